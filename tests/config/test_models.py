from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from lod_crawler.config import (
    OWL_SAME_AS,
    SCHEMA_SAME_AS,
    SCHEMA_SAME_AS_HTTPS,
    CrawlerConfig,
    RewriteRuleConfig,
)


def test_defaults_cover_owl_and_schema_same_as() -> None:
    config = CrawlerConfig()
    assert config.equivalence_predicates == [OWL_SAME_AS, SCHEMA_SAME_AS, SCHEMA_SAME_AS_HTTPS]
    assert config.skip_known_identifiers is True
    assert config.rewrite_rules == []
    assert config.outputs_dir == Path("data/outputs")
    assert config.fetch.retry_on_fail == 1


def test_rewrite_rule_requires_exactly_one_action() -> None:
    RewriteRuleConfig(marker="example.org", suffix=".ttl")
    RewriteRuleConfig(marker="example.org", pattern="/page/", replacement="/data/")
    with pytest.raises(ValidationError):
        RewriteRuleConfig(marker="example.org")
    with pytest.raises(ValidationError):
        RewriteRuleConfig(marker="example.org", pattern="a", suffix="b")


def test_rewrite_rule_rejects_bad_marker_and_pattern() -> None:
    with pytest.raises(ValidationError):
        RewriteRuleConfig(marker="", suffix=".ttl")
    with pytest.raises(ValidationError):
        RewriteRuleConfig(marker="example.org", pattern="([unclosed")


def test_equivalence_predicates_are_cleaned_and_required() -> None:
    config = CrawlerConfig(equivalence_predicates=[" http://a.org/p ", ""])
    assert config.equivalence_predicates == ["http://a.org/p"]
    with pytest.raises(ValidationError):
        CrawlerConfig(equivalence_predicates=["   "])


def test_output_format_must_be_known() -> None:
    assert CrawlerConfig(default_output_format="turtle").default_output_format == "turtle"
    with pytest.raises(ValidationError):
        CrawlerConfig(default_output_format="csv")


def test_nested_mapping_validates() -> None:
    config = CrawlerConfig.model_validate(
        {
            "fetch": {"timeout": 5, "extra_headers": {"X-Api": "1"}},
            "rewrite_rules": [{"marker": "dbpedia.org", "pattern": "/resource/", "replacement": "/data/"}],
            "outputs_dir": "exports",
        }
    )
    assert config.fetch.timeout == 5.0
    assert config.fetch.extra_headers == {"X-Api": "1"}
    assert config.rewrite_rules[0].marker == "dbpedia.org"
    assert config.outputs_dir == Path("exports")
