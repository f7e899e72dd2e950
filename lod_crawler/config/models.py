"""Pydantic models describing crawler configuration."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

OWL_SAME_AS = "http://www.w3.org/2002/07/owl#sameAs"
SCHEMA_SAME_AS = "http://schema.org/sameAs"
SCHEMA_SAME_AS_HTTPS = "https://schema.org/sameAs"

DEFAULT_ACCEPT = (
    "text/turtle, application/rdf+xml;q=0.9, application/n-triples;q=0.8, "
    "application/ld+json;q=0.7, */*;q=0.1"
)


class RewriteRuleConfig(BaseModel):
    """Provider rule declared in configuration.

    A rule either substitutes ``pattern`` by ``replacement`` (first match
    only) or appends ``suffix`` when the URI contains ``marker``.
    """

    marker: str
    pattern: str | None = None
    replacement: str = ""
    suffix: str | None = None

    @model_validator(mode="after")
    def _validate_action(self) -> "RewriteRuleConfig":
        if not self.marker:
            raise ValueError("Rewrite rule requires a non-empty marker")
        if (self.pattern is None) == (self.suffix is None):
            raise ValueError("Rewrite rule expects exactly one of pattern or suffix")
        if self.pattern is not None:
            try:
                re.compile(self.pattern)
            except re.error as exc:
                raise ValueError(f"Invalid rewrite pattern {self.pattern!r}: {exc}") from exc
        return self


class FetchConfig(BaseModel):
    """Options for the HTTP dereferencing fetcher."""

    timeout: float = 20.0
    retry_on_fail: int = 1
    follow_redirects: bool = True
    accept: str = DEFAULT_ACCEPT
    user_agent: str = "lod-crawler/0.1 (+https://www.w3.org/wiki/LinkedData)"
    extra_headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be greater than zero")
        return value

    @field_validator("retry_on_fail")
    @classmethod
    def _non_negative_retries(cls, value: int) -> int:
        if value < 0:
            raise ValueError("retry_on_fail must be >= 0")
        return value


class CrawlerConfig(BaseModel):
    """Global controls for an equivalence crawl."""

    fetch: FetchConfig = Field(default_factory=FetchConfig)
    rewrite_rules: list[RewriteRuleConfig] = Field(default_factory=list)
    equivalence_predicates: list[str] = Field(
        default_factory=lambda: [OWL_SAME_AS, SCHEMA_SAME_AS, SCHEMA_SAME_AS_HTTPS]
    )
    skip_known_identifiers: bool = True
    outputs_dir: Path = Field(default=Path("data/outputs"))
    default_output_format: str = "nquads"

    @field_validator("outputs_dir", mode="before")
    @classmethod
    def _coerce_dir(cls, value: Any) -> Path:
        return Path(value)

    @field_validator("equivalence_predicates")
    @classmethod
    def _require_predicates(cls, value: list[str]) -> list[str]:
        cleaned = [item.strip() for item in value if item and item.strip()]
        if not cleaned:
            raise ValueError("At least one equivalence predicate is required")
        return cleaned

    @field_validator("default_output_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        if value not in OUTPUT_FORMATS:
            raise ValueError(f"Unsupported output format: {value}")
        return value


# Serialisation formats understood by rdflib, keyed by CLI name.
OUTPUT_FORMATS = {
    "nquads": "nquads",
    "trig": "trig",
    "nt": "nt",
    "turtle": "turtle",
}


__all__ = [
    "CrawlerConfig",
    "DEFAULT_ACCEPT",
    "FetchConfig",
    "OUTPUT_FORMATS",
    "OWL_SAME_AS",
    "RewriteRuleConfig",
    "SCHEMA_SAME_AS",
    "SCHEMA_SAME_AS_HTTPS",
]
