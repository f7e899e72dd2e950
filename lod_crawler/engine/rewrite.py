"""Provider-specific URI rewriting applied before a source is fetched."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, overload

from ..config.models import RewriteRuleConfig

Transform = Callable[[str], str]


@dataclass(frozen=True, slots=True)
class RewriteRule:
    """Apply ``transform`` when the URI contains ``marker``."""

    marker: str
    transform: Transform

    def apply(self, uri: str) -> str:
        if self.marker in uri:
            return self.transform(uri)
        return uri

    @classmethod
    def substitute(cls, marker: str, pattern: str, replacement: str) -> "RewriteRule":
        regex = re.compile(pattern)
        return cls(marker, lambda uri: regex.sub(replacement, uri, count=1))

    @classmethod
    def append(cls, marker: str, suffix: str) -> "RewriteRule":
        return cls(marker, lambda uri: uri + suffix)

    @classmethod
    def from_config(cls, config: RewriteRuleConfig) -> "RewriteRule":
        if config.suffix is not None:
            return cls.append(config.marker, config.suffix)
        return cls.substitute(config.marker, config.pattern or "", config.replacement)


# Wikidata entity pages serve RDF under Special:EntityData.
WIKIDATA_RULE = RewriteRule.substitute("wikidata", r"entity", "wiki/Special:EntityData")
# VIAF clusters expose RDF/XML at <cluster>/rdf.xml.
VIAF_RULE = RewriteRule.append("viaf", "/rdf.xml")

DEFAULT_RULES: tuple[RewriteRule, ...] = (WIKIDATA_RULE, VIAF_RULE)


class RewriteChain:
    """Ordered rule list folded left-to-right over a URI.

    ``chain(uri)`` rewrites, ``chain()`` returns the composed transform and
    ``chain.add(marker, transform)`` appends a rule.
    """

    def __init__(self, rules: Optional[Iterable[RewriteRule]] = None) -> None:
        self.rules: List[RewriteRule] = list(DEFAULT_RULES if rules is None else rules)

    @classmethod
    def from_config(
        cls, configs: Iterable[RewriteRuleConfig], include_defaults: bool = True
    ) -> "RewriteChain":
        chain = cls() if include_defaults else cls(rules=[])
        for config in configs:
            chain.add_rule(RewriteRule.from_config(config))
        return chain

    def add(self, marker: str, transform: Transform) -> "RewriteChain":
        return self.add_rule(RewriteRule(marker, transform))

    def add_rule(self, rule: RewriteRule) -> "RewriteChain":
        self.rules.append(rule)
        return self

    def rewrite(self, uri: str) -> str:
        for rule in self.rules:
            uri = rule.apply(uri)
        return uri

    def composed(self) -> Transform:
        # Freeze the current rule list so later appends do not leak in.
        rules = tuple(self.rules)

        def _transform(uri: str) -> str:
            for rule in rules:
                uri = rule.apply(uri)
            return uri

        return _transform

    @overload
    def __call__(self) -> Transform: ...

    @overload
    def __call__(self, uri: str) -> str: ...

    def __call__(self, uri: str | None = None) -> str | Transform:
        if uri is None:
            return self.composed()
        return self.rewrite(uri)

    def __len__(self) -> int:
        return len(self.rules)


__all__ = [
    "DEFAULT_RULES",
    "RewriteChain",
    "RewriteRule",
    "Transform",
    "VIAF_RULE",
    "WIKIDATA_RULE",
]
