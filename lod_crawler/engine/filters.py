"""Fact filters: structural noise, resource scoping and equivalence links."""

from __future__ import annotations

import re
from typing import Callable, Iterable

from rdflib import RDFS

from ..config.models import OWL_SAME_AS, SCHEMA_SAME_AS, SCHEMA_SAME_AS_HTTPS
from .facts import Fact, TermKind

FactPredicate = Callable[[Fact], bool]

COMMENT_PREDICATE = str(RDFS.comment)
STATEMENT_MARKER = "/statement/"
DEFAULT_EQUIVALENCE_PREDICATES = frozenset({OWL_SAME_AS, SCHEMA_SAME_AS, SCHEMA_SAME_AS_HTTPS})


def is_blank(fact: Fact) -> bool:
    return fact.subject_kind is TermKind.BLANK


def is_comment(fact: Fact) -> bool:
    return str(fact.predicate) == COMMENT_PREDICATE


def is_statement(fact: Fact) -> bool:
    """Reified statement nodes (e.g. Wikidata ``/statement/`` URIs)."""

    return STATEMENT_MARKER in str(fact.subject)


def accept_fact(fact: Fact) -> bool:
    """Reject blank subjects, ``rdfs:comment`` and reified statements."""

    return not (is_blank(fact) or is_comment(fact) or is_statement(fact))


def about_resource(identifier: str) -> FactPredicate:
    """Keep only facts whose subject mentions ``identifier``."""

    def _predicate(fact: Fact) -> bool:
        return identifier in str(fact.subject)

    return _predicate


def equivalence_target(
    fact: Fact, predicates: Iterable[str] = DEFAULT_EQUIVALENCE_PREDICATES
) -> str:
    """Return the linked URI when ``fact`` is an equivalence link, else ``""``."""

    if str(fact.predicate) in predicates:
        return str(fact.object)
    return ""


def compile_filter(pattern: str) -> FactPredicate:
    """Compile ``pattern`` into a predicate searching subject, predicate and object."""

    regex = re.compile(pattern)

    def _predicate(fact: Fact) -> bool:
        return any(
            regex.search(str(term)) is not None
            for term in (fact.subject, fact.predicate, fact.object)
        )

    return _predicate


__all__ = [
    "COMMENT_PREDICATE",
    "DEFAULT_EQUIVALENCE_PREDICATES",
    "FactPredicate",
    "STATEMENT_MARKER",
    "about_resource",
    "accept_fact",
    "compile_filter",
    "equivalence_target",
    "is_blank",
    "is_comment",
    "is_statement",
]
