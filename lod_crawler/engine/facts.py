"""Fact (quad) representation and the in-memory triple store."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from rdflib import BNode, Dataset, Graph, Literal, URIRef
from rdflib.term import Node


class TermKind(str, Enum):
    """Kind of RDF term found in subject position."""

    NAMED = "NamedNode"
    BLANK = "BlankNode"
    LITERAL = "Literal"


def term_kind(term: Node) -> TermKind:
    if isinstance(term, BNode):
        return TermKind.BLANK
    if isinstance(term, Literal):
        return TermKind.LITERAL
    return TermKind.NAMED


@dataclass(frozen=True, slots=True)
class Fact:
    """A single subject-predicate-object statement and the graph it came from."""

    subject: Node
    predicate: URIRef
    object: Node
    graph: URIRef | None = None

    @property
    def subject_kind(self) -> TermKind:
        return term_kind(self.subject)

    @property
    def triple(self) -> tuple[Node, URIRef, Node]:
        return self.subject, self.predicate, self.object

    @classmethod
    def from_triple(cls, triple: tuple[Node, Node, Node], graph: str | URIRef | None = None) -> "Fact":
        subject, predicate, obj = triple
        return cls(
            subject=subject,
            predicate=URIRef(str(predicate)),
            object=obj,
            graph=URIRef(str(graph)) if graph is not None else None,
        )

    def to_dict(self) -> dict[str, str | None]:
        return {
            "subject": str(self.subject),
            "subject_kind": self.subject_kind.value,
            "predicate": str(self.predicate),
            "object": str(self.object),
            "graph": str(self.graph) if self.graph is not None else None,
        }


class TripleStore:
    """Insertion-ordered set of facts owned by a single crawler."""

    def __init__(self, facts: Iterable[Fact] | None = None) -> None:
        self._facts: dict[Fact, None] = {}
        if facts:
            for fact in facts:
                self.add(fact)

    def add(self, fact: Fact) -> bool:
        """Store ``fact``; return ``False`` when it was already present."""

        if fact in self._facts:
            return False
        self._facts[fact] = None
        return True

    def __contains__(self, fact: object) -> bool:
        return fact in self._facts

    def __len__(self) -> int:
        return len(self._facts)

    def __iter__(self) -> Iterator[Fact]:
        return iter(list(self._facts))

    def snapshot(self) -> list[Fact]:
        return list(self._facts)

    def match(
        self,
        subject: Node | str | None = None,
        predicate: Node | str | None = None,
        obj: Node | str | None = None,
        graph: Node | str | None = None,
    ) -> list[Fact]:
        """Return facts equal to every non-``None`` component (compared by value)."""

        wanted = (subject, predicate, obj, graph)
        results: list[Fact] = []
        for fact in self._facts:
            values = (fact.subject, fact.predicate, fact.object, fact.graph)
            if all(
                want is None or (have is not None and str(have) == str(want))
                for want, have in zip(wanted, values)
            ):
                results.append(fact)
        return results

    def clear(self) -> None:
        self._facts.clear()

    def to_dataset(self) -> Dataset:
        """Build an rdflib ``Dataset`` with one named graph per fetched source."""

        dataset = Dataset()
        for fact in self._facts:
            dataset.add((fact.subject, fact.predicate, fact.object, fact.graph))
        return dataset

    def to_graph(self) -> Graph:
        """Merge every fact into a single rdflib ``Graph`` (graph names dropped)."""

        graph = Graph()
        for fact in self._facts:
            graph.add(fact.triple)
        return graph

    def serialize(self, fmt: str = "nquads") -> str:
        if fmt in ("nquads", "trig"):
            return self.to_dataset().serialize(format=fmt)
        return self.to_graph().serialize(format=fmt)


__all__ = ["Fact", "TermKind", "TripleStore", "term_kind"]
