from __future__ import annotations

from rdflib import Literal, URIRef

from lod_crawler.engine.facts import Fact, TermKind, TripleStore

LABEL = "http://www.w3.org/2000/01/rdf-schema#label"


def test_fact_subject_kind(make_fact) -> None:
    assert make_fact("http://a.org/1", LABEL, "x").subject_kind is TermKind.NAMED
    assert make_fact("_:b1", LABEL, "x").subject_kind is TermKind.BLANK
    literal = Fact(Literal("odd"), URIRef(LABEL), Literal("x"))
    assert literal.subject_kind is TermKind.LITERAL


def test_from_triple_sets_graph() -> None:
    fact = Fact.from_triple((URIRef("http://a.org/1"), URIRef(LABEL), Literal("A")), graph="http://a.org/1.ttl")
    assert fact.graph == URIRef("http://a.org/1.ttl")
    assert fact.to_dict() == {
        "subject": "http://a.org/1",
        "subject_kind": "NamedNode",
        "predicate": LABEL,
        "object": "A",
        "graph": "http://a.org/1.ttl",
    }


def test_store_is_a_set_preserving_insertion_order(make_fact) -> None:
    store = TripleStore()
    first = make_fact("http://a.org/1", LABEL, "one")
    second = make_fact("http://a.org/2", LABEL, "two")
    assert store.add(first)
    assert store.add(second)
    assert not store.add(make_fact("http://a.org/1", LABEL, "one"))
    assert len(store) == 2
    assert list(store) == [first, second]
    assert first in store


def test_store_match_by_value(make_fact) -> None:
    store = TripleStore(
        [
            make_fact("http://a.org/1", LABEL, "one", graph="http://a.org/1"),
            make_fact("http://a.org/1", "http://schema.org/name", "uno", graph="http://a.org/1"),
            make_fact("http://b.org/1", LABEL, "one", graph="http://b.org/1"),
        ]
    )
    assert len(store.match(subject="http://a.org/1")) == 2
    assert len(store.match(predicate=LABEL, obj="one")) == 2
    assert len(store.match(graph="http://b.org/1")) == 1


def test_store_exports_to_rdflib(make_fact) -> None:
    store = TripleStore(
        [
            make_fact("http://a.org/1", LABEL, "one", graph="http://a.org/1"),
            make_fact("http://b.org/1", LABEL, "one", graph="http://b.org/1"),
        ]
    )
    graph = store.to_graph()
    assert len(graph) == 2
    assert (URIRef("http://a.org/1"), URIRef(LABEL), Literal("one")) in graph
    nquads = store.serialize("nquads")
    assert "<http://b.org/1>" in nquads


def test_store_clear(make_fact) -> None:
    store = TripleStore([make_fact("http://a.org/1", LABEL, "one")])
    store.clear()
    assert len(store) == 0
