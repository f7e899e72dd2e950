from __future__ import annotations

from lod_crawler.engine.frontier import EquivalenceFrontier


def test_same_uri_admitted_once() -> None:
    frontier = EquivalenceFrontier()
    assert frontier.admit("http://www.wikidata.org/entity/Q1") is True
    assert frontier.admit("http://www.wikidata.org/entity/Q1") is False


def test_second_uri_on_same_domain_rejected_in_any_order() -> None:
    first, second = "http://viaf.org/viaf/1", "http://viaf.org/viaf/2"
    forward = EquivalenceFrontier()
    assert [forward.admit(first), forward.admit(second)] == [True, False]
    backward = EquivalenceFrontier()
    assert [backward.admit(second), backward.admit(first)] == [True, False]


def test_www_prefix_shares_domain() -> None:
    frontier = EquivalenceFrontier()
    assert frontier.admit("https://www.example.org/a")
    assert not frontier.admit("http://example.org/b")


def test_unparseable_uri_never_admitted() -> None:
    frontier = EquivalenceFrontier()
    assert frontier.admit("not a uri") is False
    assert frontier.admit("") is False
    assert frontier.is_visited("urn:isbn:0451450523") is True
    assert frontier.visited == frozenset()


def test_reset_makes_domains_admissible_again() -> None:
    frontier = EquivalenceFrontier()
    frontier.admit("http://d-nb.info/gnd/118540238")
    assert frontier.visited == {"d-nb.info"}
    frontier.reset()
    assert len(frontier) == 0
    assert frontier.admit("http://d-nb.info/gnd/118540238")


def test_custom_domain_extractor_is_used() -> None:
    frontier = EquivalenceFrontier(lambda uri: uri.split(":", 1)[0] or None)
    assert frontier.admit("a:1")
    assert not frontier.admit("a:2")
    assert frontier.admit("b:1")
    assert not frontier.admit(":orphan")


def test_failing_domain_extractor_counts_as_unknown_domain() -> None:
    def extractor(uri: str) -> str:
        if "[" in uri:
            raise ValueError("Invalid IPv6 URL")
        return uri.split("/")[2]

    frontier = EquivalenceFrontier(extractor)
    assert frontier.admit("http://bad/[x") is False
    assert frontier.is_visited("http://bad/[x") is True
    assert frontier.admit("http://good.org/a") is True
    assert frontier.visited == {"good.org"}
