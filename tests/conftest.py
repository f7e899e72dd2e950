"""Shared fixtures: fact builders, in-memory fetch capabilities and config repos."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Iterable

import pytest
from rdflib import BNode, Literal, URIRef

from lod_crawler.config import ConfigLocator, ConfigRepository, CrawlerConfig, OWL_SAME_AS
from lod_crawler.engine.facts import Fact


def _term(value: Any):
    if isinstance(value, (URIRef, BNode, Literal)):
        return value
    if isinstance(value, str) and value.startswith("_:"):
        return BNode(value[2:])
    if isinstance(value, str) and "://" in value:
        return URIRef(value)
    return Literal(value)


class FakeFetch:
    """Fetch capability serving canned facts keyed by the fetched URI.

    A value that is an exception is raised after the listed facts (or
    immediately when given alone).
    """

    def __init__(self, responses: dict[str, Iterable[Any]] | None = None) -> None:
        self.responses: dict[str, list[Any]] = {k: list(v) for k, v in (responses or {}).items()}
        self.calls: list[str] = []

    async def __call__(self, uri: str) -> AsyncIterator[Fact]:
        self.calls.append(uri)
        for item in self.responses.get(uri, []):
            # Yield control so concurrent branches interleave.
            await asyncio.sleep(0)
            if isinstance(item, BaseException):
                raise item
            yield item


@pytest.fixture
def make_fact() -> Callable[..., Fact]:
    def _builder(subject: Any, predicate: Any, obj: Any, graph: str | None = None) -> Fact:
        return Fact(
            subject=_term(subject),
            predicate=URIRef(str(predicate)),
            object=_term(obj),
            graph=URIRef(graph) if graph else None,
        )

    return _builder


@pytest.fixture
def same_as(make_fact) -> Callable[[str, str], Fact]:
    def _builder(subject: str, target: str) -> Fact:
        return make_fact(subject, OWL_SAME_AS, URIRef(target), graph=subject)

    return _builder


@pytest.fixture
def fake_fetch() -> Callable[..., FakeFetch]:
    def _builder(responses: dict[str, Iterable[Any]] | None = None) -> FakeFetch:
        return FakeFetch(responses)

    return _builder


@pytest.fixture
def plain_config() -> CrawlerConfig:
    """Configuration without provider rewrites affecting test URIs."""

    return CrawlerConfig()


@pytest.fixture
def temp_config_repository(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterable[ConfigRepository]:
    monkeypatch.setenv("LOD_CRAWLER_HOME", str(tmp_path))
    locator = ConfigLocator(project_root=tmp_path)
    repository = ConfigRepository(locator)
    yield repository
