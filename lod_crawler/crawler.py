"""Crawler facade: lifecycle, subscriptions and one-shot crawl helper."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

import structlog

from .config import CrawlerConfig
from .engine.aggregator import FilterCompiler, TripleAggregator
from .engine.facts import Fact, TripleStore
from .engine.filters import compile_filter
from .engine.frontier import DomainExtractor, EquivalenceFrontier
from .engine.identifiers import extract_domain, extract_identifier
from .engine.rewrite import RewriteChain
from .engine.streams import Broadcast, ErrorCallback, Stream, Subscription
from .errors import CrawlerStoppedError, SourceFetchError
from .orchestrator import FetchCapability, FetchOrchestrator, IdentifierExtractor


class CrawlerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class Crawler:
    """Follow equivalence links from a seed URI across LOD endpoints.

    Every fact about the seed resource (and the resources it is declared
    equivalent to) is stored in :attr:`store` and pushed to fact
    subscribers; each newly admitted source is pushed to source
    subscribers before it is fetched. A domain is visited at most once.

    Example::

        async with LodFetcher() as fetcher:
            crawler = Crawler(fetcher.fetch)
            crawler.on_new_source(print)
            async for fact in crawler.run("http://www.wikidata.org/entity/Q1"):
                ...
    """

    def __init__(
        self,
        fetch: FetchCapability,
        config: CrawlerConfig | None = None,
        rewrite: Callable[[str], str] | None = None,
        identifier_extractor: IdentifierExtractor = extract_identifier,
        domain_extractor: DomainExtractor = extract_domain,
        filter_compiler: FilterCompiler = compile_filter,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config or CrawlerConfig()
        self.logger = logger or structlog.get_logger("lod_crawler.crawler")
        self.rewrite_chain = RewriteChain.from_config(self.config.rewrite_rules)
        if rewrite is not None:
            # Caller transform runs after the provider rules.
            self.rewrite_chain.add("", rewrite)
        self.frontier = EquivalenceFrontier(domain_extractor, logger=self.logger)
        self.aggregator = TripleAggregator(filter_compiler, logger=self.logger)
        self.sources = Broadcast[str]("sources", logger=self.logger)
        self.orchestrator = FetchOrchestrator(
            fetch=fetch,
            frontier=self.frontier,
            aggregator=self.aggregator,
            sources=self.sources,
            rewrite=self.rewrite_chain,
            identifier_extractor=identifier_extractor,
            equivalence_predicates=self.config.equivalence_predicates,
            skip_known_identifiers=self.config.skip_known_identifiers,
            logger=self.logger.bind(component="orchestrator"),
        )
        self.state = CrawlerState.IDLE

    # ------------------------------------------------------------------
    @property
    def store(self) -> TripleStore:
        return self.aggregator.store

    @property
    def visited_domains(self) -> frozenset[str]:
        return self.frontier.visited

    @property
    def visited_identifiers(self) -> frozenset[str]:
        return frozenset(self.orchestrator.visited_identifiers)

    @property
    def failures(self) -> list[SourceFetchError]:
        return list(self.orchestrator.failures)

    @property
    def skipped(self) -> list[str]:
        """Admitted sources not fetched because their identifier was already known."""

        return list(self.orchestrator.skipped)

    def run(self, uri: str) -> Stream[Fact]:
        """Seed the crawl with ``uri`` and return a stream of accepted facts.

        Must be called from a running event loop. A seed whose domain was
        already visited is ignored.
        """

        self.seed(uri)
        return self.aggregator.stream()

    def seed(self, uri: str) -> bool:
        """Start the pipeline if needed and submit ``uri``; return whether it was admitted."""

        if self.state is CrawlerState.STOPPED:
            raise CrawlerStoppedError("Crawler has been ended; create a new instance")
        self.orchestrator.start()
        self.state = CrawlerState.RUNNING
        admitted = self.orchestrator.submit(uri)
        if not admitted:
            self.logger.info("seed_rejected", source=uri)
        return admitted

    async def join(self) -> None:
        """Wait until the crawl has no queued or in-flight sources."""

        await self.orchestrator.join()

    def on_new_fact(
        self,
        callback: Callable[[Fact], None],
        pattern: Optional[str] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription[Fact]:
        return self.aggregator.subscribe(callback, pattern, on_error=on_error)

    def new_fact_stream(self, pattern: Optional[str] = None) -> Stream[Fact]:
        return self.aggregator.stream(pattern)

    def on_new_source(self, callback: Callable[[str], None]) -> Subscription[str]:
        return self.sources.subscribe(callback)

    def new_source_stream(self) -> Stream[str]:
        return self.sources.stream()

    def on_error(self, callback: ErrorCallback) -> Subscription[Fact]:
        """Be notified of failing sources without receiving facts."""

        return self.aggregator.facts.subscribe(lambda _fact: None, on_error=callback)

    def end(self) -> None:
        """Stop every task and complete all streams; safe to call repeatedly."""

        if self.state is CrawlerState.STOPPED:
            return
        self.orchestrator.stop()
        self.aggregator.complete()
        self.sources.complete()
        self.state = CrawlerState.STOPPED
        self.logger.info("crawler_ended", facts=len(self.store), domains=len(self.frontier))

    def clear(self) -> None:
        """Forget stored facts and visited domains/identifiers."""

        self.aggregator.reset()
        self.frontier.reset()
        self.orchestrator.reset()

    async def __aenter__(self) -> "Crawler":
        return self

    async def __aexit__(self, *_exc_info) -> None:
        self.end()


@dataclass
class CrawlSummary:
    """Outcome of :func:`crawl`."""

    seed: str
    sources: list[str] = field(default_factory=list)
    store: TripleStore = field(default_factory=TripleStore)
    failures: list[SourceFetchError] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def fact_count(self) -> int:
        return len(self.store)


async def crawl(
    seed: str,
    fetch: FetchCapability,
    config: CrawlerConfig | None = None,
    on_fact: Callable[[Fact], None] | None = None,
    on_source: Callable[[str], None] | None = None,
    pattern: str | None = None,
    logger: structlog.BoundLogger | None = None,
) -> CrawlSummary:
    """Crawl from ``seed`` until no source is left, then end the crawler."""

    summary = CrawlSummary(seed=seed)
    async with Crawler(fetch, config=config, logger=logger) as crawler:
        crawler.on_new_source(summary.sources.append)
        if on_source is not None:
            crawler.on_new_source(on_source)
        if on_fact is not None:
            crawler.on_new_fact(on_fact, pattern)
        crawler.seed(seed)
        await crawler.join()
        summary.store = crawler.store
        summary.failures = crawler.failures
        summary.skipped = crawler.skipped
    return summary


__all__ = ["CrawlSummary", "Crawler", "CrawlerState", "crawl"]
