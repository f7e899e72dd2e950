"""Fetch orchestration: candidate-source channel, per-source tasks, link discovery."""

from __future__ import annotations

import asyncio
from typing import AsyncIterable, Callable, Iterable

import structlog

from .engine.aggregator import TripleAggregator
from .engine.facts import Fact
from .engine.filters import (
    DEFAULT_EQUIVALENCE_PREDICATES,
    about_resource,
    accept_fact,
    equivalence_target,
)
from .engine.frontier import EquivalenceFrontier
from .engine.identifiers import extract_identifier
from .engine.rewrite import RewriteChain
from .engine.streams import Broadcast
from .errors import SourceFetchError

FetchCapability = Callable[[str], AsyncIterable[Fact]]
IdentifierExtractor = Callable[[str], str]


class FetchOrchestrator:
    """Turn admitted URIs into concurrent fetches and feed accepted facts onward.

    One dispatcher task drains the candidate channel and starts a task per
    source without any concurrency cap. Admission of discovered links goes
    through the frontier before anything is queued.
    """

    def __init__(
        self,
        fetch: FetchCapability,
        frontier: EquivalenceFrontier,
        aggregator: TripleAggregator,
        sources: Broadcast[str],
        rewrite: Callable[[str], str] | None = None,
        identifier_extractor: IdentifierExtractor = extract_identifier,
        equivalence_predicates: Iterable[str] = DEFAULT_EQUIVALENCE_PREDICATES,
        skip_known_identifiers: bool = True,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.fetch = fetch
        self.frontier = frontier
        self.aggregator = aggregator
        self.sources = sources
        self.rewrite = rewrite or RewriteChain()
        self.identifier_extractor = identifier_extractor
        self.equivalence_predicates = frozenset(equivalence_predicates)
        self.skip_known_identifiers = skip_known_identifiers
        self.logger = logger or structlog.get_logger("lod_crawler.orchestrator")
        self.visited_identifiers: set[str] = set()
        self.failures: list[SourceFetchError] = []
        self.skipped: list[str] = []
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._dispatcher: asyncio.Task | None = None
        self._branches: set[asyncio.Task] = set()
        self._stopped = False

    # ------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self._dispatcher is not None and not self._dispatcher.done()

    def start(self) -> None:
        """Start the dispatcher on the running loop (no-op when already running)."""

        if self._stopped or self.running:
            return
        self._dispatcher = asyncio.get_running_loop().create_task(
            self._dispatch(), name="lod-crawler-dispatcher"
        )

    def submit(self, uri: str) -> bool:
        """Admit ``uri`` through the frontier and queue it; return whether admitted."""

        if self._stopped or not self.frontier.admit(uri):
            return False
        self.logger.info("source_admitted", source=uri)
        self.sources.publish(uri)
        self._queue.put_nowait(uri)
        return True

    async def join(self) -> None:
        """Wait until every queued source has been fully processed."""

        await self._queue.join()

    def stop(self) -> None:
        self._stopped = True
        if self._dispatcher is not None:
            self._dispatcher.cancel()
        for task in list(self._branches):
            task.cancel()
        self._branches.clear()
        # Release join() waiters blocked on sources that will never run.
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()

    def reset(self) -> None:
        self.visited_identifiers = set()
        self.failures = []
        self.skipped = []

    # ------------------------------------------------------------------
    def _identifier(self, uri: str) -> str:
        try:
            return self.identifier_extractor(uri) or ""
        except Exception:  # noqa: BLE001
            self.logger.debug("identifier_extraction_failed", source=uri)
            return ""

    async def _dispatch(self) -> None:
        while True:
            uri = await self._queue.get()
            identifier = self._identifier(uri)
            if self.skip_known_identifiers and identifier in self.visited_identifiers:
                self.logger.info("source_skipped", source=uri, identifier=identifier)
                self.skipped.append(uri)
                self._queue.task_done()
                continue
            self.visited_identifiers.add(identifier)
            task = asyncio.create_task(self._process(uri, identifier), name=f"lod-fetch:{uri}")
            self._branches.add(task)
            task.add_done_callback(self._branch_done)

    def _branch_done(self, task: asyncio.Task) -> None:
        self._branches.discard(task)
        self._queue.task_done()

    async def _process(self, uri: str, identifier: str) -> None:
        log = self.logger.bind(source=uri, identifier=identifier)
        target = uri
        about = about_resource(identifier)
        received = accepted = 0
        try:
            target = self.rewrite(uri)
            log.info("fetch_started", fetch_url=target)
            async for fact in self.fetch(target):
                received += 1
                if not about(fact) or not accept_fact(fact):
                    continue
                accepted += 1
                self._handle(fact)
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            log.warning("fetch_failed", fetch_url=target, error=str(exc), facts=accepted)
            error = SourceFetchError(uri, target)
            error.__cause__ = exc
            self.failures.append(error)
            self.aggregator.fail(error)
            return
        log.info("fetch_completed", received=received, accepted=accepted)

    def _handle(self, fact: Fact) -> None:
        linked = equivalence_target(fact, self.equivalence_predicates)
        if linked:
            self.submit(linked)
        self.aggregator.accept(fact)


__all__ = ["FetchCapability", "FetchOrchestrator", "IdentifierExtractor"]
