"""Accumulate accepted facts and republish them to subscribers."""

from __future__ import annotations

from typing import Callable, Optional

import structlog

from .facts import Fact, TripleStore
from .filters import FactPredicate, compile_filter
from .streams import Broadcast, ErrorCallback, Stream, Subscription

FilterCompiler = Callable[[str], FactPredicate]


class TripleAggregator:
    """Store every accepted fact, then push it on the outward fact stream."""

    def __init__(
        self,
        filter_compiler: FilterCompiler = compile_filter,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.logger = logger or structlog.get_logger("lod_crawler.aggregator")
        self._compile = filter_compiler
        self.store = TripleStore()
        self.facts = Broadcast[Fact]("facts", logger=self.logger)

    def accept(self, fact: Fact) -> None:
        if self.facts.completed:
            return
        self.store.add(fact)
        self.facts.publish(fact)

    def _predicate(self, pattern: Optional[str]) -> Optional[FactPredicate]:
        if pattern is None:
            return None
        return self._compile(pattern)

    def subscribe(
        self,
        callback: Callable[[Fact], None],
        pattern: Optional[str] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription[Fact]:
        return self.facts.subscribe(callback, predicate=self._predicate(pattern), on_error=on_error)

    def stream(self, pattern: Optional[str] = None) -> Stream[Fact]:
        return self.facts.stream(self._predicate(pattern))

    def fail(self, error: BaseException) -> None:
        self.facts.fail(error)

    def complete(self) -> None:
        self.facts.complete()

    def reset(self) -> TripleStore:
        """Swap in an empty store; previous snapshots stay untouched."""

        self.store = TripleStore()
        return self.store


__all__ = ["FilterCompiler", "TripleAggregator"]
