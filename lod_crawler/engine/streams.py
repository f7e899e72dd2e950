"""Broadcast hub feeding callback subscribers and async-iterator streams."""

from __future__ import annotations

import asyncio
import weakref
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, TypeVar

import structlog

T = TypeVar("T")

ErrorCallback = Callable[[BaseException], None]


@dataclass(slots=True)
class _Failure:
    error: BaseException


_END = object()


class Subscription(Generic[T]):
    """Callback registration on a :class:`Broadcast`."""

    def __init__(
        self,
        hub: "Broadcast[T]",
        callback: Callable[[T], None],
        predicate: Optional[Callable[[T], bool]] = None,
        on_error: Optional[ErrorCallback] = None,
        on_complete: Optional[Callable[[], None]] = None,
    ) -> None:
        self._hub = hub
        self.callback = callback
        self.predicate = predicate
        self.on_error = on_error
        self.on_complete = on_complete
        self.closed = False

    def deliver(self, item: T) -> None:
        if self.predicate is not None and not self.predicate(item):
            return
        self.callback(item)

    def fail(self, error: BaseException) -> None:
        if self.on_error is not None:
            self.on_error(error)

    def complete(self) -> None:
        self.closed = True
        if self.on_complete is not None:
            self.on_complete()

    def unsubscribe(self) -> None:
        if not self.closed:
            self.closed = True
            self._hub.detach(self)


class Stream(Generic[T]):
    """Async iterator over items published after its creation.

    A published failure is raised once from ``__anext__``; iterating the
    stream again resumes with the following items. Completion of the hub
    ends iteration. The hub does not keep the stream alive: once the
    stream is garbage collected its subscription is detached.
    """

    def __init__(self, hub: "Broadcast[T]", predicate: Optional[Callable[[T], bool]] = None) -> None:
        self._hub = hub
        self.predicate = predicate
        queue: asyncio.Queue = asyncio.Queue()
        self._queue = queue
        self._finished = False
        # Callbacks close over the queue only, never over the stream.
        self.subscription = hub.subscribe(
            queue.put_nowait,
            predicate=predicate,
            on_error=lambda error: queue.put_nowait(_Failure(error)),
            on_complete=lambda: queue.put_nowait(_END),
        )
        self._finalizer = weakref.finalize(self, self.subscription.unsubscribe)
        self._finalizer.atexit = False

    def __aiter__(self) -> "Stream[T]":
        return self

    async def __anext__(self) -> T:
        if self._finished:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _END:
            self._finished = True
            raise StopAsyncIteration
        if isinstance(item, _Failure):
            raise item.error
        return item

    def close(self) -> None:
        """Stop receiving items; queued items remain readable."""

        self._finalizer()
        self._queue.put_nowait(_END)


class Broadcast(Generic[T]):
    """Push items to every live subscriber in subscription order."""

    def __init__(self, name: str, logger: structlog.BoundLogger | None = None) -> None:
        self.name = name
        self.logger = logger or structlog.get_logger("lod_crawler.streams").bind(hub=name)
        self._subscribers: List[Subscription[T]] = []
        self._completed = False

    @property
    def completed(self) -> bool:
        return self._completed

    def subscribe(
        self,
        callback: Callable[[T], None],
        predicate: Optional[Callable[[T], bool]] = None,
        on_error: Optional[ErrorCallback] = None,
        on_complete: Optional[Callable[[], None]] = None,
    ) -> Subscription[T]:
        subscription = Subscription(self, callback, predicate, on_error, on_complete)
        if self._completed:
            subscription.complete()
        else:
            self._subscribers.append(subscription)
        return subscription

    def stream(self, predicate: Optional[Callable[[T], bool]] = None) -> Stream[T]:
        return Stream(self, predicate)

    def detach(self, subscription: Subscription[T]) -> None:
        if subscription in self._subscribers:
            self._subscribers.remove(subscription)

    def publish(self, item: T) -> None:
        if self._completed:
            return
        for subscription in list(self._subscribers):
            try:
                subscription.deliver(item)
            except Exception:  # noqa: BLE001
                self.logger.exception("subscriber_error", item=str(item))

    def fail(self, error: BaseException) -> None:
        if self._completed:
            return
        for subscription in list(self._subscribers):
            try:
                subscription.fail(error)
            except Exception:  # noqa: BLE001
                self.logger.exception("error_handler_failed", error=str(error))

    def complete(self) -> None:
        if self._completed:
            return
        self._completed = True
        subscribers, self._subscribers = self._subscribers, []
        for subscription in subscribers:
            subscription.complete()

    def __len__(self) -> int:
        return len(self._subscribers)


__all__ = ["Broadcast", "ErrorCallback", "Stream", "Subscription"]
