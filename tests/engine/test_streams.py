from __future__ import annotations

import asyncio
import gc

import pytest

from lod_crawler.engine.streams import Broadcast


def test_callbacks_receive_items_in_order_and_respect_predicate() -> None:
    hub = Broadcast[int]("numbers")
    everything: list[int] = []
    evens: list[int] = []
    hub.subscribe(everything.append)
    hub.subscribe(evens.append, predicate=lambda n: n % 2 == 0)
    for number in range(5):
        hub.publish(number)
    assert everything == [0, 1, 2, 3, 4]
    assert evens == [0, 2, 4]


def test_unsubscribe_stops_delivery() -> None:
    hub = Broadcast[str]("words")
    seen: list[str] = []
    subscription = hub.subscribe(seen.append)
    hub.publish("a")
    subscription.unsubscribe()
    hub.publish("b")
    assert seen == ["a"]
    assert len(hub) == 0


def test_failing_callback_does_not_block_other_subscribers() -> None:
    hub = Broadcast[int]("numbers")
    seen: list[int] = []

    def broken(_item: int) -> None:
        raise RuntimeError("boom")

    hub.subscribe(broken)
    hub.subscribe(seen.append)
    hub.publish(1)
    assert seen == [1]


def test_complete_notifies_and_ignores_later_items() -> None:
    hub = Broadcast[int]("numbers")
    seen: list[int] = []
    completed: list[bool] = []
    hub.subscribe(seen.append, on_complete=lambda: completed.append(True))
    hub.complete()
    hub.complete()
    hub.publish(1)
    assert seen == []
    assert completed == [True]
    late = hub.subscribe(seen.append)
    assert late.closed


def test_stream_yields_items_then_stops_on_complete() -> None:
    async def scenario() -> list[int]:
        hub = Broadcast[int]("numbers")
        stream = hub.stream(lambda n: n > 1)
        for number in range(4):
            hub.publish(number)
        hub.complete()
        return [item async for item in stream]

    assert asyncio.run(scenario()) == [2, 3]


def test_stream_raises_failure_once_and_stays_usable() -> None:
    async def scenario() -> tuple[list[int], list[int]]:
        hub = Broadcast[int]("numbers")
        stream = hub.stream()
        hub.publish(1)
        hub.fail(ValueError("branch failed"))
        hub.publish(2)
        hub.complete()
        before: list[int] = []
        with pytest.raises(ValueError):
            async for item in stream:
                before.append(item)
        after = [item async for item in stream]
        return before, after

    assert asyncio.run(scenario()) == ([1], [2])


def test_closed_stream_keeps_buffered_items() -> None:
    async def scenario() -> list[int]:
        hub = Broadcast[int]("numbers")
        stream = hub.stream()
        hub.publish(1)
        stream.close()
        hub.publish(2)
        return [item async for item in stream]

    assert asyncio.run(scenario()) == [1]


def test_discarded_stream_is_detached_from_hub() -> None:
    hub = Broadcast[int]("numbers")
    kept = hub.stream()
    hub.stream()
    hub.stream()
    gc.collect()
    assert len(hub) == 1
    hub.publish(1)
    hub.complete()
    assert kept.subscription.closed
