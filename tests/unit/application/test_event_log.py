"""Unit tests for InMemoryEventLog and the committed Event envelope."""

from __future__ import annotations

import asyncio
import dataclasses

import pytest

from es_commerce.application.event_sourcing import (
    ActionCausation,
    Causation,
    Event,
    EventCausation,
    EventMeta,
    InMemoryEventLog,
    serialize_events,
)
from es_commerce.kernel.errors import ConcurrencyConflictError
from es_commerce.kernel.security import Actor
from es_commerce.testing.fakes import FakeClock

ALICE = Actor("u1", "Alice", role="user", picture="https://example.com/alice.png")


def _meta(stream: str = "s", name: str | None = "DoIt") -> EventMeta:
    return EventMeta(
        correlation="corr-1",
        causation=Causation(action=ActionCausation(stream=stream, actor=ALICE, name=name)),
    )


def _log() -> InMemoryEventLog:
    return InMemoryEventLog(FakeClock())


# ---------------------------------------------------------------------------
# Append
# ---------------------------------------------------------------------------


class TestAppend:
    def test_ids_are_global_and_versions_per_stream(self) -> None:
        log = _log()

        async def run() -> None:
            await log.append("a", 0, [("E1", {}), ("E2", {})], _meta("a"))
            await log.append("b", 0, [("E3", {})], _meta("b"))
            await log.append("a", 2, [("E4", {})], _meta("a"))

        asyncio.run(run())
        assert [(e.id, e.stream, e.version) for e in log.query()] == [
            (0, "a", 1),
            (1, "a", 2),
            (2, "b", 1),
            (3, "a", 3),
        ]
        assert log.stream_version("a") == 3
        assert log.last_id == 3
        assert len(log) == 4

    def test_version_mismatch_commits_nothing(self) -> None:
        log = _log()

        async def run() -> None:
            await log.append("s", 0, [("E", {})], _meta())
            await log.append("s", 0, [("E", {}), ("E", {})], _meta())

        with pytest.raises(ConcurrencyConflictError) as exc_info:
            asyncio.run(run())
        assert (exc_info.value.expected, exc_info.value.actual) == (0, 1)
        assert len(log) == 1

    def test_empty_batch_is_noop(self) -> None:
        log = _log()
        assert asyncio.run(log.append("s", 0, [], _meta())) == []
        assert len(log) == 0

    def test_data_is_copied_on_append(self) -> None:
        log = _log()
        data = {"items": [1]}
        asyncio.run(log.append("s", 0, [("E", data)], _meta()))
        data["items"].append(2)
        assert log.load("s")[0].data == {"items": [1]}

    def test_listeners_receive_each_batch(self) -> None:
        log = _log()
        batches: list[list[int]] = []
        log.on_committed(lambda events: batches.append([e.id for e in events]))

        async def run() -> None:
            await log.append("s", 0, [("E", {}), ("E", {})], _meta())
            await log.append("t", 0, [("E", {})], _meta())

        asyncio.run(run())
        assert batches == [[0, 1], [2]]

    def test_failing_listener_does_not_fail_the_commit(self) -> None:
        log = _log()

        def boom(events: list[Event]) -> None:
            raise RuntimeError("listener broke")

        seen: list[int] = []
        log.on_committed(boom)
        log.on_committed(lambda events: seen.extend(e.id for e in events))
        events = asyncio.run(log.append("s", 0, [("E", {})], _meta()))
        assert [e.id for e in events] == [0]
        assert seen == [0]

    def test_off_committed(self) -> None:
        log = _log()
        listener = lambda events: None  # noqa: E731
        log.on_committed(listener)
        assert log.listener_count == 1
        log.off_committed(listener)
        log.off_committed(listener)
        assert log.listener_count == 0


# ---------------------------------------------------------------------------
# Query
# ---------------------------------------------------------------------------


class TestQuery:
    @pytest.fixture
    def log(self) -> InMemoryEventLog:
        log = _log()

        async def run() -> None:
            await log.append("cart-1", 0, [("CartSubmitted", {})], _meta())
            await log.append("prod-a", 0, [("InventoryImported", {})], _meta())
            await log.append("cart-1", 1, [("CartPublished", {})], _meta())
            await log.append("prod-a", 1, [("InventoryAdjusted", {})], _meta())

        asyncio.run(run())
        return log

    def test_after_is_exclusive(self, log: InMemoryEventLog) -> None:
        assert [e.id for e in log.query(after=1)] == [2, 3]

    def test_after_minus_one_is_everything(self, log: InMemoryEventLog) -> None:
        assert [e.id for e in log.query(after=-1)] == [0, 1, 2, 3]

    def test_limit(self, log: InMemoryEventLog) -> None:
        assert [e.id for e in log.query(limit=2)] == [0, 1]

    def test_stream_filter(self, log: InMemoryEventLog) -> None:
        assert [e.id for e in log.query(stream="prod-a")] == [1, 3]

    def test_name_globs(self, log: InMemoryEventLog) -> None:
        assert [e.name for e in log.query(names=["Inventory*"])] == [
            "InventoryImported",
            "InventoryAdjusted",
        ]

    def test_load_unknown_stream(self, log: InMemoryEventLog) -> None:
        assert log.load("nope") == []
        assert log.stream_version("nope") == 0


# ---------------------------------------------------------------------------
# Event envelope
# ---------------------------------------------------------------------------


class TestEventWire:
    def test_wire_shape(self) -> None:
        log = _log()
        [event] = asyncio.run(log.append("s", 0, [("E", {"n": 1})], _meta()))
        assert event.to_wire() == {
            "id": 0,
            "name": "E",
            "data": {"n": 1},
            "stream": "s",
            "version": 1,
            "created": "2026-01-01T12:00:00.000Z",
            "meta": {
                "correlation": "corr-1",
                "causation": {
                    "action": {
                        "stream": "s",
                        "actor": {"id": "u1", "name": "Alice"},
                        "name": "DoIt",
                    }
                },
            },
        }

    def test_action_name_omitted_when_absent(self) -> None:
        log = _log()
        [event] = asyncio.run(log.append("s", 0, [("E", {})], _meta(name=None)))
        assert "name" not in event.to_wire()["meta"]["causation"]["action"]

    def test_event_causation_is_rendered(self) -> None:
        meta = EventMeta(
            correlation="c",
            causation=Causation(event=EventCausation(id=4, name="CartSubmitted", stream="cart-1")),
        )
        assert meta.to_wire() == {
            "correlation": "c",
            "causation": {"event": {"id": 4, "name": "CartSubmitted", "stream": "cart-1"}},
        }

    def test_actor_property(self) -> None:
        log = _log()
        [event] = asyncio.run(log.append("s", 0, [("E", {})], _meta()))
        assert event.actor == ALICE

    def test_event_is_frozen(self) -> None:
        log = _log()
        [event] = asyncio.run(log.append("s", 0, [("E", {})], _meta()))
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.version = 2  # type: ignore[misc]

    def test_serialize_events(self) -> None:
        log = _log()
        asyncio.run(log.append("s", 0, [("E", {}), ("F", {})], _meta()))
        assert [w["name"] for w in serialize_events(log.query())] == ["E", "F"]
