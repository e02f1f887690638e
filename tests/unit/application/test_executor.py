"""Unit tests for CommandExecutor through App.do."""

from __future__ import annotations

import asyncio

import pydantic
import pytest

from es_commerce.application.event_sourcing import (
    AggregateDefinition,
    AggregateRegistry,
    App,
    CommandContext,
    Slice,
    Target,
)
from es_commerce.kernel.ddd import Invariant
from es_commerce.kernel.errors import (
    ConcurrencyConflictError,
    InvariantViolationError,
    UnknownCommandError,
    UnknownStreamError,
    ValidationError,
)
from es_commerce.kernel.security import Actor
from es_commerce.observability.correlation import RequestContext
from es_commerce.testing.fakes import FakeClock

ALICE = Actor("u1", "Alice")


class Increment(pydantic.BaseModel):
    by: int = 1


class Incremented(pydantic.BaseModel):
    by: int


class Reset(pydantic.BaseModel):
    pass


below_ten = Invariant("Count must stay below ten", lambda state, actor: state["count"] < 10)


def _reset(data: dict, ctx: CommandContext):
    if ctx.state["count"] == 0:
        return None
    return "Incremented", {"by": -ctx.state["count"]}


Counter = (
    AggregateDefinition("Counter", lambda: {"count": 0})
    .emits(Incremented=Incremented)
    .patch(Incremented=lambda event, state: {"count": state["count"] + event.data["by"]})
    .on("Increment", Increment, given=[below_ten], emit="Incremented")
    .on("Reset", Reset, emit=_reset)
)


def _app() -> App:
    return App([Slice("counter").with_state(Counter)], clock=FakeClock())


class TestExecute:
    def test_first_command_creates_stream(self) -> None:
        app = _app()
        result = asyncio.run(app.do("Increment", Target("c", ALICE), {"by": 2}))
        assert result.accepted
        assert result.version == 1
        assert result.state == {"count": 2}
        assert [e.name for e in result.events] == ["Incremented"]
        assert app.load(Counter, "c").state == {"count": 2}

    def test_meta_records_the_action(self) -> None:
        app = _app()
        result = asyncio.run(app.do("Increment", Target("c", ALICE), {}))
        action = result.events[0].meta.causation.action
        assert (action.stream, action.actor, action.name) == ("c", ALICE, "Increment")
        assert result.events[0].meta.causation.event is None
        assert len(result.events[0].meta.correlation) == 32

    def test_correlation_comes_from_context(self, correlation_fixture: RequestContext) -> None:
        app = _app()
        result = asyncio.run(app.do("Increment", Target("c", ALICE), {}))
        assert result.events[0].meta.correlation == "test-correlation-id"

    def test_unknown_command(self) -> None:
        with pytest.raises(UnknownCommandError):
            asyncio.run(_app().do("Decrement", Target("c", ALICE), {}))

    def test_load_unknown_aggregate(self) -> None:
        with pytest.raises(UnknownStreamError):
            _app().load("Ghost", "c")

    def test_missing_stream(self) -> None:
        with pytest.raises(ValidationError):
            asyncio.run(_app().do("Increment", Target("", ALICE), {}))

    def test_invalid_payload_appends_nothing(self) -> None:
        app = _app()
        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(app.do("Increment", Target("c", ALICE), {"by": "lots"}))
        assert exc_info.value.errors
        assert len(app.log) == 0

    def test_invariant_rejects_and_appends_nothing(self) -> None:
        app = _app()

        async def run() -> None:
            await app.do("Increment", Target("c", ALICE), {"by": 10})
            await app.do("Increment", Target("c", ALICE), {"by": 1})

        with pytest.raises(InvariantViolationError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.description == "Count must stay below ten"
        assert len(app.log) == 1

    def test_noop_decision(self) -> None:
        app = _app()
        result = asyncio.run(app.do("Reset", Target("c", ALICE), {}))
        assert result.events == ()
        assert result.version == 0
        assert len(app.log) == 0

    def test_expected_version_mismatch(self) -> None:
        app = _app()
        with pytest.raises(ConcurrencyConflictError) as exc_info:
            asyncio.run(app.do("Increment", Target("c", ALICE, expected_version=3), {}))
        assert (exc_info.value.expected, exc_info.value.actual) == (3, 0)


class TestOptimisticConcurrency:
    def test_concurrent_commands_on_one_stream(self) -> None:
        app = _app()

        async def run() -> list:
            return await asyncio.gather(
                app.do("Increment", Target("c", ALICE), {"by": 1}),
                app.do("Increment", Target("c", ALICE), {"by": 1}),
                return_exceptions=True,
            )

        results = asyncio.run(run())
        conflicts = [r for r in results if isinstance(r, ConcurrencyConflictError)]
        assert len(conflicts) == 1
        assert app.log.stream_version("c") == 1
        assert app.load(Counter, "c").state == {"count": 1}

    def test_different_streams_do_not_conflict(self) -> None:
        app = _app()

        async def run() -> list:
            return await asyncio.gather(
                app.do("Increment", Target("a", ALICE), {}),
                app.do("Increment", Target("b", ALICE), {}),
            )

        results = asyncio.run(run())
        assert {r.stream for r in results} == {"a", "b"}


class TestRegistry:
    def test_register_is_idempotent(self) -> None:
        registry = AggregateRegistry([Counter, Counter])
        assert list(registry) == [Counter]
        assert registry.commands == ["Increment", "Reset"]

    def test_duplicate_command_rejected(self) -> None:
        other = AggregateDefinition("Other", dict).emits(Incremented=Incremented).on(
            "Increment", Increment, emit="Incremented"
        )
        with pytest.raises(ValueError, match="Increment"):
            AggregateRegistry([Counter, other])
