"""Unit tests for the correlation context."""

from __future__ import annotations

import asyncio

from es_commerce.observability.correlation import CorrelationContext, RequestContext
from es_commerce.observability.logging import CorrelationProcessor


class TestCorrelationContext:
    def setup_method(self) -> None:
        CorrelationContext.clear()

    def teardown_method(self) -> None:
        CorrelationContext.clear()

    def test_get_returns_none_by_default(self) -> None:
        assert CorrelationContext.get() is None

    def test_set_and_reset(self) -> None:
        ctx = RequestContext(correlation_id="abc", actor_id="u1")
        token = CorrelationContext.set(ctx)
        assert CorrelationContext.get() is ctx
        CorrelationContext.reset(token)
        assert CorrelationContext.get() is None

    def test_scope_restores_previous(self) -> None:
        outer = RequestContext("outer")
        CorrelationContext.set(outer)
        with CorrelationContext.scope() as inner:
            assert CorrelationContext.get() is inner
            assert len(inner.correlation_id) == 32
        assert CorrelationContext.get() is outer

    def test_tasks_see_a_copy(self) -> None:
        async def inner() -> str | None:
            CorrelationContext.set(RequestContext("inner"))
            ctx = CorrelationContext.get()
            return ctx.correlation_id if ctx else None

        async def run() -> tuple[str | None, RequestContext | None]:
            seen = await asyncio.create_task(inner())
            return seen, CorrelationContext.get()

        seen, outer = asyncio.run(run())
        assert seen == "inner"
        assert outer is None


class TestCorrelationProcessor:
    def teardown_method(self) -> None:
        CorrelationContext.clear()

    def test_adds_ids_from_context(self) -> None:
        with CorrelationContext.scope(RequestContext("abc", actor_id="u1")):
            out = CorrelationProcessor()(None, "info", {"event": "x"})
        assert out == {"event": "x", "correlation_id": "abc", "actor_id": "u1"}

    def test_keeps_explicit_values(self) -> None:
        with CorrelationContext.scope(RequestContext("abc")):
            out = CorrelationProcessor()(None, "info", {"event": "x", "correlation_id": "mine"})
        assert out["correlation_id"] == "mine"
        assert "actor_id" not in out

    def test_noop_without_context(self) -> None:
        assert CorrelationProcessor()(None, "info", {"event": "x"}) == {"event": "x"}
