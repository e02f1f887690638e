"""Observability – causal-chain context shared by commands issued in one request."""
from __future__ import annotations

import contextlib
import dataclasses
from contextvars import ContextVar, Token
from typing import Iterator
from uuid import uuid4


@dataclasses.dataclass(frozen=True)
class RequestContext:
    """Correlation id (and optionally the acting user) of one inbound request."""
    correlation_id: str
    actor_id: str | None = None

    @classmethod
    def new(cls, actor_id: str | None = None) -> RequestContext:
        return cls(correlation_id=uuid4().hex, actor_id=actor_id)


_current: ContextVar[RequestContext | None] = ContextVar("es_commerce_request", default=None)


class CorrelationContext:
    """Access to the :class:`RequestContext` of the running task.

    When a context is active, every top-level command stamps its
    ``correlation_id`` on the events it commits, so one request that issues
    several commands yields a single causal chain.

    Example::

        with CorrelationContext.scope(RequestContext.new(actor_id=user.id)):
            await app.do("PlaceOrder", target, payload)
    """

    @staticmethod
    def set(ctx: RequestContext) -> Token[RequestContext | None]:
        return _current.set(ctx)

    @staticmethod
    def reset(token: Token[RequestContext | None]) -> None:
        _current.reset(token)

    @staticmethod
    def get() -> RequestContext | None:
        return _current.get()

    @staticmethod
    def clear() -> None:
        _current.set(None)

    @staticmethod
    @contextlib.contextmanager
    def scope(ctx: RequestContext | None = None) -> Iterator[RequestContext]:
        """Activate *ctx* (a fresh one by default) for the ``with`` block."""
        active = ctx or RequestContext.new()
        token = _current.set(active)
        try:
            yield active
        finally:
            _current.reset(token)


__all__ = ["CorrelationContext", "RequestContext"]
