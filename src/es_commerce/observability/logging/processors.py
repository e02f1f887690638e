"""Observability – structlog processor for the request context, and get_logger."""
from __future__ import annotations

from typing import Any

import structlog

from es_commerce.observability.correlation import CorrelationContext


class CorrelationProcessor:
    """Copy ``correlation_id`` and ``actor_id`` of the active request into each entry.

    Values already bound on the logger win.
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        ctx = CorrelationContext.get()
        if ctx is None:
            return event_dict
        event_dict.setdefault("correlation_id", ctx.correlation_id)
        if ctx.actor_id is not None:
            event_dict.setdefault("actor_id", ctx.actor_id)
        return event_dict


def get_logger(name: str | None = None, **bound: Any) -> Any:
    """structlog logger for *name* with *bound* key-values attached."""
    logger = structlog.get_logger(name)
    return logger.bind(**bound) if bound else logger


__all__ = ["CorrelationProcessor", "get_logger"]
