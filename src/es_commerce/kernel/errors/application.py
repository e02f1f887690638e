"""Kernel errors – registry lookups and reaction/projection handler failures."""

from __future__ import annotations

from typing import Any

from es_commerce.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Something outside a single command's decision went wrong."""

    default_code = "application_error"


class UnknownCommandError(ApplicationError):
    """No aggregate registers a handler for the command name."""

    default_code = "unknown_command"

    def __init__(self, command: str, **kwargs: Any) -> None:
        super().__init__(f"Unknown command '{command}'", **kwargs)
        self.command = command


class UnknownStreamError(ApplicationError):
    """No aggregate is registered under the requested name."""

    default_code = "unknown_stream"

    def __init__(self, name: str, **kwargs: Any) -> None:
        super().__init__(f"Unknown aggregate '{name}'", **kwargs)
        self.name = name


class HandlerError(ApplicationError):
    """A reaction or projection handler raised while processing an event."""

    default_code = "handler_error"

    def __init__(
        self,
        consumer: str,
        event_id: int,
        event_name: str,
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            f"{consumer} failed on event {event_id} ({event_name})",
            detail={"consumer": consumer, "event_id": event_id, "event_name": event_name},
            cause=cause,
        )
        self.consumer = consumer
        self.event_id = event_id
        self.event_name = event_name


class ReactionHandlerError(HandlerError):
    default_code = "reaction_handler_error"


class ProjectionHandlerError(HandlerError):
    default_code = "projection_handler_error"


__all__ = [
    "ApplicationError",
    "HandlerError",
    "ProjectionHandlerError",
    "ReactionHandlerError",
    "UnknownCommandError",
    "UnknownStreamError",
]
