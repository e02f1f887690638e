"""Kernel errors – failures reported back to whoever issued a command.

None of these is retried by the engine; they surface from ``App.do``
unchanged.
"""

from __future__ import annotations

from typing import Any, Iterable

from es_commerce.kernel.errors.base import BaseError


class DomainError(BaseError):
    default_code = "domain_error"


class InvariantViolationError(DomainError):
    """A ``given`` invariant refused the command.

    The message is the invariant's description, e.g. ``"Cart must be open"``.
    """

    default_code = "invariant_violation"

    def __init__(self, description: str, **kwargs: Any) -> None:
        super().__init__(description, **kwargs)
        self.description = description


class ValidationError(DomainError):
    """A command or event payload failed its schema.

    Field failures (pydantic's ``loc``/``msg``/``type`` dicts) travel in
    ``detail["errors"]`` so they reach the caller with the response body.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: Iterable[dict[str, Any]] = (),
        detail: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        detail = dict(detail or {})
        detail["errors"] = list(errors)
        super().__init__(message, detail=detail, **kwargs)

    @property
    def errors(self) -> list[dict[str, Any]]:
        return self.detail["errors"]

    @property
    def fields(self) -> list[str]:
        """Dotted path of each failing field, e.g. ``items.0.price``."""
        return [".".join(str(part) for part in e.get("loc", ())) for e in self.errors]


class ConflictError(DomainError):
    """The command clashes with what is already recorded (e.g. a taken email)."""

    default_code = "conflict"


class ConcurrencyConflictError(ConflictError):
    """The stream moved past the version the command was decided on."""

    default_code = "concurrency_conflict"

    def __init__(self, stream: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Stream {stream!r} is at version {actual}, expected {expected}",
            detail={"stream": stream, "expected": expected, "actual": actual},
        )
        self.stream = stream
        self.expected = expected
        self.actual = actual


__all__ = [
    "ConcurrencyConflictError",
    "ConflictError",
    "DomainError",
    "InvariantViolationError",
    "ValidationError",
]
