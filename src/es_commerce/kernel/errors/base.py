"""Kernel errors – BaseError, the root every deliberate failure derives from."""

from __future__ import annotations

import json
from typing import Any


class BaseError(Exception):
    """Failure the engine raises on purpose, as opposed to a bug.

    ``code`` is a stable slug callers can branch on; ``detail`` holds
    JSON-safe context (stream, versions, offending field...).  ``cause``
    is chained as ``__cause__`` so tracebacks keep the original error.
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code}: {self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Response body for whoever issued the failing command."""
        body: dict[str, Any] = {"code": self.code, "message": self.message, "detail": self.detail}
        if self.cause is not None:
            body["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return body

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)


__all__ = ["BaseError"]
