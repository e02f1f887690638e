"""Kernel errors – every failure the engine raises deliberately.

Hierarchy::

    BaseError
    ├── DomainError          returned to the command issuer
    │   ├── InvariantViolationError
    │   ├── ValidationError
    │   └── ConflictError
    │       └── ConcurrencyConflictError
    └── ApplicationError     wiring, lookup and handler failures
        ├── UnknownCommandError
        ├── UnknownStreamError
        └── HandlerError
            ├── ReactionHandlerError
            └── ProjectionHandlerError
"""

from es_commerce.kernel.errors.application import (
    ApplicationError,
    HandlerError,
    ProjectionHandlerError,
    ReactionHandlerError,
    UnknownCommandError,
    UnknownStreamError,
)
from es_commerce.kernel.errors.base import BaseError
from es_commerce.kernel.errors.domain import (
    ConcurrencyConflictError,
    ConflictError,
    DomainError,
    InvariantViolationError,
    ValidationError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConcurrencyConflictError",
    "ConflictError",
    "DomainError",
    "HandlerError",
    "InvariantViolationError",
    "ProjectionHandlerError",
    "ReactionHandlerError",
    "UnknownCommandError",
    "UnknownStreamError",
    "ValidationError",
]
