"""Invariants – named preconditions over aggregate state."""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Mapping

from es_commerce.kernel.errors.domain import InvariantViolationError

#: ``valid(state, actor) -> bool``
Predicate = Callable[[Mapping[str, Any], Any], bool]


@dataclasses.dataclass(frozen=True)
class Invariant:
    """A business rule that must hold before a command handler runs.

    Example::

        must_be_open = Invariant(
            "Cart must be open",
            lambda state, actor: state["status"] == "Open",
        )
    """

    description: str
    valid: Predicate

    def check(self, state: Mapping[str, Any], actor: Any = None) -> None:
        """Raise ``InvariantViolationError`` when the rule does not hold."""
        if not self.valid(state, actor):
            raise InvariantViolationError(self.description)


__all__ = ["Invariant", "Predicate"]
