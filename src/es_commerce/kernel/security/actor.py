"""Kernel security – Actor identity carried through command causation."""
from __future__ import annotations

import dataclasses
from typing import Any


@dataclasses.dataclass(frozen=True)
class Actor:
    """Who issued a command.

    Opaque to the engine: it is copied into ``meta.causation.action`` and
    handed to invariants and handlers, never authenticated.
    """
    id: str
    name: str
    role: str | None = None
    picture: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def to_wire(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


SYSTEM_ACTOR = Actor(id="system", name="System", role="admin")
ANONYMOUS_ACTOR = Actor(id="anonymous", name="Browser", role="user")

__all__ = ["ANONYMOUS_ACTOR", "Actor", "SYSTEM_ACTOR"]
