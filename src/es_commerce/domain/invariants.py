"""Domain invariants shared by the shop aggregates."""
from __future__ import annotations

from es_commerce.kernel.ddd import Invariant

must_be_open = Invariant("Cart must be open", lambda state, actor: state["status"] == "Open")

must_be_submitted = Invariant(
    "Cart must be submitted", lambda state, actor: state["status"] == "Submitted"
)

must_not_be_registered = Invariant(
    "User must not be registered", lambda state, actor: not state["email"]
)

must_be_registered = Invariant("User must be registered", lambda state, actor: bool(state["email"]))

__all__ = ["must_be_open", "must_be_registered", "must_be_submitted", "must_not_be_registered"]
