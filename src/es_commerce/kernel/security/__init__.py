"""Kernel security – actor identity."""
from es_commerce.kernel.security.actor import ANONYMOUS_ACTOR, SYSTEM_ACTOR, Actor

__all__ = ["ANONYMOUS_ACTOR", "Actor", "SYSTEM_ACTOR"]
