"""DDD building blocks – public re-export surface."""

from es_commerce.kernel.ddd.invariant import Invariant, Predicate

__all__ = ["Invariant", "Predicate"]
