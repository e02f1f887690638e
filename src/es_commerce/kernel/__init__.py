"""Kernel – errors, time, invariants and actor identity shared by every layer."""
