"""Testing fakes – deterministic doubles for the runtime's ports."""
from es_commerce.testing.fakes.clock import EPOCH, FakeClock
from es_commerce.testing.fakes.reactions import FailingReaction

__all__ = ["EPOCH", "FailingReaction", "FakeClock"]
