"""Testing support – fakes, fixtures and Hypothesis strategies for shop tests.

Import the fixtures in your ``conftest.py``::

    from es_commerce.testing.fixtures import fake_clock, shop  # noqa: F401
"""

from es_commerce.testing.fakes import FakeClock, FailingReaction

__all__ = ["FailingReaction", "FakeClock"]
