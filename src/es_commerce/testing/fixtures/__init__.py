"""Testing fixtures – pytest fixtures for a fresh shop per test."""
from es_commerce.testing.fixtures.clock import fake_clock
from es_commerce.testing.fixtures.correlation import correlation_fixture
from es_commerce.testing.fixtures.shop import shop

__all__ = ["correlation_fixture", "fake_clock", "shop"]
