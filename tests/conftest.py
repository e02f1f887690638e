"""Shared pytest fixtures."""

from es_commerce.testing.fixtures import correlation_fixture, fake_clock, shop  # noqa: F401
