"""Testing fixtures – shop: a freshly built shop on a frozen clock."""
from __future__ import annotations

import pytest

from es_commerce.domain import build_shop
from es_commerce.testing.fakes import FakeClock


@pytest.fixture
def shop():
    return build_shop(clock=FakeClock())


__all__ = ["shop"]
