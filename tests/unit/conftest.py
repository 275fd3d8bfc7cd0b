"""Unit test configuration.

Unit tests are fast and isolated: no Redis, no network. Every test collected
under this directory gets the ``unit`` marker.
"""

from __future__ import annotations

from pathlib import Path

import pytest


UNIT_DIR = Path(__file__).parent


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Mark every test in this directory as a unit test."""
    for item in items:
        if UNIT_DIR in item.path.parents:
            item.add_marker(pytest.mark.unit)
