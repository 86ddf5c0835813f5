"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so imports like
``import lru_engine`` resolve correctly regardless of the working directory
pytest chooses, and provides small cache fixtures shared across modules.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()


@pytest.fixture
def cache():
    """Empty cache with capacity 2."""
    from lru_engine import Cache

    return Cache(2)


@pytest.fixture
def abc_cache():
    """Capacity-5 cache holding a=1, b=2, c=3 inserted in that order."""
    from lru_engine import Cache

    return Cache(5, [("a", 1), ("b", 2), ("c", 3)])


@pytest.fixture
def check_invariants():
    """Return a checker for the structural invariants of a cache."""
    return assert_consistent


def assert_consistent(c) -> None:
    """Check the structural invariants of a cache."""
    assert len(c._index) == len(c._order)
    assert len(c) <= c.capacity
    assert set(c._index) == set(c._order)
    if c._last_accessed:
        entry = c._last_accessed.entry
        assert c._index.get(entry.index_key) is entry
