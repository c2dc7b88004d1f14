"""
Configuration for pytest to set up the proper import paths and shared fixtures.
"""

import sys
from pathlib import Path
import pytest


# Add the repository root to Python path so ferrocore imports without installing
parent_dir = Path(__file__).parent.parent
sys.path.insert(0, str(parent_dir))

from ferrocore.utils import clear_performance_metrics


class PullCounter:
    """Iterable source that records how many elements have been pulled from it."""

    def __init__(self, data):
        self._data = data
        self.pulled = 0

    def __iter__(self):
        for item in self._data:
            self.pulled += 1
            yield item


class CallTracker:
    """Wraps a function and records every argument it was called with."""

    def __init__(self, fn=lambda x: x):
        self._fn = fn
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args[0] if len(args) == 1 else args)
        return self._fn(*args)

    @property
    def count(self):
        return len(self.calls)


@pytest.fixture
def counted_source():
    """Factory for sources that count pulls."""
    return PullCounter


@pytest.fixture
def tracker():
    """Factory for call-recording wrappers around functions."""
    return CallTracker


@pytest.fixture(autouse=True)
def reset_performance_metrics():
    """Every test starts with an empty metrics store."""
    clear_performance_metrics()
    yield
    clear_performance_metrics()
