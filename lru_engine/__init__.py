"""
LRU engine package.

A bounded, in-process key/value cache with least-recently-used eviction,
dual iteration views and optional hit/miss statistics.
"""

from .__version__ import __version__
from .abstract import CacheProtocol
from .cache import Cache, InsertionResult, swap
from .errors import (
    InvalidIterator,
    KeyNotFound,
    LRUError,
    NotMonitoring,
    ReadOnlyIterator,
)
from .iterators import CacheIterator
from .memoize import memoize
from .pair import Pair
from .statistics import Statistics, StatisticsSnapshot

__all__ = [
    "__version__",
    "Cache",
    "CacheIterator",
    "CacheProtocol",
    "InsertionResult",
    "InvalidIterator",
    "KeyNotFound",
    "LRUError",
    "NotMonitoring",
    "Pair",
    "ReadOnlyIterator",
    "Statistics",
    "StatisticsSnapshot",
    "memoize",
    "swap",
]
