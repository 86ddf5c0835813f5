"""Hit/miss accounting for monitored caches.

A :class:`Statistics` object is attached to a cache with
:meth:`lru_engine.cache.Cache.monitor`. The cache calls
:meth:`Statistics.register_hit` or :meth:`Statistics.register_miss` exactly
once per lookup-class operation; the object never influences cache
behavior. One object may be shared between several caches to aggregate
their traffic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterable, Optional

from pydantic import BaseModel, Field

from .errors import LRUError

logger = logging.getLogger(__name__)


@dataclass
class HitMiss:
    """Per-key counters."""

    hits: int = 0
    misses: int = 0

    @property
    def accesses(self) -> int:
        return self.hits + self.misses


class KeyStatisticsSnapshot(BaseModel):
    """Serializable per-key counters."""

    key: str
    hits: int = Field(0, ge=0)
    misses: int = Field(0, ge=0)


class StatisticsSnapshot(BaseModel):
    """Point-in-time copy of a :class:`Statistics` object.

    Attributes
    ----------
    total_accesses: int
        Number of hit and miss events recorded.
    hits: int
        Number of hit events.
    misses: int
        Number of miss events.
    hit_rate: float
        ``hits / total_accesses`` (0.0 when nothing was recorded).
    keys: list[KeyStatisticsSnapshot]
        Counters for every monitored key, keys rendered with ``repr``.
    """

    total_accesses: int = Field(0, ge=0)
    hits: int = Field(0, ge=0)
    misses: int = Field(0, ge=0)
    hit_rate: float = Field(0.0, ge=0.0, le=1.0)
    keys: list[KeyStatisticsSnapshot] = Field(default_factory=list)


class Statistics:
    """Counts hits and misses, globally and for selected keys.

    Parameters
    ----------
    keys: Iterable[Hashable]
        Keys whose individual hit/miss counts should be tracked. Global
        counts are always kept.
    """

    def __init__(self, keys: Iterable[Hashable] = ()) -> None:
        self._hits = 0
        self._misses = 0
        self._key_map: Dict[Hashable, HitMiss] = {key: HitMiss() for key in keys}

    # ---------------- Recording ----------------
    def register_hit(self, key: Hashable) -> None:
        self._hits += 1
        if self._key_map:
            counters = self._key_map.get(key)
            if counters is not None:
                counters.hits += 1

    def register_miss(self, key: Hashable) -> None:
        self._misses += 1
        if self._key_map:
            counters = self._key_map.get(key)
            if counters is not None:
                counters.misses += 1

    # ---------------- Global counters ----------------
    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    @property
    def total_accesses(self) -> int:
        return self._hits + self._misses

    @property
    def hit_rate(self) -> float:
        """Fraction of accesses that were hits (0.0 if none recorded)."""
        total = self.total_accesses
        if total == 0:
            return 0.0
        return self._hits / total

    @property
    def miss_rate(self) -> float:
        total = self.total_accesses
        if total == 0:
            return 0.0
        return self._misses / total

    # ---------------- Per-key counters ----------------
    def monitor(self, key: Hashable) -> None:
        """Start tracking ``key`` individually (no-op if already tracked)."""
        self._key_map.setdefault(key, HitMiss())

    def unmonitor(self, key: Hashable) -> None:
        self._key_map.pop(key, None)

    def unmonitor_all(self) -> None:
        self._key_map.clear()

    def is_monitoring(self, key: Hashable) -> bool:
        return key in self._key_map

    @property
    def number_of_monitored_keys(self) -> int:
        return len(self._key_map)

    def stats_for(self, key: Hashable) -> HitMiss:
        """Return the counters for a monitored key.

        Raises
        ------
        LRUError
            If ``key`` is not monitored.
        """
        counters = self._key_map.get(key)
        if counters is None:
            raise LRUError(f"key is not monitored: {key!r}")
        return counters

    def hits_for(self, key: Hashable) -> int:
        return self.stats_for(key).hits

    def misses_for(self, key: Hashable) -> int:
        return self.stats_for(key).misses

    def __getitem__(self, key: Hashable) -> HitMiss:
        return self.stats_for(key)

    # ---------------- Housekeeping ----------------
    def reset(self) -> None:
        """Zero all counters; monitored keys stay monitored."""
        self._hits = 0
        self._misses = 0
        for key in self._key_map:
            self._key_map[key] = HitMiss()
        logger.debug("lru.statistics.reset", extra={"keys": len(self._key_map)})

    def snapshot(self) -> StatisticsSnapshot:
        return StatisticsSnapshot(
            total_accesses=self.total_accesses,
            hits=self._hits,
            misses=self._misses,
            hit_rate=self.hit_rate,
            keys=[
                KeyStatisticsSnapshot(key=repr(key), hits=c.hits, misses=c.misses)
                for key, c in self._key_map.items()
            ],
        )

    def __repr__(self) -> str:
        return (
            f"Statistics(hits={self._hits}, misses={self._misses}, "
            f"monitored_keys={len(self._key_map)})"
        )


def make_statistics(
    statistics: Optional[Statistics] = None, keys: Iterable[Any] = ()
) -> Statistics:
    """Return ``statistics`` (extended with ``keys``) or a new object."""
    if statistics is None:
        return Statistics(keys)
    for key in keys:
        statistics.monitor(key)
    return statistics
