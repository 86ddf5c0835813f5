"""Function memoization backed by :class:`~lru_engine.cache.Cache`.

Call arguments are turned into cache keys with :mod:`cachetools.keys`, so
the keys follow the same rules as ``cachetools.cached``: positional and
keyword arguments must be hashable, and ``typed=True`` distinguishes
``f(1)`` from ``f(1.0)``.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Optional, TypeVar

from cachetools.keys import hashkey, typedkey  # type: ignore[import-untyped]
from pydantic import BaseModel

from .abstract import CacheProtocol
from .cache import Cache
from .errors import NotMonitoring

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class CacheInfo(BaseModel):
    """Summary returned by a memoized function's ``cache_info()``."""

    hits: Optional[int] = None
    misses: Optional[int] = None
    capacity: int
    size: int


def memoize(
    capacity: int = 128,
    *,
    typed: bool = False,
    monitor: bool = False,
    key: Optional[Callable[..., Any]] = None,
    cache_factory: Callable[[int], CacheProtocol[Any, Any]] = Cache,
) -> Callable[[F], F]:
    """Decorate a function so that results are cached per argument set.

    Parameters
    ----------
    capacity: int
        Maximum number of distinct argument sets remembered.
    typed: bool
        Key on argument types as well as values.
    monitor: bool
        Attach a statistics hook so ``cache_info()`` reports hits/misses.
    key: callable, optional
        Custom key function; overrides ``typed``.
    cache_factory: callable
        Builds the backing cache from a capacity; any
        :class:`~lru_engine.abstract.CacheProtocol` implementation works.

    The wrapper exposes ``cache`` (the backing :class:`Cache`),
    ``cache_clear()`` and ``cache_info()``.
    """
    make_key = key or (typedkey if typed else hashkey)

    def decorator(func: F) -> F:
        cache = cache_factory(capacity)
        if monitor:
            cache.monitor()

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            cache_key = make_key(*args, **kwargs)
            position = cache.find(cache_key)
            if not position.is_end:
                return position.value
            result = func(*args, **kwargs)
            cache.insert(cache_key, result)
            return result

        def cache_clear() -> None:
            cache.clear()
            if cache.is_monitoring:
                cache.statistics.reset()

        def cache_info() -> CacheInfo:
            try:
                stats = cache.statistics
            except NotMonitoring:
                return CacheInfo(capacity=cache.capacity, size=cache.size)
            return CacheInfo(
                hits=stats.hits,
                misses=stats.misses,
                capacity=cache.capacity,
                size=cache.size,
            )

        wrapper.cache = cache  # type: ignore[attr-defined]
        wrapper.cache_clear = cache_clear  # type: ignore[attr-defined]
        wrapper.cache_info = cache_info  # type: ignore[attr-defined]
        logger.debug(
            "lru.memoize.wrapped",
            extra={"function": func.__qualname__, "capacity": capacity},
        )
        return wrapper  # type: ignore[return-value]

    return decorator
