"""Internal building blocks of the cache engine.

Nothing in this package is part of the public API; the engine in
:mod:`lru_engine.cache` is the only consumer.
"""
