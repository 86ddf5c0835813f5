"""Command-line interface for replaying key traces through a cache.

Each non-empty line of the trace is one request. A request that misses is
followed by an insert of the key, so the replay models a read-through cache
in front of a slower store. The statistics snapshot is printed as JSON.

Usage
-----
    lru-engine replay trace.txt --capacity 1000
    python -m lru_engine.cli replay - --config cache.json < trace.txt
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO

from .cache import Cache
from .config.models import CacheConfig, EnvSettings
from .observability import setup_logging
from .statistics import StatisticsSnapshot

logger = logging.getLogger(__name__)


def _read_keys(stream: TextIO) -> Iterator[str]:
    for line in stream:
        key = line.strip()
        if key:
            yield key


def replay(keys: Iterable[str], cache: Cache[str, int]) -> StatisticsSnapshot:
    """Run ``keys`` through ``cache`` and return the resulting statistics.

    The cache is monitored for the duration of the replay if it was not
    already. Values stored are the request ordinal of the miss.
    """
    stats = cache.statistics if cache.is_monitoring else cache.monitor()
    requests = 0
    for requests, key in enumerate(keys, start=1):
        if not cache.contains(key):
            cache.insert(key, requests)
    snapshot = stats.snapshot()
    logger.info(
        "lru.replay.complete",
        extra={
            "requests": requests,
            "hits": snapshot.hits,
            "misses": snapshot.misses,
            "hit_rate": snapshot.hit_rate,
            "capacity": cache.capacity,
        },
    )
    return snapshot


def _build_cache(args: argparse.Namespace, settings: EnvSettings) -> Cache[str, int]:
    if args.config:
        config = CacheConfig.load(Path(args.config))
    else:
        config = CacheConfig(capacity=settings.default_capacity)
    if args.capacity is not None:
        config = config.model_copy(update={"capacity": args.capacity})
    return Cache.from_config(config)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lru-engine", description="LRU engine CLI")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=[
            "CRITICAL",
            "ERROR",
            "WARNING",
            "INFO",
            "DEBUG",
        ],
        help="Logging level (overrides environment)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (once sets DEBUG)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    rp = sub.add_parser("replay", help="Replay a key trace and report hit rate")
    rp.add_argument("trace", help="Path to a file with one key per line, or -")
    rp.add_argument("--capacity", type=int, help="Cache capacity (overrides config)")
    rp.add_argument("--config", help="Path to JSON cache config")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = EnvSettings()
    env_level = os.environ.get("LRU_ENGINE_LOG_LEVEL", settings.log_level).upper()
    effective_level = args.log_level or ("DEBUG" if args.verbose > 0 else env_level)
    setup_logging(effective_level)

    if args.capacity is not None and args.capacity < 0:
        parser.error("--capacity must be >= 0")

    cache = _build_cache(args, settings)
    if args.trace == "-":
        snapshot = replay(_read_keys(sys.stdin), cache)
    else:
        with open(args.trace, encoding="utf-8") as fh:
            snapshot = replay(_read_keys(fh), cache)

    print(snapshot.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
