"""Config models and loader.

This module defines Pydantic models for file- and environment-based cache
configuration. JSON parsing prefers `orjson` when available and falls back
to the standard library's `json` module otherwise.
"""

from __future__ import annotations

import json as _json
from pathlib import Path
from typing import Any, Callable, List, Optional

try:
    import orjson as _orjson_mod  # type: ignore[assignment]
except ImportError:  # pragma: no cover - optional dependency
    _orjson_mod = None  # type: ignore[assignment]
    _loads_orjson: Optional[Callable[[bytes], Any]] = None
else:

    def _loads_orjson(buf: bytes) -> Any:
        loader = getattr(_orjson_mod, "loads")  # type: ignore[assignment]
        return loader(buf)


from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheConfig(BaseModel):
    """Settings for a single cache instance.

    Attributes
    ----------
    capacity: int
        Maximum number of entries. Zero yields a cache that admits nothing.
    monitor: bool
        Attach a statistics hook on construction.
    monitored_keys: List[str]
        Keys to track individually when monitoring.
    """

    capacity: int = Field(128, ge=0, description="Maximum number of entries")
    monitor: bool = Field(False, description="Attach a statistics hook")
    monitored_keys: List[str] = Field(
        default_factory=list, description="Keys tracked individually"
    )

    @staticmethod
    def load(path: Path) -> "CacheConfig":
        """Load cache config from a JSON file."""
        raw = path.read_bytes()
        if _loads_orjson is not None:
            data = _loads_orjson(raw)
        else:
            data = _json.loads(raw.decode("utf-8"))
        return CacheConfig.model_validate(data)


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    default_capacity: int
        Capacity used when no explicit capacity or config file is given.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="LRU_ENGINE_")

    log_level: str = Field("INFO")
    default_capacity: int = Field(128, ge=0)
