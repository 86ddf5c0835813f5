"""Configuration models for caches built from files or the environment."""

from .models import CacheConfig, EnvSettings

__all__ = ["CacheConfig", "EnvSettings"]
