"""Caching stores used during a scan."""

from .file_cache import DEFAULT_TTL, CacheEntry, CachedReader, FileCache

__all__ = ["CacheEntry", "CachedReader", "DEFAULT_TTL", "FileCache"]
