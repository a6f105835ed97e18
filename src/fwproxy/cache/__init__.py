"""
Cache module for storing upstream responses.

Provides the abstract store interface and the flat-file implementation.
"""

from fwproxy.cache.base import CacheStore
from fwproxy.cache.filesystem import FileCacheStore

__all__ = ["CacheStore", "FileCacheStore"]
