"""
Abstract base class for response caches.

Defines the key-value interface the forwarding handler depends on, so the
handler can run against the on-disk store or an in-memory fake.
"""

from abc import ABC, abstractmethod
from typing import Optional

from fwproxy.core.models import CacheEntry


class CacheStore(ABC):
    """Key-value store of cached upstream responses.

    Keys are cache keys produced by ``make_cache_key``. An entry is either
    fully present (body and metadata) or absent.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the complete entry for key, or None on a miss.

        Raises:
            CacheError: If the store cannot be read.
        """

    @abstractmethod
    def put(self, key: str, entry: CacheEntry) -> None:
        """Store entry under key, replacing any previous entry.

        Raises:
            CacheError: If the entry cannot be written.
        """
