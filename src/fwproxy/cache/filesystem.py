"""
Filesystem-backed cache implementation.

Each entry is two files in the cache directory:

    <md5 hex>        raw response body
    <md5 hex>.meta   JSON {"time": <unix seconds>, "content_type": "<str>"}

Writes go to temporary files that are renamed into place, body first and
metadata last, so neither file is ever partially written. Lookups require
both files and treat a body replaced during the read as a miss. A reader
racing a put for the same URL can still pair the old metadata with the new
body if the body is swapped before the lookup starts and the metadata
after it ends.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterator, Optional

from fwproxy.cache.base import CacheStore
from fwproxy.core.exceptions import CacheError
from fwproxy.core.models import CacheEntry, CacheMetadata
from fwproxy.core.validation import is_valid_cache_key

logger = logging.getLogger(__name__)

META_SUFFIX = ".meta"
TMP_SUFFIX = ".tmp"


class FileCacheStore(CacheStore):
    """Cache of upstream responses stored as flat files.

    The directory is created on the first write, not on construction, so
    rejected requests never leave a cache directory behind.
    """

    DEFAULT_DIR = Path("cache")

    def __init__(self, cache_dir: Optional[Path] = None):
        """Initialize the store.

        Args:
            cache_dir: Directory holding cache files. Defaults to ./cache
        """
        self.cache_dir = Path(cache_dir) if cache_dir is not None else self.DEFAULT_DIR

    def body_path(self, key: str) -> Path:
        return self.cache_dir / self._checked(key)

    def meta_path(self, key: str) -> Path:
        return self.cache_dir / f"{self._checked(key)}{META_SUFFIX}"

    @staticmethod
    def _checked(key: str) -> str:
        # Keys become file names; anything else could escape the directory
        if not is_valid_cache_key(key):
            raise CacheError("key validation", f"invalid cache key {key!r}")
        return key

    def get(self, key: str) -> Optional[CacheEntry]:
        """Get the cached entry for key.

        Args:
            key: Cache key.

        Returns:
            CacheEntry, or None if either file is missing or the metadata
            is unreadable.
        """
        body_path = self.body_path(key)
        meta_path = self.meta_path(key)

        if not (body_path.is_file() and meta_path.is_file()):
            return None

        try:
            body_ino = body_path.stat().st_ino
            metadata = CacheMetadata.from_json(meta_path.read_bytes())
            with body_path.open("rb") as fh:
                # Body replaced after the metadata was read
                if os.fstat(fh.fileno()).st_ino != body_ino:
                    logger.debug("Cache entry %s changed while reading", key)
                    return None
                body = fh.read()
        except FileNotFoundError:
            # Removed between the existence check and the read
            return None
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning("Ignoring corrupt cache metadata %s: %s", meta_path.name, e)
            return None
        except OSError as e:
            raise CacheError("get", str(e))

        return CacheEntry(body=body, metadata=metadata)

    def put(self, key: str, entry: CacheEntry) -> None:
        """Store entry under key, overwriting any previous entry.

        Args:
            key: Cache key.
            entry: Body and metadata to persist.
        """
        body_path = self.body_path(key)
        meta_path = self.meta_path(key)

        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            self._write_atomic(body_path, entry.body)
            self._write_atomic(meta_path, entry.metadata.to_json().encode("utf-8"))
        except OSError as e:
            raise CacheError("put", str(e))

    def _write_atomic(self, target: Path, data: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self.cache_dir,
            prefix=f"{target.name}.",
            suffix=TMP_SUFFIX,
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, target)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    def delete(self, key: str) -> bool:
        """Delete a specific cache entry.

        Args:
            key: Cache key to delete.

        Returns:
            True if any file was removed, False if the entry was absent.
        """
        removed = False
        # Metadata first, so the entry stops being a hit before the body goes
        for path in (self.meta_path(key), self.body_path(key)):
            try:
                path.unlink()
                removed = True
            except FileNotFoundError:
                pass
            except OSError as e:
                raise CacheError("delete", str(e))
        return removed

    def keys(self) -> Iterator[str]:
        """Yield keys that have both a body and a metadata file."""
        if not self.cache_dir.is_dir():
            return
        for path in sorted(self.cache_dir.iterdir()):
            if is_valid_cache_key(path.name) and path.with_name(path.name + META_SUFFIX).is_file():
                yield path.name

    def clear(self) -> int:
        """Remove every cache file, including leftover temporary files.

        Returns:
            Number of complete entries removed.
        """
        if not self.cache_dir.is_dir():
            return 0

        count = len(list(self.keys()))
        try:
            for path in list(self.cache_dir.iterdir()):
                name = path.name
                if (
                    is_valid_cache_key(name.removesuffix(META_SUFFIX))
                    or name.endswith(TMP_SUFFIX)
                ) and path.is_file():
                    path.unlink()
        except OSError as e:
            raise CacheError("clear", str(e))
        return count

    def stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dict with entry count, total body size and per content type counts.
        """
        entries = 0
        size = 0
        by_type: dict[str, int] = {}

        for _, metadata, body_size in self.describe():
            entries += 1
            size += body_size
            by_type[metadata.content_type] = by_type.get(metadata.content_type, 0) + 1

        return {
            "cache_dir": str(self.cache_dir),
            "exists": self.cache_dir.is_dir(),
            "entries": entries,
            "size_bytes": size,
            "entries_by_content_type": by_type,
        }

    def describe(self) -> Iterator[tuple[str, CacheMetadata, int]]:
        """Yield (key, metadata, body size) for each readable entry."""
        for key in self.keys():
            try:
                metadata = CacheMetadata.from_json(self.meta_path(key).read_bytes())
                size = self.body_path(key).stat().st_size
            except (OSError, ValueError):
                continue
            yield key, metadata, size
