"""
Core data models for the firmware forwarding proxy.

Defines the cache records persisted on disk and the response values passed
between the upstream client, the handler and the HTTP layer.
"""

import json
import time
from dataclasses import dataclass

DEFAULT_CONTENT_TYPE = "application/octet-stream"
JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class CacheMetadata:
    """Metadata stored next to a cached body."""

    fetched_at: int  # Unix seconds
    content_type: str

    @classmethod
    def now(cls, content_type: str) -> "CacheMetadata":
        """Create metadata stamped with the current time."""
        return cls(fetched_at=int(time.time()), content_type=content_type)

    def to_dict(self) -> dict:
        """Convert to the on-disk JSON shape."""
        return {
            "time": self.fetched_at,
            "content_type": self.content_type,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CacheMetadata":
        """Create from the on-disk JSON shape.

        Raises:
            ValueError: If the record has no usable content type.
        """
        content_type = data.get("content_type")
        if not isinstance(content_type, str) or not content_type:
            raise ValueError("metadata record has no content_type")

        try:
            fetched_at = int(data.get("time", 0))
        except (ValueError, TypeError):
            fetched_at = 0

        return cls(fetched_at=fetched_at, content_type=content_type)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str | bytes) -> "CacheMetadata":
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("metadata record is not a JSON object")
        return cls.from_dict(data)


@dataclass(frozen=True)
class CacheEntry:
    """A cached response: body bytes plus metadata."""

    body: bytes
    metadata: CacheMetadata

    @property
    def content_type(self) -> str:
        return self.metadata.content_type

    @property
    def size(self) -> int:
        return len(self.body)


@dataclass(frozen=True)
class UpstreamResponse:
    """Result of a successful upstream fetch."""

    body: bytes
    content_type: str = DEFAULT_CONTENT_TYPE
    status: int = 200


@dataclass(frozen=True)
class ProxyResponse:
    """What the endpoint sends back to the client."""

    status: int
    content_type: str | None = None
    body: bytes = b""
    from_cache: bool = False

    @classmethod
    def preflight(cls) -> "ProxyResponse":
        """Empty success response for CORS preflight probes."""
        return cls(status=200)
