"""
fwproxy - caching GitHub forwarder for the ESP32 firmware flashing site.

Accepts a target URL, checks that it belongs to the allow-listed project on
github.com, api.github.com or raw.githubusercontent.com, fetches it on the
client's behalf and keeps a copy on disk for later identical requests.
Release listings are always fetched live.

Quick Start:
    $ fwproxy serve --port 8080
    $ curl 'http://127.0.0.1:8080/proxy.php?url=https://api.github.com/repos/netham45/esp32-scream-receiver/releases'

    # Or from Python:
    >>> from fwproxy import fetch_sync
    >>> response = fetch_sync(
    ...     "https://raw.githubusercontent.com/netham45/esp32-scream-receiver/main/firmware.bin"
    ... )
    >>> response.content_type
    'application/octet-stream'
"""

__version__ = "0.1.0"

# High-level API
from fwproxy.api import fetch, fetch_sync

# Components
from fwproxy.cache import CacheStore, FileCacheStore
from fwproxy.core.config import ProxyConfig

# Exceptions
from fwproxy.core.exceptions import (
    BadRequestError,
    CacheError,
    ForbiddenError,
    ProxyError,
    UpstreamError,
)

# Data models
from fwproxy.core.models import (
    CacheEntry,
    CacheMetadata,
    ProxyResponse,
    UpstreamResponse,
)
from fwproxy.proxy.handler import ForwardingCache
from fwproxy.upstream.client import UpstreamClient

__all__ = [
    # Version
    "__version__",
    # High-level API
    "fetch",
    "fetch_sync",
    # Models
    "CacheEntry",
    "CacheMetadata",
    "ProxyResponse",
    "UpstreamResponse",
    # Components
    "CacheStore",
    "FileCacheStore",
    "ForwardingCache",
    "ProxyConfig",
    "UpstreamClient",
    # Exceptions
    "ProxyError",
    "BadRequestError",
    "ForbiddenError",
    "UpstreamError",
    "CacheError",
]
