"""
Core module for fwproxy.

Contains data models, configuration, URL validation and exceptions.
"""

from fwproxy.core.config import ProxyConfig
from fwproxy.core.exceptions import (
    BadRequestError,
    CacheError,
    ForbiddenError,
    ProxyError,
    UpstreamError,
)
from fwproxy.core.models import (
    CacheEntry,
    CacheMetadata,
    ProxyResponse,
    UpstreamResponse,
)

__all__ = [
    # Models
    "CacheEntry",
    "CacheMetadata",
    "ProxyResponse",
    "UpstreamResponse",
    # Config
    "ProxyConfig",
    # Exceptions
    "ProxyError",
    "BadRequestError",
    "ForbiddenError",
    "UpstreamError",
    "CacheError",
]
