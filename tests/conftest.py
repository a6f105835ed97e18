"""
Pytest fixtures and configuration for fwproxy tests.

Provides an in-memory cache store, canned upstream responses and a mock
upstream client so handler logic can be tested without network or disk.
"""

from pathlib import Path
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from fwproxy.cache.base import CacheStore
from fwproxy.core.config import ProxyConfig
from fwproxy.core.models import CacheEntry, UpstreamResponse
from fwproxy.proxy.handler import ForwardingCache
from fwproxy.upstream.client import UpstreamClient

OWNER = "netham45"
REPO = "esp32-scream-receiver"

FIRMWARE_URL = f"https://raw.githubusercontent.com/{OWNER}/{REPO}/main/firmware.bin"
API_URL = f"https://api.github.com/repos/{OWNER}/{REPO}/contents/build"
RELEASES_URL = f"https://api.github.com/repos/{OWNER}/{REPO}/releases"
LATEST_RELEASE_URL = f"https://api.github.com/repos/{OWNER}/{REPO}/releases/latest"
PAGE_URL = f"https://github.com/{OWNER}/{REPO}/releases/download/v1.0/firmware.bin"

FIRMWARE_BYTES = b"\xe9\x03\x02\x20BYTES\x00\xff"


# =============================================================================
# Fakes
# =============================================================================


class MemoryCacheStore(CacheStore):
    """In-memory CacheStore that records every call."""

    def __init__(self):
        self.entries: dict[str, CacheEntry] = {}
        self.gets: list[str] = []
        self.puts: list[str] = []

    def get(self, key: str) -> Optional[CacheEntry]:
        self.gets.append(key)
        return self.entries.get(key)

    def put(self, key: str, entry: CacheEntry) -> None:
        self.puts.append(key)
        self.entries[key] = entry


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def config(tmp_path: Path) -> ProxyConfig:
    """Create a config pointing at a temporary cache directory."""
    return ProxyConfig(owner=OWNER, repo=REPO, cache_dir=tmp_path / "cache")


@pytest.fixture
def firmware_response() -> UpstreamResponse:
    """Create an upstream binary response."""
    return UpstreamResponse(body=FIRMWARE_BYTES, content_type="application/octet-stream")


@pytest.fixture
def api_response() -> UpstreamResponse:
    """Create an upstream API response."""
    return UpstreamResponse(body=b'[{"tag_name": "v1.0"}]', content_type="application/json")


# =============================================================================
# Mock Client Fixtures
# =============================================================================


@pytest.fixture
def mock_client(firmware_response: UpstreamResponse) -> MagicMock:
    """Create a mock upstream client returning the firmware response."""
    client = MagicMock(spec=UpstreamClient)
    client.fetch = AsyncMock(return_value=firmware_response)
    client.close = AsyncMock()
    return client


@pytest.fixture
def memory_store() -> MemoryCacheStore:
    """Create an empty in-memory cache store."""
    return MemoryCacheStore()


@pytest.fixture
def handler(mock_client: MagicMock, memory_store: MemoryCacheStore) -> ForwardingCache:
    """Create a handler wired to the mock client and in-memory store."""
    return ForwardingCache(mock_client, memory_store, owner=OWNER, repo=REPO)
