"""
Tests for core data models.
"""

import json
import time

import pytest

from fwproxy.core.config import ProxyConfig
from fwproxy.core.exceptions import ForbiddenError, ProxyError, UpstreamError
from fwproxy.core.models import (
    CacheEntry,
    CacheMetadata,
    ProxyResponse,
)


class TestCacheMetadata:
    """Tests for CacheMetadata dataclass."""

    def test_to_dict_uses_on_disk_keys(self):
        meta = CacheMetadata(fetched_at=1700000000, content_type="application/octet-stream")
        assert meta.to_dict() == {
            "time": 1700000000,
            "content_type": "application/octet-stream",
        }

    def test_to_json(self):
        meta = CacheMetadata(fetched_at=5, content_type="application/json")
        assert json.loads(meta.to_json()) == {"time": 5, "content_type": "application/json"}

    def test_from_json(self):
        meta = CacheMetadata.from_json(b'{"time": 42, "content_type": "text/plain"}')
        assert meta == CacheMetadata(fetched_at=42, content_type="text/plain")

    def test_from_dict_tolerates_bad_time(self):
        meta = CacheMetadata.from_dict({"time": "soon", "content_type": "text/plain"})
        assert meta.fetched_at == 0
        assert meta.content_type == "text/plain"

    @pytest.mark.parametrize(
        "raw",
        [
            b"{}",
            b'{"time": 1}',
            b'{"time": 1, "content_type": ""}',
            b'{"time": 1, "content_type": 7}',
            b"[]",
            b"not json",
        ],
    )
    def test_from_json_rejects_incomplete_records(self, raw):
        with pytest.raises(ValueError):
            CacheMetadata.from_json(raw)

    def test_now(self):
        before = int(time.time())
        meta = CacheMetadata.now("application/json")
        assert before <= meta.fetched_at <= int(time.time())
        assert meta.content_type == "application/json"


class TestCacheEntry:
    """Tests for CacheEntry dataclass."""

    def test_properties(self):
        entry = CacheEntry(
            body=b"abc",
            metadata=CacheMetadata(fetched_at=1, content_type="text/plain"),
        )
        assert entry.content_type == "text/plain"
        assert entry.size == 3


class TestProxyResponse:
    """Tests for ProxyResponse dataclass."""

    def test_preflight_is_empty(self):
        response = ProxyResponse.preflight()
        assert response.status == 200
        assert response.body == b""
        assert response.content_type is None
        assert not response.from_cache


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_forbidden_body_and_str(self):
        err = ForbiddenError("https://evil.com/", "netham45/esp32-scream-receiver")
        assert isinstance(err, ProxyError)
        assert err.body == "Only URLs from github.com/netham45/esp32-scream-receiver are allowed"
        assert "evil.com" in str(err)

    def test_upstream_error_carries_transport_detail(self):
        err = UpstreamError("https://github.com/x/y", "Cannot connect to host github.com:443")
        assert err.status_code == 500
        assert err.body == "Proxy Error: Cannot connect to host github.com:443"
        assert err.transport_details == "Cannot connect to host github.com:443"


class TestProxyConfig:
    """Tests for ProxyConfig."""

    def test_defaults(self):
        config = ProxyConfig()
        assert config.project == "netham45/esp32-scream-receiver"
        assert config.allowed_origin == "https://netham45.org"
        assert config.user_agent == "ESP32-Flasher-Proxy"
        assert config.cache_enabled

    def test_endpoint_path_gets_leading_slash(self):
        assert ProxyConfig(endpoint_path="proxy.php").endpoint_path == "/proxy.php"

    def test_cache_dir_coerced_to_path(self, tmp_path):
        config = ProxyConfig(cache_dir=str(tmp_path))
        assert config.cache_dir == tmp_path
