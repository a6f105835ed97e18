"""
Upstream HTTP access.
"""

from fwproxy.upstream.client import UpstreamClient

__all__ = ["UpstreamClient"]
