"""
Forwarding cache request handling.
"""

from fwproxy.proxy.handler import ForwardingCache

__all__ = ["ForwardingCache"]
