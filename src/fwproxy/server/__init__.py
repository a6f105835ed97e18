"""
HTTP server for the forwarding cache.
"""

from fwproxy.server.app import create_app, cors_headers, run

__all__ = ["create_app", "cors_headers", "run"]
