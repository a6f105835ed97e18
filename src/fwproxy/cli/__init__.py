"""
Command-line interface for fwproxy.

Provides Click-based CLI commands for serving, one-off fetches,
and cache management.
"""

from fwproxy.cli.main import cli

__all__ = ["cli"]
