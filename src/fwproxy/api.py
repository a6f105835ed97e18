"""
High-level programmatic API for fwproxy.

This module provides simple functions for running a single request through
the forwarding cache without starting the server.

Example:
    import asyncio
    from fwproxy import fetch

    async def main():
        response = await fetch(
            "https://api.github.com/repos/netham45/esp32-scream-receiver/releases/latest"
        )
        print(response.content_type, len(response.body))

    asyncio.run(main())
"""

import asyncio
import dataclasses
from pathlib import Path

from fwproxy.core.config import ProxyConfig
from fwproxy.core.models import ProxyResponse
from fwproxy.proxy.handler import ForwardingCache


async def fetch(
    url: str,
    *,
    cache_dir: str | Path | None = None,
    use_cache: bool = True,
    config: ProxyConfig | None = None,
) -> ProxyResponse:
    """Fetch an allow-listed URL through the forwarding cache.

    Args:
        url: Target URL inside the allow-listed project.
        cache_dir: Cache directory. Defaults to the config value (./cache).
        use_cache: Whether to read and write the cache (default: True).
        config: Optional full configuration; cache_dir and use_cache
            override its cache settings.

    Returns:
        ProxyResponse with the body and content type.

    Raises:
        BadRequestError, ForbiddenError, UpstreamError: As the endpoint would
            report them.
    """
    base = config or ProxyConfig()
    # Overrides apply to a copy of the caller's config
    config = dataclasses.replace(
        base,
        cache_dir=Path(cache_dir) if cache_dir is not None else base.cache_dir,
        cache_enabled=base.cache_enabled and use_cache,
    )

    async with ForwardingCache.from_config(config) as handler:
        return await handler.handle("GET", url)


def fetch_sync(
    url: str,
    *,
    cache_dir: str | Path | None = None,
    use_cache: bool = True,
    config: ProxyConfig | None = None,
) -> ProxyResponse:
    """Synchronous wrapper for fetch().

    Example:
        >>> from fwproxy import fetch_sync
        >>> response = fetch_sync(
        ...     "https://raw.githubusercontent.com/netham45/esp32-scream-receiver/main/README.md"
        ... )
        >>> response.content_type
        'text/plain; charset=utf-8'
    """
    return asyncio.run(
        fetch(url, cache_dir=cache_dir, use_cache=use_cache, config=config)
    )
