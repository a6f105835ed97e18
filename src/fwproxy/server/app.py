"""
aiohttp web application exposing the forwarding cache endpoint.

Every response from the endpoint, errors included, carries the CORS headers
the flashing site needs.
"""

import logging
from typing import Optional

from aiohttp import web

from fwproxy.core.config import ProxyConfig
from fwproxy.core.exceptions import ProxyError
from fwproxy.proxy.handler import ForwardingCache

logger = logging.getLogger(__name__)

CONFIG_KEY = web.AppKey("config", ProxyConfig)
HANDLER_KEY = web.AppKey("handler", ForwardingCache)


def cors_headers(origin: str) -> dict[str, str]:
    """Build the CORS headers sent with every endpoint response."""
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": "GET",
        "Access-Control-Allow-Headers": "*",
    }


async def forward(request: web.Request) -> web.Response:
    """Serve one request through the forwarding cache."""
    config = request.app[CONFIG_KEY]
    handler = request.app[HANDLER_KEY]
    headers = cors_headers(config.allowed_origin)

    try:
        result = await handler.handle(request.method, request.query.get("url"))
    except ProxyError as e:
        if e.status_code >= 500:
            logger.warning("%s %s -> %s: %s", request.method, request.path_qs, e.status_code, e)
        else:
            logger.info("%s %s -> %s: %s", request.method, request.path_qs, e.status_code, e)
        return web.Response(status=e.status_code, text=e.body, headers=headers)

    if result.content_type:
        headers["Content-Type"] = result.content_type
    if result.from_cache:
        headers["X-Cache"] = "HIT"
    elif result.content_type:
        headers["X-Cache"] = "MISS"

    return web.Response(status=result.status, body=result.body, headers=headers)


async def health(request: web.Request) -> web.Response:
    return web.Response(text="ok")


async def _close_handler(app: web.Application) -> None:
    await app[HANDLER_KEY].close()


def create_app(
    config: Optional[ProxyConfig] = None,
    handler: Optional[ForwardingCache] = None,
) -> web.Application:
    """Create the web application.

    Args:
        config: Proxy settings. Defaults to ProxyConfig().
        handler: Pre-built handler (tests inject one with fakes). Built from
                 config when omitted.

    Returns:
        Configured aiohttp Application.
    """
    config = config or ProxyConfig()
    handler = handler or ForwardingCache.from_config(config)

    app = web.Application()
    app[CONFIG_KEY] = config
    app[HANDLER_KEY] = handler

    app.router.add_get(config.endpoint_path, forward)
    app.router.add_route("OPTIONS", config.endpoint_path, forward)
    app.router.add_get("/health", health)
    app.on_cleanup.append(_close_handler)

    return app


def run(config: ProxyConfig) -> None:
    """Run the server until interrupted."""
    app = create_app(config)
    logger.info(
        "Serving %s on http://%s:%s%s (cache: %s)",
        config.project,
        config.host,
        config.port,
        config.endpoint_path,
        config.cache_dir if config.cache_enabled else "disabled",
    )
    web.run_app(
        app,
        host=config.host,
        port=config.port,
        access_log=logging.getLogger("fwproxy.access"),
        print=None,
    )
