"""
HTTP client for fetching allow-listed GitHub URLs.

Wraps an aiohttp session: sends the proxy's user agent, follows redirects,
and turns the response into an ``UpstreamResponse`` whose content type
follows the proxy's rules (API responses are always JSON, everything else
keeps the upstream Content-Type).
"""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from fwproxy.core.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from fwproxy.core.exceptions import UpstreamError
from fwproxy.core.models import DEFAULT_CONTENT_TYPE, JSON_CONTENT_TYPE, UpstreamResponse
from fwproxy.core.validation import is_api_url

logger = logging.getLogger(__name__)


class UpstreamClient:
    """Async client for GitHub, the GitHub API and raw.githubusercontent.com.

    Only transport-level failures raise. An HTTP error status from GitHub is
    still a successful fetch; its body is relayed like any other.
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: int = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        """Initialize the client.

        Args:
            session: Optional aiohttp session. If not provided, one will
                     be created when needed.
            timeout: Request timeout in seconds.
            user_agent: User-Agent header sent upstream.
        """
        self._session = session
        self._owns_session = session is None
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.user_agent = user_agent

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if we own it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "UpstreamClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _build_headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent}

    async def fetch(self, url: str) -> UpstreamResponse:
        """GET url and return its body and outgoing content type.

        Args:
            url: An already validated target URL.

        Returns:
            UpstreamResponse for the final response after redirects.

        Raises:
            UpstreamError: On DNS, connection, TLS or timeout failures.
        """
        logger.info("Fetching %s", url)

        try:
            async with self.session.get(
                url,
                headers=self._build_headers(),
                allow_redirects=True,
            ) as resp:
                body = await resp.read()
                status = resp.status
                upstream_type = resp.headers.get("Content-Type")
        except asyncio.TimeoutError:
            logger.warning("Timed out fetching %s", url)
            raise UpstreamError(url, f"Operation timed out after {self.timeout.total} seconds")
        except aiohttp.ClientError as e:
            logger.warning("Transport failure fetching %s: %s", url, e)
            raise UpstreamError(url, str(e) or e.__class__.__name__)

        if status >= 400:
            logger.warning("Upstream returned %s for %s", status, url)

        if is_api_url(url):
            content_type = JSON_CONTENT_TYPE
        else:
            content_type = (upstream_type or "").strip() or DEFAULT_CONTENT_TYPE

        return UpstreamResponse(
            body=body,
            content_type=content_type,
            status=status,
        )
