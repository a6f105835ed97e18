"""
The forwarding cache request policy.

``ForwardingCache.handle`` takes the request method and the ``url``
parameter and returns the status, content type and body to send back:

1. OPTIONS preflight short-circuits with an empty 200.
2. A missing url is a 400, a url outside the allow-list a 403.
3. Release listings of the project are always fetched live.
4. Everything else is served from the cache when both the body and its
   metadata are present, or fetched and written to the cache otherwise.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from fwproxy.cache.base import CacheStore
from fwproxy.cache.filesystem import FileCacheStore
from fwproxy.core.config import DEFAULT_OWNER, DEFAULT_REPO, ProxyConfig
from fwproxy.core.exceptions import CacheError
from fwproxy.core.models import CacheEntry, CacheMetadata, ProxyResponse
from fwproxy.core.validation import (
    is_release_list_query,
    make_cache_key,
    require_url,
    validate_target_url,
)
from fwproxy.upstream.client import UpstreamClient

logger = logging.getLogger(__name__)


class ForwardingCache:
    """Caching forwarder for one allow-listed GitHub project.

    The store is optional; without one every request is fetched live.
    """

    def __init__(
        self,
        client: UpstreamClient,
        store: Optional[CacheStore] = None,
        owner: str = DEFAULT_OWNER,
        repo: str = DEFAULT_REPO,
    ):
        """Initialize the handler.

        Args:
            client: Client used for upstream fetches.
            store: Cache store, or None to disable caching.
            owner: Allow-listed repository owner.
            repo: Allow-listed repository name.
        """
        self.client = client
        self.store = store
        self.owner = owner
        self.repo = repo

    @classmethod
    def from_config(
        cls,
        config: ProxyConfig,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> "ForwardingCache":
        """Build a handler with a file store and upstream client from config."""
        client = UpstreamClient(
            session=session,
            timeout=config.timeout,
            user_agent=config.user_agent,
        )
        store = FileCacheStore(config.cache_dir) if config.cache_enabled else None
        return cls(client, store, owner=config.owner, repo=config.repo)

    async def close(self) -> None:
        await self.client.close()

    async def __aenter__(self) -> "ForwardingCache":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def handle(self, method: str, url: Optional[str]) -> ProxyResponse:
        """Handle one forwarding request.

        Args:
            method: HTTP method of the client request.
            url: Value of the url query parameter, if any.

        Returns:
            ProxyResponse with status 200 and the cached or fetched body.

        Raises:
            BadRequestError: If url is missing.
            ForbiddenError: If url is outside the allow-list.
            UpstreamError: If the upstream fetch fails at the transport level.
        """
        if method.upper() == "OPTIONS":
            return ProxyResponse.preflight()

        url = require_url(url)
        validate_target_url(url, self.owner, self.repo)

        key = make_cache_key(url)
        cacheable = self.store is not None and not is_release_list_query(
            url, self.owner, self.repo
        )

        if cacheable:
            entry = await self._lookup(key)
            if entry is not None:
                logger.debug("Cache hit %s for %s", key, url)
                return ProxyResponse(
                    status=200,
                    content_type=entry.content_type,
                    body=entry.body,
                    from_cache=True,
                )
            logger.debug("Cache miss %s for %s", key, url)
        else:
            logger.debug("Bypassing cache for %s", url)

        upstream = await self.client.fetch(url)

        if cacheable:
            entry = CacheEntry(
                body=upstream.body,
                metadata=CacheMetadata.now(upstream.content_type),
            )
            await self._save(key, entry)

        return ProxyResponse(
            status=200,
            content_type=upstream.content_type,
            body=upstream.body,
        )

    async def _lookup(self, key: str) -> Optional[CacheEntry]:
        try:
            return await asyncio.to_thread(self.store.get, key)
        except CacheError as e:
            logger.error("Cache read failed for %s: %s", key, e)
            return None

    async def _save(self, key: str, entry: CacheEntry) -> None:
        # Write failures never fail the request
        try:
            await asyncio.to_thread(self.store.put, key, entry)
        except CacheError as e:
            logger.error("Cache write failed for %s: %s", key, e)
