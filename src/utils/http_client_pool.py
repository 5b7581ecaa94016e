"""
HTTP Client Pool - one shared httpx client per pipeline process

The Researcher fetches landing pages through this manager instead of
creating a client per request. The manager is an explicit object: the
orchestrator (or a test) creates it, passes it down, and closes it.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import Optional

import httpx

from src.utils.config import settings
from src.utils.logger.custom_logging import LoggerMixin


# =============================================================================
# CONFIGURATION
# =============================================================================

MAX_KEEPALIVE_CONNECTIONS = 10

DEFAULT_TIMEOUT = 15  # seconds
CONNECT_TIMEOUT = 5  # seconds


# =============================================================================
# HTTP CLIENT MANAGER
# =============================================================================

class HTTPClientManager(LoggerMixin):
    """
    Owner of the shared httpx.AsyncClient used for page fetches.

    Usage:
        async with HTTPClientManager() as manager:
            async with manager.get_httpx_client() as client:
                response = await client.get(url)
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        max_connections: Optional[int] = None,
    ):
        super().__init__()
        self.user_agent = user_agent or settings.PAGE_FETCH_USER_AGENT
        self.max_connections = max_connections or settings.PAGE_FETCH_MAX_CONNECTIONS
        self._httpx_client: Optional[httpx.AsyncClient] = None
        self._init_lock = asyncio.Lock()

    async def __aenter__(self) -> "HTTPClientManager":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    async def _ensure_httpx_client(self) -> httpx.AsyncClient:
        """Lazily initialize httpx client with connection pooling"""
        if self._httpx_client is None or self._httpx_client.is_closed:
            async with self._init_lock:
                if self._httpx_client is None or self._httpx_client.is_closed:
                    limits = httpx.Limits(
                        max_connections=self.max_connections,
                        max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
                        keepalive_expiry=30.0,
                    )
                    timeout = httpx.Timeout(timeout=DEFAULT_TIMEOUT, connect=CONNECT_TIMEOUT)

                    self._httpx_client = httpx.AsyncClient(
                        limits=limits,
                        timeout=timeout,
                        follow_redirects=True,
                        headers={
                            "User-Agent": self.user_agent,
                            "Accept": "text/html,application/xhtml+xml",
                        },
                    )
                    self.logger.info(
                        f"[HTTP_POOL] Created httpx client (max_connections={self.max_connections})"
                    )

        return self._httpx_client

    @asynccontextmanager
    async def get_httpx_client(self):
        """Get the shared httpx client"""
        client = await self._ensure_httpx_client()
        yield client

    async def close(self):
        """Close connections gracefully"""
        if self._httpx_client and not self._httpx_client.is_closed:
            await self._httpx_client.aclose()
            self.logger.info("[HTTP_POOL] Closed httpx client")
        self._httpx_client = None
