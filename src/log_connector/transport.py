from aiohttp import ClientError, ClientSession, ClientTimeout, TCPConnector
from loguru import logger
from typing import List, Optional, Protocol

from .utils import async_retry


class Transport(Protocol):
    """Carries an encoded request to the node and returns the raw response"""

    async def send(self, payload: bytes) -> bytes:
        ...


class HttpTransport:
    """JSON-RPC over HTTP POST with failover across several endpoints"""

    def __init__(self, rpc_urls: List[str], timeout: float = 30, max_connections: int = 10) -> None:
        if not rpc_urls:
            raise ValueError("At least one RPC URL is required")
        logger.info(f"Available RPC URLs: {rpc_urls}")
        self.rpc_urls = rpc_urls
        self.current_rpc_index = 0
        self.timeout = timeout
        self.max_connections = max_connections
        self._session: Optional[ClientSession] = None

    @property
    def rpc_url(self) -> str:
        return self.rpc_urls[self.current_rpc_index]

    async def __aenter__(self) -> "HttpTransport":
        self._session = ClientSession(
            connector=TCPConnector(limit=self.max_connections, enable_cleanup_closed=True),
            timeout=ClientTimeout(total=self.timeout),
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    def _rotate_rpc(self) -> bool:
        """Rotate to the next RPC URL in the list
        Returns:
            bool: True if there is another RPC to rotate to, False if there is only one
        """
        if len(self.rpc_urls) <= 1:
            return False

        self.current_rpc_index = (self.current_rpc_index + 1) % len(self.rpc_urls)
        logger.info(f"Switching to RPC URL: {self.rpc_url}")
        return True

    @async_retry(retries=5, base_delay=2, exponential_backoff=True, jitter=True)
    async def send(self, payload: bytes) -> bytes:
        if self._session is None:
            raise RuntimeError("HttpTransport must be used as an async context manager")
        try:
            async with self._session.post(
                self.rpc_url,
                data=payload,
                headers={"Content-Type": "application/json"},
            ) as resp:
                resp.raise_for_status()
                return await resp.read()
        except ClientError as e:
            logger.error(f"Request to {self.rpc_url} failed: {type(e).__name__}: {str(e)}")
            # The retry decorator picks up the next endpoint
            self._rotate_rpc()
            raise
