"""Async JSON-over-HTTP client using aiohttp."""

import logging
from typing import Any, Self

import aiohttp

from retry_executor.config import Settings

logger = logging.getLogger(__name__)


class JsonClient:
    """Fetches JSON documents over HTTP.

    Non-2xx responses raise ``aiohttp.ClientResponseError`` so the call can
    be handed straight to the retry executor as an operation.

    Usage:
        async with JsonClient(settings) as client:
            todo = await client.fetch_json()
    """

    def __init__(self, settings: Settings, session: aiohttp.ClientSession | None = None) -> None:
        """Initialize the client.

        Args:
            settings: Application settings with the default URL and timeout
            session: Existing session to use; the client does not close it
        """
        self._settings = settings
        self._session = session
        self._owns_session = session is None

    @property
    def is_initialized(self) -> bool:
        return self._session is not None

    async def initialize(self) -> None:
        """Open the HTTP session if none was supplied."""
        if self._session is not None:
            return

        timeout = aiohttp.ClientTimeout(total=self._settings.request_timeout)
        self._session = aiohttp.ClientSession(timeout=timeout)
        self._owns_session = True

    async def close(self) -> None:
        """Close the HTTP session if this client opened it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def fetch_json(self, url: str | None = None) -> Any:
        """GET ``url`` and decode the response body as JSON.

        Args:
            url: Address to fetch (defaults to ``settings.fetch_url``)

        Returns:
            Decoded JSON document

        Raises:
            RuntimeError: If the client has not been initialized
            aiohttp.ClientResponseError: On a non-2xx status
            aiohttp.ClientError: On connection failures
        """
        if self._session is None:
            raise RuntimeError("Client not initialized. Call initialize() first.")

        target = url or self._settings.fetch_url
        logger.debug(f"GET {target}")

        async with self._session.get(target) as response:
            response.raise_for_status()
            return await response.json()

    async def __aenter__(self) -> Self:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
