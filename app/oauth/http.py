import logging
from typing import Any

import aiohttp

logger = logging.getLogger(__name__)

USER_AGENT = "vestibule-example"


class OAuthHttpError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class OAuthHttpClient:
    """Shared aiohttp session for talking to identity providers."""

    def __init__(self, timeout: float = 10.0):
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._client: aiohttp.ClientSession | None = None
        logger.debug("OAuthHttpClient initialized with timeout=%s", timeout)

    async def _get_client(self) -> aiohttp.ClientSession:
        if self._client is None or self._client.closed:
            logger.debug("Creating new aiohttp ClientSession")
            self._client = aiohttp.ClientSession(
                timeout=self._timeout,
                headers={"User-Agent": USER_AGENT},
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.closed:
            logger.debug("Closing aiohttp ClientSession")
            await self._client.close()
            self._client = None

    async def get_json(
        self, url: str, headers: dict[str, str] | None = None
    ) -> Any:
        client = await self._get_client()
        async with client.get(url, headers=headers) as response:
            return await self._read_json(response)

    async def post_form(
        self,
        url: str,
        data: dict[str, str],
        headers: dict[str, str] | None = None,
    ) -> Any:
        client = await self._get_client()
        request_headers = {"Accept": "application/json", **(headers or {})}
        async with client.post(url, data=data, headers=request_headers) as response:
            return await self._read_json(response)

    async def _read_json(self, response: aiohttp.ClientResponse) -> Any:
        if response.status >= 400:
            body = await response.text()
            logger.warning(
                "Provider request to %s failed with status %s",
                response.url,
                response.status,
            )
            raise OAuthHttpError(response.status, body[:500])
        return await response.json(content_type=None)
