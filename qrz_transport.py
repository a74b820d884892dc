"""
HTTP transport for the QRZ XML data service.

Issues a single GET against the configured base URL and hands back the raw
response body. Interpreting the body (including any error it reports) is left
to the XML layer.
"""

import logging
from typing import Dict, Optional

import httpx

from qrz_config import config
from qrz_log_filters import install_httpx_filter

logger = logging.getLogger(__name__)

# Redact passwords and session keys from httpx request logs
install_httpx_filter()


class QRZError(Exception):
    """Base exception for QRZ client errors."""
    pass


class TransportError(QRZError):
    """Exception for requests that never produced a response."""
    pass


def _build_params(params: Dict[str, str], agent: str) -> Dict[str, str]:
    query = dict(params)
    if agent:
        query["agent"] = agent
    return query


class QRZTransport:
    """Blocking transport backed by an httpx.Client."""

    def __init__(
        self,
        base_url: str = None,
        timeout: float = None,
        user_agent: str = None,
        agent: str = None,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url or config.QRZ_XML_URL
        self.timeout = timeout if timeout is not None else config.QRZ_TIMEOUT
        self.agent = agent if agent is not None else config.QRZ_AGENT
        user_agent = user_agent or config.QRZ_USER_AGENT

        self._owns_client = client is None
        self._client = client or httpx.Client(
            headers={"User-Agent": user_agent},
            timeout=self.timeout,
        )

    def get(self, params: Dict[str, str]) -> bytes:
        """
        Perform one GET request against the base URL.

        Args:
            params: Query parameters for the request

        Returns:
            Raw response body bytes, whatever the HTTP status

        Raises:
            TransportError: On connection, DNS, timeout or protocol failure
        """
        logger.debug(f"GET {self.base_url} ({', '.join(params)})")
        try:
            response = self._client.get(self.base_url, params=_build_params(params, self.agent))
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error: {e}") from e
        return response.content

    def close(self):
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class AsyncQRZTransport:
    """Asyncio transport backed by an httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str = None,
        timeout: float = None,
        user_agent: str = None,
        agent: str = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url or config.QRZ_XML_URL
        self.timeout = timeout if timeout is not None else config.QRZ_TIMEOUT
        self.agent = agent if agent is not None else config.QRZ_AGENT
        user_agent = user_agent or config.QRZ_USER_AGENT

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": user_agent},
            timeout=self.timeout,
        )

    async def get(self, params: Dict[str, str]) -> bytes:
        """Async counterpart of QRZTransport.get."""
        logger.debug(f"GET {self.base_url} ({', '.join(params)})")
        try:
            response = await self._client.get(self.base_url, params=_build_params(params, self.agent))
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error: {e}") from e
        return response.content

    async def close(self):
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()
