"""HTTP transport for the Consul agent API"""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx
import requests
from requests.structures import CaseInsensitiveDict

from ..exceptions import APIError, TransportError

logger = logging.getLogger(__name__)

API_PREFIX = "/v1/"
TOKEN_HEADER = "X-Consul-Token"


@dataclass(frozen=True)
class TransportResponse:
    """Status, headers and raw body of one agent response."""

    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""


def _default_headers(token: str | None) -> dict[str, str]:
    headers = {"Accept": "application/json"}
    if token:
        headers[TOKEN_HEADER] = token
    return headers


def _check_status(method: str, url: str, response: TransportResponse) -> TransportResponse:
    if not 200 <= response.status_code < 300:
        preview = response.body[:200].decode("utf-8", errors="replace")
        raise APIError(
            f"{method} {url} returned {response.status_code}: {preview}",
            status_code=response.status_code,
            body=response.body,
            method=method,
            url=url,
        )
    return response


class HTTPClient:
    """Blocking HTTP client wrapper"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        verify: bool = True,
        token: str | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.verify = verify
        self.session.headers.update(_default_headers(token))

    def url(self, path: str) -> str:
        return f"{self.base_url}{API_PREFIX}{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        body: Any = None,
        timeout: float | None = None,
    ) -> TransportResponse:
        """Perform one request and return the raw response"""
        url = self.url(path)
        logger.debug(f"{method} {url} params={params}")
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                data=body,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}", method=method, url=url) from e

        result = TransportResponse(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers),
            body=response.content,
        )
        return _check_status(method, url, result)

    def get(
        self, path: str, params: dict[str, str] | None = None, timeout: float | None = None
    ) -> TransportResponse:
        """Make GET request"""
        return self.request("GET", path, params=params, timeout=timeout)

    def put(
        self, path: str, params: dict[str, str] | None = None, body: Any = None
    ) -> TransportResponse:
        """Make PUT request"""
        return self.request("PUT", path, params=params, body=body)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class AsyncHTTPClient:
    """asyncio HTTP client wrapper built on httpx"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        verify: bool = True,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = httpx.AsyncClient(
            verify=verify,
            headers=_default_headers(token),
            transport=transport,
        )

    def url(self, path: str) -> str:
        return f"{self.base_url}{API_PREFIX}{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        body: Any = None,
        timeout: float | None = None,
    ) -> TransportResponse:
        url = self.url(path)
        logger.debug(f"{method} {url} params={params}")
        try:
            response = await self.client.request(
                method,
                url,
                params=params,
                content=body,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}", method=method, url=url) from e

        result = TransportResponse(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers.items()),
            body=response.content,
        )
        return _check_status(method, url, result)

    async def get(
        self, path: str, params: dict[str, str] | None = None, timeout: float | None = None
    ) -> TransportResponse:
        return await self.request("GET", path, params=params, timeout=timeout)

    async def put(
        self, path: str, params: dict[str, str] | None = None, body: Any = None
    ) -> TransportResponse:
        return await self.request("PUT", path, params=params, body=body)

    async def close(self):
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
