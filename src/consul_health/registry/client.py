"""
Registry clients.

A client pairs an immutable ClientConfig with a transport. Client uses a
blocking requests session; AsyncClient uses httpx and returns awaitables from
the same endpoint methods.
"""

import logging
from datetime import timedelta
from typing import Any

from ..config.settings import ClientConfig
from ..exceptions import ConfigError
from ..utils.http_client import AsyncHTTPClient, HTTPClient
from .base import BlockingResponse, QueryOptions
from .blocking import BlockingQuery
from .catalog import Catalog
from .decoder import decode
from .health import Health
from .params import build_params

logger = logging.getLogger(__name__)


def _resolve_config(config: ClientConfig | None, overrides: dict[str, Any]) -> ClientConfig:
    if config is not None and not isinstance(config, ClientConfig):
        raise ConfigError(f"config must be a ClientConfig, got {type(config).__name__}")
    if config is None:
        return ClientConfig.create(**overrides)
    if overrides:
        return ClientConfig.create(**{**config.model_dump(), **overrides})
    return config


class BaseClient:
    """Configuration and request plumbing shared by both clients."""

    def __init__(self, config: ClientConfig | None = None, **overrides: Any):
        self.config = _resolve_config(config, overrides)
        logger.debug(
            f"Client for {self.config.address} (dc={self.config.datacenter or 'agent default'})"
        )
        self.health = Health(self)
        self.catalog = Catalog(self)

    def params(self, options: QueryOptions | None = None) -> dict[str, str]:
        """Query parameters for options, applying the client's default datacenter."""
        return build_params(options, default_dc=self.config.datacenter)

    def blocking_query(
        self,
        path: str,
        params: dict[str, str],
        shape: Any,
        index: int,
        wait: timedelta | None = None,
    ) -> BlockingQuery:
        return BlockingQuery(
            path, params, shape, index, wait=wait, base_timeout=self.config.timeout
        )


class Client(BaseClient):
    """Blocking client for the health and catalog endpoints.

    Example:
        client = Client(address="http://127.0.0.1:8500", datacenter="dc1")
        entries = client.health.service("web", ServiceOptions(passing=True))
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: HTTPClient | None = None,
        **overrides: Any,
    ):
        super().__init__(config, **overrides)
        self.transport = transport or HTTPClient(
            self.config.address,
            timeout=self.config.timeout,
            verify=self.config.verify,
            token=self.config.token,
        )

    def query(self, path: str, params: dict[str, str], shape: Any) -> Any:
        response = self.transport.get(path, params=params)
        return decode(response.body, shape)

    def query_blocking(
        self,
        path: str,
        params: dict[str, str],
        shape: Any,
        index: int,
        wait: timedelta | None = None,
    ) -> BlockingResponse:
        return self.blocking_query(path, params, shape, index, wait).run(self.transport)

    def close(self):
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class AsyncClient(BaseClient):
    """asyncio client; endpoint methods return coroutines."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: AsyncHTTPClient | None = None,
        **overrides: Any,
    ):
        super().__init__(config, **overrides)
        self.transport = transport or AsyncHTTPClient(
            self.config.address,
            timeout=self.config.timeout,
            verify=self.config.verify,
            token=self.config.token,
        )

    async def query(self, path: str, params: dict[str, str], shape: Any) -> Any:
        response = await self.transport.get(path, params=params)
        return decode(response.body, shape)

    async def query_blocking(
        self,
        path: str,
        params: dict[str, str],
        shape: Any,
        index: int,
        wait: timedelta | None = None,
    ) -> BlockingResponse:
        query = self.blocking_query(path, params, shape, index, wait)
        return await query.run_async(self.transport)

    async def close(self):
        await self.transport.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
