"""
Catalog endpoints.

https://developer.hashicorp.com/consul/api-docs/catalog
"""

from .base import (
    BlockingOptions,
    BlockingResponse,
    CatalogOptions,
    CatalogServiceOptions,
    Endpoint,
)
from .models import CatalogService

SERVICES = Endpoint("catalog/services", dict[str, list[str]])
SERVICE = Endpoint("catalog/service/{}", list[CatalogService])


class Catalog:
    """Catalog queries. With an AsyncClient every method returns a coroutine."""

    def __init__(self, client):
        self._client = client
        self.blocking = CatalogBlocking(client)

    def services(self, options: CatalogOptions | None = None) -> dict[str, list[str]]:
        """Map every registered service name to its tags."""
        return self._client.query(SERVICES.path(), self._client.params(options), SERVICES.shape)

    def service(
        self, service: str, options: CatalogServiceOptions | None = None
    ) -> list[CatalogService]:
        """List the catalog entries for a service."""
        return self._client.query(
            SERVICE.path(service), self._client.params(options), SERVICE.shape
        )


class CatalogBlocking:
    """Blocking variants of the catalog queries."""

    def __init__(self, client):
        self._client = client

    def services(
        self, index: int, options: BlockingOptions[CatalogOptions] | None = None
    ) -> BlockingResponse[dict[str, list[str]]]:
        options = options or BlockingOptions()
        return self._client.query_blocking(
            SERVICES.path(),
            self._client.params(options.options),
            SERVICES.shape,
            index,
            options.wait,
        )

    def service(
        self,
        index: int,
        service: str,
        options: BlockingOptions[CatalogServiceOptions] | None = None,
    ) -> BlockingResponse[list[CatalogService]]:
        options = options or BlockingOptions()
        return self._client.query_blocking(
            SERVICE.path(service),
            self._client.params(options.options),
            SERVICE.shape,
            index,
            options.wait,
        )
