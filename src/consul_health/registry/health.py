"""
Health endpoints.

https://developer.hashicorp.com/consul/api-docs/health
"""

from .base import (
    BlockingOptions,
    BlockingResponse,
    CheckOptions,
    Endpoint,
    NodeOptions,
    QueryOptions,
    ServiceOptions,
    StateOptions,
)
from .models import HealthCheck, ServiceEntry

NODE = Endpoint("health/node/{}", list[HealthCheck])
CHECKS = Endpoint("health/checks/{}", list[HealthCheck])
SERVICE = Endpoint("health/service/{}", list[ServiceEntry])
CONNECT = Endpoint("health/connect/{}", list[ServiceEntry])
STATE = Endpoint("health/state/{}", list[HealthCheck])


class Health:
    """Health queries. With an AsyncClient every method returns a coroutine."""

    def __init__(self, client):
        self._client = client
        self.blocking = HealthBlocking(client)

    def _query(self, endpoint: Endpoint, target: str, options: QueryOptions | None):
        return self._client.query(
            endpoint.path(target), self._client.params(options), endpoint.shape
        )

    def node(self, node: str, options: NodeOptions | None = None) -> list[HealthCheck]:
        """List the checks registered on a node."""
        return self._query(NODE, node, options)

    def checks(self, service: str, options: CheckOptions | None = None) -> list[HealthCheck]:
        """List the checks associated with a service."""
        return self._query(CHECKS, service, options)

    def service(
        self, service: str, options: ServiceOptions | None = None
    ) -> list[ServiceEntry]:
        """List the instances of a service with their node and checks."""
        return self._query(SERVICE, service, options)

    def connect(
        self, service: str, options: ServiceOptions | None = None
    ) -> list[ServiceEntry]:
        """List the Connect-capable instances of a service."""
        return self._query(CONNECT, service, options)

    def state(self, state: str, options: StateOptions | None = None) -> list[HealthCheck]:
        """List the checks in a given state (``any`` matches every state)."""
        return self._query(STATE, state, options)


class HealthBlocking:
    """Blocking variants of the health queries.

    Each call waits until the agent's state moves past ``index`` or the wait
    elapses, then returns the new index with the body. Looping and backoff are
    up to the caller.
    """

    def __init__(self, client):
        self._client = client

    def _query(
        self,
        endpoint: Endpoint,
        index: int,
        target: str,
        options: BlockingOptions | None,
    ):
        options = options or BlockingOptions()
        return self._client.query_blocking(
            endpoint.path(target),
            self._client.params(options.options),
            endpoint.shape,
            index,
            options.wait,
        )

    def node(
        self, index: int, node: str, options: BlockingOptions[NodeOptions] | None = None
    ) -> BlockingResponse[list[HealthCheck]]:
        return self._query(NODE, index, node, options)

    def checks(
        self, index: int, service: str, options: BlockingOptions[CheckOptions] | None = None
    ) -> BlockingResponse[list[HealthCheck]]:
        return self._query(CHECKS, index, service, options)

    def service(
        self, index: int, service: str, options: BlockingOptions[ServiceOptions] | None = None
    ) -> BlockingResponse[list[ServiceEntry]]:
        return self._query(SERVICE, index, service, options)

    def connect(
        self, index: int, service: str, options: BlockingOptions[ServiceOptions] | None = None
    ) -> BlockingResponse[list[ServiceEntry]]:
        return self._query(CONNECT, index, service, options)

    def state(
        self, index: int, state: str, options: BlockingOptions[StateOptions] | None = None
    ) -> BlockingResponse[list[HealthCheck]]:
        return self._query(STATE, index, state, options)
