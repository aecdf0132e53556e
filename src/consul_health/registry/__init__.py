"""Health and catalog queries against a Consul agent."""

from .base import (
    BlockingOptions,
    BlockingResponse,
    CatalogOptions,
    CatalogServiceOptions,
    CheckOptions,
    NodeOptions,
    ServiceOptions,
    StateOptions,
)
from .blocking import INDEX_HEADER, BlockingQuery, parse_index
from .client import AsyncClient, Client
from .models import (
    AgentService,
    CatalogNode,
    CatalogService,
    HealthCheck,
    HealthCheckDefinition,
    ServiceEntry,
)
