"""
Query options and blocking query envelopes.

Option fields left as None are not sent; the agent then applies its own
default. An empty string is a value like any other.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Annotated, Any, Generic, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

MAX_QUERY_INDEX = 2**64 - 1

QueryIndex = Annotated[int, Field(ge=0, le=MAX_QUERY_INDEX)]

T = TypeVar("T")


class QueryOptions(BaseModel):
    """Base class for per-endpoint filter options."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    dc: str | None = None


class NodeOptions(QueryOptions):
    """Filters for health/node."""

    pass


class CheckOptions(QueryOptions):
    """Filters for health/checks."""

    near: str | None = None
    node_meta: str | None = Field(default=None, serialization_alias="node-meta")


class ServiceOptions(QueryOptions):
    """Filters for health/service and health/connect."""

    near: str | None = None
    tag: str | None = None
    node_meta: str | None = Field(default=None, serialization_alias="node-meta")
    passing: bool | None = None


class StateOptions(QueryOptions):
    """Filters for health/state."""

    near: str | None = None
    node_meta: str | None = Field(default=None, serialization_alias="node-meta")


class CatalogOptions(QueryOptions):
    """Filters for catalog/services."""

    node_meta: str | None = Field(default=None, serialization_alias="node-meta")


class CatalogServiceOptions(QueryOptions):
    """Filters for catalog/service."""

    near: str | None = None
    tag: str | None = None
    node_meta: str | None = Field(default=None, serialization_alias="node-meta")


class BlockingOptions(BaseModel, Generic[T]):
    """Wait duration and endpoint filters for one blocking call."""

    model_config = ConfigDict(frozen=True)

    wait: timedelta | None = None
    options: T | None = None


class BlockingResponse(BaseModel, Generic[T]):
    """Result of one blocking call.

    Pass ``index`` to the next call to keep watching.
    """

    model_config = ConfigDict(frozen=True)

    index: QueryIndex
    body: T


@dataclass(frozen=True)
class Endpoint:
    """A read-only endpoint: path template plus the shape of its body."""

    template: str
    shape: Any

    def path(self, target: str | None = None) -> str:
        if target is None:
            return self.template
        if not target:
            raise ValueError(f"{self.template} needs a non-empty name")
        return self.template.format(quote(target, safe=""))
