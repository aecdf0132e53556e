"""
Registry record models.

Decoded from the agent's PascalCase JSON. Fields the agent always sends are
required; fields older agents omit (or send as null) fall back to empty values.
Unknown keys are ignored.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegistryRecord(BaseModel):
    """Common configuration for immutable agent records."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the agent's wire representation."""
        return self.model_dump(mode="json", by_alias=True)


def _empty_list(v: Any) -> Any:
    return [] if v is None else v


def _empty_dict(v: Any) -> Any:
    return {} if v is None else v


class CatalogNode(RegistryRecord):
    """A cluster member."""

    name: str = Field(alias="Node")
    address: str = Field(alias="Address")
    id: str = Field(default="", alias="ID")
    datacenter: str = Field(default="", alias="Datacenter")
    tagged_addresses: dict[str, str] = Field(default_factory=dict, alias="TaggedAddresses")
    meta: dict[str, str] = Field(default_factory=dict, alias="Meta")
    create_index: int = Field(default=0, alias="CreateIndex")
    modify_index: int = Field(default=0, alias="ModifyIndex")

    normalize_maps = field_validator("tagged_addresses", "meta", mode="before")(_empty_dict)


class AgentService(RegistryRecord):
    """A service instance as registered with an agent."""

    id: str = Field(alias="ID")
    service: str = Field(alias="Service")
    tags: list[str] = Field(default_factory=list, alias="Tags")
    address: str = Field(default="", alias="Address")
    port: int = Field(default=0, alias="Port")
    meta: dict[str, str] = Field(default_factory=dict, alias="Meta")
    enable_tag_override: bool = Field(default=False, alias="EnableTagOverride")
    create_index: int = Field(default=0, alias="CreateIndex")
    modify_index: int = Field(default=0, alias="ModifyIndex")

    normalize_tags = field_validator("tags", mode="before")(_empty_list)
    normalize_meta = field_validator("meta", mode="before")(_empty_dict)


class HealthCheckDefinition(RegistryRecord):
    """How the agent runs a check. Passed through, never interpreted."""

    http: str = Field(default="", alias="HTTP")
    header: dict[str, list[str]] | None = Field(default=None, alias="Header")
    method: str = Field(default="", alias="Method")
    tls_skip_verify: bool = Field(default=False, alias="TLSSkipVerify")
    tcp: str = Field(default="", alias="TCP")
    interval: str = Field(default="", alias="Interval")
    timeout: str = Field(default="", alias="Timeout")
    deregister_critical_service_after: str = Field(
        default="", alias="DeregisterCriticalServiceAfter"
    )


class HealthCheck(RegistryRecord):
    """State of one health check.

    ``status`` is whatever the agent reports (passing, warning, critical,
    maintenance, ...); it is not checked against a fixed set.
    """

    node: str = Field(alias="Node")
    check_id: str = Field(alias="CheckID")
    name: str = Field(alias="Name")
    status: str = Field(alias="Status")
    notes: str = Field(default="", alias="Notes")
    output: str = Field(default="", alias="Output")
    service_id: str = Field(default="", alias="ServiceID")
    service_name: str = Field(default="", alias="ServiceName")
    service_tags: list[str] = Field(default_factory=list, alias="ServiceTags")
    definition: HealthCheckDefinition = Field(
        default_factory=HealthCheckDefinition, alias="Definition"
    )
    create_index: int = Field(alias="CreateIndex")
    modify_index: int = Field(alias="ModifyIndex")

    normalize_tags = field_validator("service_tags", mode="before")(_empty_list)


class ServiceEntry(RegistryRecord):
    """Health snapshot of one service instance at query time."""

    node: CatalogNode = Field(alias="Node")
    service: AgentService = Field(alias="Service")
    checks: list[HealthCheck] = Field(alias="Checks")


class CatalogService(RegistryRecord):
    """One row of the catalog's service listing."""

    node: str = Field(alias="Node")
    address: str = Field(alias="Address")
    service_id: str = Field(alias="ServiceID")
    service_name: str = Field(alias="ServiceName")
    datacenter: str = Field(default="", alias="Datacenter")
    service_address: str = Field(default="", alias="ServiceAddress")
    service_port: int = Field(default=0, alias="ServicePort")
    service_tags: list[str] = Field(default_factory=list, alias="ServiceTags")
    service_meta: dict[str, str] = Field(default_factory=dict, alias="ServiceMeta")
    create_index: int = Field(default=0, alias="CreateIndex")
    modify_index: int = Field(default=0, alias="ModifyIndex")

    normalize_tags = field_validator("service_tags", mode="before")(_empty_list)
    normalize_meta = field_validator("service_meta", mode="before")(_empty_dict)

    def as_node(self) -> CatalogNode:
        return CatalogNode(name=self.node, address=self.address, datacenter=self.datacenter)
