"""Compute hypervisors."""

from typing import Any, ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.types import ServiceType


class ListHypervisors(RestEndpoint):
    path = "os-hypervisors/detail"
    service_type = ServiceType.COMPUTE
    response_key = "hypervisors"
    microversion = "2.53"
    query_fields = {
        "hypervisor_hostname_pattern": "hypervisor_hostname_pattern",
        "limit": "limit",
        "marker": "marker",
        "with_servers": "with_servers",
    }

    hypervisor_hostname_pattern: str | None = None
    limit: int | None = None
    marker: str | None = None
    with_servers: bool | None = None


class GetHypervisor(RestEndpoint):
    path = "os-hypervisors/{id}"
    service_type = ServiceType.COMPUTE
    response_key = "hypervisor"
    microversion = "2.53"

    id: str


class Hypervisor(ResourceRecord):
    view_key: ClassVar[str] = "compute.hypervisor"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"service", "servers", "uptime"})

    id: str | int
    hypervisor_hostname: str | None = None
    hypervisor_type: str | None = None
    host_ip: str | None = None
    state: str | None = None
    status: str | None = None
    service: dict[str, Any] | None = None
    servers: list[dict[str, Any]] | None = None
    uptime: str | None = None
