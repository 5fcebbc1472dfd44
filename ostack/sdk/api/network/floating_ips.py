"""Floating IPs."""

from typing import ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.params import CommaSeparatedList, json_body
from ostack.sdk.types import ServiceType


class ListFloatingIps(RestEndpoint):
    path = "v2.0/floatingips"
    service_type = ServiceType.NETWORK
    response_key = "floatingips"
    query_fields = {
        "fixed_ip_address": "fixed_ip_address",
        "floating_ip_address": "floating_ip_address",
        "floating_network_id": "floating_network_id",
        "limit": "limit",
        "marker": "marker",
        "port_id": "port_id",
        "project_id": "project_id",
        "router_id": "router_id",
        "status": "status",
        "tags": "tags",
    }

    fixed_ip_address: str | None = None
    floating_ip_address: str | None = None
    floating_network_id: str | None = None
    limit: int | None = None
    marker: str | None = None
    port_id: str | None = None
    project_id: str | None = None
    router_id: str | None = None
    status: str | None = None
    tags: CommaSeparatedList | None = None


class GetFloatingIp(RestEndpoint):
    path = "v2.0/floatingips/{id}"
    service_type = ServiceType.NETWORK
    response_key = "floatingip"

    id: str


class CreateFloatingIp(RestEndpoint):
    method = "POST"
    path = "v2.0/floatingips"
    service_type = ServiceType.NETWORK
    response_key = "floatingip"
    body_key = "floatingip"

    floating_network_id: str
    floating_ip_address: str | None = None
    subnet_id: str | None = None
    port_id: str | None = None
    fixed_ip_address: str | None = None
    description: str | None = None
    dns_name: str | None = None
    dns_domain: str | None = None
    project_id: str | None = None


class SetFloatingIp(RestEndpoint):
    """Associate with a port, or disassociate by sending port_id null."""

    method = "PUT"
    path = "v2.0/floatingips/{id}"
    service_type = ServiceType.NETWORK
    response_key = "floatingip"
    body_key = "floatingip"

    id: str
    port_id: str | None = None
    fixed_ip_address: str | None = None
    description: str | None = None
    disassociate: bool = False

    def body(self) -> tuple[str, bytes]:
        values = self.model_dump(include={"port_id", "fixed_ip_address", "description"}, exclude_none=True)
        if self.disassociate:
            values["port_id"] = None
        return json_body({self.body_key: values})


class DeleteFloatingIp(RestEndpoint):
    method = "DELETE"
    path = "v2.0/floatingips/{id}"
    service_type = ServiceType.NETWORK

    id: str


class FloatingIp(ResourceRecord):
    view_key: ClassVar[str] = "network.floating_ip"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "description", "floating_network_id", "project_id", "router_id", "tags",
    })

    id: str
    floating_ip_address: str | None = None
    fixed_ip_address: str | None = None
    port_id: str | None = None
    status: str | None = None
    description: str | None = None
    floating_network_id: str | None = None
    project_id: str | None = None
    router_id: str | None = None
    tags: list[str] | None = None
