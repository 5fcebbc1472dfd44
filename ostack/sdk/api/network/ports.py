"""Ports."""

from typing import Any, ClassVar

from pydantic import Field

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.params import CommaSeparatedList
from ostack.sdk.types import ServiceType


class ListPorts(RestEndpoint):
    path = "v2.0/ports"
    service_type = ServiceType.NETWORK
    response_key = "ports"
    query_fields = {
        "device_id": "device_id",
        "device_owner": "device_owner",
        "fixed_ips": "fixed_ips",
        "limit": "limit",
        "mac_address": "mac_address",
        "marker": "marker",
        "name": "name",
        "network_id": "network_id",
        "project_id": "project_id",
        "security_groups": "security_groups",
        "sort_dir": "sort_dir",
        "sort_key": "sort_key",
        "status": "status",
        "tags": "tags",
    }

    device_id: str | None = None
    device_owner: str | None = None
    fixed_ips: list[str] | None = None
    limit: int | None = None
    mac_address: str | None = None
    marker: str | None = None
    name: str | None = None
    network_id: str | None = None
    project_id: str | None = None
    security_groups: list[str] | None = None
    sort_dir: list[str] | None = None
    sort_key: list[str] | None = None
    status: str | None = None
    tags: CommaSeparatedList | None = None


class GetPort(RestEndpoint):
    path = "v2.0/ports/{id}"
    service_type = ServiceType.NETWORK
    response_key = "port"

    id: str


class CreatePort(RestEndpoint):
    method = "POST"
    path = "v2.0/ports"
    service_type = ServiceType.NETWORK
    response_key = "port"
    body_key = "port"

    network_id: str
    name: str | None = None
    description: str | None = None
    admin_state_up: bool | None = None
    device_id: str | None = None
    device_owner: str | None = None
    fixed_ips: list[dict[str, str]] | None = None
    mac_address: str | None = None
    port_security_enabled: bool | None = None
    security_groups: list[str] | None = None
    vnic_type: str | None = Field(default=None, alias="binding:vnic_type")
    project_id: str | None = None


class SetPort(RestEndpoint):
    method = "PUT"
    path = "v2.0/ports/{id}"
    service_type = ServiceType.NETWORK
    response_key = "port"
    body_key = "port"

    id: str
    name: str | None = None
    description: str | None = None
    admin_state_up: bool | None = None
    device_id: str | None = None
    device_owner: str | None = None
    fixed_ips: list[dict[str, str]] | None = None
    port_security_enabled: bool | None = None
    security_groups: list[str] | None = None


class DeletePort(RestEndpoint):
    method = "DELETE"
    path = "v2.0/ports/{id}"
    service_type = ServiceType.NETWORK

    id: str


class Port(ResourceRecord):
    view_key: ClassVar[str] = "network.port"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "admin_state_up",
        "binding_host_id",
        "description",
        "device_id",
        "device_owner",
        "network_id",
        "project_id",
        "security_groups",
        "tags",
    })

    id: str
    name: str | None = None
    mac_address: str | None = None
    fixed_ips: list[dict[str, Any]] | None = None
    status: str | None = None
    admin_state_up: bool | None = None
    binding_host_id: str | None = Field(default=None, alias="binding:host_id")
    description: str | None = None
    device_id: str | None = None
    device_owner: str | None = None
    network_id: str | None = None
    project_id: str | None = None
    security_groups: list[str] | None = None
    tags: list[str] | None = None


def find_port(ref: str) -> Findable:
    return Findable(GetPort(id=ref), ListPorts(name=ref))
