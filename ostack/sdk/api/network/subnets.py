"""Subnets."""

from typing import Any, ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.params import CommaSeparatedList
from ostack.sdk.types import ServiceType


class ListSubnets(RestEndpoint):
    path = "v2.0/subnets"
    service_type = ServiceType.NETWORK
    response_key = "subnets"
    query_fields = {
        "cidr": "cidr",
        "enable_dhcp": "enable_dhcp",
        "gateway_ip": "gateway_ip",
        "ip_version": "ip_version",
        "limit": "limit",
        "marker": "marker",
        "name": "name",
        "network_id": "network_id",
        "project_id": "project_id",
        "sort_dir": "sort_dir",
        "sort_key": "sort_key",
        "subnetpool_id": "subnetpool_id",
        "tags": "tags",
    }

    cidr: str | None = None
    enable_dhcp: bool | None = None
    gateway_ip: str | None = None
    ip_version: int | None = None
    limit: int | None = None
    marker: str | None = None
    name: str | None = None
    network_id: str | None = None
    project_id: str | None = None
    sort_dir: list[str] | None = None
    sort_key: list[str] | None = None
    subnetpool_id: str | None = None
    tags: CommaSeparatedList | None = None


class GetSubnet(RestEndpoint):
    path = "v2.0/subnets/{id}"
    service_type = ServiceType.NETWORK
    response_key = "subnet"

    id: str


class CreateSubnet(RestEndpoint):
    method = "POST"
    path = "v2.0/subnets"
    service_type = ServiceType.NETWORK
    response_key = "subnet"
    body_key = "subnet"

    network_id: str
    ip_version: int = 4
    cidr: str | None = None
    name: str | None = None
    description: str | None = None
    gateway_ip: str | None = None
    enable_dhcp: bool | None = None
    dns_nameservers: list[str] | None = None
    allocation_pools: list[dict[str, str]] | None = None
    host_routes: list[dict[str, str]] | None = None
    subnetpool_id: str | None = None
    prefixlen: int | None = None
    ipv6_address_mode: str | None = None
    ipv6_ra_mode: str | None = None
    project_id: str | None = None


class SetSubnet(RestEndpoint):
    method = "PUT"
    path = "v2.0/subnets/{id}"
    service_type = ServiceType.NETWORK
    response_key = "subnet"
    body_key = "subnet"

    id: str
    name: str | None = None
    description: str | None = None
    gateway_ip: str | None = None
    enable_dhcp: bool | None = None
    dns_nameservers: list[str] | None = None
    allocation_pools: list[dict[str, str]] | None = None
    host_routes: list[dict[str, str]] | None = None


class DeleteSubnet(RestEndpoint):
    method = "DELETE"
    path = "v2.0/subnets/{id}"
    service_type = ServiceType.NETWORK

    id: str


class Subnet(ResourceRecord):
    view_key: ClassVar[str] = "network.subnet"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "allocation_pools",
        "description",
        "dns_nameservers",
        "enable_dhcp",
        "gateway_ip",
        "host_routes",
        "ip_version",
        "project_id",
        "subnetpool_id",
        "tags",
    })

    id: str
    name: str | None = None
    network_id: str | None = None
    cidr: str | None = None
    allocation_pools: list[dict[str, Any]] | None = None
    description: str | None = None
    dns_nameservers: list[str] | None = None
    enable_dhcp: bool | None = None
    gateway_ip: str | None = None
    host_routes: list[dict[str, Any]] | None = None
    ip_version: int | None = None
    project_id: str | None = None
    subnetpool_id: str | None = None
    tags: list[str] | None = None


def find_subnet(ref: str) -> Findable:
    return Findable(GetSubnet(id=ref), ListSubnets(name=ref))
