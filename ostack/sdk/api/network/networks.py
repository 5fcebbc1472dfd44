"""Networks."""

from typing import ClassVar

from pydantic import Field

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.params import CommaSeparatedList
from ostack.sdk.types import ServiceType


class ListNetworks(RestEndpoint):
    path = "v2.0/networks"
    service_type = ServiceType.NETWORK
    response_key = "networks"
    query_fields = {
        "admin_state_up": "admin_state_up",
        "description": "description",
        "external": "router:external",
        "fields": "fields",
        "id": "id",
        "is_default": "is_default",
        "limit": "limit",
        "marker": "marker",
        "mtu": "mtu",
        "name": "name",
        "not_tags": "not-tags",
        "project_id": "project_id",
        "shared": "shared",
        "sort_dir": "sort_dir",
        "sort_key": "sort_key",
        "status": "status",
        "tags": "tags",
        "tags_any": "tags-any",
    }

    admin_state_up: bool | None = None
    description: str | None = None
    external: bool | None = None
    fields: list[str] | None = None
    id: str | None = None
    is_default: bool | None = None
    limit: int | None = None
    marker: str | None = None
    mtu: int | None = None
    name: str | None = None
    not_tags: CommaSeparatedList | None = None
    project_id: str | None = None
    shared: bool | None = None
    sort_dir: list[str] | None = None
    sort_key: list[str] | None = None
    status: str | None = None
    tags: CommaSeparatedList | None = None
    tags_any: CommaSeparatedList | None = None


class GetNetwork(RestEndpoint):
    path = "v2.0/networks/{id}"
    service_type = ServiceType.NETWORK
    response_key = "network"

    id: str


class CreateNetwork(RestEndpoint):
    method = "POST"
    path = "v2.0/networks"
    service_type = ServiceType.NETWORK
    response_key = "network"
    body_key = "network"

    name: str | None = None
    description: str | None = None
    admin_state_up: bool | None = None
    shared: bool | None = None
    external: bool | None = Field(default=None, alias="router:external")
    mtu: int | None = None
    port_security_enabled: bool | None = None
    project_id: str | None = None
    availability_zone_hints: list[str] | None = None
    provider_network_type: str | None = Field(default=None, alias="provider:network_type")
    provider_physical_network: str | None = Field(default=None, alias="provider:physical_network")
    provider_segmentation_id: int | None = Field(default=None, alias="provider:segmentation_id")


class SetNetwork(RestEndpoint):
    method = "PUT"
    path = "v2.0/networks/{id}"
    service_type = ServiceType.NETWORK
    response_key = "network"
    body_key = "network"

    id: str
    name: str | None = None
    description: str | None = None
    admin_state_up: bool | None = None
    shared: bool | None = None
    external: bool | None = Field(default=None, alias="router:external")
    mtu: int | None = None
    port_security_enabled: bool | None = None


class DeleteNetwork(RestEndpoint):
    method = "DELETE"
    path = "v2.0/networks/{id}"
    service_type = ServiceType.NETWORK

    id: str


class Network(ResourceRecord):
    view_key: ClassVar[str] = "network.network"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "admin_state_up",
        "availability_zones",
        "created_at",
        "description",
        "external",
        "mtu",
        "port_security_enabled",
        "project_id",
        "shared",
        "tags",
        "updated_at",
    })

    id: str
    name: str | None = None
    status: str | None = None
    subnets: list[str] | None = None
    admin_state_up: bool | None = None
    availability_zones: list[str] | None = None
    created_at: str | None = None
    description: str | None = None
    external: bool | None = Field(default=None, alias="router:external")
    mtu: int | None = None
    port_security_enabled: bool | None = None
    project_id: str | None = None
    shared: bool | None = None
    tags: list[str] | None = None
    updated_at: str | None = None


def find_network(ref: str) -> Findable:
    return Findable(GetNetwork(id=ref), ListNetworks(name=ref))
