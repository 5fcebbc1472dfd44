"""Routers and router interfaces."""

from typing import Any, ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.params import CommaSeparatedList
from ostack.sdk.types import ServiceType


class ListRouters(RestEndpoint):
    path = "v2.0/routers"
    service_type = ServiceType.NETWORK
    response_key = "routers"
    query_fields = {
        "admin_state_up": "admin_state_up",
        "limit": "limit",
        "marker": "marker",
        "name": "name",
        "project_id": "project_id",
        "sort_dir": "sort_dir",
        "sort_key": "sort_key",
        "status": "status",
        "tags": "tags",
    }

    admin_state_up: bool | None = None
    limit: int | None = None
    marker: str | None = None
    name: str | None = None
    project_id: str | None = None
    sort_dir: list[str] | None = None
    sort_key: list[str] | None = None
    status: str | None = None
    tags: CommaSeparatedList | None = None


class GetRouter(RestEndpoint):
    path = "v2.0/routers/{id}"
    service_type = ServiceType.NETWORK
    response_key = "router"

    id: str


class CreateRouter(RestEndpoint):
    method = "POST"
    path = "v2.0/routers"
    service_type = ServiceType.NETWORK
    response_key = "router"
    body_key = "router"

    name: str | None = None
    description: str | None = None
    admin_state_up: bool | None = None
    external_gateway_info: dict[str, Any] | None = None
    distributed: bool | None = None
    ha: bool | None = None
    availability_zone_hints: list[str] | None = None
    project_id: str | None = None


class SetRouter(RestEndpoint):
    method = "PUT"
    path = "v2.0/routers/{id}"
    service_type = ServiceType.NETWORK
    response_key = "router"
    body_key = "router"

    id: str
    name: str | None = None
    description: str | None = None
    admin_state_up: bool | None = None
    external_gateway_info: dict[str, Any] | None = None
    routes: list[dict[str, str]] | None = None


class DeleteRouter(RestEndpoint):
    method = "DELETE"
    path = "v2.0/routers/{id}"
    service_type = ServiceType.NETWORK

    id: str


class AddRouterInterface(RestEndpoint):
    """Attach a subnet (or an existing port) to a router. Exactly one must be given."""

    method = "PUT"
    path = "v2.0/routers/{id}/add_router_interface"
    service_type = ServiceType.NETWORK

    id: str
    subnet_id: str | None = None
    port_id: str | None = None


class RemoveRouterInterface(AddRouterInterface):
    path = "v2.0/routers/{id}/remove_router_interface"


class Router(ResourceRecord):
    view_key: ClassVar[str] = "network.router"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "admin_state_up",
        "availability_zones",
        "description",
        "distributed",
        "external_gateway_info",
        "ha",
        "project_id",
        "routes",
        "tags",
    })

    id: str
    name: str | None = None
    status: str | None = None
    admin_state_up: bool | None = None
    availability_zones: list[str] | None = None
    description: str | None = None
    distributed: bool | None = None
    external_gateway_info: dict[str, Any] | None = None
    ha: bool | None = None
    project_id: str | None = None
    routes: list[dict[str, Any]] | None = None
    tags: list[str] | None = None


def find_router(ref: str) -> Findable:
    return Findable(GetRouter(id=ref), ListRouters(name=ref))
