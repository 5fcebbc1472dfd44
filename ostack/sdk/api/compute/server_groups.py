"""Compute server groups."""

from typing import Any, ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.types import ServiceType


class ListServerGroups(RestEndpoint):
    path = "os-server-groups"
    service_type = ServiceType.COMPUTE
    response_key = "server_groups"
    query_fields = {"all_projects": "all_projects", "limit": "limit", "offset": "offset"}

    all_projects: bool | None = None
    limit: int | None = None
    offset: int | None = None


class GetServerGroup(RestEndpoint):
    path = "os-server-groups/{id}"
    service_type = ServiceType.COMPUTE
    response_key = "server_group"

    id: str


class CreateServerGroup(RestEndpoint):
    method = "POST"
    path = "os-server-groups"
    service_type = ServiceType.COMPUTE
    response_key = "server_group"
    body_key = "server_group"
    microversion = "2.64"

    name: str
    policy: str
    rules: dict[str, Any] | None = None


class DeleteServerGroup(RestEndpoint):
    method = "DELETE"
    path = "os-server-groups/{id}"
    service_type = ServiceType.COMPUTE

    id: str


class ServerGroup(ResourceRecord):
    view_key: ClassVar[str] = "compute.server_group"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"members", "rules", "project_id", "user_id"})

    id: str
    name: str | None = None
    policy: str | None = None
    policies: list[str] | None = None
    members: list[str] | None = None
    rules: dict[str, Any] | None = None
    project_id: str | None = None
    user_id: str | None = None


def find_server_group(ref: str) -> Findable:
    return Findable(GetServerGroup(id=ref), ListServerGroups(), name=ref)
