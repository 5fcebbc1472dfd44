"""Identity roles and role assignments."""

from typing import Any, ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.types import ServiceType


class ListRoles(RestEndpoint):
    path = "v3/roles"
    service_type = ServiceType.IDENTITY
    response_key = "roles"
    query_fields = {"domain_id": "domain_id", "name": "name"}

    domain_id: str | None = None
    name: str | None = None


class GetRole(RestEndpoint):
    path = "v3/roles/{id}"
    service_type = ServiceType.IDENTITY
    response_key = "role"

    id: str


class CreateRole(RestEndpoint):
    method = "POST"
    path = "v3/roles"
    service_type = ServiceType.IDENTITY
    response_key = "role"
    body_key = "role"

    name: str
    description: str | None = None
    domain_id: str | None = None


class DeleteRole(RestEndpoint):
    method = "DELETE"
    path = "v3/roles/{id}"
    service_type = ServiceType.IDENTITY

    id: str


class Role(ResourceRecord):
    view_key: ClassVar[str] = "identity.role"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"description", "options"})

    id: str
    name: str | None = None
    domain_id: str | None = None
    description: str | None = None
    options: dict[str, Any] | None = None


def find_role(ref: str) -> Findable:
    return Findable(GetRole(id=ref), ListRoles(name=ref))


class ListRoleAssignments(RestEndpoint):
    path = "v3/role_assignments"
    service_type = ServiceType.IDENTITY
    response_key = "role_assignments"
    query_fields = {
        "effective": "effective",
        "group_id": "group.id",
        "include_names": "include_names",
        "include_subtree": "include_subtree",
        "role_id": "role.id",
        "scope_domain_id": "scope.domain.id",
        "scope_project_id": "scope.project.id",
        "scope_system": "scope.system",
        "user_id": "user.id",
    }

    effective: bool | None = None
    group_id: str | None = None
    include_names: bool | None = None
    include_subtree: bool | None = None
    role_id: str | None = None
    scope_domain_id: str | None = None
    scope_project_id: str | None = None
    scope_system: str | None = None
    user_id: str | None = None


class RoleAssignment(ResourceRecord):
    view_key: ClassVar[str] = "identity.role_assignment"

    role: dict[str, Any] | None = None
    user: dict[str, Any] | None = None
    group: dict[str, Any] | None = None
    scope: dict[str, Any] | None = None
