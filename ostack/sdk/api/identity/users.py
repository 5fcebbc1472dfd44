"""Identity users."""

from typing import Any, ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.types import ServiceType


class ListUsers(RestEndpoint):
    path = "v3/users"
    service_type = ServiceType.IDENTITY
    response_key = "users"
    query_fields = {
        "domain_id": "domain_id",
        "enabled": "enabled",
        "idp_id": "idp_id",
        "name": "name",
        "password_expires_at": "password_expires_at",
        "protocol_id": "protocol_id",
        "unique_id": "unique_id",
    }

    domain_id: str | None = None
    enabled: bool | None = None
    idp_id: str | None = None
    name: str | None = None
    password_expires_at: str | None = None
    protocol_id: str | None = None
    unique_id: str | None = None


class GetUser(RestEndpoint):
    path = "v3/users/{id}"
    service_type = ServiceType.IDENTITY
    response_key = "user"

    id: str


class CreateUser(RestEndpoint):
    method = "POST"
    path = "v3/users"
    service_type = ServiceType.IDENTITY
    response_key = "user"
    body_key = "user"

    name: str
    domain_id: str | None = None
    default_project_id: str | None = None
    description: str | None = None
    email: str | None = None
    enabled: bool | None = None
    password: str | None = None
    options: dict[str, Any] | None = None


class SetUser(RestEndpoint):
    method = "PATCH"
    path = "v3/users/{id}"
    service_type = ServiceType.IDENTITY
    response_key = "user"
    body_key = "user"

    id: str
    name: str | None = None
    default_project_id: str | None = None
    description: str | None = None
    email: str | None = None
    enabled: bool | None = None
    password: str | None = None
    options: dict[str, Any] | None = None


class DeleteUser(RestEndpoint):
    method = "DELETE"
    path = "v3/users/{id}"
    service_type = ServiceType.IDENTITY

    id: str


class User(ResourceRecord):
    view_key: ClassVar[str] = "identity.user"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "default_project_id", "description", "email", "options", "password_expires_at",
    })

    id: str
    name: str | None = None
    domain_id: str | None = None
    enabled: bool | None = None
    default_project_id: str | None = None
    description: str | None = None
    email: str | None = None
    options: dict[str, Any] | None = None
    password_expires_at: str | None = None


def find_user(ref: str, domain_id: str | None = None) -> Findable:
    return Findable(GetUser(id=ref), ListUsers(name=ref, domain_id=domain_id))
