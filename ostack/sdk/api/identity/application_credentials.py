"""Identity application credentials. They belong to a user."""

from typing import Any, ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.types import ServiceType


class ListApplicationCredentials(RestEndpoint):
    path = "v3/users/{user_id}/application_credentials"
    service_type = ServiceType.IDENTITY
    response_key = "application_credentials"
    query_fields = {"name": "name"}

    user_id: str
    name: str | None = None


class GetApplicationCredential(RestEndpoint):
    path = "v3/users/{user_id}/application_credentials/{id}"
    service_type = ServiceType.IDENTITY
    response_key = "application_credential"

    user_id: str
    id: str


class CreateApplicationCredential(RestEndpoint):
    method = "POST"
    path = "v3/users/{user_id}/application_credentials"
    service_type = ServiceType.IDENTITY
    response_key = "application_credential"
    body_key = "application_credential"

    user_id: str
    name: str
    description: str | None = None
    secret: str | None = None
    expires_at: str | None = None
    roles: list[dict[str, str]] | None = None
    unrestricted: bool | None = None
    access_rules: list[dict[str, Any]] | None = None


class DeleteApplicationCredential(RestEndpoint):
    method = "DELETE"
    path = "v3/users/{user_id}/application_credentials/{id}"
    service_type = ServiceType.IDENTITY

    user_id: str
    id: str


class ApplicationCredential(ResourceRecord):
    view_key: ClassVar[str] = "identity.application_credential"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"access_rules", "roles", "unrestricted"})

    id: str
    name: str | None = None
    project_id: str | None = None
    description: str | None = None
    expires_at: str | None = None
    secret: str | None = None
    access_rules: list[dict[str, Any]] | None = None
    roles: list[dict[str, Any]] | None = None
    unrestricted: bool | None = None


def find_application_credential(user_id: str, ref: str) -> Findable:
    return Findable(
        GetApplicationCredential(user_id=user_id, id=ref),
        ListApplicationCredentials(user_id=user_id, name=ref),
    )
