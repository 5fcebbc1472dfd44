"""Identity projects."""

from typing import ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.params import CommaSeparatedList
from ostack.sdk.types import ServiceType


class ListProjects(RestEndpoint):
    path = "v3/projects"
    service_type = ServiceType.IDENTITY
    response_key = "projects"
    query_fields = {
        "domain_id": "domain_id",
        "enabled": "enabled",
        "is_domain": "is_domain",
        "name": "name",
        "parent_id": "parent_id",
        "tags": "tags",
        "tags_any": "tags-any",
    }

    domain_id: str | None = None
    enabled: bool | None = None
    is_domain: bool | None = None
    name: str | None = None
    parent_id: str | None = None
    tags: CommaSeparatedList | None = None
    tags_any: CommaSeparatedList | None = None


class GetProject(RestEndpoint):
    path = "v3/projects/{id}"
    service_type = ServiceType.IDENTITY
    response_key = "project"

    id: str


class CreateProject(RestEndpoint):
    method = "POST"
    path = "v3/projects"
    service_type = ServiceType.IDENTITY
    response_key = "project"
    body_key = "project"

    name: str
    description: str | None = None
    domain_id: str | None = None
    enabled: bool | None = None
    is_domain: bool | None = None
    parent_id: str | None = None
    tags: list[str] | None = None


class SetProject(RestEndpoint):
    method = "PATCH"
    path = "v3/projects/{id}"
    service_type = ServiceType.IDENTITY
    response_key = "project"
    body_key = "project"

    id: str
    name: str | None = None
    description: str | None = None
    enabled: bool | None = None
    tags: list[str] | None = None


class DeleteProject(RestEndpoint):
    method = "DELETE"
    path = "v3/projects/{id}"
    service_type = ServiceType.IDENTITY

    id: str


class Project(ResourceRecord):
    view_key: ClassVar[str] = "identity.project"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"is_domain", "parent_id", "tags"})

    id: str
    name: str | None = None
    domain_id: str | None = None
    description: str | None = None
    enabled: bool | None = None
    is_domain: bool | None = None
    parent_id: str | None = None
    tags: list[str] | None = None


def find_project(ref: str, domain_id: str | None = None) -> Findable:
    return Findable(GetProject(id=ref), ListProjects(name=ref, domain_id=domain_id))
