"""Identity domains, services and endpoints."""

from typing import ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.types import ServiceType


class ListDomains(RestEndpoint):
    path = "v3/domains"
    service_type = ServiceType.IDENTITY
    response_key = "domains"
    query_fields = {"enabled": "enabled", "name": "name"}

    enabled: bool | None = None
    name: str | None = None


class GetDomain(RestEndpoint):
    path = "v3/domains/{id}"
    service_type = ServiceType.IDENTITY
    response_key = "domain"

    id: str


class Domain(ResourceRecord):
    view_key: ClassVar[str] = "identity.domain"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"description", "tags"})

    id: str
    name: str | None = None
    enabled: bool | None = None
    description: str | None = None
    tags: list[str] | None = None


def find_domain(ref: str) -> Findable:
    return Findable(GetDomain(id=ref), ListDomains(name=ref))


class ListServices(RestEndpoint):
    path = "v3/services"
    service_type = ServiceType.IDENTITY
    response_key = "services"
    query_fields = {"type": "type"}

    type: str | None = None


class Service(ResourceRecord):
    view_key: ClassVar[str] = "identity.service"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"description"})

    id: str
    name: str | None = None
    type: str | None = None
    enabled: bool | None = None
    description: str | None = None


class ListEndpoints(RestEndpoint):
    path = "v3/endpoints"
    service_type = ServiceType.IDENTITY
    response_key = "endpoints"
    query_fields = {"interface": "interface", "region_id": "region_id", "service_id": "service_id"}

    interface: str | None = None
    region_id: str | None = None
    service_id: str | None = None


class Endpoint(ResourceRecord):
    view_key: ClassVar[str] = "identity.endpoint"

    id: str
    service_id: str | None = None
    interface: str | None = None
    region_id: str | None = None
    url: str | None = None
    enabled: bool | None = None
