"""Compute host aggregates."""

from typing import Any, ClassVar

from ostack.sdk.api.common import ActionEndpoint, ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.types import ServiceType


class ListAggregates(RestEndpoint):
    path = "os-aggregates"
    service_type = ServiceType.COMPUTE
    response_key = "aggregates"


class GetAggregate(RestEndpoint):
    path = "os-aggregates/{id}"
    service_type = ServiceType.COMPUTE
    response_key = "aggregate"

    id: str


class CreateAggregate(RestEndpoint):
    method = "POST"
    path = "os-aggregates"
    service_type = ServiceType.COMPUTE
    response_key = "aggregate"
    body_key = "aggregate"

    name: str
    availability_zone: str | None = None


class DeleteAggregate(RestEndpoint):
    method = "DELETE"
    path = "os-aggregates/{id}"
    service_type = ServiceType.COMPUTE

    id: str


class AddAggregateHost(ActionEndpoint):
    path = "os-aggregates/{id}/action"
    service_type = ServiceType.COMPUTE
    response_key = "aggregate"
    action = "add_host"

    id: str
    host: str

    def action_body(self) -> Any:
        return {"host": self.host}


class RemoveAggregateHost(AddAggregateHost):
    action = "remove_host"


class Aggregate(ResourceRecord):
    view_key: ClassVar[str] = "compute.aggregate"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"metadata", "created_at", "updated_at", "uuid"})

    id: int | str
    name: str | None = None
    availability_zone: str | None = None
    hosts: list[str] | None = None
    metadata: dict[str, Any] | None = None
    uuid: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


def find_aggregate(ref: str) -> Findable:
    return Findable(GetAggregate(id=ref), ListAggregates(), name=ref)
