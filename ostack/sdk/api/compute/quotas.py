"""Compute quota sets, absolute limits and availability zones."""

from typing import Any, ClassVar

from pydantic import Field

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.types import ServiceType


class GetQuotaSet(RestEndpoint):
    path = "os-quota-sets/{project_id}"
    service_type = ServiceType.COMPUTE
    response_key = "quota_set"
    query_fields = {"user_id": "user_id"}

    project_id: str
    user_id: str | None = None


class QuotaSet(ResourceRecord):
    view_key: ClassVar[str] = "compute.quota_set"

    id: str | None = None
    cores: int | None = None
    instances: int | None = None
    ram: int | None = None
    key_pairs: int | None = None
    metadata_items: int | None = None
    server_groups: int | None = None
    server_group_members: int | None = None


class GetLimits(RestEndpoint):
    path = "limits"
    service_type = ServiceType.COMPUTE
    response_key = "limits"
    query_fields = {"project_id": "tenant_id"}

    project_id: str | None = None


class Limits(ResourceRecord):
    view_key: ClassVar[str] = "compute.limits"

    absolute: dict[str, Any] = Field(default_factory=dict)
    rate: list[Any] | None = None


class AbsoluteLimits(ResourceRecord):
    """The "absolute" part of the limits: maximums and current usage."""

    view_key: ClassVar[str] = "compute.absolute_limits"

    maxTotalCores: int | None = None
    maxTotalInstances: int | None = None
    maxTotalRAMSize: int | None = None
    totalCoresUsed: int | None = None
    totalInstancesUsed: int | None = None
    totalRAMUsed: int | None = None


class ListAvailabilityZones(RestEndpoint):
    path = "os-availability-zone"
    service_type = ServiceType.COMPUTE
    response_key = "availabilityZoneInfo"


class ListAvailabilityZonesDetail(ListAvailabilityZones):
    path = "os-availability-zone/detail"


class AvailabilityZone(ResourceRecord):
    view_key: ClassVar[str] = "compute.availability_zone"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"hosts"})

    name: str | None = Field(default=None, alias="zoneName")
    state: dict[str, Any] | None = Field(default=None, alias="zoneState")
    hosts: dict[str, Any] | None = None
