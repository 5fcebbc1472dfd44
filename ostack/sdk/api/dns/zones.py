"""
DNS Zones and Recordsets.

Designate returns single resources unwrapped and sends create/update bodies
without a resource key. Listings carry {"links": {"next": ...}}.
"""

from typing import ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.types import ServiceType


class ListZones(RestEndpoint):
    path = "v2/zones"
    service_type = ServiceType.DNS
    response_key = "zones"
    query_fields = {
        "email": "email",
        "limit": "limit",
        "marker": "marker",
        "name": "name",
        "status": "status",
        "type": "type",
    }

    email: str | None = None
    limit: int | None = None
    marker: str | None = None
    name: str | None = None
    status: str | None = None
    type: str | None = None


class GetZone(RestEndpoint):
    path = "v2/zones/{id}"
    service_type = ServiceType.DNS

    id: str


class CreateZone(RestEndpoint):
    method = "POST"
    path = "v2/zones"
    service_type = ServiceType.DNS

    name: str
    email: str | None = None
    type: str | None = None
    ttl: int | None = None
    description: str | None = None
    masters: list[str] | None = None


class SetZone(RestEndpoint):
    method = "PATCH"
    path = "v2/zones/{id}"
    service_type = ServiceType.DNS

    id: str
    email: str | None = None
    ttl: int | None = None
    description: str | None = None


class DeleteZone(RestEndpoint):
    method = "DELETE"
    path = "v2/zones/{id}"
    service_type = ServiceType.DNS

    id: str


class Zone(ResourceRecord):
    view_key: ClassVar[str] = "dns.zone"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "action", "created_at", "description", "email", "serial", "ttl",
    })

    id: str
    name: str | None = None
    type: str | None = None
    status: str | None = None
    action: str | None = None
    created_at: str | None = None
    description: str | None = None
    email: str | None = None
    serial: int | None = None
    ttl: int | None = None


def find_zone(ref: str) -> Findable:
    return Findable(GetZone(id=ref), ListZones(name=ref))


class ListRecordsets(RestEndpoint):
    path = "v2/zones/{zone_id}/recordsets"
    service_type = ServiceType.DNS
    response_key = "recordsets"
    query_fields = {
        "data": "data",
        "limit": "limit",
        "marker": "marker",
        "name": "name",
        "status": "status",
        "type": "type",
    }

    zone_id: str
    data: str | None = None
    limit: int | None = None
    marker: str | None = None
    name: str | None = None
    status: str | None = None
    type: str | None = None


class ListAllRecordsets(RestEndpoint):
    """Recordsets of every zone of the project."""

    path = "v2/recordsets"
    service_type = ServiceType.DNS
    response_key = "recordsets"
    query_fields = {
        "limit": "limit",
        "marker": "marker",
        "name": "name",
        "type": "type",
    }

    limit: int | None = None
    marker: str | None = None
    name: str | None = None
    type: str | None = None


class GetRecordset(RestEndpoint):
    path = "v2/zones/{zone_id}/recordsets/{id}"
    service_type = ServiceType.DNS

    zone_id: str
    id: str


class CreateRecordset(RestEndpoint):
    method = "POST"
    path = "v2/zones/{zone_id}/recordsets"
    service_type = ServiceType.DNS

    zone_id: str
    name: str
    type: str
    records: list[str]
    ttl: int | None = None
    description: str | None = None


class DeleteRecordset(RestEndpoint):
    method = "DELETE"
    path = "v2/zones/{zone_id}/recordsets/{id}"
    service_type = ServiceType.DNS

    zone_id: str
    id: str


class Recordset(ResourceRecord):
    view_key: ClassVar[str] = "dns.recordset"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"action", "description", "ttl", "zone_name"})

    id: str
    name: str | None = None
    type: str | None = None
    records: list[str] | None = None
    status: str | None = None
    action: str | None = None
    description: str | None = None
    ttl: int | None = None
    zone_name: str | None = None


def find_recordset(zone_id: str, ref: str) -> Findable:
    return Findable(GetRecordset(zone_id=zone_id, id=ref), ListRecordsets(zone_id=zone_id, name=ref))
