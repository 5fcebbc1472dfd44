"""
Block Storage Volumes.

    GET    volumes/detail         ListVolumes
    GET    volumes/{id}           GetVolume
    POST   volumes                CreateVolume
    PUT    volumes/{id}           SetVolume
    DELETE volumes/{id}           DeleteVolume
    POST   volumes/{id}/action    ExtendVolume (os-extend)
"""

from typing import Any, ClassVar

from pydantic import Field

from ostack.sdk.api.common import ActionEndpoint, ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.types import ServiceType


class ListVolumes(RestEndpoint):
    path = "volumes/detail"
    service_type = ServiceType.BLOCK_STORAGE
    response_key = "volumes"
    query_fields = {
        "all_tenants": "all_tenants",
        "limit": "limit",
        "marker": "marker",
        "name": "name",
        "project_id": "project_id",
        "sort": "sort",
        "status": "status",
    }

    all_tenants: bool | None = None
    limit: int | None = None
    marker: str | None = None
    name: str | None = None
    project_id: str | None = None
    sort: str | None = None
    status: str | None = None


class GetVolume(RestEndpoint):
    path = "volumes/{id}"
    service_type = ServiceType.BLOCK_STORAGE
    response_key = "volume"

    id: str


class CreateVolume(RestEndpoint):
    method = "POST"
    path = "volumes"
    service_type = ServiceType.BLOCK_STORAGE
    response_key = "volume"
    body_key = "volume"

    size: int | None = None
    name: str | None = None
    description: str | None = None
    availability_zone: str | None = None
    volume_type: str | None = None
    snapshot_id: str | None = None
    source_volid: str | None = None
    backup_id: str | None = None
    image_ref: str | None = Field(default=None, alias="imageRef")
    multiattach: bool | None = None
    metadata: dict[str, str] | None = None


class SetVolume(RestEndpoint):
    method = "PUT"
    path = "volumes/{id}"
    service_type = ServiceType.BLOCK_STORAGE
    response_key = "volume"
    body_key = "volume"

    id: str
    name: str | None = None
    description: str | None = None
    metadata: dict[str, str] | None = None


class DeleteVolume(RestEndpoint):
    method = "DELETE"
    path = "volumes/{id}"
    service_type = ServiceType.BLOCK_STORAGE
    query_fields = {"cascade": "cascade", "force": "force"}

    id: str
    cascade: bool | None = None
    force: bool | None = None


class ExtendVolume(ActionEndpoint):
    path = "volumes/{id}/action"
    service_type = ServiceType.BLOCK_STORAGE
    action = "os-extend"

    id: str
    new_size: int

    def action_body(self) -> dict[str, Any]:
        return {"new_size": self.new_size}


class Volume(ResourceRecord):
    view_key: ClassVar[str] = "block_storage.volume"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "attachments", "availability_zone", "bootable", "created_at", "description",
        "encrypted", "metadata", "multiattach", "updated_at",
    })

    id: str
    name: str | None = None
    status: str | None = None
    size: int | None = None
    volume_type: str | None = None
    attachments: list[dict[str, Any]] | None = None
    availability_zone: str | None = None
    bootable: str | None = None
    created_at: str | None = None
    description: str | None = None
    encrypted: bool | None = None
    metadata: dict[str, str] | None = None
    multiattach: bool | None = None
    updated_at: str | None = None


def find_volume(ref: str) -> Findable:
    return Findable(GetVolume(id=ref), ListVolumes(name=ref))
