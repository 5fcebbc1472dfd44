"""Block storage snapshots and backups."""

from typing import ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.types import ServiceType


class ListSnapshots(RestEndpoint):
    path = "snapshots/detail"
    service_type = ServiceType.BLOCK_STORAGE
    response_key = "snapshots"
    query_fields = {
        "all_tenants": "all_tenants",
        "limit": "limit",
        "marker": "marker",
        "name": "name",
        "status": "status",
        "volume_id": "volume_id",
    }

    all_tenants: bool | None = None
    limit: int | None = None
    marker: str | None = None
    name: str | None = None
    status: str | None = None
    volume_id: str | None = None


class GetSnapshot(RestEndpoint):
    path = "snapshots/{id}"
    service_type = ServiceType.BLOCK_STORAGE
    response_key = "snapshot"

    id: str


class CreateSnapshot(RestEndpoint):
    method = "POST"
    path = "snapshots"
    service_type = ServiceType.BLOCK_STORAGE
    response_key = "snapshot"
    body_key = "snapshot"

    volume_id: str
    name: str | None = None
    description: str | None = None
    force: bool | None = None
    metadata: dict[str, str] | None = None


class DeleteSnapshot(RestEndpoint):
    method = "DELETE"
    path = "snapshots/{id}"
    service_type = ServiceType.BLOCK_STORAGE

    id: str


class Snapshot(ResourceRecord):
    view_key: ClassVar[str] = "block_storage.snapshot"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"created_at", "description", "metadata"})

    id: str
    name: str | None = None
    status: str | None = None
    size: int | None = None
    volume_id: str | None = None
    created_at: str | None = None
    description: str | None = None
    metadata: dict[str, str] | None = None


def find_snapshot(ref: str) -> Findable:
    return Findable(GetSnapshot(id=ref), ListSnapshots(name=ref))


class ListBackups(RestEndpoint):
    path = "backups/detail"
    service_type = ServiceType.BLOCK_STORAGE
    response_key = "backups"
    query_fields = {
        "all_tenants": "all_tenants",
        "limit": "limit",
        "marker": "marker",
        "name": "name",
        "status": "status",
        "volume_id": "volume_id",
    }

    all_tenants: bool | None = None
    limit: int | None = None
    marker: str | None = None
    name: str | None = None
    status: str | None = None
    volume_id: str | None = None


class GetBackup(RestEndpoint):
    path = "backups/{id}"
    service_type = ServiceType.BLOCK_STORAGE
    response_key = "backup"

    id: str


class CreateBackup(RestEndpoint):
    method = "POST"
    path = "backups"
    service_type = ServiceType.BLOCK_STORAGE
    response_key = "backup"
    body_key = "backup"

    volume_id: str
    name: str | None = None
    description: str | None = None
    container: str | None = None
    incremental: bool | None = None
    force: bool | None = None
    snapshot_id: str | None = None


class DeleteBackup(RestEndpoint):
    method = "DELETE"
    path = "backups/{id}"
    service_type = ServiceType.BLOCK_STORAGE

    id: str


class Backup(ResourceRecord):
    view_key: ClassVar[str] = "block_storage.backup"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "container", "created_at", "description", "is_incremental",
    })

    id: str
    name: str | None = None
    status: str | None = None
    size: int | None = None
    volume_id: str | None = None
    container: str | None = None
    created_at: str | None = None
    description: str | None = None
    is_incremental: bool | None = None


def find_backup(ref: str) -> Findable:
    return Findable(GetBackup(id=ref), ListBackups(name=ref))


class ListVolumeTypes(RestEndpoint):
    path = "types"
    service_type = ServiceType.BLOCK_STORAGE
    response_key = "volume_types"
    query_fields = {"is_public": "is_public"}

    is_public: bool | None = None


class GetVolumeType(RestEndpoint):
    path = "types/{id}"
    service_type = ServiceType.BLOCK_STORAGE
    response_key = "volume_type"

    id: str


class VolumeType(ResourceRecord):
    view_key: ClassVar[str] = "block_storage.volume_type"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"description", "extra_specs"})

    id: str
    name: str | None = None
    is_public: bool | None = None
    description: str | None = None
    extra_specs: dict[str, str] | None = None
