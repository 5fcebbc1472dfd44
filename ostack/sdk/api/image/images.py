"""
Image Service Images.

    GET    v2/images             ListImages (paginated through the top level "next")
    GET    v2/images/{id}        GetImage
    POST   v2/images             CreateImage
    PATCH  v2/images/{id}        SetImage (JSON patch)
    DELETE v2/images/{id}        DeleteImage
    PUT    v2/images/{id}/file   UploadImageData
    GET    v2/images/{id}/file   DownloadImageData
"""

from collections.abc import AsyncIterable
from typing import Any, ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint, file_chunks
from ostack.sdk.api.find import Findable
from ostack.sdk.params import json_body
from ostack.sdk.types import ServiceType

JSON_PATCH_CONTENT_TYPE = "application/openstack-images-v2.1-json-patch"

# Attributes of the image schema; everything else is a custom property
CORE_ATTRIBUTES = ("name", "visibility", "protected", "min_disk", "min_ram", "os_hidden", "tags")


class ListImages(RestEndpoint):
    path = "v2/images"
    service_type = ServiceType.IMAGE
    response_key = "images"
    query_fields = {
        "limit": "limit",
        "marker": "marker",
        "member_status": "member_status",
        "name": "name",
        "os_hidden": "os_hidden",
        "owner": "owner",
        "protected": "protected",
        "sort": "sort",
        "sort_dir": "sort_dir",
        "sort_key": "sort_key",
        "status": "status",
        "tag": "tag",
        "visibility": "visibility",
    }

    limit: int | None = None
    marker: str | None = None
    member_status: str | None = None
    name: str | None = None
    os_hidden: bool | None = None
    owner: str | None = None
    protected: bool | None = None
    sort: str | None = None
    sort_dir: str | None = None
    sort_key: str | None = None
    status: str | None = None
    tag: list[str] | None = None
    visibility: str | None = None


class GetImage(RestEndpoint):
    path = "v2/images/{id}"
    service_type = ServiceType.IMAGE

    id: str


class CreateImage(RestEndpoint):
    """Create the image record. Data is uploaded separately with UploadImageData."""

    method = "POST"
    path = "v2/images"
    service_type = ServiceType.IMAGE

    name: str
    container_format: str | None = None
    disk_format: str | None = None
    visibility: str | None = None
    protected: bool | None = None
    min_disk: int | None = None
    min_ram: int | None = None
    tags: list[str] | None = None
    properties: dict[str, str] | None = None

    def body(self) -> tuple[str, bytes]:
        values = self.model_dump(exclude={"headers", "properties"}, exclude_none=True)
        values.update(self.properties or {})
        return json_body(values)


class SetImage(RestEndpoint):
    """
    Update an image with a JSON patch document.

    Core attributes are replaced, custom properties are added (which also
    overwrites existing ones) and remove_properties are removed.
    """

    method = "PATCH"
    path = "v2/images/{id}"
    service_type = ServiceType.IMAGE

    id: str
    name: str | None = None
    visibility: str | None = None
    protected: bool | None = None
    min_disk: int | None = None
    min_ram: int | None = None
    os_hidden: bool | None = None
    tags: list[str] | None = None
    properties: dict[str, str] | None = None
    remove_properties: list[str] | None = None

    def patch_operations(self) -> list[dict[str, Any]]:
        operations: list[dict[str, Any]] = []
        for name in CORE_ATTRIBUTES:
            value = getattr(self, name)
            if value is not None:
                operations.append({"op": "replace", "path": f"/{name}", "value": value})
        for key, value in (self.properties or {}).items():
            operations.append({"op": "add", "path": f"/{key}", "value": value})
        for key in self.remove_properties or ():
            operations.append({"op": "remove", "path": f"/{key}"})
        return operations

    def body(self) -> tuple[str, bytes]:
        return json_body(self.patch_operations(), JSON_PATCH_CONTENT_TYPE)


class DeleteImage(RestEndpoint):
    method = "DELETE"
    path = "v2/images/{id}"
    service_type = ServiceType.IMAGE

    id: str


class UploadImageData(RestEndpoint):
    """Stream a local file as the image data."""

    method = "PUT"
    path = "v2/images/{id}/file"
    service_type = ServiceType.IMAGE

    id: str
    file: str

    def body(self) -> tuple[str, AsyncIterable[bytes]]:
        return "application/octet-stream", file_chunks(self.file)


class DownloadImageData(RestEndpoint):
    path = "v2/images/{id}/file"
    service_type = ServiceType.IMAGE

    id: str


class Image(ResourceRecord):
    view_key: ClassVar[str] = "image.image"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "checksum", "container_format", "created_at", "min_disk", "min_ram",
        "owner", "protected", "tags", "updated_at",
    })

    id: str
    name: str | None = None
    status: str | None = None
    visibility: str | None = None
    disk_format: str | None = None
    size: int | None = None
    checksum: str | None = None
    container_format: str | None = None
    created_at: str | None = None
    min_disk: int | None = None
    min_ram: int | None = None
    owner: str | None = None
    protected: bool | None = None
    tags: list[str] | None = None
    updated_at: str | None = None


def find_image(ref: str) -> Findable:
    return Findable(GetImage(id=ref), ListImages(name=ref))
