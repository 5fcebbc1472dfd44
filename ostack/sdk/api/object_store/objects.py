"""
Object Store (Swift) account, containers and objects.

Paths are relative to the account URL from the catalog:

    ""                           account
    "{container}"                container
    "{container}/{object_name}"  object (the name may contain "/")

Listings request format=json and paginate by marker (the last item name).
Metadata is reported through response headers of HEAD requests.
"""

from collections.abc import AsyncIterable
from typing import ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint, file_chunks
from ostack.sdk.types import ServiceType

ACCOUNT_HEADERS = {
    "X-Account-Bytes-Used": "bytes_used",
    "X-Account-Container-Count": "container_count",
    "X-Account-Object-Count": "object_count",
}

CONTAINER_HEADERS = {
    "X-Container-Bytes-Used": "bytes_used",
    "X-Container-Object-Count": "object_count",
    "X-Storage-Policy": "storage_policy",
    "X-Container-Read": "read_acl",
    "X-Container-Write": "write_acl",
}

OBJECT_HEADERS = {
    "Content-Length": "content_length",
    "Content-Type": "content_type",
    "Etag": "etag",
    "Last-Modified": "last_modified",
}


class GetAccount(RestEndpoint):
    method = "HEAD"
    path = ""
    service_type = ServiceType.OBJECT_STORE
    response_headers = ACCOUNT_HEADERS


class Account(ResourceRecord):
    view_key: ClassVar[str] = "object_store.account"

    bytes_used: int | None = None
    container_count: int | None = None
    object_count: int | None = None


# =============================================================================
# Containers
# =============================================================================


class ListContainers(RestEndpoint):
    path = ""
    service_type = ServiceType.OBJECT_STORE
    query_fields = {
        "format": "format",
        "limit": "limit",
        "marker": "marker",
        "prefix": "prefix",
    }

    format: str = "json"
    limit: int | None = None
    marker: str | None = None
    prefix: str | None = None


class GetContainer(RestEndpoint):
    method = "HEAD"
    path = "{container}"
    service_type = ServiceType.OBJECT_STORE
    response_headers = CONTAINER_HEADERS

    container: str


class CreateContainer(RestEndpoint):
    method = "PUT"
    path = "{container}"
    service_type = ServiceType.OBJECT_STORE
    header_fields = {"storage_policy": "X-Storage-Policy"}

    container: str
    storage_policy: str | None = None


class DeleteContainer(RestEndpoint):
    method = "DELETE"
    path = "{container}"
    service_type = ServiceType.OBJECT_STORE

    container: str


class Container(ResourceRecord):
    view_key: ClassVar[str] = "object_store.container"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"last_modified"})

    name: str | None = None
    count: int | None = None
    bytes: int | None = None
    last_modified: str | None = None


class ContainerInfo(ResourceRecord):
    view_key: ClassVar[str] = "object_store.container_info"

    bytes_used: int | None = None
    object_count: int | None = None
    storage_policy: str | None = None
    read_acl: str | None = None
    write_acl: str | None = None


# =============================================================================
# Objects
# =============================================================================


class ListObjects(RestEndpoint):
    path = "{container}"
    service_type = ServiceType.OBJECT_STORE
    query_fields = {
        "delimiter": "delimiter",
        "format": "format",
        "limit": "limit",
        "marker": "marker",
        "prefix": "prefix",
    }

    container: str
    delimiter: str | None = None
    format: str = "json"
    limit: int | None = None
    marker: str | None = None
    prefix: str | None = None


class GetObject(RestEndpoint):
    method = "HEAD"
    path = "{container}/{object_name}"
    service_type = ServiceType.OBJECT_STORE
    raw_path_fields = frozenset({"object_name"})
    response_headers = OBJECT_HEADERS

    container: str
    object_name: str


class UploadObject(RestEndpoint):
    """Stream a local file into an object."""

    method = "PUT"
    path = "{container}/{object_name}"
    service_type = ServiceType.OBJECT_STORE
    raw_path_fields = frozenset({"object_name"})

    container: str
    object_name: str
    file: str
    content_type: str = "application/octet-stream"

    def body(self) -> tuple[str, AsyncIterable[bytes]]:
        return self.content_type, file_chunks(self.file)


class DownloadObject(RestEndpoint):
    path = "{container}/{object_name}"
    service_type = ServiceType.OBJECT_STORE
    raw_path_fields = frozenset({"object_name"})

    container: str
    object_name: str


class DeleteObject(RestEndpoint):
    method = "DELETE"
    path = "{container}/{object_name}"
    service_type = ServiceType.OBJECT_STORE
    raw_path_fields = frozenset({"object_name"})

    container: str
    object_name: str


class StoredObject(ResourceRecord):
    view_key: ClassVar[str] = "object_store.object"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"hash", "last_modified"})

    name: str | None = None
    bytes: int | None = None
    content_type: str | None = None
    hash: str | None = None
    last_modified: str | None = None
    subdir: str | None = None


class ObjectInfo(ResourceRecord):
    view_key: ClassVar[str] = "object_store.object_info"

    content_length: int | None = None
    content_type: str | None = None
    etag: str | None = None
    last_modified: str | None = None
