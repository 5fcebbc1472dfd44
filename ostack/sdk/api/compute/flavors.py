"""Compute flavors."""

from typing import Any, ClassVar

from pydantic import Field

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.types import ServiceType


class ListFlavors(RestEndpoint):
    path = "flavors/detail"
    service_type = ServiceType.COMPUTE
    response_key = "flavors"
    query_fields = {
        "is_public": "is_public",
        "limit": "limit",
        "marker": "marker",
        "min_disk": "minDisk",
        "min_ram": "minRam",
        "sort_dir": "sort_dir",
        "sort_key": "sort_key",
    }

    is_public: str | None = None
    limit: int | None = None
    marker: str | None = None
    min_disk: int | None = None
    min_ram: int | None = None
    sort_dir: str | None = None
    sort_key: str | None = None


class GetFlavor(RestEndpoint):
    path = "flavors/{id}"
    service_type = ServiceType.COMPUTE
    response_key = "flavor"

    id: str


class CreateFlavor(RestEndpoint):
    method = "POST"
    path = "flavors"
    service_type = ServiceType.COMPUTE
    response_key = "flavor"
    body_key = "flavor"

    name: str
    ram: int
    vcpus: int
    disk: int = 0
    id: str | None = None
    swap: int | None = None
    ephemeral: int | None = Field(default=None, alias="OS-FLV-EXT-DATA:ephemeral")
    rxtx_factor: float | None = None
    is_public: bool | None = Field(default=None, alias="os-flavor-access:is_public")
    description: str | None = None


class DeleteFlavor(RestEndpoint):
    method = "DELETE"
    path = "flavors/{id}"
    service_type = ServiceType.COMPUTE

    id: str


class Flavor(ResourceRecord):
    view_key: ClassVar[str] = "compute.flavor"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "description", "ephemeral", "extra_specs", "rxtx_factor", "swap",
    })

    id: str
    name: str | None = None
    vcpus: int | None = None
    ram: int | None = None
    disk: int | None = None
    is_public: bool | None = Field(default=None, alias="os-flavor-access:is_public")
    description: str | None = None
    ephemeral: int | None = Field(default=None, alias="OS-FLV-EXT-DATA:ephemeral")
    extra_specs: dict[str, Any] | None = None
    rxtx_factor: float | None = None
    swap: int | str | None = None


def find_flavor(ref: str) -> Findable:
    return Findable(GetFlavor(id=ref), ListFlavors(), name=ref)
