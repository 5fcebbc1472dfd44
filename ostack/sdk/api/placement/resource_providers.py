"""Placement resource providers, their inventories and usages, and resource classes."""

from typing import Any, ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.types import ServiceType


class ListResourceProviders(RestEndpoint):
    path = "resource_providers"
    service_type = ServiceType.PLACEMENT
    response_key = "resource_providers"
    microversion = "1.14"
    query_fields = {
        "in_tree": "in_tree",
        "member_of": "member_of",
        "name": "name",
        "resources": "resources",
        "uuid": "uuid",
    }

    in_tree: str | None = None
    member_of: str | None = None
    name: str | None = None
    resources: str | None = None
    uuid: str | None = None


class GetResourceProvider(RestEndpoint):
    path = "resource_providers/{uuid}"
    service_type = ServiceType.PLACEMENT
    microversion = "1.14"

    uuid: str


class ResourceProvider(ResourceRecord):
    view_key: ClassVar[str] = "placement.resource_provider"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"parent_provider_uuid", "root_provider_uuid"})

    uuid: str
    name: str | None = None
    generation: int | None = None
    parent_provider_uuid: str | None = None
    root_provider_uuid: str | None = None


def find_resource_provider(ref: str) -> Findable:
    return Findable(GetResourceProvider(uuid=ref), ListResourceProviders(name=ref))


class ListResourceProviderInventories(RestEndpoint):
    """Inventories keyed by resource class ({"VCPU": {...}, ...})."""

    path = "resource_providers/{uuid}/inventories"
    service_type = ServiceType.PLACEMENT
    response_key = "inventories"

    uuid: str


class Inventory(ResourceRecord):
    view_key: ClassVar[str] = "placement.inventory"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"min_unit", "step_size"})

    resource_class: str
    total: int | None = None
    reserved: int | None = None
    allocation_ratio: float | None = None
    max_unit: int | None = None
    min_unit: int | None = None
    step_size: int | None = None


class ListResourceProviderUsages(RestEndpoint):
    path = "resource_providers/{uuid}/usages"
    service_type = ServiceType.PLACEMENT
    response_key = "usages"

    uuid: str


class Usage(ResourceRecord):
    view_key: ClassVar[str] = "placement.usage"

    resource_class: str
    usage: int | None = None


class ListResourceClasses(RestEndpoint):
    path = "resource_classes"
    service_type = ServiceType.PLACEMENT
    response_key = "resource_classes"
    microversion = "1.2"


class ResourceClass(ResourceRecord):
    view_key: ClassVar[str] = "placement.resource_class"

    name: str


def keyed_to_rows(data: dict[str, Any] | None, value_key: str | None = None) -> list[dict[str, Any]]:
    """
    Flatten a mapping keyed by resource class into rows.

    {"VCPU": {"total": 8}} → [{"resource_class": "VCPU", "total": 8}]
    {"VCPU": 2} with value_key="usage" → [{"resource_class": "VCPU", "usage": 2}]
    """
    rows = []
    for resource_class, value in sorted((data or {}).items()):
        row: dict[str, Any] = {"resource_class": resource_class}
        if value_key is not None:
            row[value_key] = value
        elif isinstance(value, dict):
            row.update(value)
        rows.append(row)
    return rows
