"""Security groups and security group rules."""

from typing import Any, ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.params import CommaSeparatedList
from ostack.sdk.types import ServiceType


class ListSecurityGroups(RestEndpoint):
    path = "v2.0/security-groups"
    service_type = ServiceType.NETWORK
    response_key = "security_groups"
    query_fields = {
        "limit": "limit",
        "marker": "marker",
        "name": "name",
        "project_id": "project_id",
        "sort_dir": "sort_dir",
        "sort_key": "sort_key",
        "tags": "tags",
    }

    limit: int | None = None
    marker: str | None = None
    name: str | None = None
    project_id: str | None = None
    sort_dir: list[str] | None = None
    sort_key: list[str] | None = None
    tags: CommaSeparatedList | None = None


class GetSecurityGroup(RestEndpoint):
    path = "v2.0/security-groups/{id}"
    service_type = ServiceType.NETWORK
    response_key = "security_group"

    id: str


class CreateSecurityGroup(RestEndpoint):
    method = "POST"
    path = "v2.0/security-groups"
    service_type = ServiceType.NETWORK
    response_key = "security_group"
    body_key = "security_group"

    name: str
    description: str | None = None
    stateful: bool | None = None
    project_id: str | None = None


class SetSecurityGroup(RestEndpoint):
    method = "PUT"
    path = "v2.0/security-groups/{id}"
    service_type = ServiceType.NETWORK
    response_key = "security_group"
    body_key = "security_group"

    id: str
    name: str | None = None
    description: str | None = None
    stateful: bool | None = None


class DeleteSecurityGroup(RestEndpoint):
    method = "DELETE"
    path = "v2.0/security-groups/{id}"
    service_type = ServiceType.NETWORK

    id: str


class SecurityGroup(ResourceRecord):
    view_key: ClassVar[str] = "network.security_group"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "security_group_rules", "stateful", "tags", "created_at", "updated_at",
    })

    id: str
    name: str | None = None
    description: str | None = None
    project_id: str | None = None
    security_group_rules: list[dict[str, Any]] | None = None
    stateful: bool | None = None
    tags: list[str] | None = None
    created_at: str | None = None
    updated_at: str | None = None


def find_security_group(ref: str) -> Findable:
    return Findable(GetSecurityGroup(id=ref), ListSecurityGroups(name=ref))


# =============================================================================
# Rules
# =============================================================================


class ListSecurityGroupRules(RestEndpoint):
    path = "v2.0/security-group-rules"
    service_type = ServiceType.NETWORK
    response_key = "security_group_rules"
    query_fields = {
        "direction": "direction",
        "ethertype": "ethertype",
        "limit": "limit",
        "marker": "marker",
        "protocol": "protocol",
        "remote_group_id": "remote_group_id",
        "security_group_id": "security_group_id",
    }

    direction: str | None = None
    ethertype: str | None = None
    limit: int | None = None
    marker: str | None = None
    protocol: str | None = None
    remote_group_id: str | None = None
    security_group_id: str | None = None


class GetSecurityGroupRule(RestEndpoint):
    path = "v2.0/security-group-rules/{id}"
    service_type = ServiceType.NETWORK
    response_key = "security_group_rule"

    id: str


class CreateSecurityGroupRule(RestEndpoint):
    method = "POST"
    path = "v2.0/security-group-rules"
    service_type = ServiceType.NETWORK
    response_key = "security_group_rule"
    body_key = "security_group_rule"

    security_group_id: str
    direction: str = "ingress"
    ethertype: str | None = None
    protocol: str | None = None
    port_range_min: int | None = None
    port_range_max: int | None = None
    remote_ip_prefix: str | None = None
    remote_group_id: str | None = None
    description: str | None = None


class DeleteSecurityGroupRule(RestEndpoint):
    method = "DELETE"
    path = "v2.0/security-group-rules/{id}"
    service_type = ServiceType.NETWORK

    id: str


class SecurityGroupRule(ResourceRecord):
    view_key: ClassVar[str] = "network.security_group_rule"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"description", "project_id", "remote_group_id"})

    id: str
    security_group_id: str | None = None
    direction: str | None = None
    ethertype: str | None = None
    protocol: str | None = None
    port_range_min: int | None = None
    port_range_max: int | None = None
    remote_ip_prefix: str | None = None
    remote_group_id: str | None = None
    description: str | None = None
    project_id: str | None = None
