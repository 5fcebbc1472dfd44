"""
Load Balancer (Octavia) resources.

Listings return "<resources>_links" for pagination. Members live below
their pool. Amphorae are admin resources under the "octavia" prefix.
"""

from typing import Any, ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.params import CommaSeparatedList
from ostack.sdk.types import ServiceType

# =============================================================================
# Load balancers
# =============================================================================


class ListLoadBalancers(RestEndpoint):
    path = "v2/lbaas/loadbalancers"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "loadbalancers"
    query_fields = {
        "limit": "limit",
        "marker": "marker",
        "name": "name",
        "operating_status": "operating_status",
        "project_id": "project_id",
        "provisioning_status": "provisioning_status",
        "tags": "tags",
        "vip_address": "vip_address",
    }

    limit: int | None = None
    marker: str | None = None
    name: str | None = None
    operating_status: str | None = None
    project_id: str | None = None
    provisioning_status: str | None = None
    tags: CommaSeparatedList | None = None
    vip_address: str | None = None


class GetLoadBalancer(RestEndpoint):
    path = "v2/lbaas/loadbalancers/{id}"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "loadbalancer"

    id: str


class CreateLoadBalancer(RestEndpoint):
    method = "POST"
    path = "v2/lbaas/loadbalancers"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "loadbalancer"
    body_key = "loadbalancer"

    name: str | None = None
    description: str | None = None
    vip_subnet_id: str | None = None
    vip_network_id: str | None = None
    vip_port_id: str | None = None
    vip_address: str | None = None
    flavor_id: str | None = None
    provider: str | None = None
    availability_zone: str | None = None
    admin_state_up: bool | None = None
    tags: list[str] | None = None


class SetLoadBalancer(RestEndpoint):
    method = "PUT"
    path = "v2/lbaas/loadbalancers/{id}"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "loadbalancer"
    body_key = "loadbalancer"

    id: str
    name: str | None = None
    description: str | None = None
    admin_state_up: bool | None = None
    tags: list[str] | None = None


class DeleteLoadBalancer(RestEndpoint):
    method = "DELETE"
    path = "v2/lbaas/loadbalancers/{id}"
    service_type = ServiceType.LOAD_BALANCER
    query_fields = {"cascade": "cascade"}

    id: str
    cascade: bool | None = None


class LoadBalancer(ResourceRecord):
    view_key: ClassVar[str] = "load_balancer.loadbalancer"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "availability_zone", "description", "flavor_id", "project_id", "provider",
        "vip_port_id", "vip_subnet_id",
    })

    id: str
    name: str | None = None
    vip_address: str | None = None
    provisioning_status: str | None = None
    operating_status: str | None = None
    availability_zone: str | None = None
    description: str | None = None
    flavor_id: str | None = None
    project_id: str | None = None
    provider: str | None = None
    vip_port_id: str | None = None
    vip_subnet_id: str | None = None


def find_load_balancer(ref: str) -> Findable:
    return Findable(GetLoadBalancer(id=ref), ListLoadBalancers(name=ref))


# =============================================================================
# Listeners
# =============================================================================


class ListListeners(RestEndpoint):
    path = "v2/lbaas/listeners"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "listeners"
    query_fields = {
        "limit": "limit",
        "loadbalancer_id": "loadbalancer_id",
        "marker": "marker",
        "name": "name",
        "protocol": "protocol",
    }

    limit: int | None = None
    loadbalancer_id: str | None = None
    marker: str | None = None
    name: str | None = None
    protocol: str | None = None


class GetListener(RestEndpoint):
    path = "v2/lbaas/listeners/{id}"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "listener"

    id: str


class CreateListener(RestEndpoint):
    method = "POST"
    path = "v2/lbaas/listeners"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "listener"
    body_key = "listener"

    loadbalancer_id: str
    protocol: str
    protocol_port: int
    name: str | None = None
    description: str | None = None
    default_pool_id: str | None = None
    connection_limit: int | None = None
    admin_state_up: bool | None = None


class DeleteListener(RestEndpoint):
    method = "DELETE"
    path = "v2/lbaas/listeners/{id}"
    service_type = ServiceType.LOAD_BALANCER

    id: str


class Listener(ResourceRecord):
    view_key: ClassVar[str] = "load_balancer.listener"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "connection_limit", "default_pool_id", "description", "loadbalancers",
    })

    id: str
    name: str | None = None
    protocol: str | None = None
    protocol_port: int | None = None
    provisioning_status: str | None = None
    operating_status: str | None = None
    connection_limit: int | None = None
    default_pool_id: str | None = None
    description: str | None = None
    loadbalancers: list[dict[str, Any]] | None = None


def find_listener(ref: str) -> Findable:
    return Findable(GetListener(id=ref), ListListeners(name=ref))


# =============================================================================
# Pools and members
# =============================================================================


class ListPools(RestEndpoint):
    path = "v2/lbaas/pools"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "pools"
    query_fields = {
        "limit": "limit",
        "loadbalancer_id": "loadbalancer_id",
        "marker": "marker",
        "name": "name",
    }

    limit: int | None = None
    loadbalancer_id: str | None = None
    marker: str | None = None
    name: str | None = None


class GetPool(RestEndpoint):
    path = "v2/lbaas/pools/{id}"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "pool"

    id: str


class CreatePool(RestEndpoint):
    method = "POST"
    path = "v2/lbaas/pools"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "pool"
    body_key = "pool"

    lb_algorithm: str
    protocol: str
    listener_id: str | None = None
    loadbalancer_id: str | None = None
    name: str | None = None
    description: str | None = None
    admin_state_up: bool | None = None


class DeletePool(RestEndpoint):
    method = "DELETE"
    path = "v2/lbaas/pools/{id}"
    service_type = ServiceType.LOAD_BALANCER

    id: str


class Pool(ResourceRecord):
    view_key: ClassVar[str] = "load_balancer.pool"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"description", "healthmonitor_id", "members"})

    id: str
    name: str | None = None
    protocol: str | None = None
    lb_algorithm: str | None = None
    provisioning_status: str | None = None
    operating_status: str | None = None
    description: str | None = None
    healthmonitor_id: str | None = None
    members: list[dict[str, Any]] | None = None


def find_pool(ref: str) -> Findable:
    return Findable(GetPool(id=ref), ListPools(name=ref))


class ListMembers(RestEndpoint):
    path = "v2/lbaas/pools/{pool_id}/members"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "members"
    query_fields = {"limit": "limit", "marker": "marker", "name": "name"}

    pool_id: str
    limit: int | None = None
    marker: str | None = None
    name: str | None = None


class GetMember(RestEndpoint):
    path = "v2/lbaas/pools/{pool_id}/members/{id}"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "member"

    pool_id: str
    id: str


class CreateMember(RestEndpoint):
    method = "POST"
    path = "v2/lbaas/pools/{pool_id}/members"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "member"
    body_key = "member"

    pool_id: str
    address: str
    protocol_port: int
    name: str | None = None
    subnet_id: str | None = None
    weight: int | None = None
    backup: bool | None = None
    monitor_address: str | None = None
    monitor_port: int | None = None
    admin_state_up: bool | None = None


class DeleteMember(RestEndpoint):
    method = "DELETE"
    path = "v2/lbaas/pools/{pool_id}/members/{id}"
    service_type = ServiceType.LOAD_BALANCER

    pool_id: str
    id: str


class Member(ResourceRecord):
    view_key: ClassVar[str] = "load_balancer.member"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"backup", "subnet_id", "weight"})

    id: str
    name: str | None = None
    address: str | None = None
    protocol_port: int | None = None
    provisioning_status: str | None = None
    operating_status: str | None = None
    backup: bool | None = None
    subnet_id: str | None = None
    weight: int | None = None


def find_member(pool_id: str, ref: str) -> Findable:
    return Findable(GetMember(pool_id=pool_id, id=ref), ListMembers(pool_id=pool_id, name=ref))


# =============================================================================
# Health monitors
# =============================================================================


class ListHealthMonitors(RestEndpoint):
    path = "v2/lbaas/healthmonitors"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "healthmonitors"
    query_fields = {"limit": "limit", "marker": "marker", "name": "name", "pool_id": "pool_id"}

    limit: int | None = None
    marker: str | None = None
    name: str | None = None
    pool_id: str | None = None


class GetHealthMonitor(RestEndpoint):
    path = "v2/lbaas/healthmonitors/{id}"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "healthmonitor"

    id: str


class CreateHealthMonitor(RestEndpoint):
    method = "POST"
    path = "v2/lbaas/healthmonitors"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "healthmonitor"
    body_key = "healthmonitor"

    pool_id: str
    type: str
    delay: int
    timeout: int
    max_retries: int
    name: str | None = None
    http_method: str | None = None
    url_path: str | None = None
    expected_codes: str | None = None
    admin_state_up: bool | None = None


class DeleteHealthMonitor(RestEndpoint):
    method = "DELETE"
    path = "v2/lbaas/healthmonitors/{id}"
    service_type = ServiceType.LOAD_BALANCER

    id: str


class HealthMonitor(ResourceRecord):
    view_key: ClassVar[str] = "load_balancer.healthmonitor"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "expected_codes", "http_method", "max_retries", "pools", "url_path",
    })

    id: str
    name: str | None = None
    type: str | None = None
    delay: int | None = None
    timeout: int | None = None
    provisioning_status: str | None = None
    operating_status: str | None = None
    expected_codes: str | None = None
    http_method: str | None = None
    max_retries: int | None = None
    pools: list[dict[str, Any]] | None = None
    url_path: str | None = None


def find_health_monitor(ref: str) -> Findable:
    return Findable(GetHealthMonitor(id=ref), ListHealthMonitors(name=ref))


# =============================================================================
# Amphorae
# =============================================================================


class ListAmphorae(RestEndpoint):
    path = "v2/octavia/amphorae"
    service_type = ServiceType.LOAD_BALANCER
    response_key = "amphorae"
    query_fields = {
        "limit": "limit",
        "loadbalancer_id": "loadbalancer_id",
        "marker": "marker",
        "role": "role",
        "status": "status",
    }

    limit: int | None = None
    loadbalancer_id: str | None = None
    marker: str | None = None
    role: str | None = None
    status: str | None = None


class Amphora(ResourceRecord):
    view_key: ClassVar[str] = "load_balancer.amphora"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"compute_id", "ha_ip", "image_id"})

    id: str
    loadbalancer_id: str | None = None
    status: str | None = None
    role: str | None = None
    lb_network_ip: str | None = None
    compute_id: str | None = None
    ha_ip: str | None = None
    image_id: str | None = None
