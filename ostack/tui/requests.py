"""
Dashboard Requests.

An ApiRequest is what a dashboard mode asks the CloudWorker to fetch: a
listing endpoint and the record type used for its columns. REQUESTS maps
the mode ids of tui.yaml to a factory building the request.
"""

from collections.abc import Callable
from dataclasses import dataclass

from ostack.core.exceptions import ConfigError
from ostack.sdk.api.block_storage.snapshots import Backup, ListBackups
from ostack.sdk.api.block_storage.volumes import ListVolumes, Volume
from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.compute.flavors import Flavor, ListFlavors
from ostack.sdk.api.compute.servers import ListServers, Server
from ostack.sdk.api.dns.zones import ListAllRecordsets, ListZones, Recordset, Zone
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.identity.projects import ListProjects, Project
from ostack.sdk.api.identity.users import ListUsers, User
from ostack.sdk.api.image.images import Image, ListImages
from ostack.sdk.api.load_balancer.load_balancers import (
    ListLoadBalancers,
    ListPools,
    LoadBalancer,
    Pool,
)
from ostack.sdk.api.network.networks import ListNetworks, Network
from ostack.sdk.api.network.routers import ListRouters, Router
from ostack.sdk.api.network.security_groups import ListSecurityGroups, SecurityGroup
from ostack.sdk.api.network.subnets import ListSubnets, Subnet


@dataclass(frozen=True)
class ApiRequest:
    """A listing issued on behalf of a dashboard mode."""

    mode: str
    endpoint: RestEndpoint
    model: type[ResourceRecord]


RequestFactory = Callable[[], ApiRequest]


def _listing(mode: str, endpoint: Callable[[], RestEndpoint], model: type[ResourceRecord]) -> RequestFactory:
    return lambda: ApiRequest(mode, endpoint(), model)


REQUESTS: dict[str, RequestFactory] = {
    "compute.servers": _listing("compute.servers", ListServers, Server),
    "compute.flavors": _listing("compute.flavors", ListFlavors, Flavor),
    "network.networks": _listing("network.networks", ListNetworks, Network),
    "network.subnets": _listing("network.subnets", ListSubnets, Subnet),
    "network.routers": _listing("network.routers", ListRouters, Router),
    "network.security_groups": _listing("network.security_groups", ListSecurityGroups, SecurityGroup),
    "image.images": _listing("image.images", ListImages, Image),
    "block_storage.volumes": _listing("block_storage.volumes", ListVolumes, Volume),
    "block_storage.backups": _listing("block_storage.backups", ListBackups, Backup),
    "load_balancer.loadbalancers": _listing("load_balancer.loadbalancers", ListLoadBalancers, LoadBalancer),
    "load_balancer.pools": _listing("load_balancer.pools", ListPools, Pool),
    "dns.zones": _listing("dns.zones", ListZones, Zone),
    "dns.recordsets": _listing("dns.recordsets", ListAllRecordsets, Recordset),
    "identity.projects": _listing("identity.projects", ListProjects, Project),
    "identity.users": _listing("identity.users", ListUsers, User),
}


def build_request(mode: str) -> ApiRequest:
    """
    Request of a dashboard mode.

    Raises:
        ConfigError: If tui.yaml names a mode without a request
    """
    try:
        factory = REQUESTS[mode]
    except KeyError:
        raise ConfigError(f"Unknown dashboard mode: {mode}") from None
    return factory()
