"""
Network Commands.

Networks, subnets, ports, routers, security groups and their rules,
floating IPs, quotas, extensions and agents of the network service
(Neutron).
"""

from typing import Optional

import typer

from ostack.cli.common import parse_csv, parse_key_val
from ostack.cli.context import (
    CliContext,
    delete_found,
    limit_option,
    max_items_option,
    output_list,
    output_one,
    resolve_id,
    run_command,
    run_ignored,
)
from ostack.core.exceptions import ConfigError
from ostack.sdk.api.network.floating_ips import (
    CreateFloatingIp,
    DeleteFloatingIp,
    FloatingIp,
    GetFloatingIp,
    ListFloatingIps,
    SetFloatingIp,
)
from ostack.sdk.api.network.misc import Agent, Extension, GetQuota, ListAgents, ListExtensions, Quota
from ostack.sdk.api.network.networks import CreateNetwork, DeleteNetwork, ListNetworks, Network, SetNetwork, find_network
from ostack.sdk.api.network.ports import CreatePort, DeletePort, ListPorts, Port, SetPort, find_port
from ostack.sdk.api.network.routers import (
    AddRouterInterface,
    CreateRouter,
    DeleteRouter,
    ListRouters,
    RemoveRouterInterface,
    Router,
    SetRouter,
    find_router,
)
from ostack.sdk.api.network.security_groups import (
    CreateSecurityGroup,
    CreateSecurityGroupRule,
    DeleteSecurityGroup,
    DeleteSecurityGroupRule,
    GetSecurityGroupRule,
    ListSecurityGroupRules,
    ListSecurityGroups,
    SecurityGroup,
    SecurityGroupRule,
    SetSecurityGroup,
    find_security_group,
)
from ostack.sdk.api.network.subnets import CreateSubnet, DeleteSubnet, ListSubnets, SetSubnet, Subnet, find_subnet
from ostack.sdk.session import AsyncOpenStack

app = typer.Typer(help="Network service (Neutron) commands")

network_app = typer.Typer(help="Networks")
subnet_app = typer.Typer(help="Subnets")
port_app = typer.Typer(help="Ports")
router_app = typer.Typer(help="Routers")
security_group_app = typer.Typer(help="Security groups")
security_group_rule_app = typer.Typer(help="Security group rules")
floating_ip_app = typer.Typer(help="Floating IPs")
quota_app = typer.Typer(help="Network quotas")
extension_app = typer.Typer(help="API extensions")
agent_app = typer.Typer(help="Network agents")

app.add_typer(network_app, name="network")
app.add_typer(subnet_app, name="subnet")
app.add_typer(port_app, name="port")
app.add_typer(router_app, name="router")
app.add_typer(security_group_app, name="security-group")
app.add_typer(security_group_rule_app, name="security-group-rule")
app.add_typer(floating_ip_app, name="floating-ip")
app.add_typer(quota_app, name="quota")
app.add_typer(extension_app, name="extension")
app.add_typer(agent_app, name="agent")


def _tags(value: str | None):
    return parse_csv(value) if value else None


# =============================================================================
# Networks
# =============================================================================


@network_app.command("list")
def list_networks(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Network name"),
    status: Optional[str] = typer.Option(None, "--status", help="Network status"),
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Owning project"),
    external: Optional[bool] = typer.Option(None, "--external/--internal", help="External (provider) networks"),
    shared: Optional[bool] = typer.Option(None, "--shared/--not-shared", help="Shared networks"),
    tags: Optional[str] = typer.Option(None, "--tags", help="Networks having all these tags (a,b)"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """
    List networks.

    Examples:
        osc --os-cloud devstack network network list --external
    """

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListNetworks(
            name=name, status=status, project_id=project_id,
            external=external, shared=shared, tags=_tags(tags),
        )
        await output_list(session, cli, endpoint, Network, max_items, limit)

    run_command(ctx, _list)


@network_app.command("show")
def show_network(ctx: typer.Context, network: str = typer.Argument(..., help="Network ID or name")) -> None:
    """Show network details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_network(network), Network)

    run_command(ctx, _show)


@network_app.command("create")
def create_network(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Network name"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
    shared: Optional[bool] = typer.Option(None, "--shared/--no-shared", help="Share with all projects"),
    external: Optional[bool] = typer.Option(None, "--external/--internal", help="Router external network"),
    mtu: Optional[int] = typer.Option(None, "--mtu", min=68, help="MTU"),
    disable: bool = typer.Option(False, "--disable", help="Create administratively down"),
    provider_network_type: Optional[str] = typer.Option(None, "--provider-network-type", help="flat, vlan, vxlan, ..."),
    provider_physical_network: Optional[str] = typer.Option(None, "--provider-physical-network", help="Physical network"),
    provider_segment: Optional[int] = typer.Option(None, "--provider-segment", help="VLAN ID or tunnel ID"),
) -> None:
    """Create a network."""

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = CreateNetwork(
            name=name,
            description=description,
            shared=shared,
            external=external,
            mtu=mtu,
            admin_state_up=False if disable else None,
            provider_network_type=provider_network_type,
            provider_physical_network=provider_physical_network,
            provider_segmentation_id=provider_segment,
        )
        await output_one(session, cli, endpoint, Network)

    run_command(ctx, _create)


@network_app.command("set")
def set_network(
    ctx: typer.Context,
    network: str = typer.Argument(..., help="Network ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
    enable: Optional[bool] = typer.Option(None, "--enable/--disable", help="Administrative state"),
    shared: Optional[bool] = typer.Option(None, "--shared/--no-shared", help="Share with all projects"),
    mtu: Optional[int] = typer.Option(None, "--mtu", min=68, help="MTU"),
) -> None:
    """Update network properties."""

    async def _set(session: AsyncOpenStack, cli: CliContext) -> None:
        network_id = await resolve_id(session, find_network(network))
        endpoint = SetNetwork(
            id=network_id, name=name, description=description,
            admin_state_up=enable, shared=shared, mtu=mtu,
        )
        await output_one(session, cli, endpoint, Network)

    run_command(ctx, _set)


@network_app.command("delete")
def delete_network(ctx: typer.Context, networks: list[str] = typer.Argument(..., help="Network IDs or names")) -> None:
    """Delete networks."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(session, cli, networks, find_network, lambda i: DeleteNetwork(id=i), "network")

    run_command(ctx, _delete)


# =============================================================================
# Subnets
# =============================================================================


@subnet_app.command("list")
def list_subnets(
    ctx: typer.Context,
    network: Optional[str] = typer.Option(None, "--network", help="Network ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="Subnet name"),
    ip_version: Optional[int] = typer.Option(None, "--ip-version", help="4 or 6"),
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Owning project"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List subnets."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        network_id = await resolve_id(session, find_network(network)) if network else None
        endpoint = ListSubnets(network_id=network_id, name=name, ip_version=ip_version, project_id=project_id)
        await output_list(session, cli, endpoint, Subnet, max_items, limit)

    run_command(ctx, _list)


@subnet_app.command("show")
def show_subnet(ctx: typer.Context, subnet: str = typer.Argument(..., help="Subnet ID or name")) -> None:
    """Show subnet details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_subnet(subnet), Subnet)

    run_command(ctx, _show)


@subnet_app.command("create")
def create_subnet(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Subnet name"),
    network: str = typer.Option(..., "--network", help="Network ID or name"),
    cidr: Optional[str] = typer.Option(None, "--subnet-range", help="CIDR, e.g. 10.0.0.0/24"),
    ip_version: int = typer.Option(4, "--ip-version", help="4 or 6"),
    gateway: Optional[str] = typer.Option(None, "--gateway", help="Gateway IP"),
    dhcp: Optional[bool] = typer.Option(None, "--dhcp/--no-dhcp", help="Enable DHCP"),
    dns_nameserver: Optional[list[str]] = typer.Option(None, "--dns-nameserver", help="DNS server. Repeatable"),
    allocation_pool: Optional[list[str]] = typer.Option(
        None, "--allocation-pool", help="start=IP,end=IP. Repeatable",
    ),
    subnet_pool: Optional[str] = typer.Option(None, "--subnet-pool", help="Subnet pool ID"),
    prefix_length: Optional[int] = typer.Option(None, "--prefix-length", help="Prefix length for the subnet pool"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
) -> None:
    """
    Create a subnet.

    Examples:
        osc --os-cloud devstack network subnet create s1 --network private --subnet-range 10.0.0.0/24
    """
    pools = [dict(parse_key_val(p) for p in pool.split(",")) for pool in allocation_pool or []]

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        network_id = await resolve_id(session, find_network(network))
        endpoint = CreateSubnet(
            network_id=network_id,
            name=name,
            cidr=cidr,
            ip_version=ip_version,
            gateway_ip=gateway,
            enable_dhcp=dhcp,
            dns_nameservers=dns_nameserver or None,
            allocation_pools=pools or None,
            subnetpool_id=subnet_pool,
            prefixlen=prefix_length,
            description=description,
        )
        await output_one(session, cli, endpoint, Subnet)

    run_command(ctx, _create)


@subnet_app.command("set")
def set_subnet(
    ctx: typer.Context,
    subnet: str = typer.Argument(..., help="Subnet ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
    gateway: Optional[str] = typer.Option(None, "--gateway", help="Gateway IP"),
    dhcp: Optional[bool] = typer.Option(None, "--dhcp/--no-dhcp", help="Enable DHCP"),
    dns_nameserver: Optional[list[str]] = typer.Option(None, "--dns-nameserver", help="Replace DNS servers. Repeatable"),
) -> None:
    """Update subnet properties."""

    async def _set(session: AsyncOpenStack, cli: CliContext) -> None:
        subnet_id = await resolve_id(session, find_subnet(subnet))
        endpoint = SetSubnet(
            id=subnet_id, name=name, description=description, gateway_ip=gateway,
            enable_dhcp=dhcp, dns_nameservers=dns_nameserver or None,
        )
        await output_one(session, cli, endpoint, Subnet)

    run_command(ctx, _set)


@subnet_app.command("delete")
def delete_subnet(ctx: typer.Context, subnets: list[str] = typer.Argument(..., help="Subnet IDs or names")) -> None:
    """Delete subnets."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(session, cli, subnets, find_subnet, lambda i: DeleteSubnet(id=i), "subnet")

    run_command(ctx, _delete)


# =============================================================================
# Ports
# =============================================================================


@port_app.command("list")
def list_ports(
    ctx: typer.Context,
    network: Optional[str] = typer.Option(None, "--network", help="Network ID or name"),
    device_id: Optional[str] = typer.Option(None, "--device-id", help="Device (server, router) ID"),
    device_owner: Optional[str] = typer.Option(None, "--device-owner", help="Device owner, e.g. compute:nova"),
    name: Optional[str] = typer.Option(None, "--name", help="Port name"),
    mac_address: Optional[str] = typer.Option(None, "--mac-address", help="MAC address"),
    status: Optional[str] = typer.Option(None, "--status", help="Port status"),
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Owning project"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List ports."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        network_id = await resolve_id(session, find_network(network)) if network else None
        endpoint = ListPorts(
            network_id=network_id, device_id=device_id, device_owner=device_owner,
            name=name, mac_address=mac_address, status=status, project_id=project_id,
        )
        await output_list(session, cli, endpoint, Port, max_items, limit)

    run_command(ctx, _list)


@port_app.command("show")
def show_port(ctx: typer.Context, port: str = typer.Argument(..., help="Port ID or name")) -> None:
    """Show port details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_port(port), Port)

    run_command(ctx, _show)


def _fixed_ips(values: list[str] | None) -> list[dict[str, str]] | None:
    """--fixed-ip subnet=<id>,ip-address=<ip> to the API representation."""
    if not values:
        return None
    keys = {"subnet": "subnet_id", "subnet_id": "subnet_id", "ip-address": "ip_address", "ip_address": "ip_address"}
    result = []
    for value in values:
        entry = {}
        for item in value.split(","):
            key, val = parse_key_val(item)
            if key not in keys:
                raise typer.BadParameter(f"unknown fixed IP key `{key}`", param_hint="--fixed-ip")
            entry[keys[key]] = val
        result.append(entry)
    return result


@port_app.command("create")
def create_port(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Port name"),
    network: str = typer.Option(..., "--network", help="Network ID or name"),
    fixed_ip: Optional[list[str]] = typer.Option(
        None, "--fixed-ip", help="subnet=<subnet-id>,ip-address=<ip>. Repeatable",
    ),
    security_group: Optional[list[str]] = typer.Option(None, "--security-group", help="Security group ID or name. Repeatable"),
    port_security: Optional[bool] = typer.Option(None, "--enable-port-security/--disable-port-security"),
    vnic_type: Optional[str] = typer.Option(None, "--vnic-type", help="normal, direct, macvtap, ..."),
    mac_address: Optional[str] = typer.Option(None, "--mac-address", help="MAC address"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
) -> None:
    """Create a port."""
    fixed_ips = _fixed_ips(fixed_ip)

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        network_id = await resolve_id(session, find_network(network))
        groups = [await resolve_id(session, find_security_group(sg)) for sg in security_group or []]
        endpoint = CreatePort(
            network_id=network_id,
            name=name,
            fixed_ips=fixed_ips,
            security_groups=groups or None,
            port_security_enabled=port_security,
            vnic_type=vnic_type,
            mac_address=mac_address,
            description=description,
        )
        await output_one(session, cli, endpoint, Port)

    run_command(ctx, _create)


@port_app.command("set")
def set_port(
    ctx: typer.Context,
    port: str = typer.Argument(..., help="Port ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
    enable: Optional[bool] = typer.Option(None, "--enable/--disable", help="Administrative state"),
    security_group: Optional[list[str]] = typer.Option(None, "--security-group", help="Replace security groups. Repeatable"),
    no_security_group: bool = typer.Option(False, "--no-security-group", help="Remove all security groups"),
) -> None:
    """Update port properties."""

    async def _set(session: AsyncOpenStack, cli: CliContext) -> None:
        port_id = await resolve_id(session, find_port(port))
        groups = None
        if no_security_group:
            groups = []
        elif security_group:
            groups = [await resolve_id(session, find_security_group(sg)) for sg in security_group]
        endpoint = SetPort(id=port_id, name=name, description=description, admin_state_up=enable, security_groups=groups)
        await output_one(session, cli, endpoint, Port)

    run_command(ctx, _set)


@port_app.command("delete")
def delete_port(ctx: typer.Context, ports: list[str] = typer.Argument(..., help="Port IDs or names")) -> None:
    """Delete ports."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(session, cli, ports, find_port, lambda i: DeletePort(id=i), "port")

    run_command(ctx, _delete)


# =============================================================================
# Routers
# =============================================================================


@router_app.command("list")
def list_routers(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Router name"),
    status: Optional[str] = typer.Option(None, "--status", help="Router status"),
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Owning project"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List routers."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListRouters(name=name, status=status, project_id=project_id)
        await output_list(session, cli, endpoint, Router, max_items, limit)

    run_command(ctx, _list)


@router_app.command("show")
def show_router(ctx: typer.Context, router: str = typer.Argument(..., help="Router ID or name")) -> None:
    """Show router details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_router(router), Router)

    run_command(ctx, _show)


@router_app.command("create")
def create_router(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Router name"),
    external_gateway: Optional[str] = typer.Option(None, "--external-gateway", help="External network ID or name"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
    distributed: Optional[bool] = typer.Option(None, "--distributed/--centralized", help="DVR mode (admin)"),
    ha: Optional[bool] = typer.Option(None, "--ha/--no-ha", help="HA mode (admin)"),
) -> None:
    """Create a router."""

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        gateway = None
        if external_gateway:
            gateway = {"network_id": await resolve_id(session, find_network(external_gateway))}
        endpoint = CreateRouter(
            name=name, external_gateway_info=gateway, description=description,
            distributed=distributed, ha=ha,
        )
        await output_one(session, cli, endpoint, Router)

    run_command(ctx, _create)


@router_app.command("set")
def set_router(
    ctx: typer.Context,
    router: str = typer.Argument(..., help="Router ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
    enable: Optional[bool] = typer.Option(None, "--enable/--disable", help="Administrative state"),
    external_gateway: Optional[str] = typer.Option(None, "--external-gateway", help="External network ID or name"),
) -> None:
    """Update router properties."""

    async def _set(session: AsyncOpenStack, cli: CliContext) -> None:
        router_id = await resolve_id(session, find_router(router))
        gateway = None
        if external_gateway:
            gateway = {"network_id": await resolve_id(session, find_network(external_gateway))}
        endpoint = SetRouter(
            id=router_id, name=name, description=description,
            admin_state_up=enable, external_gateway_info=gateway,
        )
        await output_one(session, cli, endpoint, Router)

    run_command(ctx, _set)


@router_app.command("delete")
def delete_router(ctx: typer.Context, routers: list[str] = typer.Argument(..., help="Router IDs or names")) -> None:
    """Delete routers."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(session, cli, routers, find_router, lambda i: DeleteRouter(id=i), "router")

    run_command(ctx, _delete)


def _router_interface(ctx: typer.Context, router: str, subnet: str | None, port: str | None, remove: bool) -> None:
    if (subnet is None) == (port is None):
        raise typer.BadParameter("give exactly one of --subnet or --port")

    async def _interface(session: AsyncOpenStack, cli: CliContext) -> None:
        router_id = await resolve_id(session, find_router(router))
        subnet_id = await resolve_id(session, find_subnet(subnet)) if subnet else None
        port_id = await resolve_id(session, find_port(port)) if port else None
        endpoint_cls = RemoveRouterInterface if remove else AddRouterInterface
        data = await endpoint_cls(id=router_id, subnet_id=subnet_id, port_id=port_id).query(session)
        cli.output_processor().output_raw(data)

    run_command(ctx, _interface)


@router_app.command("add-interface")
def add_router_interface(
    ctx: typer.Context,
    router: str = typer.Argument(..., help="Router ID or name"),
    subnet: Optional[str] = typer.Option(None, "--subnet", help="Subnet ID or name"),
    port: Optional[str] = typer.Option(None, "--port", help="Port ID or name"),
) -> None:
    """Attach a subnet or a port to a router."""
    _router_interface(ctx, router, subnet, port, remove=False)


@router_app.command("remove-interface")
def remove_router_interface(
    ctx: typer.Context,
    router: str = typer.Argument(..., help="Router ID or name"),
    subnet: Optional[str] = typer.Option(None, "--subnet", help="Subnet ID or name"),
    port: Optional[str] = typer.Option(None, "--port", help="Port ID or name"),
) -> None:
    """Detach a subnet or a port from a router."""
    _router_interface(ctx, router, subnet, port, remove=True)


# =============================================================================
# Security groups
# =============================================================================


@security_group_app.command("list")
def list_security_groups(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Security group name"),
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Owning project"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List security groups."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListSecurityGroups(name=name, project_id=project_id)
        await output_list(session, cli, endpoint, SecurityGroup, max_items, limit)

    run_command(ctx, _list)


@security_group_app.command("show")
def show_security_group(ctx: typer.Context, group: str = typer.Argument(..., help="Security group ID or name")) -> None:
    """Show security group details with its rules."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_security_group(group), SecurityGroup)

    run_command(ctx, _show)


@security_group_app.command("create")
def create_security_group(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Security group name"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
    stateful: Optional[bool] = typer.Option(None, "--stateful/--stateless", help="Stateful filtering"),
) -> None:
    """Create a security group."""

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = CreateSecurityGroup(name=name, description=description, stateful=stateful)
        await output_one(session, cli, endpoint, SecurityGroup)

    run_command(ctx, _create)


@security_group_app.command("set")
def set_security_group(
    ctx: typer.Context,
    group: str = typer.Argument(..., help="Security group ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
) -> None:
    """Update security group properties."""

    async def _set(session: AsyncOpenStack, cli: CliContext) -> None:
        group_id = await resolve_id(session, find_security_group(group))
        endpoint = SetSecurityGroup(id=group_id, name=name, description=description)
        await output_one(session, cli, endpoint, SecurityGroup)

    run_command(ctx, _set)


@security_group_app.command("delete")
def delete_security_group(
    ctx: typer.Context,
    groups: list[str] = typer.Argument(..., help="Security group IDs or names"),
) -> None:
    """Delete security groups."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(
            session, cli, groups, find_security_group, lambda i: DeleteSecurityGroup(id=i), "security group",
        )

    run_command(ctx, _delete)


# =============================================================================
# Security group rules
# =============================================================================


@security_group_rule_app.command("list")
def list_security_group_rules(
    ctx: typer.Context,
    group: Optional[str] = typer.Argument(None, help="Security group ID or name"),
    direction: Optional[str] = typer.Option(None, "--direction", help="ingress or egress"),
    protocol: Optional[str] = typer.Option(None, "--protocol", help="tcp, udp, icmp, ..."),
    ethertype: Optional[str] = typer.Option(None, "--ethertype", help="IPv4 or IPv6"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List security group rules, optionally of one group."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        group_id = await resolve_id(session, find_security_group(group)) if group else None
        endpoint = ListSecurityGroupRules(
            security_group_id=group_id, direction=direction, protocol=protocol, ethertype=ethertype,
        )
        await output_list(session, cli, endpoint, SecurityGroupRule, max_items, limit)

    run_command(ctx, _list)


@security_group_rule_app.command("show")
def show_security_group_rule(ctx: typer.Context, rule_id: str = typer.Argument(..., help="Rule ID")) -> None:
    """Show security group rule details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, GetSecurityGroupRule(id=rule_id), SecurityGroupRule)

    run_command(ctx, _show)


def _port_range(value: str | None) -> tuple[int | None, int | None]:
    """"22" or "8000:8080" to (min, max)."""
    if not value:
        return None, None
    low, _, high = value.partition(":")
    try:
        return int(low), int(high or low)
    except ValueError as e:
        raise typer.BadParameter(f"invalid port range `{value}`", param_hint="--dst-port") from e


@security_group_rule_app.command("create")
def create_security_group_rule(
    ctx: typer.Context,
    group: str = typer.Argument(..., help="Security group ID or name"),
    direction: str = typer.Option("ingress", "--direction", help="ingress or egress"),
    protocol: Optional[str] = typer.Option(None, "--protocol", help="tcp, udp, icmp, ... (any when omitted)"),
    dst_port: Optional[str] = typer.Option(None, "--dst-port", help="Port or range (8000:8080)"),
    remote_ip: Optional[str] = typer.Option(None, "--remote-ip", help="Remote CIDR"),
    remote_group: Optional[str] = typer.Option(None, "--remote-group", help="Remote security group ID or name"),
    ethertype: Optional[str] = typer.Option(None, "--ethertype", help="IPv4 or IPv6"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
) -> None:
    """
    Create a security group rule.

    Examples:
        osc --os-cloud devstack network security-group-rule create default --protocol tcp --dst-port 22
    """
    port_min, port_max = _port_range(dst_port)

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        group_id = await resolve_id(session, find_security_group(group))
        remote_group_id = await resolve_id(session, find_security_group(remote_group)) if remote_group else None
        endpoint = CreateSecurityGroupRule(
            security_group_id=group_id,
            direction=direction,
            protocol=protocol,
            port_range_min=port_min,
            port_range_max=port_max,
            remote_ip_prefix=remote_ip,
            remote_group_id=remote_group_id,
            ethertype=ethertype,
            description=description,
        )
        await output_one(session, cli, endpoint, SecurityGroupRule)

    run_command(ctx, _create)


@security_group_rule_app.command("delete")
def delete_security_group_rule(ctx: typer.Context, rule_ids: list[str] = typer.Argument(..., help="Rule IDs")) -> None:
    """Delete security group rules."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        for rule_id in rule_ids:
            await run_ignored(session, DeleteSecurityGroupRule(id=rule_id))
            cli.report(f"Deleted security group rule {rule_id}")

    run_command(ctx, _delete)


# =============================================================================
# Floating IPs
# =============================================================================


@floating_ip_app.command("list")
def list_floating_ips(
    ctx: typer.Context,
    network: Optional[str] = typer.Option(None, "--network", help="Floating network ID or name"),
    port: Optional[str] = typer.Option(None, "--port", help="Associated port ID"),
    status: Optional[str] = typer.Option(None, "--status", help="ACTIVE or DOWN"),
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Owning project"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List floating IPs."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        network_id = await resolve_id(session, find_network(network)) if network else None
        endpoint = ListFloatingIps(floating_network_id=network_id, port_id=port, status=status, project_id=project_id)
        await output_list(session, cli, endpoint, FloatingIp, max_items, limit)

    run_command(ctx, _list)


@floating_ip_app.command("show")
def show_floating_ip(ctx: typer.Context, floating_ip_id: str = typer.Argument(..., help="Floating IP ID")) -> None:
    """Show floating IP details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, GetFloatingIp(id=floating_ip_id), FloatingIp)

    run_command(ctx, _show)


@floating_ip_app.command("create")
def create_floating_ip(
    ctx: typer.Context,
    network: str = typer.Argument(..., help="External network ID or name"),
    port: Optional[str] = typer.Option(None, "--port", help="Port ID or name to associate"),
    floating_ip_address: Optional[str] = typer.Option(None, "--floating-ip-address", help="Requested address"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
) -> None:
    """Allocate a floating IP from an external network."""

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        network_id = await resolve_id(session, find_network(network))
        port_id = await resolve_id(session, find_port(port)) if port else None
        endpoint = CreateFloatingIp(
            floating_network_id=network_id, port_id=port_id,
            floating_ip_address=floating_ip_address, description=description,
        )
        await output_one(session, cli, endpoint, FloatingIp)

    run_command(ctx, _create)


@floating_ip_app.command("set")
def set_floating_ip(
    ctx: typer.Context,
    floating_ip_id: str = typer.Argument(..., help="Floating IP ID"),
    port: Optional[str] = typer.Option(None, "--port", help="Associate with this port (ID or name)"),
    fixed_ip_address: Optional[str] = typer.Option(None, "--fixed-ip-address", help="Fixed IP of the port"),
    disassociate: bool = typer.Option(False, "--disassociate", help="Remove the port association"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
) -> None:
    """Associate a floating IP with a port, or disassociate it."""
    if port and disassociate:
        raise typer.BadParameter("--port and --disassociate are mutually exclusive")

    async def _set(session: AsyncOpenStack, cli: CliContext) -> None:
        port_id = await resolve_id(session, find_port(port)) if port else None
        endpoint = SetFloatingIp(
            id=floating_ip_id, port_id=port_id, fixed_ip_address=fixed_ip_address,
            description=description, disassociate=disassociate,
        )
        await output_one(session, cli, endpoint, FloatingIp)

    run_command(ctx, _set)


@floating_ip_app.command("delete")
def delete_floating_ip(ctx: typer.Context, floating_ip_ids: list[str] = typer.Argument(..., help="Floating IP IDs")) -> None:
    """Release floating IPs."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        for floating_ip_id in floating_ip_ids:
            await run_ignored(session, DeleteFloatingIp(id=floating_ip_id))
            cli.report(f"Deleted floating IP {floating_ip_id}")

    run_command(ctx, _delete)


# =============================================================================
# Quotas, extensions, agents
# =============================================================================


@quota_app.command("show")
def show_quota(
    ctx: typer.Context,
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Project (default: current project)"),
) -> None:
    """Show the network quota of a project."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        target = project_id or session.project_id
        if not target:
            raise ConfigError("The token is not project scoped: give --project-id")
        await output_one(session, cli, GetQuota(project_id=target), Quota)

    run_command(ctx, _show)


@extension_app.command("list")
def list_extensions(ctx: typer.Context) -> None:
    """List the API extensions of the network service."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_list(session, cli, ListExtensions(), Extension)

    run_command(ctx, _list)


@agent_app.command("list")
def list_agents(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, "--host", help="Agent host"),
    agent_type: Optional[str] = typer.Option(None, "--agent-type", help="e.g. 'Open vSwitch agent'"),
    alive: Optional[bool] = typer.Option(None, "--alive/--dead", help="Agent liveness"),
    max_items: Optional[int] = max_items_option(),
) -> None:
    """List network agents (admin)."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_list(session, cli, ListAgents(host=host, agent_type=agent_type, alive=alive), Agent, max_items)

    run_command(ctx, _list)
