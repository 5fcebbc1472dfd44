"""
Load Balancer Commands.

Octavia load balancers, listeners, pools, members, health monitors and
amphorae.
"""

from typing import Optional

import typer

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
from ostack.sdk.api.load_balancer.load_balancers import (
    Amphora,
    CreateHealthMonitor,
    CreateListener,
    CreateLoadBalancer,
    CreateMember,
    CreatePool,
    DeleteHealthMonitor,
    DeleteListener,
    DeleteLoadBalancer,
    DeleteMember,
    DeletePool,
    HealthMonitor,
    ListAmphorae,
    ListHealthMonitors,
    ListListeners,
    ListLoadBalancers,
    ListMembers,
    ListPools,
    Listener,
    LoadBalancer,
    Member,
    Pool,
    SetLoadBalancer,
    find_health_monitor,
    find_listener,
    find_load_balancer,
    find_member,
    find_pool,
)
from ostack.sdk.api.network.networks import find_network
from ostack.sdk.api.network.subnets import find_subnet
from ostack.sdk.session import AsyncOpenStack

app = typer.Typer(help="Load balancer service (Octavia) commands")

loadbalancer_app = typer.Typer(help="Load balancers")
listener_app = typer.Typer(help="Listeners")
pool_app = typer.Typer(help="Pools")
member_app = typer.Typer(help="Pool members")
healthmonitor_app = typer.Typer(help="Health monitors")
amphora_app = typer.Typer(help="Amphorae (admin)")

app.add_typer(loadbalancer_app, name="loadbalancer")
app.add_typer(listener_app, name="listener")
app.add_typer(pool_app, name="pool")
app.add_typer(member_app, name="member")
app.add_typer(healthmonitor_app, name="healthmonitor")
app.add_typer(amphora_app, name="amphora")


# =============================================================================
# Load balancers
# =============================================================================


@loadbalancer_app.command("list")
def list_load_balancers(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Load balancer name"),
    provisioning_status: Optional[str] = typer.Option(None, "--provisioning-status", help="ACTIVE, ERROR, ..."),
    operating_status: Optional[str] = typer.Option(None, "--operating-status", help="ONLINE, OFFLINE, ..."),
    vip_address: Optional[str] = typer.Option(None, "--vip-address", help="VIP address"),
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Owning project"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List load balancers."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListLoadBalancers(
            name=name, provisioning_status=provisioning_status, operating_status=operating_status,
            vip_address=vip_address, project_id=project_id,
        )
        await output_list(session, cli, endpoint, LoadBalancer, max_items, limit)

    run_command(ctx, _list)


@loadbalancer_app.command("show")
def show_load_balancer(ctx: typer.Context, load_balancer: str = typer.Argument(..., help="Load balancer ID or name")) -> None:
    """Show load balancer details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_load_balancer(load_balancer), LoadBalancer)

    run_command(ctx, _show)


@loadbalancer_app.command("create")
def create_load_balancer(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Load balancer name"),
    vip_subnet: Optional[str] = typer.Option(None, "--vip-subnet", help="VIP subnet ID or name"),
    vip_network: Optional[str] = typer.Option(None, "--vip-network", help="VIP network ID or name"),
    vip_address: Optional[str] = typer.Option(None, "--vip-address", help="Requested VIP address"),
    flavor_id: Optional[str] = typer.Option(None, "--flavor-id", help="Load balancer flavor ID"),
    provider: Optional[str] = typer.Option(None, "--provider", help="Provider driver (amphora, ovn, ...)"),
    availability_zone: Optional[str] = typer.Option(None, "--availability-zone", help="Availability zone"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
) -> None:
    """
    Create a load balancer.

    Examples:
        osc --os-cloud devstack load-balancer loadbalancer create lb1 --vip-subnet private-subnet
    """
    if vip_subnet is None and vip_network is None:
        raise typer.BadParameter("give --vip-subnet or --vip-network")

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = CreateLoadBalancer(
            name=name,
            vip_subnet_id=await resolve_id(session, find_subnet(vip_subnet)) if vip_subnet else None,
            vip_network_id=await resolve_id(session, find_network(vip_network)) if vip_network else None,
            vip_address=vip_address,
            flavor_id=flavor_id,
            provider=provider,
            availability_zone=availability_zone,
            description=description,
        )
        await output_one(session, cli, endpoint, LoadBalancer)

    run_command(ctx, _create)


@loadbalancer_app.command("set")
def set_load_balancer(
    ctx: typer.Context,
    load_balancer: str = typer.Argument(..., help="Load balancer ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
    enable: Optional[bool] = typer.Option(None, "--enable/--disable", help="Administrative state"),
) -> None:
    """Update load balancer properties."""

    async def _set(session: AsyncOpenStack, cli: CliContext) -> None:
        lb_id = await resolve_id(session, find_load_balancer(load_balancer))
        endpoint = SetLoadBalancer(id=lb_id, name=name, description=description, admin_state_up=enable)
        await output_one(session, cli, endpoint, LoadBalancer)

    run_command(ctx, _set)


@loadbalancer_app.command("delete")
def delete_load_balancer(
    ctx: typer.Context,
    load_balancers: list[str] = typer.Argument(..., help="Load balancer IDs or names"),
    cascade: bool = typer.Option(False, "--cascade", help="Delete listeners, pools and members too"),
) -> None:
    """Delete load balancers."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(
            session, cli, load_balancers, find_load_balancer,
            lambda i: DeleteLoadBalancer(id=i, cascade=cascade or None),
            "load balancer",
        )

    run_command(ctx, _delete)


# =============================================================================
# Listeners
# =============================================================================


@listener_app.command("list")
def list_listeners(
    ctx: typer.Context,
    load_balancer: Optional[str] = typer.Option(None, "--loadbalancer", help="Load balancer ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="Listener name"),
    protocol: Optional[str] = typer.Option(None, "--protocol", help="HTTP, HTTPS, TCP, UDP, ..."),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List listeners."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        lb_id = await resolve_id(session, find_load_balancer(load_balancer)) if load_balancer else None
        endpoint = ListListeners(loadbalancer_id=lb_id, name=name, protocol=protocol)
        await output_list(session, cli, endpoint, Listener, max_items, limit)

    run_command(ctx, _list)


@listener_app.command("show")
def show_listener(ctx: typer.Context, listener: str = typer.Argument(..., help="Listener ID or name")) -> None:
    """Show listener details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_listener(listener), Listener)

    run_command(ctx, _show)


@listener_app.command("create")
def create_listener(
    ctx: typer.Context,
    load_balancer: str = typer.Argument(..., help="Load balancer ID or name"),
    protocol: str = typer.Option(..., "--protocol", help="HTTP, HTTPS, TCP, UDP, TERMINATED_HTTPS, ..."),
    protocol_port: int = typer.Option(..., "--protocol-port", min=1, max=65535, help="Listening port"),
    name: Optional[str] = typer.Option(None, "--name", help="Listener name"),
    default_pool: Optional[str] = typer.Option(None, "--default-pool", help="Default pool ID or name"),
    connection_limit: Optional[int] = typer.Option(None, "--connection-limit", help="Max connections (-1: unlimited)"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
) -> None:
    """Create a listener on a load balancer."""

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = CreateListener(
            loadbalancer_id=await resolve_id(session, find_load_balancer(load_balancer)),
            protocol=protocol.upper(),
            protocol_port=protocol_port,
            name=name,
            default_pool_id=await resolve_id(session, find_pool(default_pool)) if default_pool else None,
            connection_limit=connection_limit,
            description=description,
        )
        await output_one(session, cli, endpoint, Listener)

    run_command(ctx, _create)


@listener_app.command("delete")
def delete_listener(ctx: typer.Context, listeners: list[str] = typer.Argument(..., help="Listener IDs or names")) -> None:
    """Delete listeners."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(session, cli, listeners, find_listener, lambda i: DeleteListener(id=i), "listener")

    run_command(ctx, _delete)


# =============================================================================
# Pools and members
# =============================================================================


@pool_app.command("list")
def list_pools(
    ctx: typer.Context,
    load_balancer: Optional[str] = typer.Option(None, "--loadbalancer", help="Load balancer ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="Pool name"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List pools."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        lb_id = await resolve_id(session, find_load_balancer(load_balancer)) if load_balancer else None
        await output_list(session, cli, ListPools(loadbalancer_id=lb_id, name=name), Pool, max_items, limit)

    run_command(ctx, _list)


@pool_app.command("show")
def show_pool(ctx: typer.Context, pool: str = typer.Argument(..., help="Pool ID or name")) -> None:
    """Show pool details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_pool(pool), Pool)

    run_command(ctx, _show)


@pool_app.command("create")
def create_pool(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Pool name"),
    protocol: str = typer.Option(..., "--protocol", help="HTTP, HTTPS, PROXY, TCP, UDP, ..."),
    lb_algorithm: str = typer.Option(
        "ROUND_ROBIN", "--lb-algorithm", help="ROUND_ROBIN, LEAST_CONNECTIONS or SOURCE_IP",
    ),
    listener: Optional[str] = typer.Option(None, "--listener", help="Listener ID or name"),
    load_balancer: Optional[str] = typer.Option(None, "--loadbalancer", help="Load balancer ID or name"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
) -> None:
    """Create a pool for a listener or a load balancer."""
    if listener is None and load_balancer is None:
        raise typer.BadParameter("give --listener or --loadbalancer")

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = CreatePool(
            name=name,
            protocol=protocol.upper(),
            lb_algorithm=lb_algorithm.upper(),
            listener_id=await resolve_id(session, find_listener(listener)) if listener else None,
            loadbalancer_id=await resolve_id(session, find_load_balancer(load_balancer)) if load_balancer else None,
            description=description,
        )
        await output_one(session, cli, endpoint, Pool)

    run_command(ctx, _create)


@pool_app.command("delete")
def delete_pool(ctx: typer.Context, pools: list[str] = typer.Argument(..., help="Pool IDs or names")) -> None:
    """Delete pools."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(session, cli, pools, find_pool, lambda i: DeletePool(id=i), "pool")

    run_command(ctx, _delete)


@member_app.command("list")
def list_members(
    ctx: typer.Context,
    pool: str = typer.Argument(..., help="Pool ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="Member name"),
    max_items: Optional[int] = max_items_option(),
) -> None:
    """List the members of a pool."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        pool_id = await resolve_id(session, find_pool(pool))
        await output_list(session, cli, ListMembers(pool_id=pool_id, name=name), Member, max_items)

    run_command(ctx, _list)


@member_app.command("show")
def show_member(
    ctx: typer.Context,
    pool: str = typer.Argument(..., help="Pool ID or name"),
    member: str = typer.Argument(..., help="Member ID or name"),
) -> None:
    """Show pool member details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        pool_id = await resolve_id(session, find_pool(pool))
        await output_one(session, cli, find_member(pool_id, member), Member)

    run_command(ctx, _show)


@member_app.command("create")
def create_member(
    ctx: typer.Context,
    pool: str = typer.Argument(..., help="Pool ID or name"),
    address: str = typer.Option(..., "--address", help="Member IP address"),
    protocol_port: int = typer.Option(..., "--protocol-port", min=1, max=65535, help="Member port"),
    name: Optional[str] = typer.Option(None, "--name", help="Member name"),
    subnet: Optional[str] = typer.Option(None, "--subnet", help="Member subnet ID or name"),
    weight: Optional[int] = typer.Option(None, "--weight", min=0, max=256, help="Relative weight"),
    backup: Optional[bool] = typer.Option(None, "--backup", help="Backup member"),
) -> None:
    """Add a member to a pool."""

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = CreateMember(
            pool_id=await resolve_id(session, find_pool(pool)),
            address=address,
            protocol_port=protocol_port,
            name=name,
            subnet_id=await resolve_id(session, find_subnet(subnet)) if subnet else None,
            weight=weight,
            backup=backup,
        )
        await output_one(session, cli, endpoint, Member)

    run_command(ctx, _create)


@member_app.command("delete")
def delete_member(
    ctx: typer.Context,
    pool: str = typer.Argument(..., help="Pool ID or name"),
    members: list[str] = typer.Argument(..., help="Member IDs or names"),
) -> None:
    """Remove members from a pool."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        pool_id = await resolve_id(session, find_pool(pool))
        for ref in members:
            member_id = await resolve_id(session, find_member(pool_id, ref))
            await run_ignored(session, DeleteMember(pool_id=pool_id, id=member_id))
            cli.report(f"Deleted member {member_id}")

    run_command(ctx, _delete)


# =============================================================================
# Health monitors
# =============================================================================


@healthmonitor_app.command("list")
def list_health_monitors(
    ctx: typer.Context,
    pool: Optional[str] = typer.Option(None, "--pool", help="Pool ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="Health monitor name"),
    max_items: Optional[int] = max_items_option(),
) -> None:
    """List health monitors."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        pool_id = await resolve_id(session, find_pool(pool)) if pool else None
        await output_list(session, cli, ListHealthMonitors(pool_id=pool_id, name=name), HealthMonitor, max_items)

    run_command(ctx, _list)


@healthmonitor_app.command("show")
def show_health_monitor(ctx: typer.Context, monitor: str = typer.Argument(..., help="Health monitor ID or name")) -> None:
    """Show health monitor details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_health_monitor(monitor), HealthMonitor)

    run_command(ctx, _show)


@healthmonitor_app.command("create")
def create_health_monitor(
    ctx: typer.Context,
    pool: str = typer.Argument(..., help="Pool ID or name"),
    monitor_type: str = typer.Option(..., "--type", help="HTTP, HTTPS, PING, TCP, TLS-HELLO, UDP-CONNECT"),
    delay: int = typer.Option(..., "--delay", min=1, help="Seconds between probes"),
    timeout: int = typer.Option(..., "--timeout", min=1, help="Probe timeout in seconds"),
    max_retries: int = typer.Option(..., "--max-retries", min=1, max=10, help="Failures before marking down"),
    name: Optional[str] = typer.Option(None, "--name", help="Health monitor name"),
    url_path: Optional[str] = typer.Option(None, "--url-path", help="HTTP probe path"),
    http_method: Optional[str] = typer.Option(None, "--http-method", help="HTTP probe method"),
    expected_codes: Optional[str] = typer.Option(None, "--expected-codes", help="e.g. 200 or 200-204"),
) -> None:
    """Create a health monitor for a pool."""

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = CreateHealthMonitor(
            pool_id=await resolve_id(session, find_pool(pool)),
            type=monitor_type.upper(),
            delay=delay,
            timeout=timeout,
            max_retries=max_retries,
            name=name,
            url_path=url_path,
            http_method=http_method,
            expected_codes=expected_codes,
        )
        await output_one(session, cli, endpoint, HealthMonitor)

    run_command(ctx, _create)


@healthmonitor_app.command("delete")
def delete_health_monitor(
    ctx: typer.Context,
    monitors: list[str] = typer.Argument(..., help="Health monitor IDs or names"),
) -> None:
    """Delete health monitors."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(
            session, cli, monitors, find_health_monitor, lambda i: DeleteHealthMonitor(id=i), "health monitor",
        )

    run_command(ctx, _delete)


@amphora_app.command("list")
def list_amphorae(
    ctx: typer.Context,
    load_balancer: Optional[str] = typer.Option(None, "--loadbalancer", help="Load balancer ID or name"),
    status: Optional[str] = typer.Option(None, "--status", help="Amphora status"),
    role: Optional[str] = typer.Option(None, "--role", help="MASTER, BACKUP or STANDALONE"),
    max_items: Optional[int] = max_items_option(),
) -> None:
    """List amphorae (admin)."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        lb_id = await resolve_id(session, find_load_balancer(load_balancer)) if load_balancer else None
        await output_list(session, cli, ListAmphorae(loadbalancer_id=lb_id, status=status, role=role), Amphora, max_items)

    run_command(ctx, _list)
