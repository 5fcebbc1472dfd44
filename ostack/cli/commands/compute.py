"""
Compute Commands.

Servers, flavors, keypairs, host aggregates, hypervisors, server groups,
quotas, limits and availability zones. Resources accept an ID or a name
wherever a reference is expected.
"""

import base64
from pathlib import Path
from typing import Optional

import typer

from ostack.cli.common import parse_csv, parse_properties
from ostack.cli.context import (
    CliContext,
    limit_option,
    max_items_option,
    output_list,
    output_one,
    resolve_id,
    run_command,
    run_ignored,
)
from ostack.core.exceptions import ConfigError
from ostack.sdk.api.compute.aggregates import (
    AddAggregateHost,
    Aggregate,
    CreateAggregate,
    DeleteAggregate,
    ListAggregates,
    RemoveAggregateHost,
    find_aggregate,
)
from ostack.sdk.api.compute.flavors import CreateFlavor, DeleteFlavor, Flavor, ListFlavors, find_flavor
from ostack.sdk.api.compute.hypervisors import GetHypervisor, Hypervisor, ListHypervisors
from ostack.sdk.api.compute.keypairs import CreateKeypair, DeleteKeypair, GetKeypair, Keypair, ListKeypairs
from ostack.sdk.api.compute.quotas import (
    AbsoluteLimits,
    AvailabilityZone,
    GetLimits,
    GetQuotaSet,
    Limits,
    ListAvailabilityZones,
    ListAvailabilityZonesDetail,
    QuotaSet,
)
from ostack.sdk.api.compute.server_groups import (
    CreateServerGroup,
    DeleteServerGroup,
    ListServerGroups,
    ServerGroup,
    find_server_group,
)
from ostack.sdk.api.compute.servers import (
    CreateServer,
    DeleteServer,
    ListServers,
    LockServer,
    PauseServer,
    RebootServer,
    RebootType,
    Server,
    ServerNetwork,
    SetServer,
    StartServer,
    StopServer,
    UnlockServer,
    UnpauseServer,
    find_server,
)
from ostack.sdk.api.image.images import find_image
from ostack.sdk.api.network.networks import find_network
from ostack.sdk.session import AsyncOpenStack

app = typer.Typer(help="Compute service (Nova) commands")

server_app = typer.Typer(help="Servers")
flavor_app = typer.Typer(help="Flavors")
keypair_app = typer.Typer(help="Keypairs")
aggregate_app = typer.Typer(help="Host aggregates")
hypervisor_app = typer.Typer(help="Hypervisors")
server_group_app = typer.Typer(help="Server groups")
quota_app = typer.Typer(help="Quota sets")
limits_app = typer.Typer(help="Absolute limits")
availability_zone_app = typer.Typer(help="Availability zones")

app.add_typer(server_app, name="server")
app.add_typer(flavor_app, name="flavor")
app.add_typer(keypair_app, name="keypair")
app.add_typer(aggregate_app, name="aggregate")
app.add_typer(hypervisor_app, name="hypervisor")
app.add_typer(server_group_app, name="server-group")
app.add_typer(quota_app, name="quota")
app.add_typer(limits_app, name="limits")
app.add_typer(availability_zone_app, name="availability-zone")


# =============================================================================
# Servers
# =============================================================================


@server_app.command("list")
def list_servers(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Regular expression matching server names"),
    status: Optional[str] = typer.Option(None, "--status", help="Server status (ACTIVE, SHUTOFF, ERROR, ...)"),
    host: Optional[str] = typer.Option(None, "--host", help="Compute host (admin)"),
    flavor: Optional[str] = typer.Option(None, "--flavor", help="Flavor ID"),
    image: Optional[str] = typer.Option(None, "--image", help="Image ID"),
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Project ID (admin)"),
    all_projects: bool = typer.Option(False, "--all-projects", help="Servers of all projects (admin)"),
    tags: Optional[str] = typer.Option(None, "--tags", help="Servers having all these tags (a,b)"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """
    List servers.

    Examples:
        osc --os-cloud devstack compute server list
        osc --os-cloud devstack -o wide compute server list --status ERROR --all-projects
    """

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListServers(
            name=name,
            status=status,
            host=host,
            flavor=flavor,
            image=image,
            project_id=project_id,
            all_tenants=all_projects or None,
            tags=parse_csv(tags) if tags else None,
        )
        await output_list(session, cli, endpoint, Server, max_items, limit)

    run_command(ctx, _list)


@server_app.command("show")
def show_server(
    ctx: typer.Context,
    server: str = typer.Argument(..., help="Server ID or name"),
) -> None:
    """Show server details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_server(server), Server)

    run_command(ctx, _show)


async def _server_networks(session: AsyncOpenStack, networks: list[str]) -> list[ServerNetwork] | str | None:
    if not networks:
        return None
    if len(networks) == 1 and networks[0] in ("auto", "none"):
        return networks[0]
    result = []
    for ref in networks:
        if ref.startswith("port="):
            result.append(ServerNetwork(port=ref.partition("=")[2]))
        else:
            result.append(ServerNetwork(uuid=await resolve_id(session, find_network(ref))))
    return result


@server_app.command("create")
def create_server(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the new server"),
    flavor: str = typer.Option(..., "--flavor", help="Flavor ID or name"),
    image: Optional[str] = typer.Option(None, "--image", help="Image ID or name"),
    network: Optional[list[str]] = typer.Option(
        None, "--network",
        help="Network ID or name, port=<port-id>, or auto/none. Repeat for more NICs",
    ),
    key_name: Optional[str] = typer.Option(None, "--key-name", help="Keypair to inject"),
    security_group: Optional[list[str]] = typer.Option(None, "--security-group", help="Security group name. Repeatable"),
    availability_zone: Optional[str] = typer.Option(None, "--availability-zone", help="Availability zone"),
    user_data: Optional[Path] = typer.Option(None, "--user-data", exists=True, dir_okay=False, help="User data file"),
    property: Optional[list[str]] = typer.Option(None, "--property", help="Metadata KEY=value. Repeatable"),
    description: Optional[str] = typer.Option(None, "--description", help="Server description"),
    min_count: Optional[int] = typer.Option(None, "--min", min=1, help="Minimum number of servers"),
    max_count: Optional[int] = typer.Option(None, "--max", min=1, help="Maximum number of servers"),
) -> None:
    """
    Create a server.

    Examples:
        osc --os-cloud devstack compute server create vm1 --flavor m1.small --image cirros --network private
    """
    metadata = parse_properties(property)
    encoded_user_data = base64.b64encode(user_data.read_bytes()).decode() if user_data else None

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        flavor_id = await resolve_id(session, find_flavor(flavor))
        image_id = await resolve_id(session, find_image(image)) if image else None
        endpoint = CreateServer(
            name=name,
            flavor_ref=flavor_id,
            image_ref=image_id,
            networks=await _server_networks(session, network or []),
            key_name=key_name,
            security_groups=[{"name": sg} for sg in security_group] if security_group else None,
            availability_zone=availability_zone,
            user_data=encoded_user_data,
            metadata=metadata,
            description=description,
            min_count=min_count,
            max_count=max_count,
        )
        await output_one(session, cli, endpoint, Server)

    run_command(ctx, _create)


@server_app.command("set")
def set_server(
    ctx: typer.Context,
    server: str = typer.Argument(..., help="Server ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
) -> None:
    """Update the server name or description."""
    if name is None and description is None:
        raise typer.BadParameter("nothing to update: give --name or --description")

    async def _set(session: AsyncOpenStack, cli: CliContext) -> None:
        server_id = await resolve_id(session, find_server(server))
        await output_one(session, cli, SetServer(id=server_id, name=name, description=description), Server)

    run_command(ctx, _set)


@server_app.command("delete")
def delete_server(
    ctx: typer.Context,
    servers: list[str] = typer.Argument(..., help="Server IDs or names"),
) -> None:
    """Delete servers."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        for ref in servers:
            server_id = await resolve_id(session, find_server(ref))
            await run_ignored(session, DeleteServer(id=server_id))
            cli.report(f"Deleted server {server_id}")

    run_command(ctx, _delete)


def _server_action(ctx: typer.Context, ref: str, build, verb: str) -> None:
    async def _action(session: AsyncOpenStack, cli: CliContext) -> None:
        server_id = await resolve_id(session, find_server(ref))
        await run_ignored(session, build(server_id))
        cli.report(f"{verb} server {server_id}")

    run_command(ctx, _action)


@server_app.command("start")
def start_server(ctx: typer.Context, server: str = typer.Argument(..., help="Server ID or name")) -> None:
    """Start a stopped server."""
    _server_action(ctx, server, lambda sid: StartServer(id=sid), "Started")


@server_app.command("stop")
def stop_server(ctx: typer.Context, server: str = typer.Argument(..., help="Server ID or name")) -> None:
    """Stop a running server."""
    _server_action(ctx, server, lambda sid: StopServer(id=sid), "Stopped")


@server_app.command("pause")
def pause_server(ctx: typer.Context, server: str = typer.Argument(..., help="Server ID or name")) -> None:
    """Pause a server."""
    _server_action(ctx, server, lambda sid: PauseServer(id=sid), "Paused")


@server_app.command("unpause")
def unpause_server(ctx: typer.Context, server: str = typer.Argument(..., help="Server ID or name")) -> None:
    """Unpause a server."""
    _server_action(ctx, server, lambda sid: UnpauseServer(id=sid), "Unpaused")


@server_app.command("lock")
def lock_server(
    ctx: typer.Context,
    server: str = typer.Argument(..., help="Server ID or name"),
    reason: Optional[str] = typer.Option(None, "--reason", help="Reason for locking"),
) -> None:
    """Lock a server against changes by non-admin users."""
    _server_action(ctx, server, lambda sid: LockServer(id=sid, locked_reason=reason), "Locked")


@server_app.command("unlock")
def unlock_server(ctx: typer.Context, server: str = typer.Argument(..., help="Server ID or name")) -> None:
    """Unlock a server."""
    _server_action(ctx, server, lambda sid: UnlockServer(id=sid), "Unlocked")


@server_app.command("reboot")
def reboot_server(
    ctx: typer.Context,
    server: str = typer.Argument(..., help="Server ID or name"),
    hard: bool = typer.Option(False, "--hard", help="Hard reboot (power cycle)"),
) -> None:
    """Reboot a server."""
    reboot_type = RebootType.HARD if hard else RebootType.SOFT
    _server_action(ctx, server, lambda sid: RebootServer(id=sid, reboot_type=reboot_type), "Rebooted")


# =============================================================================
# Flavors
# =============================================================================


@flavor_app.command("list")
def list_flavors(
    ctx: typer.Context,
    all_flavors: bool = typer.Option(False, "--all", help="Public and private flavors (admin)"),
    private: bool = typer.Option(False, "--private", help="Private flavors only (admin)"),
    min_ram: Optional[int] = typer.Option(None, "--min-ram", help="Minimum RAM in MiB"),
    min_disk: Optional[int] = typer.Option(None, "--min-disk", help="Minimum disk in GiB"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List flavors."""
    is_public = "None" if all_flavors else ("false" if private else None)

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListFlavors(is_public=is_public, min_ram=min_ram, min_disk=min_disk)
        await output_list(session, cli, endpoint, Flavor, max_items, limit)

    run_command(ctx, _list)


@flavor_app.command("show")
def show_flavor(ctx: typer.Context, flavor: str = typer.Argument(..., help="Flavor ID or name")) -> None:
    """Show flavor details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_flavor(flavor), Flavor)

    run_command(ctx, _show)


@flavor_app.command("create")
def create_flavor(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Flavor name"),
    ram: int = typer.Option(..., "--ram", min=1, help="Memory in MiB"),
    vcpus: int = typer.Option(..., "--vcpus", min=1, help="Number of vCPUs"),
    disk: int = typer.Option(0, "--disk", min=0, help="Root disk in GiB"),
    flavor_id: Optional[str] = typer.Option(None, "--id", help="Flavor ID (generated when omitted)"),
    swap: Optional[int] = typer.Option(None, "--swap", min=0, help="Swap in MiB"),
    ephemeral: Optional[int] = typer.Option(None, "--ephemeral", min=0, help="Ephemeral disk in GiB"),
    public: bool = typer.Option(True, "--public/--private", help="Flavor visibility"),
    description: Optional[str] = typer.Option(None, "--description", help="Flavor description"),
) -> None:
    """Create a flavor (admin)."""

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = CreateFlavor(
            name=name, ram=ram, vcpus=vcpus, disk=disk, id=flavor_id, swap=swap,
            ephemeral=ephemeral, is_public=public, description=description,
        )
        await output_one(session, cli, endpoint, Flavor)

    run_command(ctx, _create)


@flavor_app.command("delete")
def delete_flavor(ctx: typer.Context, flavors: list[str] = typer.Argument(..., help="Flavor IDs or names")) -> None:
    """Delete flavors (admin)."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        for ref in flavors:
            flavor_id = await resolve_id(session, find_flavor(ref))
            await run_ignored(session, DeleteFlavor(id=flavor_id))
            cli.report(f"Deleted flavor {flavor_id}")

    run_command(ctx, _delete)


# =============================================================================
# Keypairs
# =============================================================================


@keypair_app.command("list")
def list_keypairs(
    ctx: typer.Context,
    user_id: Optional[str] = typer.Option(None, "--user-id", help="Keypairs of another user (admin)"),
    max_items: Optional[int] = max_items_option(),
) -> None:
    """List keypairs."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_list(session, cli, ListKeypairs(user_id=user_id), Keypair, max_items)

    run_command(ctx, _list)


@keypair_app.command("show")
def show_keypair(ctx: typer.Context, name: str = typer.Argument(..., help="Keypair name")) -> None:
    """Show keypair details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, GetKeypair(name=name), Keypair)

    run_command(ctx, _show)


@keypair_app.command("create")
def create_keypair(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Keypair name"),
    public_key: Optional[Path] = typer.Option(
        None, "--public-key", exists=True, dir_okay=False,
        help="Public key file to import (a key pair is generated when omitted)",
    ),
    key_type: Optional[str] = typer.Option(None, "--type", help="ssh or x509"),
) -> None:
    """Create or import a keypair. A generated private key is part of the output."""
    key = public_key.read_text().strip() if public_key else None

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, CreateKeypair(name=name, public_key=key, type=key_type), Keypair)

    run_command(ctx, _create)


@keypair_app.command("delete")
def delete_keypair(ctx: typer.Context, names: list[str] = typer.Argument(..., help="Keypair names")) -> None:
    """Delete keypairs."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        for name in names:
            await run_ignored(session, DeleteKeypair(name=name))
            cli.report(f"Deleted keypair {name}")

    run_command(ctx, _delete)


# =============================================================================
# Host aggregates
# =============================================================================


@aggregate_app.command("list")
def list_aggregates(ctx: typer.Context, max_items: Optional[int] = max_items_option()) -> None:
    """List host aggregates (admin)."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_list(session, cli, ListAggregates(), Aggregate, max_items)

    run_command(ctx, _list)


@aggregate_app.command("show")
def show_aggregate(ctx: typer.Context, aggregate: str = typer.Argument(..., help="Aggregate ID or name")) -> None:
    """Show aggregate details (admin)."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_aggregate(aggregate), Aggregate)

    run_command(ctx, _show)


@aggregate_app.command("create")
def create_aggregate(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Aggregate name"),
    zone: Optional[str] = typer.Option(None, "--zone", help="Availability zone name"),
) -> None:
    """Create a host aggregate (admin)."""

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, CreateAggregate(name=name, availability_zone=zone), Aggregate)

    run_command(ctx, _create)


@aggregate_app.command("delete")
def delete_aggregate(ctx: typer.Context, aggregates: list[str] = typer.Argument(..., help="Aggregate IDs or names")) -> None:
    """Delete host aggregates (admin)."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        for ref in aggregates:
            aggregate_id = await resolve_id(session, find_aggregate(ref))
            await run_ignored(session, DeleteAggregate(id=str(aggregate_id)))
            cli.report(f"Deleted aggregate {aggregate_id}")

    run_command(ctx, _delete)


@aggregate_app.command("add-host")
def add_aggregate_host(
    ctx: typer.Context,
    aggregate: str = typer.Argument(..., help="Aggregate ID or name"),
    host: str = typer.Argument(..., help="Compute host name"),
) -> None:
    """Add a host to an aggregate (admin)."""

    async def _add(session: AsyncOpenStack, cli: CliContext) -> None:
        aggregate_id = await resolve_id(session, find_aggregate(aggregate))
        await output_one(session, cli, AddAggregateHost(id=str(aggregate_id), host=host), Aggregate)

    run_command(ctx, _add)


@aggregate_app.command("remove-host")
def remove_aggregate_host(
    ctx: typer.Context,
    aggregate: str = typer.Argument(..., help="Aggregate ID or name"),
    host: str = typer.Argument(..., help="Compute host name"),
) -> None:
    """Remove a host from an aggregate (admin)."""

    async def _remove(session: AsyncOpenStack, cli: CliContext) -> None:
        aggregate_id = await resolve_id(session, find_aggregate(aggregate))
        await output_one(session, cli, RemoveAggregateHost(id=str(aggregate_id), host=host), Aggregate)

    run_command(ctx, _remove)


# =============================================================================
# Hypervisors
# =============================================================================


@hypervisor_app.command("list")
def list_hypervisors(
    ctx: typer.Context,
    matching: Optional[str] = typer.Option(None, "--matching", help="Hypervisor hostname pattern"),
    with_servers: bool = typer.Option(False, "--with-servers", help="Include the servers of each hypervisor"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List hypervisors (admin)."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListHypervisors(hypervisor_hostname_pattern=matching, with_servers=with_servers or None)
        await output_list(session, cli, endpoint, Hypervisor, max_items, limit)

    run_command(ctx, _list)


@hypervisor_app.command("show")
def show_hypervisor(ctx: typer.Context, hypervisor_id: str = typer.Argument(..., help="Hypervisor ID")) -> None:
    """Show hypervisor details (admin)."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, GetHypervisor(id=hypervisor_id), Hypervisor)

    run_command(ctx, _show)


# =============================================================================
# Server groups
# =============================================================================


@server_group_app.command("list")
def list_server_groups(
    ctx: typer.Context,
    all_projects: bool = typer.Option(False, "--all-projects", help="Server groups of all projects (admin)"),
    max_items: Optional[int] = max_items_option(),
) -> None:
    """List server groups."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_list(session, cli, ListServerGroups(all_projects=all_projects or None), ServerGroup, max_items)

    run_command(ctx, _list)


@server_group_app.command("show")
def show_server_group(ctx: typer.Context, group: str = typer.Argument(..., help="Server group ID or name")) -> None:
    """Show server group details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_server_group(group), ServerGroup)

    run_command(ctx, _show)


@server_group_app.command("create")
def create_server_group(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Server group name"),
    policy: str = typer.Option(
        "anti-affinity", "--policy",
        help="affinity, anti-affinity, soft-affinity or soft-anti-affinity",
    ),
    max_server_per_host: Optional[int] = typer.Option(
        None, "--max-server-per-host", min=1, help="Rule for the anti-affinity policy",
    ),
) -> None:
    """Create a server group."""
    rules = {"max_server_per_host": max_server_per_host} if max_server_per_host else None

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, CreateServerGroup(name=name, policy=policy, rules=rules), ServerGroup)

    run_command(ctx, _create)


@server_group_app.command("delete")
def delete_server_group(ctx: typer.Context, groups: list[str] = typer.Argument(..., help="Server group IDs or names")) -> None:
    """Delete server groups."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        for ref in groups:
            group_id = await resolve_id(session, find_server_group(ref))
            await run_ignored(session, DeleteServerGroup(id=group_id))
            cli.report(f"Deleted server group {group_id}")

    run_command(ctx, _delete)


# =============================================================================
# Quotas, limits, availability zones
# =============================================================================


def _project_or_current(session: AsyncOpenStack, project_id: str | None) -> str:
    project_id = project_id or session.project_id
    if not project_id:
        raise ConfigError("The token is not project scoped: give --project-id")
    return project_id


@quota_app.command("show")
def show_quota(
    ctx: typer.Context,
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Project (default: current project)"),
    user_id: Optional[str] = typer.Option(None, "--user-id", help="Quota of a user in the project"),
) -> None:
    """Show the compute quota set of a project."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = GetQuotaSet(project_id=_project_or_current(session, project_id), user_id=user_id)
        await output_one(session, cli, endpoint, QuotaSet)

    run_command(ctx, _show)


@limits_app.command("show")
def show_limits(
    ctx: typer.Context,
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Limits of another project (admin)"),
) -> None:
    """Show absolute compute limits and usage."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        data = await GetLimits(project_id=project_id).query(session)
        limits = Limits.model_validate(data or {})
        cli.output_processor().output_single(limits.absolute, AbsoluteLimits)

    run_command(ctx, _show)


@availability_zone_app.command("list")
def list_availability_zones(
    ctx: typer.Context,
    long: bool = typer.Option(False, "--long", help="Include hosts and services (admin)"),
) -> None:
    """List availability zones."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListAvailabilityZonesDetail() if long else ListAvailabilityZones()
        await output_list(session, cli, endpoint, AvailabilityZone)

    run_command(ctx, _list)
