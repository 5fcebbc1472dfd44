"""
DNS Commands.

Designate zones and recordsets. Zone names are fully qualified and end
with a dot ("example.com.").
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
from ostack.sdk.api.dns.zones import (
    CreateRecordset,
    CreateZone,
    DeleteRecordset,
    DeleteZone,
    ListRecordsets,
    ListZones,
    Recordset,
    SetZone,
    Zone,
    find_recordset,
    find_zone,
)
from ostack.sdk.session import AsyncOpenStack

app = typer.Typer(help="DNS service (Designate) commands")

zone_app = typer.Typer(help="Zones")
recordset_app = typer.Typer(help="Recordsets")

app.add_typer(zone_app, name="zone")
app.add_typer(recordset_app, name="recordset")


@zone_app.command("list")
def list_zones(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Zone name"),
    zone_type: Optional[str] = typer.Option(None, "--type", help="PRIMARY or SECONDARY"),
    status: Optional[str] = typer.Option(None, "--status", help="ACTIVE, PENDING or ERROR"),
    email: Optional[str] = typer.Option(None, "--email", help="Zone e-mail"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List zones."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListZones(name=name, type=zone_type, status=status, email=email)
        await output_list(session, cli, endpoint, Zone, max_items, limit)

    run_command(ctx, _list)


@zone_app.command("show")
def show_zone(ctx: typer.Context, zone: str = typer.Argument(..., help="Zone ID or name")) -> None:
    """Show zone details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_zone(zone), Zone)

    run_command(ctx, _show)


@zone_app.command("create")
def create_zone(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Zone name, e.g. example.com."),
    email: Optional[str] = typer.Option(None, "--email", help="Zone owner e-mail (PRIMARY zones)"),
    zone_type: Optional[str] = typer.Option(None, "--type", help="PRIMARY or SECONDARY"),
    ttl: Optional[int] = typer.Option(None, "--ttl", min=1, help="Default TTL"),
    master: Optional[list[str]] = typer.Option(None, "--master", help="Master server (SECONDARY zones). Repeatable"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
) -> None:
    """
    Create a zone.

    Examples:
        osc --os-cloud devstack dns zone create example.com. --email admin@example.com
    """

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = CreateZone(
            name=name, email=email, type=zone_type.upper() if zone_type else None,
            ttl=ttl, masters=master or None, description=description,
        )
        await output_one(session, cli, endpoint, Zone)

    run_command(ctx, _create)


@zone_app.command("set")
def set_zone(
    ctx: typer.Context,
    zone: str = typer.Argument(..., help="Zone ID or name"),
    email: Optional[str] = typer.Option(None, "--email", help="New e-mail"),
    ttl: Optional[int] = typer.Option(None, "--ttl", min=1, help="New default TTL"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
) -> None:
    """Update zone properties."""

    async def _set(session: AsyncOpenStack, cli: CliContext) -> None:
        zone_id = await resolve_id(session, find_zone(zone))
        await output_one(session, cli, SetZone(id=zone_id, email=email, ttl=ttl, description=description), Zone)

    run_command(ctx, _set)


@zone_app.command("delete")
def delete_zone(ctx: typer.Context, zones: list[str] = typer.Argument(..., help="Zone IDs or names")) -> None:
    """Delete zones."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(session, cli, zones, find_zone, lambda i: DeleteZone(id=i), "zone")

    run_command(ctx, _delete)


@recordset_app.command("list")
def list_recordsets(
    ctx: typer.Context,
    zone: str = typer.Argument(..., help="Zone ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="Recordset name"),
    record_type: Optional[str] = typer.Option(None, "--type", help="A, AAAA, CNAME, MX, TXT, ..."),
    data: Optional[str] = typer.Option(None, "--data", help="Record data"),
    status: Optional[str] = typer.Option(None, "--status", help="Recordset status"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List the recordsets of a zone."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        zone_id = await resolve_id(session, find_zone(zone))
        endpoint = ListRecordsets(
            zone_id=zone_id, name=name, type=record_type.upper() if record_type else None,
            data=data, status=status,
        )
        await output_list(session, cli, endpoint, Recordset, max_items, limit)

    run_command(ctx, _list)


@recordset_app.command("show")
def show_recordset(
    ctx: typer.Context,
    zone: str = typer.Argument(..., help="Zone ID or name"),
    recordset: str = typer.Argument(..., help="Recordset ID or name"),
) -> None:
    """Show recordset details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        zone_id = await resolve_id(session, find_zone(zone))
        await output_one(session, cli, find_recordset(zone_id, recordset), Recordset)

    run_command(ctx, _show)


@recordset_app.command("create")
def create_recordset(
    ctx: typer.Context,
    zone: str = typer.Argument(..., help="Zone ID or name"),
    name: str = typer.Argument(..., help="Recordset name, e.g. www.example.com."),
    record_type: str = typer.Option(..., "--type", help="A, AAAA, CNAME, MX, TXT, ..."),
    record: list[str] = typer.Option(..., "--record", help="Record data. Repeatable"),
    ttl: Optional[int] = typer.Option(None, "--ttl", min=1, help="TTL"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
) -> None:
    """
    Create a recordset.

    Examples:
        osc --os-cloud devstack dns recordset create example.com. www.example.com. --type A --record 192.0.2.10
    """

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        zone_id = await resolve_id(session, find_zone(zone))
        endpoint = CreateRecordset(
            zone_id=zone_id, name=name, type=record_type.upper(), records=record,
            ttl=ttl, description=description,
        )
        await output_one(session, cli, endpoint, Recordset)

    run_command(ctx, _create)


@recordset_app.command("delete")
def delete_recordset(
    ctx: typer.Context,
    zone: str = typer.Argument(..., help="Zone ID or name"),
    recordsets: list[str] = typer.Argument(..., help="Recordset IDs or names"),
) -> None:
    """Delete recordsets."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        zone_id = await resolve_id(session, find_zone(zone))
        for ref in recordsets:
            recordset_id = await resolve_id(session, find_recordset(zone_id, ref))
            await run_ignored(session, DeleteRecordset(zone_id=zone_id, id=recordset_id))
            cli.report(f"Deleted recordset {recordset_id}")

    run_command(ctx, _delete)
