"""
Block Storage Commands.

Volumes, snapshots, backups and volume types of Cinder v3.
"""

from typing import Optional

import typer

from ostack.cli.common import parse_properties
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
from ostack.sdk.api.block_storage.snapshots import (
    Backup,
    CreateBackup,
    CreateSnapshot,
    DeleteBackup,
    DeleteSnapshot,
    GetVolumeType,
    ListBackups,
    ListSnapshots,
    ListVolumeTypes,
    Snapshot,
    VolumeType,
    find_backup,
    find_snapshot,
)
from ostack.sdk.api.block_storage.volumes import (
    CreateVolume,
    DeleteVolume,
    ExtendVolume,
    ListVolumes,
    SetVolume,
    Volume,
    find_volume,
)
from ostack.sdk.api.image.images import find_image
from ostack.sdk.session import AsyncOpenStack

app = typer.Typer(help="Block storage service (Cinder) commands")

volume_app = typer.Typer(help="Volumes")
snapshot_app = typer.Typer(help="Volume snapshots")
backup_app = typer.Typer(help="Volume backups")
type_app = typer.Typer(help="Volume types")

app.add_typer(volume_app, name="volume")
app.add_typer(snapshot_app, name="snapshot")
app.add_typer(backup_app, name="backup")
app.add_typer(type_app, name="type")


# =============================================================================
# Volumes
# =============================================================================


@volume_app.command("list")
def list_volumes(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Volume name"),
    status: Optional[str] = typer.Option(None, "--status", help="Volume status (available, in-use, ...)"),
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Owning project (admin)"),
    all_projects: bool = typer.Option(False, "--all-projects", help="Volumes of all projects (admin)"),
    sort: Optional[str] = typer.Option(None, "--sort", help="Sort, e.g. created_at:desc"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List volumes."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListVolumes(
            name=name, status=status, project_id=project_id,
            all_tenants=all_projects or None, sort=sort,
        )
        await output_list(session, cli, endpoint, Volume, max_items, limit)

    run_command(ctx, _list)


@volume_app.command("show")
def show_volume(ctx: typer.Context, volume: str = typer.Argument(..., help="Volume ID or name")) -> None:
    """Show volume details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_volume(volume), Volume)

    run_command(ctx, _show)


@volume_app.command("create")
def create_volume(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Volume name"),
    size: Optional[int] = typer.Option(None, "--size", min=1, help="Size in GiB (required unless cloning)"),
    volume_type: Optional[str] = typer.Option(None, "--type", help="Volume type"),
    image: Optional[str] = typer.Option(None, "--image", help="Source image ID or name"),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help="Source snapshot ID or name"),
    source: Optional[str] = typer.Option(None, "--source", help="Source volume ID or name"),
    availability_zone: Optional[str] = typer.Option(None, "--availability-zone", help="Availability zone"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
    property: Optional[list[str]] = typer.Option(None, "--property", help="Metadata KEY=value. Repeatable"),
    multiattach: Optional[bool] = typer.Option(None, "--multiattach", help="Allow multiple attachments"),
) -> None:
    """
    Create a volume.

    Examples:
        osc --os-cloud devstack block-storage volume create data --size 10
        osc --os-cloud devstack block-storage volume create boot --size 5 --image cirros
    """
    if size is None and snapshot is None and source is None:
        raise typer.BadParameter("--size is required unless --snapshot or --source is given")
    metadata = parse_properties(property)

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = CreateVolume(
            name=name,
            size=size,
            volume_type=volume_type,
            image_ref=await resolve_id(session, find_image(image)) if image else None,
            snapshot_id=await resolve_id(session, find_snapshot(snapshot)) if snapshot else None,
            source_volid=await resolve_id(session, find_volume(source)) if source else None,
            availability_zone=availability_zone,
            description=description,
            metadata=metadata,
            multiattach=multiattach,
        )
        await output_one(session, cli, endpoint, Volume)

    run_command(ctx, _create)


@volume_app.command("set")
def set_volume(
    ctx: typer.Context,
    volume: str = typer.Argument(..., help="Volume ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
    property: Optional[list[str]] = typer.Option(None, "--property", help="Metadata KEY=value. Repeatable"),
) -> None:
    """Update volume name, description or metadata."""
    metadata = parse_properties(property)

    async def _set(session: AsyncOpenStack, cli: CliContext) -> None:
        volume_id = await resolve_id(session, find_volume(volume))
        endpoint = SetVolume(id=volume_id, name=name, description=description, metadata=metadata)
        await output_one(session, cli, endpoint, Volume)

    run_command(ctx, _set)


@volume_app.command("delete")
def delete_volume(
    ctx: typer.Context,
    volumes: list[str] = typer.Argument(..., help="Volume IDs or names"),
    purge: bool = typer.Option(False, "--purge", help="Delete the snapshots of the volume too"),
    force: bool = typer.Option(False, "--force", help="Delete regardless of state (admin)"),
) -> None:
    """Delete volumes."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(
            session, cli, volumes, find_volume,
            lambda i: DeleteVolume(id=i, cascade=purge or None, force=force or None),
            "volume",
        )

    run_command(ctx, _delete)


@volume_app.command("extend")
def extend_volume(
    ctx: typer.Context,
    volume: str = typer.Argument(..., help="Volume ID or name"),
    size: int = typer.Option(..., "--size", min=1, help="New size in GiB"),
) -> None:
    """Extend a volume to a larger size."""

    async def _extend(session: AsyncOpenStack, cli: CliContext) -> None:
        volume_id = await resolve_id(session, find_volume(volume))
        await run_ignored(session, ExtendVolume(id=volume_id, new_size=size))
        cli.report(f"Extending volume {volume_id} to {size} GiB")

    run_command(ctx, _extend)


# =============================================================================
# Snapshots
# =============================================================================


@snapshot_app.command("list")
def list_snapshots(
    ctx: typer.Context,
    volume: Optional[str] = typer.Option(None, "--volume", help="Volume ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="Snapshot name"),
    status: Optional[str] = typer.Option(None, "--status", help="Snapshot status"),
    all_projects: bool = typer.Option(False, "--all-projects", help="Snapshots of all projects (admin)"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List volume snapshots."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListSnapshots(
            volume_id=await resolve_id(session, find_volume(volume)) if volume else None,
            name=name, status=status, all_tenants=all_projects or None,
        )
        await output_list(session, cli, endpoint, Snapshot, max_items, limit)

    run_command(ctx, _list)


@snapshot_app.command("show")
def show_snapshot(ctx: typer.Context, snapshot: str = typer.Argument(..., help="Snapshot ID or name")) -> None:
    """Show snapshot details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_snapshot(snapshot), Snapshot)

    run_command(ctx, _show)


@snapshot_app.command("create")
def create_snapshot(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Snapshot name"),
    volume: str = typer.Option(..., "--volume", help="Volume ID or name"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
    force: bool = typer.Option(False, "--force", help="Snapshot an attached volume"),
    property: Optional[list[str]] = typer.Option(None, "--property", help="Metadata KEY=value. Repeatable"),
) -> None:
    """Create a volume snapshot."""
    metadata = parse_properties(property)

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = CreateSnapshot(
            volume_id=await resolve_id(session, find_volume(volume)),
            name=name, description=description, force=force or None, metadata=metadata,
        )
        await output_one(session, cli, endpoint, Snapshot)

    run_command(ctx, _create)


@snapshot_app.command("delete")
def delete_snapshot(ctx: typer.Context, snapshots: list[str] = typer.Argument(..., help="Snapshot IDs or names")) -> None:
    """Delete snapshots."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(session, cli, snapshots, find_snapshot, lambda i: DeleteSnapshot(id=i), "snapshot")

    run_command(ctx, _delete)


# =============================================================================
# Backups
# =============================================================================


@backup_app.command("list")
def list_backups(
    ctx: typer.Context,
    volume: Optional[str] = typer.Option(None, "--volume", help="Volume ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="Backup name"),
    status: Optional[str] = typer.Option(None, "--status", help="Backup status"),
    all_projects: bool = typer.Option(False, "--all-projects", help="Backups of all projects (admin)"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List volume backups."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListBackups(
            volume_id=await resolve_id(session, find_volume(volume)) if volume else None,
            name=name, status=status, all_tenants=all_projects or None,
        )
        await output_list(session, cli, endpoint, Backup, max_items, limit)

    run_command(ctx, _list)


@backup_app.command("show")
def show_backup(ctx: typer.Context, backup: str = typer.Argument(..., help="Backup ID or name")) -> None:
    """Show backup details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_backup(backup), Backup)

    run_command(ctx, _show)


@backup_app.command("create")
def create_backup(
    ctx: typer.Context,
    volume: str = typer.Argument(..., help="Volume ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="Backup name"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
    container: Optional[str] = typer.Option(None, "--container", help="Object storage container"),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help="Back up this snapshot of the volume"),
    incremental: bool = typer.Option(False, "--incremental", help="Incremental backup"),
    force: bool = typer.Option(False, "--force", help="Back up an attached volume"),
) -> None:
    """Create a volume backup."""

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = CreateBackup(
            volume_id=await resolve_id(session, find_volume(volume)),
            name=name,
            description=description,
            container=container,
            snapshot_id=await resolve_id(session, find_snapshot(snapshot)) if snapshot else None,
            incremental=incremental or None,
            force=force or None,
        )
        await output_one(session, cli, endpoint, Backup)

    run_command(ctx, _create)


@backup_app.command("delete")
def delete_backup(ctx: typer.Context, backups: list[str] = typer.Argument(..., help="Backup IDs or names")) -> None:
    """Delete backups."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(session, cli, backups, find_backup, lambda i: DeleteBackup(id=i), "backup")

    run_command(ctx, _delete)


# =============================================================================
# Volume types
# =============================================================================


@type_app.command("list")
def list_volume_types(
    ctx: typer.Context,
    public: Optional[bool] = typer.Option(None, "--public/--private", help="Filter by visibility (admin)"),
) -> None:
    """List volume types."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_list(session, cli, ListVolumeTypes(is_public=public), VolumeType)

    run_command(ctx, _list)


@type_app.command("show")
def show_volume_type(ctx: typer.Context, type_id: str = typer.Argument(..., help="Volume type ID")) -> None:
    """Show volume type details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, GetVolumeType(id=type_id), VolumeType)

    run_command(ctx, _show)
