"""
Image Commands.

Glance v2 images: list, show, create (with optional data upload), update,
delete, and image data upload and download.
"""

from pathlib import Path
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
from ostack.sdk.api.image.images import (
    CreateImage,
    DeleteImage,
    DownloadImageData,
    GetImage,
    Image,
    ListImages,
    SetImage,
    UploadImageData,
    find_image,
)
from ostack.sdk.session import AsyncOpenStack

app = typer.Typer(help="Image service (Glance) commands")

image_app = typer.Typer(help="Images")
app.add_typer(image_app, name="image")


@image_app.command("list")
def list_images(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Image name"),
    status: Optional[str] = typer.Option(None, "--status", help="Image status (active, queued, ...)"),
    visibility: Optional[str] = typer.Option(None, "--visibility", help="public, private, shared, community or all"),
    owner: Optional[str] = typer.Option(None, "--owner", help="Owning project ID"),
    tag: Optional[list[str]] = typer.Option(None, "--tag", help="Images having this tag. Repeatable"),
    hidden: Optional[bool] = typer.Option(None, "--hidden/--no-hidden", help="Hidden images"),
    sort: Optional[str] = typer.Option(None, "--sort", help="Sort, e.g. name:asc,created_at:desc"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """
    List images.

    Examples:
        osc --os-cloud devstack image image list --visibility public
        osc --os-cloud devstack image image list --sort created_at:desc --max-items 5
    """

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListImages(
            name=name, status=status, visibility=visibility, owner=owner,
            tag=tag or None, os_hidden=hidden, sort=sort,
        )
        await output_list(session, cli, endpoint, Image, max_items, limit)

    run_command(ctx, _list)


@image_app.command("show")
def show_image(ctx: typer.Context, image: str = typer.Argument(..., help="Image ID or name")) -> None:
    """Show image details, custom properties included."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_image(image), Image)

    run_command(ctx, _show)


@image_app.command("create")
def create_image(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Image name"),
    disk_format: Optional[str] = typer.Option(None, "--disk-format", help="qcow2, raw, iso, ..."),
    container_format: Optional[str] = typer.Option(None, "--container-format", help="bare, ovf, ..."),
    file: Optional[Path] = typer.Option(None, "--file", exists=True, dir_okay=False, help="Image data to upload"),
    visibility: Optional[str] = typer.Option(None, "--visibility", help="public, private, shared or community"),
    protected: Optional[bool] = typer.Option(None, "--protected/--unprotected", help="Deletion protection"),
    min_disk: Optional[int] = typer.Option(None, "--min-disk", min=0, help="Minimum disk in GiB"),
    min_ram: Optional[int] = typer.Option(None, "--min-ram", min=0, help="Minimum RAM in MiB"),
    tag: Optional[list[str]] = typer.Option(None, "--tag", help="Tag. Repeatable"),
    property: Optional[list[str]] = typer.Option(None, "--property", help="Custom property KEY=value. Repeatable"),
) -> None:
    """
    Create an image, uploading its data when --file is given.

    Examples:
        osc --os-cloud devstack image image create cirros --disk-format qcow2 \\
            --container-format bare --file cirros.qcow2
    """
    properties = parse_properties(property)

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = CreateImage(
            name=name,
            disk_format=disk_format,
            container_format=container_format,
            visibility=visibility,
            protected=protected,
            min_disk=min_disk,
            min_ram=min_ram,
            tags=tag or None,
            properties=properties,
        )
        if file is None:
            await output_one(session, cli, endpoint, Image)
            return
        created = await endpoint.query(session)
        await run_ignored(session, UploadImageData(id=created["id"], file=str(file)))
        await output_one(session, cli, GetImage(id=created["id"]), Image)

    run_command(ctx, _create)


@image_app.command("set")
def set_image(
    ctx: typer.Context,
    image: str = typer.Argument(..., help="Image ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    visibility: Optional[str] = typer.Option(None, "--visibility", help="public, private, shared or community"),
    protected: Optional[bool] = typer.Option(None, "--protected/--unprotected", help="Deletion protection"),
    hidden: Optional[bool] = typer.Option(None, "--hidden/--unhidden", help="Hide from the default listing"),
    min_disk: Optional[int] = typer.Option(None, "--min-disk", min=0, help="Minimum disk in GiB"),
    min_ram: Optional[int] = typer.Option(None, "--min-ram", min=0, help="Minimum RAM in MiB"),
    tag: Optional[list[str]] = typer.Option(None, "--tag", help="Replace tags. Repeatable"),
    property: Optional[list[str]] = typer.Option(None, "--property", help="Set custom property KEY=value. Repeatable"),
    remove_property: Optional[list[str]] = typer.Option(None, "--remove-property", help="Remove custom property. Repeatable"),
) -> None:
    """Update image attributes and custom properties."""
    properties = parse_properties(property)

    async def _set(session: AsyncOpenStack, cli: CliContext) -> None:
        image_id = await resolve_id(session, find_image(image))
        endpoint = SetImage(
            id=image_id,
            name=name,
            visibility=visibility,
            protected=protected,
            os_hidden=hidden,
            min_disk=min_disk,
            min_ram=min_ram,
            tags=tag or None,
            properties=properties,
            remove_properties=remove_property or None,
        )
        await output_one(session, cli, endpoint, Image)

    run_command(ctx, _set)


@image_app.command("delete")
def delete_image(ctx: typer.Context, images: list[str] = typer.Argument(..., help="Image IDs or names")) -> None:
    """Delete images."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(session, cli, images, find_image, lambda i: DeleteImage(id=i), "image")

    run_command(ctx, _delete)


@image_app.command("upload")
def upload_image(
    ctx: typer.Context,
    image: str = typer.Argument(..., help="Image ID or name (status queued)"),
    file: Path = typer.Option(..., "--file", exists=True, dir_okay=False, help="Image data"),
) -> None:
    """Upload data into an existing image record."""

    async def _upload(session: AsyncOpenStack, cli: CliContext) -> None:
        image_id = await resolve_id(session, find_image(image))
        await run_ignored(session, UploadImageData(id=image_id, file=str(file)))
        cli.report(f"Uploaded {file} to image {image_id}")

    run_command(ctx, _upload)


@image_app.command("download")
def download_image(
    ctx: typer.Context,
    image: str = typer.Argument(..., help="Image ID or name"),
    file: Path = typer.Option(..., "--file", dir_okay=False, help="Destination file"),
) -> None:
    """Download the image data into a file."""

    async def _download(session: AsyncOpenStack, cli: CliContext) -> None:
        image_id = await resolve_id(session, find_image(image))
        with open(file, "wb") as sink:
            await DownloadImageData(id=image_id).download(session, sink)
        cli.report(f"Saved image {image_id} to {file}")

    run_command(ctx, _download)
