"""
Object Store Commands.

Swift account, containers and objects. Object names may contain "/".
"""

import mimetypes
from pathlib import Path
from typing import Optional

import typer

from ostack.cli.context import (
    CliContext,
    limit_option,
    max_items_option,
    output_list,
    output_one,
    run_command,
    run_ignored,
)
from ostack.sdk.api.object_store.objects import (
    Account,
    Container,
    ContainerInfo,
    CreateContainer,
    DeleteContainer,
    DeleteObject,
    DownloadObject,
    GetAccount,
    GetContainer,
    GetObject,
    ListContainers,
    ListObjects,
    ObjectInfo,
    StoredObject,
    UploadObject,
)
from ostack.sdk.api.paged import paged
from ostack.sdk.session import AsyncOpenStack

app = typer.Typer(help="Object store service (Swift) commands")

account_app = typer.Typer(help="Account")
container_app = typer.Typer(help="Containers")
object_app = typer.Typer(help="Objects")

app.add_typer(account_app, name="account")
app.add_typer(container_app, name="container")
app.add_typer(object_app, name="object")


@account_app.command("show")
def show_account(ctx: typer.Context) -> None:
    """Show account usage: container and object counts, bytes used."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, GetAccount(), Account)

    run_command(ctx, _show)


# =============================================================================
# Containers
# =============================================================================


@container_app.command("list")
def list_containers(
    ctx: typer.Context,
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Only containers starting with this prefix"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """List containers."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_list(session, cli, ListContainers(prefix=prefix), Container, max_items, limit)

    run_command(ctx, _list)


@container_app.command("show")
def show_container(ctx: typer.Context, container: str = typer.Argument(..., help="Container name")) -> None:
    """Show container metadata."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, GetContainer(container=container), ContainerInfo)

    run_command(ctx, _show)


@container_app.command("create")
def create_container(
    ctx: typer.Context,
    containers: list[str] = typer.Argument(..., help="Container names"),
    storage_policy: Optional[str] = typer.Option(None, "--storage-policy", help="Storage policy name"),
) -> None:
    """Create containers."""

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        for container in containers:
            await run_ignored(session, CreateContainer(container=container, storage_policy=storage_policy))
            cli.report(f"Created container {container}")

    run_command(ctx, _create)


@container_app.command("delete")
def delete_container(
    ctx: typer.Context,
    containers: list[str] = typer.Argument(..., help="Container names"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Delete the objects of the container first"),
) -> None:
    """Delete containers. A container must be empty unless --recursive is given."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        for container in containers:
            if recursive:
                for item in await paged(ListObjects(container=container)).query(session):
                    await run_ignored(session, DeleteObject(container=container, object_name=item["name"]))
            await run_ignored(session, DeleteContainer(container=container))
            cli.report(f"Deleted container {container}")

    run_command(ctx, _delete)


# =============================================================================
# Objects
# =============================================================================


@object_app.command("list")
def list_objects(
    ctx: typer.Context,
    container: str = typer.Argument(..., help="Container name"),
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Only objects starting with this prefix"),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", help="Roll up names into pseudo folders (/)"),
    max_items: Optional[int] = max_items_option(),
    limit: Optional[int] = limit_option(),
) -> None:
    """
    List the objects of a container.

    Examples:
        osc --os-cloud devstack object-store object list backups --prefix 2024/ --delimiter /
    """

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListObjects(container=container, prefix=prefix, delimiter=delimiter)
        await output_list(session, cli, endpoint, StoredObject, max_items, limit)

    run_command(ctx, _list)


@object_app.command("show")
def show_object(
    ctx: typer.Context,
    container: str = typer.Argument(..., help="Container name"),
    object_name: str = typer.Argument(..., help="Object name"),
) -> None:
    """Show object metadata."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, GetObject(container=container, object_name=object_name), ObjectInfo)

    run_command(ctx, _show)


@object_app.command("upload")
def upload_object(
    ctx: typer.Context,
    container: str = typer.Argument(..., help="Container name"),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Local file"),
    name: Optional[str] = typer.Option(None, "--name", help="Object name (default: the file name)"),
    content_type: Optional[str] = typer.Option(None, "--content-type", help="Content type (guessed when omitted)"),
) -> None:
    """Upload a file as an object."""
    object_name = name or file.name
    mime = content_type or mimetypes.guess_type(file.name)[0] or "application/octet-stream"

    async def _upload(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = UploadObject(container=container, object_name=object_name, file=str(file), content_type=mime)
        await run_ignored(session, endpoint)
        cli.report(f"Uploaded {file} to {container}/{object_name}")

    run_command(ctx, _upload)


@object_app.command("download")
def download_object(
    ctx: typer.Context,
    container: str = typer.Argument(..., help="Container name"),
    object_name: str = typer.Argument(..., help="Object name"),
    file: Optional[Path] = typer.Option(None, "--file", dir_okay=False, help="Destination (default: the object base name)"),
) -> None:
    """Download an object into a file."""
    target = file or Path(object_name.rsplit("/", 1)[-1])

    async def _download(session: AsyncOpenStack, cli: CliContext) -> None:
        with open(target, "wb") as sink:
            await DownloadObject(container=container, object_name=object_name).download(session, sink)
        cli.report(f"Saved {container}/{object_name} to {target}")

    run_command(ctx, _download)


@object_app.command("delete")
def delete_object(
    ctx: typer.Context,
    container: str = typer.Argument(..., help="Container name"),
    object_names: list[str] = typer.Argument(..., help="Object names"),
) -> None:
    """Delete objects."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        for object_name in object_names:
            await run_ignored(session, DeleteObject(container=container, object_name=object_name))
            cli.report(f"Deleted {container}/{object_name}")

    run_command(ctx, _delete)
