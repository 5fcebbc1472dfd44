"""
Placement Commands.

Resource providers with their inventories and usages, and resource
classes. Inventories and usages are returned keyed by resource class and
printed as one row per class.
"""

from typing import Optional

import typer

from ostack.cli.context import CliContext, output_list, output_one, resolve_id, run_command
from ostack.sdk.api.placement.resource_providers import (
    Inventory,
    ListResourceClasses,
    ListResourceProviderInventories,
    ListResourceProviders,
    ListResourceProviderUsages,
    ResourceClass,
    ResourceProvider,
    Usage,
    find_resource_provider,
    keyed_to_rows,
)
from ostack.sdk.session import AsyncOpenStack

app = typer.Typer(help="Placement service commands")

resource_provider_app = typer.Typer(help="Resource providers")
resource_class_app = typer.Typer(help="Resource classes")

app.add_typer(resource_provider_app, name="resource-provider")
app.add_typer(resource_class_app, name="resource-class")


@resource_provider_app.command("list")
def list_resource_providers(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Provider name"),
    uuid: Optional[str] = typer.Option(None, "--uuid", help="Provider UUID"),
    in_tree: Optional[str] = typer.Option(None, "--in-tree", help="Providers in the tree of this provider"),
    resources: Optional[str] = typer.Option(None, "--resources", help="Capacity filter, e.g. VCPU:2,MEMORY_MB:512"),
    member_of: Optional[str] = typer.Option(None, "--member-of", help="Aggregate UUID, or in:<uuid>,<uuid>"),
) -> None:
    """
    List resource providers.

    Examples:
        osc --os-cloud devstack placement resource-provider list --resources VCPU:4
    """

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListResourceProviders(
            name=name, uuid=uuid, in_tree=in_tree, resources=resources, member_of=member_of,
        )
        await output_list(session, cli, endpoint, ResourceProvider)

    run_command(ctx, _list)


@resource_provider_app.command("show")
def show_resource_provider(
    ctx: typer.Context,
    provider: str = typer.Argument(..., help="Resource provider UUID or name"),
) -> None:
    """Show resource provider details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_resource_provider(provider), ResourceProvider)

    run_command(ctx, _show)


@resource_provider_app.command("inventory")
def list_inventories(
    ctx: typer.Context,
    provider: str = typer.Argument(..., help="Resource provider UUID or name"),
) -> None:
    """List the inventories of a resource provider."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        provider_uuid = await resolve_id(session, find_resource_provider(provider), key="uuid")
        data = await ListResourceProviderInventories(uuid=provider_uuid).query(session)
        cli.output_processor().output_list(keyed_to_rows(data), Inventory)

    run_command(ctx, _list)


@resource_provider_app.command("usage")
def list_usages(
    ctx: typer.Context,
    provider: str = typer.Argument(..., help="Resource provider UUID or name"),
) -> None:
    """Show the usages of a resource provider per resource class."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        provider_uuid = await resolve_id(session, find_resource_provider(provider), key="uuid")
        data = await ListResourceProviderUsages(uuid=provider_uuid).query(session)
        cli.output_processor().output_list(keyed_to_rows(data, value_key="usage"), Usage)

    run_command(ctx, _list)


@resource_class_app.command("list")
def list_resource_classes(ctx: typer.Context) -> None:
    """List resource classes, standard and custom."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_list(session, cli, ListResourceClasses(), ResourceClass)

    run_command(ctx, _list)
