"""
Container Infrastructure Commands.

Magnum clusters and cluster templates.
"""

from typing import Optional

import typer

from ostack.cli.context import (
    CliContext,
    delete_found,
    max_items_option,
    output_list,
    output_one,
    run_command,
)
from ostack.sdk.api.container_infra.clusters import (
    Cluster,
    ClusterTemplate,
    DeleteCluster,
    ListClusters,
    ListClusterTemplates,
    find_cluster,
    find_cluster_template,
)
from ostack.sdk.session import AsyncOpenStack

app = typer.Typer(help="Container infrastructure service (Magnum) commands")

cluster_app = typer.Typer(help="Clusters")
cluster_template_app = typer.Typer(help="Cluster templates")

app.add_typer(cluster_app, name="cluster")
app.add_typer(cluster_template_app, name="cluster-template")


@cluster_app.command("list")
def list_clusters(
    ctx: typer.Context,
    sort_key: Optional[str] = typer.Option(None, "--sort-key", help="Attribute to sort by"),
    sort_dir: Optional[str] = typer.Option(None, "--sort-dir", help="asc or desc"),
    max_items: Optional[int] = max_items_option(),
) -> None:
    """List clusters."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_list(session, cli, ListClusters(sort_key=sort_key, sort_dir=sort_dir), Cluster, max_items)

    run_command(ctx, _list)


@cluster_app.command("show")
def show_cluster(ctx: typer.Context, cluster: str = typer.Argument(..., help="Cluster UUID or name")) -> None:
    """Show cluster details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_cluster(cluster), Cluster)

    run_command(ctx, _show)


@cluster_app.command("delete")
def delete_cluster(ctx: typer.Context, clusters: list[str] = typer.Argument(..., help="Cluster UUIDs or names")) -> None:
    """Delete clusters."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(
            session, cli, clusters, find_cluster, lambda i: DeleteCluster(id=i), "cluster", key="uuid",
        )

    run_command(ctx, _delete)


@cluster_template_app.command("list")
def list_cluster_templates(
    ctx: typer.Context,
    max_items: Optional[int] = max_items_option(),
) -> None:
    """List cluster templates."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_list(session, cli, ListClusterTemplates(), ClusterTemplate, max_items)

    run_command(ctx, _list)


@cluster_template_app.command("show")
def show_cluster_template(
    ctx: typer.Context,
    template: str = typer.Argument(..., help="Cluster template UUID or name"),
) -> None:
    """Show cluster template details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_cluster_template(template), ClusterTemplate)

    run_command(ctx, _show)
