"""
Catalog Commands.

Show the service catalog returned with the token.
"""

from typing import ClassVar, Optional

import typer

from ostack.cli.context import CliContext, run_command
from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.service_authority import get_service_authority
from ostack.sdk.session import AsyncOpenStack

app = typer.Typer(help="Service catalog commands")


class CatalogEndpoint(ResourceRecord):
    view_key: ClassVar[str] = "catalog.endpoint"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"id"})

    type: str
    name: str | None = None
    interface: str | None = None
    region: str | None = None
    url: str | None = None
    id: str | None = None


def flatten_catalog(
    catalog: list[dict],
    service_type: str | None = None,
    interface: str | None = None,
) -> list[dict]:
    """One row per endpoint of each catalog service."""
    authority = get_service_authority()
    official = authority.get_official_type(service_type) if service_type else None
    rows = []
    for service in catalog:
        srv_type = service.get("type", "")
        if official and authority.get_official_type(srv_type) != official:
            continue
        for endpoint in service.get("endpoints") or []:
            if interface and endpoint.get("interface") != interface:
                continue
            rows.append({
                "type": srv_type,
                "name": service.get("name"),
                "interface": endpoint.get("interface"),
                "region": endpoint.get("region_id") or endpoint.get("region"),
                "url": endpoint.get("url"),
                "id": endpoint.get("id"),
            })
    return rows


@app.command("list")
def list_catalog(
    ctx: typer.Context,
    service_type: Optional[str] = typer.Option(None, "--service-type", help="Only this service type (aliases accepted)"),
    interface: Optional[str] = typer.Option(None, "--interface", help="Only this interface (public, internal, admin)"),
) -> None:
    """
    List the endpoints of the token catalog.

    Examples:
        osc --os-cloud devstack catalog list
        osc --os-cloud devstack catalog list --service-type volumev3
    """

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        rows = flatten_catalog(session.get_token_catalog(), service_type, interface)
        cli.output_processor().output_list(rows, CatalogEndpoint)

    run_command(ctx, _list)
