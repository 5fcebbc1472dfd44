"""
Raw API Command.

Send an arbitrary request to a service endpoint of the selected cloud. The
URL is relative to the service endpoint from the catalog (version
discovery applies), the token is added automatically.

Examples:
    osc --os-cloud devstack api compute servers/detail
    osc --os-cloud devstack api network v2.0/networks -m POST --body '{"network": {"name": "n1"}}'
    osc --os-cloud devstack api compute os-hypervisors --microversion 2.53
"""

from enum import Enum
from typing import Optional

import typer

from ostack.cli.common import parse_json, parse_key_val
from ostack.cli.context import CliContext, run_command
from ostack.sdk.api.endpoint import check_response_error
from ostack.sdk.params import json_body
from ostack.sdk.service_authority import get_service_authority
from ostack.sdk.session import AsyncOpenStack
from ostack.sdk.types import ApiVersion


class HttpMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


def api_command(
    ctx: typer.Context,
    service: str = typer.Argument(..., help="Service type or alias (compute, network, volumev3, ...)"),
    url: str = typer.Argument(..., help="URL relative to the service endpoint"),
    method: HttpMethod = typer.Option(HttpMethod.GET, "--method", "-m", case_sensitive=False, help="HTTP method"),
    header: Optional[list[str]] = typer.Option(None, "--header", "-H", help="Request header KEY=value"),
    body: Optional[str] = typer.Option(None, "--body", help="JSON request body"),
    microversion: Optional[str] = typer.Option(None, "--microversion", help="API microversion to request"),
) -> None:
    """
    Perform a raw API request and print the JSON response.
    """
    headers = {"Accept": "application/json"}
    headers.update(parse_key_val(h) for h in header or [])
    payload = parse_json(body) if body is not None else None
    if microversion:
        try:
            official = get_service_authority().get_official_type(service)
            headers.update(ApiVersion.from_str(microversion).microversion_headers(official))
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--microversion") from e

    async def _api(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = await session.get_service_endpoint(service)
        path, _, query = url.partition("?")
        request_url = endpoint.build_request_url(path)
        if query:
            request_url = f"{request_url}?{query}"

        content = None
        if payload is not None:
            headers["Content-Type"], content = json_body(payload)

        response = await session.rest(method.value, request_url, headers=headers, content=content)
        check_response_error(response)
        if not response.content:
            return
        try:
            data = response.json()
        except ValueError:
            cli.console.out(response.text)
            return
        cli.output_processor().output_raw(data)

    run_command(ctx, _api)
