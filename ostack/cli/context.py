"""
CLI Context.

CliContext carries the global options of the `osc` callback (cloud
selection, output format, verbosity) to the commands through ctx.obj.
run_command() is the boundary every command goes through: it connects to
the cloud, runs the async handler, prints the request timings when asked
for and turns ApplicationError into "Error: <message>" with exit code 1.

Usage:
    @app.command("list")
    def list_networks(ctx: typer.Context) -> None:
        async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
            await output_list(session, cli, ListNetworks(), Network)

        run_command(ctx, _list)
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ostack.cli.output import OutputFormat, OutputProcessor
from ostack.core.config import get_app_config
from ostack.core.exceptions import ApplicationError, ConfigError
from ostack.core.logging import get_logger, log_with_source
from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint, ignore
from ostack.sdk.api.find import Findable, find
from ostack.sdk.api.paged import Pagination, paged
from ostack.sdk.config import AuthConfig, CloudConfig, ConfigFile
from ostack.sdk.session import AsyncOpenStack

logger = get_logger(__name__)

err_console = Console(stderr=True)

Handler = Callable[[AsyncOpenStack, "CliContext"], Awaitable[None]]


@dataclass
class CliContext:
    """Global options of the osc command."""

    os_cloud: str | None = None
    os_project_id: str | None = None
    os_project_name: str | None = None
    os_region_name: str | None = None
    os_client_config_file: str | None = None
    os_client_secure_file: str | None = None
    cloud_config_from_env: bool = False
    output: OutputFormat = OutputFormat.TABLE
    fields: list[str] = field(default_factory=list)
    pretty: bool = False
    verbosity: int = 0
    timing: bool = False
    console: Console = field(default_factory=Console)

    def load_config_file(self) -> ConfigFile:
        return ConfigFile.load(self.os_client_config_file, self.os_client_secure_file)

    def get_cloud_config(self) -> tuple[CloudConfig, bool]:
        """
        Resolve the cloud to connect to, with command line overrides applied.

        Returns:
            Tuple of (cloud config, whether the token cache is enabled)

        Raises:
            ConfigError: If neither --os-cloud nor --cloud-config-from-env is given
        """
        if self.cloud_config_from_env:
            config = CloudConfig.from_env()
            cache_enabled = True
        elif self.os_cloud:
            config_file = self.load_config_file()
            config = config_file.get_cloud_config(self.os_cloud)
            cache_enabled = config_file.is_auth_cache_enabled()
        else:
            raise ConfigError("Cloud is not selected: use --os-cloud or --cloud-config-from-env")

        if self.os_project_id or self.os_project_name:
            auth = config.auth or AuthConfig()
            auth.project_id = self.os_project_id
            auth.project_name = None if self.os_project_id else self.os_project_name
            config.auth = auth
        if self.os_region_name:
            config.region_name = self.os_region_name
        return config, cache_enabled

    async def connect(self, renew_auth: bool = False) -> AsyncOpenStack:
        config, cache_enabled = self.get_cloud_config()
        log_with_source(
            logger, "cli", "debug", "Connecting",
            cloud=self.os_cloud or "env", region=config.region_name,
        )
        return await AsyncOpenStack.connect(
            config, cache_enabled=cache_enabled, renew_auth=renew_auth,
        )

    def output_processor(self) -> OutputProcessor:
        return OutputProcessor(
            output=self.output,
            fields=self.fields,
            pretty=self.pretty,
            console=self.console,
            err_console=err_console,
        )

    def report(self, message: str) -> None:
        """Status line of a command without output (delete, actions); goes to stderr."""
        err_console.print(Text(message, style="green"))

    async def run(self, handler: Handler, renew_auth: bool = False) -> None:
        session = await self.connect(renew_auth)
        try:
            await handler(session, self)
        finally:
            if self.timing:
                print_timings(session.client.timing_summary())
            await session.close()


def get_cli_context(ctx: typer.Context) -> CliContext:
    """CliContext of the invocation (a default one when the callback did not run)."""
    root = ctx.find_root()
    if not isinstance(root.obj, CliContext):
        root.obj = CliContext()
    return root.obj


def print_timings(summary: list[tuple[str, str, int, float]]) -> None:
    table = Table(title="HTTP requests", show_header=True)
    table.add_column("Method", style="cyan")
    table.add_column("URL")
    table.add_column("Count", justify="right")
    table.add_column("Total (s)", justify="right")
    total_count = 0
    total_time = 0.0
    for method, url, count, elapsed in summary:
        table.add_row(method, url, str(count), f"{elapsed:.3f}")
        total_count += count
        total_time += elapsed
    table.add_row("", "[bold]Total[/bold]", str(total_count), f"{total_time:.3f}")
    err_console.print(table)


def run_command(ctx: typer.Context, handler: Handler, renew_auth: bool = False) -> None:
    """Run an async command handler against a connected session."""
    cli = get_cli_context(ctx)
    try:
        asyncio.run(cli.run(handler, renew_auth))
    except ApplicationError as e:
        log_with_source(logger, "cli", "error", "Command failed", error=e.message, code=e.code)
        err_console.print(Text(f"Error: {e.message}", style="red"))
        raise typer.Exit(1) from e


# =============================================================================
# Shared command bodies
# =============================================================================


def max_items_option() -> Any:
    return typer.Option(
        None, "--max-items", min=1,
        help="Maximum number of items to return (default from application.yaml)",
    )


def limit_option() -> Any:
    return typer.Option(None, "--limit", min=1, help="Page size requested from the service")


async def output_list(
    session: AsyncOpenStack,
    cli: CliContext,
    endpoint: RestEndpoint,
    model: type[ResourceRecord],
    max_items: int | None = None,
    page_size: int | None = None,
) -> list[Any]:
    """Fetch all pages of a listing (up to max_items) and print them."""
    listing = get_app_config().application.listing
    pagination = Pagination.limit(max_items or listing.max_items)
    data = await paged(endpoint, pagination, page_size=page_size or listing.page_size).query(session)
    cli.output_processor().output_list(data, model)
    return data


async def output_one(
    session: AsyncOpenStack,
    cli: CliContext,
    request: RestEndpoint | Findable,
    model: type[ResourceRecord],
) -> Any:
    """Run a show/create/set request (or a find) and print the resource."""
    if isinstance(request, Findable):
        data = await find(request).query(session)
    else:
        data = await request.query(session)
    cli.output_processor().output_single(data, model)
    return data


async def resolve_id(session: AsyncOpenStack, findable: Findable, key: str = "id") -> str:
    """Find a resource by id or name and return its id."""
    resource = await find(findable).query(session)
    return resource[key]


async def run_ignored(session: AsyncOpenStack, endpoint: RestEndpoint) -> None:
    """Run a request whose response body is not needed (delete, actions)."""
    await ignore(endpoint).query(session)


async def delete_found(
    session: AsyncOpenStack,
    cli: CliContext,
    refs: list[str],
    finder: Callable[[str], Findable],
    delete: Callable[[str], RestEndpoint],
    kind: str,
    key: str = "id",
) -> None:
    """Resolve each reference (id or name) and delete the resource."""
    for ref in refs:
        resource_id = await resolve_id(session, finder(ref), key)
        await run_ignored(session, delete(resource_id))
        cli.report(f"Deleted {kind} {resource_id}")
