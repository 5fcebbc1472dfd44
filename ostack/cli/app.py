"""
osc - OpenStack command line client.

Built with Typer for type-safe commands and Rich for formatted output.
One command group per service, one sub-group per resource.

Usage:
    osc --help
    osc --os-cloud devstack compute server list
    osc --os-cloud devstack -o json network network show private
    osc --os-cloud devstack -f id -f name image image list --max-items 20
    osc --cloud-config-from-env auth login
    osc --os-cloud devstack api compute /servers/detail -m GET
    osc system clouds

Options:
    --os-cloud              Cloud from clouds.yaml (env OS_CLOUD)
    --cloud-config-from-env Build the cloud from OS_* variables
    -o, --output            table | wide | json | yaml
    -f, --fields            Columns to show (repeatable)
    -v, --verbose           -v info logs, -vv debug logs on stderr
    --timing                Print HTTP request timings at exit
"""

from typing import Optional

import typer
from rich.console import Console

from ostack.cli.commands import (
    api_command,
    auth_app,
    block_storage_app,
    catalog_app,
    compute_app,
    container_infra_app,
    dns_app,
    identity_app,
    image_app,
    load_balancer_app,
    network_app,
    object_store_app,
    placement_app,
    system_app,
)
from ostack.cli.context import CliContext, err_console
from ostack.cli.output import OutputFormat
from ostack.core.logging import setup_logging

app = typer.Typer(
    name="osc",
    help="OpenStack command line client.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

app.add_typer(auth_app, name="auth")
app.add_typer(catalog_app, name="catalog")
app.command(name="api")(api_command)
app.add_typer(block_storage_app, name="block-storage")
app.add_typer(compute_app, name="compute")
app.add_typer(container_infra_app, name="container-infrastructure")
app.add_typer(dns_app, name="dns")
app.add_typer(identity_app, name="identity")
app.add_typer(image_app, name="image")
app.add_typer(load_balancer_app, name="load-balancer")
app.add_typer(network_app, name="network")
app.add_typer(object_store_app, name="object-store")
app.add_typer(placement_app, name="placement")
app.add_typer(system_app, name="system")


def configure_logging(verbosity: int, debug: bool) -> None:
    """File logging per logging.yaml; -v adds info and -vv debug output on stderr."""
    if debug or verbosity >= 2:
        setup_logging(level="DEBUG", enable_console=True)
    elif verbosity == 1:
        setup_logging(level="INFO", enable_console=True)
    else:
        setup_logging()


@app.callback()
def main_callback(
    ctx: typer.Context,
    os_cloud: Optional[str] = typer.Option(
        None, "--os-cloud", envvar="OS_CLOUD", help="Name of the cloud in clouds.yaml",
    ),
    os_project_id: Optional[str] = typer.Option(
        None, "--os-project-id", help="Project ID to scope the token to",
    ),
    os_project_name: Optional[str] = typer.Option(
        None, "--os-project-name", help="Project name to scope the token to",
    ),
    os_region_name: Optional[str] = typer.Option(
        None, "--os-region-name", help="Region of the service endpoints",
    ),
    os_client_config_file: Optional[str] = typer.Option(
        None, "--os-client-config-file", help="Additional clouds.yaml file",
    ),
    os_client_secure_file: Optional[str] = typer.Option(
        None, "--os-client-secure-file", help="Additional secure.yaml file",
    ),
    cloud_config_from_env: bool = typer.Option(
        False, "--cloud-config-from-env", help="Use OS_* environment variables instead of clouds.yaml",
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE, "--output", "-o", case_sensitive=False, help="Output format",
    ),
    fields: Optional[list[str]] = typer.Option(
        None, "--fields", "-f", help="Fields (columns) to show. Repeat for more",
    ),
    pretty: bool = typer.Option(False, "--pretty", help="Indent JSON output"),
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="Increase log verbosity (-v info, -vv debug)",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    timing: bool = typer.Option(False, "--timing", help="Print HTTP request timings"),
) -> None:
    """
    OpenStack command line client.

    Commands talk to the services of the selected cloud and print the
    results as a table, JSON or YAML.
    """
    configure_logging(verbose, debug)

    ctx.obj = CliContext(
        os_cloud=os_cloud,
        os_project_id=os_project_id,
        os_project_name=os_project_name,
        os_region_name=os_region_name,
        os_client_config_file=os_client_config_file,
        os_client_secure_file=os_client_secure_file,
        cloud_config_from_env=cloud_config_from_env,
        output=output,
        fields=fields or [],
        pretty=pretty,
        verbosity=2 if debug else verbose,
        timing=timing,
        console=console,
    )
    if debug:
        err_console.print("[dim]Debug mode enabled[/dim]")


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
