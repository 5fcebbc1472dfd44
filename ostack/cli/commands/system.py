"""
System Commands.

Commands for local information: configured clouds, application settings
and the version. None of them contacts a cloud.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from ostack.cli.context import err_console, get_cli_context
from ostack.core.config import get_app_config, get_config_dir
from ostack.core.exceptions import ApplicationError

app = typer.Typer(help="Local configuration and version commands")
console = Console()


@app.command()
def clouds(ctx: typer.Context) -> None:
    """
    List the clouds defined in clouds.yaml.

    Shows the auth URL, region and auth type of each cloud. Secrets are
    never printed.
    """
    cli = get_cli_context(ctx)
    try:
        config_file = cli.load_config_file()
        table = Table(title="Clouds", show_header=True)
        table.add_column("Name", style="cyan")
        table.add_column("Auth URL")
        table.add_column("Region")
        table.add_column("Auth type")
        for name in config_file.get_available_clouds():
            cloud = config_file.get_cloud_config(name)
            auth_url = cloud.auth.auth_url if cloud.auth else None
            table.add_row(name, auth_url or "-", cloud.region_name or "-", cloud.auth_type or "password")
    except ApplicationError as e:
        err_console.print(Text(f"Error: {e.message}", style="red"))
        raise typer.Exit(1) from e

    console.print(table)
    if config_file.sources:
        console.print("[dim]Sources: " + ", ".join(str(s) for s in config_file.sources) + "[/dim]")
    else:
        console.print("[dim]No clouds.yaml found[/dim]")


@app.command()
def info() -> None:
    """
    Display application information.
    """
    app_config = get_app_config().application
    console.print(Panel(
        f"[bold]{app_config.name}[/bold]\n"
        f"Version: {app_config.version}\n"
        f"Description: {app_config.description}\n"
        f"Settings directory: {get_config_dir()}",
        title="Application Info",
    ))


@app.command()
def config(
    section: Optional[str] = typer.Argument(None, help="Section to show (application, logging, views, tui)"),
) -> None:
    """
    Display the effective application settings.

    Shows every settings file or a specific one, with user overrides applied.
    """
    app_config = get_app_config()
    sections = {
        "application": app_config.application.model_dump(),
        "logging": app_config.logging.model_dump(),
        "views": app_config.views.model_dump(),
        "tui": app_config.tui.model_dump(),
    }

    if section:
        if section not in sections:
            err_console.print(f"[red]Unknown section: {section}[/red]")
            err_console.print(f"Available sections: {', '.join(sections)}")
            raise typer.Exit(1)
        _display_config_section(section, sections[section])
    else:
        for name, data in sections.items():
            _display_config_section(name, data)
            console.print()


def _display_config_section(name: str, data: dict) -> None:
    """Display a configuration section as a tree."""
    tree = Tree(f"[bold cyan]{name}[/bold cyan]")

    def add_items(parent: Tree, items: dict) -> None:
        for key, value in items.items():
            if isinstance(value, dict):
                branch = parent.add(f"[cyan]{key}[/cyan]")
                add_items(branch, value)
            else:
                parent.add(f"[cyan]{key}[/cyan]: {value}")

    add_items(tree, data)
    console.print(tree)


@app.command()
def version() -> None:
    """
    Display version information.
    """
    console.print(f"[bold]{get_app_config().application.version}[/bold]")
