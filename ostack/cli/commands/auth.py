"""
Authentication Commands.

Commands for obtaining and inspecting the Keystone token of the selected
cloud. Tokens are cached on disk (see application.yaml auth.cache_dir).
"""

import typer

from ostack.cli.context import CliContext, run_command
from ostack.sdk.api.identity.auth import GetAuthToken, Token
from ostack.sdk.session import AsyncOpenStack

app = typer.Typer(help="Authentication commands")


@app.command()
def login(
    ctx: typer.Context,
    renew: bool = typer.Option(False, "--renew", help="Ignore the cached token and authenticate again"),
) -> None:
    """
    Authenticate and print the token.

    Examples:
        osc --os-cloud devstack auth login
        export OS_TOKEN=$(osc --os-cloud devstack auth login)
    """

    async def _login(session: AsyncOpenStack, cli: CliContext) -> None:
        cli.console.out(session.get_auth_token() or "")

    run_command(ctx, _login, renew_auth=renew)


@app.command()
def show(
    ctx: typer.Context,
    validate: bool = typer.Option(
        False, "--validate", help="Validate the token with Keystone instead of showing the cached data",
    ),
) -> None:
    """
    Show the current token: user, project, roles and expiry.

    Examples:
        osc --os-cloud devstack auth show
        osc --os-cloud devstack -o json auth show --validate
    """

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        if validate:
            data = await GetAuthToken(subject_token=session.get_auth_token(), nocatalog=True).query(session)
        else:
            info = session.get_auth_info()
            data = info.token.model_dump(mode="json", exclude_none=True, exclude={"catalog"}) if info else {}
        cli.output_processor().output_single(data, Token)

    run_command(ctx, _show)
