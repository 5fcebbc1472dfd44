"""
Identity Commands.

Projects, users, roles and role assignments, domains, the service and
endpoint registry and application credentials of Keystone v3.
"""

from typing import Optional

import typer

from ostack.cli.common import parse_csv
from ostack.cli.context import (
    CliContext,
    delete_found,
    max_items_option,
    output_list,
    output_one,
    resolve_id,
    run_command,
    run_ignored,
)
from ostack.core.exceptions import AuthError
from ostack.sdk.api.identity.application_credentials import (
    ApplicationCredential,
    CreateApplicationCredential,
    DeleteApplicationCredential,
    ListApplicationCredentials,
    find_application_credential,
)
from ostack.sdk.api.identity.domains import (
    Domain,
    Endpoint,
    ListDomains,
    ListEndpoints,
    ListServices,
    Service,
    find_domain,
)
from ostack.sdk.api.identity.projects import (
    CreateProject,
    DeleteProject,
    ListProjects,
    Project,
    SetProject,
    find_project,
)
from ostack.sdk.api.identity.roles import (
    CreateRole,
    DeleteRole,
    ListRoleAssignments,
    ListRoles,
    Role,
    RoleAssignment,
    find_role,
)
from ostack.sdk.api.identity.users import CreateUser, DeleteUser, ListUsers, SetUser, User, find_user
from ostack.sdk.session import AsyncOpenStack

app = typer.Typer(help="Identity service (Keystone) commands")

project_app = typer.Typer(help="Projects")
user_app = typer.Typer(help="Users")
role_app = typer.Typer(help="Roles")
role_assignment_app = typer.Typer(help="Role assignments")
domain_app = typer.Typer(help="Domains")
service_app = typer.Typer(help="Service registry")
endpoint_app = typer.Typer(help="Endpoint registry")
application_credential_app = typer.Typer(help="Application credentials of the current user")

app.add_typer(project_app, name="project")
app.add_typer(user_app, name="user")
app.add_typer(role_app, name="role")
app.add_typer(role_assignment_app, name="role-assignment")
app.add_typer(domain_app, name="domain")
app.add_typer(service_app, name="service")
app.add_typer(endpoint_app, name="endpoint")
app.add_typer(application_credential_app, name="application-credential")


async def _domain_id(session: AsyncOpenStack, domain: str | None) -> str | None:
    return await resolve_id(session, find_domain(domain)) if domain else None


# =============================================================================
# Projects
# =============================================================================


@project_app.command("list")
def list_projects(
    ctx: typer.Context,
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain ID or name"),
    parent: Optional[str] = typer.Option(None, "--parent", help="Parent project ID"),
    name: Optional[str] = typer.Option(None, "--name", help="Project name"),
    enabled: Optional[bool] = typer.Option(None, "--enabled/--disabled", help="Filter by state"),
    tags: Optional[str] = typer.Option(None, "--tags", help="Projects having all these tags (a,b)"),
    max_items: Optional[int] = max_items_option(),
) -> None:
    """List projects (admin, or the domain's projects for domain admins)."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListProjects(
            domain_id=await _domain_id(session, domain),
            parent_id=parent,
            name=name,
            enabled=enabled,
            tags=parse_csv(tags) if tags else None,
        )
        await output_list(session, cli, endpoint, Project, max_items)

    run_command(ctx, _list)


@project_app.command("show")
def show_project(
    ctx: typer.Context,
    project: str = typer.Argument(..., help="Project ID or name"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain of the project name"),
) -> None:
    """Show project details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_project(project, await _domain_id(session, domain)), Project)

    run_command(ctx, _show)


@project_app.command("create")
def create_project(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Project name"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain ID or name"),
    parent: Optional[str] = typer.Option(None, "--parent", help="Parent project ID or name"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
    enable: bool = typer.Option(True, "--enable/--disable", help="Project state"),
    tag: Optional[list[str]] = typer.Option(None, "--tag", help="Tag. Repeatable"),
) -> None:
    """Create a project."""

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        domain_id = await _domain_id(session, domain)
        parent_id = await resolve_id(session, find_project(parent, domain_id)) if parent else None
        endpoint = CreateProject(
            name=name, domain_id=domain_id, parent_id=parent_id,
            description=description, enabled=enable, tags=tag or None,
        )
        await output_one(session, cli, endpoint, Project)

    run_command(ctx, _create)


@project_app.command("set")
def set_project(
    ctx: typer.Context,
    project: str = typer.Argument(..., help="Project ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
    enable: Optional[bool] = typer.Option(None, "--enable/--disable", help="Project state"),
    tag: Optional[list[str]] = typer.Option(None, "--tag", help="Replace tags. Repeatable"),
) -> None:
    """Update project properties."""

    async def _set(session: AsyncOpenStack, cli: CliContext) -> None:
        project_id = await resolve_id(session, find_project(project))
        endpoint = SetProject(id=project_id, name=name, description=description, enabled=enable, tags=tag or None)
        await output_one(session, cli, endpoint, Project)

    run_command(ctx, _set)


@project_app.command("delete")
def delete_project(ctx: typer.Context, projects: list[str] = typer.Argument(..., help="Project IDs or names")) -> None:
    """Delete projects."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(session, cli, projects, find_project, lambda i: DeleteProject(id=i), "project")

    run_command(ctx, _delete)


# =============================================================================
# Users
# =============================================================================


@user_app.command("list")
def list_users(
    ctx: typer.Context,
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="User name"),
    enabled: Optional[bool] = typer.Option(None, "--enabled/--disabled", help="Filter by state"),
    max_items: Optional[int] = max_items_option(),
) -> None:
    """List users."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListUsers(domain_id=await _domain_id(session, domain), name=name, enabled=enabled)
        await output_list(session, cli, endpoint, User, max_items)

    run_command(ctx, _list)


@user_app.command("show")
def show_user(
    ctx: typer.Context,
    user: str = typer.Argument(..., help="User ID or name"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain of the user name"),
) -> None:
    """Show user details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_user(user, await _domain_id(session, domain)), User)

    run_command(ctx, _show)


@user_app.command("create")
def create_user(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="User name"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain ID or name"),
    password: Optional[str] = typer.Option(None, "--password", help="Password"),
    password_prompt: bool = typer.Option(False, "--password-prompt", help="Prompt for the password"),
    email: Optional[str] = typer.Option(None, "--email", help="E-mail address"),
    project: Optional[str] = typer.Option(None, "--project", help="Default project ID or name"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
    enable: bool = typer.Option(True, "--enable/--disable", help="User state"),
) -> None:
    """Create a user."""
    if password_prompt:
        password = typer.prompt("Password", hide_input=True, confirmation_prompt=True)

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        domain_id = await _domain_id(session, domain)
        project_id = await resolve_id(session, find_project(project, domain_id)) if project else None
        endpoint = CreateUser(
            name=name, domain_id=domain_id, password=password, email=email,
            default_project_id=project_id, description=description, enabled=enable,
        )
        await output_one(session, cli, endpoint, User)

    run_command(ctx, _create)


@user_app.command("set")
def set_user(
    ctx: typer.Context,
    user: str = typer.Argument(..., help="User ID or name"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    password: Optional[str] = typer.Option(None, "--password", help="New password"),
    email: Optional[str] = typer.Option(None, "--email", help="New e-mail address"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
    enable: Optional[bool] = typer.Option(None, "--enable/--disable", help="User state"),
) -> None:
    """Update user properties."""

    async def _set(session: AsyncOpenStack, cli: CliContext) -> None:
        user_id = await resolve_id(session, find_user(user))
        endpoint = SetUser(
            id=user_id, name=name, password=password, email=email,
            description=description, enabled=enable,
        )
        await output_one(session, cli, endpoint, User)

    run_command(ctx, _set)


@user_app.command("delete")
def delete_user(ctx: typer.Context, users: list[str] = typer.Argument(..., help="User IDs or names")) -> None:
    """Delete users."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(session, cli, users, find_user, lambda i: DeleteUser(id=i), "user")

    run_command(ctx, _delete)


# =============================================================================
# Roles
# =============================================================================


@role_app.command("list")
def list_roles(
    ctx: typer.Context,
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain specific roles of this domain"),
) -> None:
    """List roles."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_list(session, cli, ListRoles(domain_id=await _domain_id(session, domain)), Role)

    run_command(ctx, _list)


@role_app.command("show")
def show_role(ctx: typer.Context, role: str = typer.Argument(..., help="Role ID or name")) -> None:
    """Show role details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_role(role), Role)

    run_command(ctx, _show)


@role_app.command("create")
def create_role(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Role name"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain for a domain specific role"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
) -> None:
    """Create a role."""

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = CreateRole(name=name, domain_id=await _domain_id(session, domain), description=description)
        await output_one(session, cli, endpoint, Role)

    run_command(ctx, _create)


@role_app.command("delete")
def delete_role(ctx: typer.Context, roles: list[str] = typer.Argument(..., help="Role IDs or names")) -> None:
    """Delete roles."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        await delete_found(session, cli, roles, find_role, lambda i: DeleteRole(id=i), "role")

    run_command(ctx, _delete)


@role_assignment_app.command("list")
def list_role_assignments(
    ctx: typer.Context,
    user: Optional[str] = typer.Option(None, "--user", help="User ID or name"),
    group_id: Optional[str] = typer.Option(None, "--group-id", help="Group ID"),
    project: Optional[str] = typer.Option(None, "--project", help="Project ID or name"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain ID or name"),
    role: Optional[str] = typer.Option(None, "--role", help="Role ID or name"),
    system: bool = typer.Option(False, "--system", help="System scoped assignments"),
    effective: bool = typer.Option(False, "--effective", help="Expand group and inherited assignments"),
    names: bool = typer.Option(False, "--names", help="Include resource names"),
) -> None:
    """
    List role assignments.

    Examples:
        osc --os-cloud devstack identity role-assignment list --user demo --names
    """

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListRoleAssignments(
            user_id=await resolve_id(session, find_user(user)) if user else None,
            group_id=group_id,
            scope_project_id=await resolve_id(session, find_project(project)) if project else None,
            scope_domain_id=await _domain_id(session, domain),
            role_id=await resolve_id(session, find_role(role)) if role else None,
            scope_system="all" if system else None,
            effective=effective or None,
            include_names=names or None,
        )
        await output_list(session, cli, endpoint, RoleAssignment)

    run_command(ctx, _list)


# =============================================================================
# Domains, services, endpoints
# =============================================================================


@domain_app.command("list")
def list_domains(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Domain name"),
    enabled: Optional[bool] = typer.Option(None, "--enabled/--disabled", help="Filter by state"),
) -> None:
    """List domains."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_list(session, cli, ListDomains(name=name, enabled=enabled), Domain)

    run_command(ctx, _list)


@domain_app.command("show")
def show_domain(ctx: typer.Context, domain: str = typer.Argument(..., help="Domain ID or name")) -> None:
    """Show domain details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_one(session, cli, find_domain(domain), Domain)

    run_command(ctx, _show)


@service_app.command("list")
def list_services(
    ctx: typer.Context,
    service_type: Optional[str] = typer.Option(None, "--type", help="Service type"),
) -> None:
    """List services registered in Keystone."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        await output_list(session, cli, ListServices(type=service_type), Service)

    run_command(ctx, _list)


@endpoint_app.command("list")
def list_endpoints(
    ctx: typer.Context,
    service_id: Optional[str] = typer.Option(None, "--service-id", help="Service ID"),
    interface: Optional[str] = typer.Option(None, "--interface", help="public, internal or admin"),
    region: Optional[str] = typer.Option(None, "--region", help="Region ID"),
) -> None:
    """List endpoints registered in Keystone."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListEndpoints(service_id=service_id, interface=interface, region_id=region)
        await output_list(session, cli, endpoint, Endpoint)

    run_command(ctx, _list)


# =============================================================================
# Application credentials
# =============================================================================


def _current_user(session: AsyncOpenStack) -> str:
    user_id = session.user_id
    if not user_id:
        raise AuthError("The token carries no user")
    return user_id


@application_credential_app.command("list")
def list_application_credentials(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Credential name"),
) -> None:
    """List application credentials of the current user."""

    async def _list(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = ListApplicationCredentials(user_id=_current_user(session), name=name)
        await output_list(session, cli, endpoint, ApplicationCredential)

    run_command(ctx, _list)


@application_credential_app.command("show")
def show_application_credential(
    ctx: typer.Context,
    credential: str = typer.Argument(..., help="Application credential ID or name"),
) -> None:
    """Show application credential details."""

    async def _show(session: AsyncOpenStack, cli: CliContext) -> None:
        findable = find_application_credential(_current_user(session), credential)
        await output_one(session, cli, findable, ApplicationCredential)

    run_command(ctx, _show)


@application_credential_app.command("create")
def create_application_credential(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Credential name"),
    secret: Optional[str] = typer.Option(None, "--secret", help="Secret (generated when omitted)"),
    role: Optional[list[str]] = typer.Option(None, "--role", help="Delegated role name. Repeatable"),
    expiration: Optional[str] = typer.Option(None, "--expiration", help="Expiry, e.g. 2030-01-01T00:00:00"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
    unrestricted: bool = typer.Option(False, "--unrestricted", help="Allow creating other credentials and trusts"),
) -> None:
    """
    Create an application credential for the current project.

    The secret is only shown once.
    """

    async def _create(session: AsyncOpenStack, cli: CliContext) -> None:
        endpoint = CreateApplicationCredential(
            user_id=_current_user(session),
            name=name,
            secret=secret,
            roles=[{"name": r} for r in role] if role else None,
            expires_at=expiration,
            description=description,
            unrestricted=unrestricted or None,
        )
        await output_one(session, cli, endpoint, ApplicationCredential)

    run_command(ctx, _create)


@application_credential_app.command("delete")
def delete_application_credential(
    ctx: typer.Context,
    credentials: list[str] = typer.Argument(..., help="Application credential IDs or names"),
) -> None:
    """Delete application credentials."""

    async def _delete(session: AsyncOpenStack, cli: CliContext) -> None:
        user_id = _current_user(session)
        for ref in credentials:
            credential_id = await resolve_id(session, find_application_credential(user_id, ref))
            await run_ignored(session, DeleteApplicationCredential(user_id=user_id, id=credential_id))
            cli.report(f"Deleted application credential {credential_id}")

    run_command(ctx, _delete)
