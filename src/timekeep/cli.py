"""CLI: init, route, matrix, entry, indicator, roles, user, token, access."""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import date, datetime, time
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from timekeep.auth.jwt import create_token
from timekeep.auth.manager_access import check_manager_access
from timekeep.auth.permissions import ROLE_HIERARCHY, can_assign_role, get_role_options
from timekeep.auth.routes import ROUTE_PERMISSIONS, can_access_route
from timekeep.auth.session import JWTSessionProvider, LoginRequired
from timekeep.config import Config
from timekeep.core.entry_rules import can_edit_entry, edit_window_notice, get_days_until_locked
from timekeep.core.time_indicator import get_time_of_day_indicator
from timekeep.models.user import Role
from timekeep.storage.sqlite_store import SQLiteUserStore

ROLE_CHOICE = click.Choice([r.value for r in Role])


def _config(ctx: click.Context) -> Config:
    return ctx.obj["config"]


def _parse_date(_ctx: click.Context, _param: click.Parameter, value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}") from e


@click.group()
@click.version_option(package_name="timekeep")
@click.option("--home", type=click.Path(path_type=Path), default=None, help="Data directory")
@click.pass_context
def main(ctx: click.Context, home: Path | None) -> None:
    """Timekeep: access rules for the time-tracking app."""
    config = Config.load(home.expanduser().resolve() if home else None)
    logging.basicConfig(level=config.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@main.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create the data directory, user database and config file."""
    config = _config(ctx)

    async def _init() -> None:
        store = SQLiteUserStore(config.db_path)
        await store.initialize()
        await store.close()

    asyncio.run(_init())
    config.save()
    click.echo(f"Initialized timekeep at {config.data_path}")
    click.echo(f"Database: {config.db_path}")


@main.command()
@click.argument("role")
@click.argument("pathname")
@click.pass_context
def route(ctx: click.Context, role: str, pathname: str) -> None:
    """Check whether ROLE may open PATHNAME ("anonymous" for no session)."""
    config = _config(ctx)
    actual = None if role == "anonymous" else role
    allowed = can_access_route(actual, pathname, allow_unknown=config.allow_unknown_routes)
    click.echo(f"{role} -> {pathname}: {'allowed' if allowed else 'denied'}")
    if not allowed:
        sys.exit(1)


@main.command()
def matrix() -> None:
    """Print the route permission matrix."""
    table = Table(title="Route permissions")
    table.add_column("Route")
    for r in Role:
        table.add_column(ROLE_HIERARCHY[r].label, justify="center")
    for path, allowed in ROUTE_PERMISSIONS.items():
        table.add_row(path, *("[green]yes[/green]" if r in allowed else "[red]no[/red]" for r in Role))
    Console().print(table)


@main.command()
@click.argument("entry_date", callback=_parse_date)
@click.option("--today", callback=_parse_date, default=None, help="Override today's date")
@click.pass_context
def entry(ctx: click.Context, entry_date: date, today: date | None) -> None:
    """Show whether an entry dated ENTRY_DATE can still be edited."""
    window = _config(ctx).edit_window_days
    editable = can_edit_entry(entry_date, today=today, window_days=window)
    remaining = get_days_until_locked(entry_date, today=today, window_days=window)
    notice = edit_window_notice(entry_date, today=today, window_days=window)

    lines = [
        f"Entry date: {entry_date.isoformat()}",
        f"Editable: {'[green]yes[/green]' if editable else '[red]no[/red]'}",
        f"Days until locked: {remaining}",
    ]
    if notice:
        lines.append(notice)
    Console().print(Panel("\n".join(lines), title="Edit window"))


@main.command()
@click.option("--at", "at", default=None, help="Time to check, HH:MM (default: now)")
@click.pass_context
def indicator(ctx: click.Context, at: str | None) -> None:
    """Show the team dashboard time-of-day indicator."""
    now = None
    if at:
        try:
            now = datetime.combine(date.today(), time.fromisoformat(at))
        except ValueError as e:
            raise click.BadParameter(f"expected HH:MM, got {at!r}", param_hint="--at") from e
    click.echo(get_time_of_day_indicator(now, cutoff_hour=_config(ctx).after_hours_cutoff))


@main.command()
@click.argument("acting_role", type=ROLE_CHOICE)
@click.option("--target", type=ROLE_CHOICE, default=None, help="Check a single assignment")
def roles(acting_role: str, target: str | None) -> None:
    """List the roles ACTING_ROLE may assign."""
    acting = Role(acting_role)
    if target:
        ok = can_assign_role(acting, Role(target))
        click.echo(f"{acting_role} -> {target}: {'allowed' if ok else 'denied'}")
        if not ok:
            sys.exit(1)
        return

    table = Table(title=f"Assignable roles for {ROLE_HIERARCHY[acting].label}")
    table.add_column("Value")
    table.add_column("Label")
    table.add_column("Level", justify="right")
    for option in get_role_options(acting):
        table.add_row(option.value, option.label, str(ROLE_HIERARCHY[option.value].level))
    Console().print(table)


@main.group()
def user() -> None:
    """Manage users and roles."""


@user.command("add")
@click.argument("email")
@click.option("--name", default=None, help="Display name")
@click.option("--role", type=ROLE_CHOICE, default=Role.STAFF.value)
@click.pass_context
def user_add(ctx: click.Context, email: str, name: str | None, role: str) -> None:
    """Add a user."""
    config = _config(ctx)

    async def _add() -> None:
        store = SQLiteUserStore(config.db_path)
        await store.initialize()
        try:
            profile = await store.create_user(email, display_name=name, role=Role(role))
        except Exception as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        finally:
            await store.close()
        Console().print(
            Panel(
                f"[green]✓[/green] User created: {profile.email}\nID: {profile.id}\nRole: {profile.role}",
                title="User Created",
            )
        )

    asyncio.run(_add())


@user.command("set-role")
@click.argument("user_id")
@click.argument("role", type=ROLE_CHOICE)
@click.option("--as", "acting_role", type=ROLE_CHOICE, required=True, help="Role of the acting user")
@click.pass_context
def user_set_role(ctx: click.Context, user_id: str, role: str, acting_role: str) -> None:
    """Assign ROLE to USER_ID."""
    config = _config(ctx)
    if not can_assign_role(Role(acting_role), Role(role)):
        click.echo(f"Error: {acting_role} cannot assign {role}", err=True)
        sys.exit(1)

    async def _set() -> None:
        store = SQLiteUserStore(config.db_path)
        await store.initialize()
        try:
            profile = await store.set_role(user_id, role)
        finally:
            await store.close()
        if profile is None:
            click.echo(f"Error: User {user_id} not found", err=True)
            sys.exit(1)
        click.echo(f"{profile.email} is now {profile.role}")

    asyncio.run(_set())


@user.command("list")
@click.pass_context
def user_list(ctx: click.Context) -> None:
    """List users."""
    config = _config(ctx)

    async def _list() -> None:
        store = SQLiteUserStore(config.db_path)
        await store.initialize()
        try:
            users = await store.list_users()
        finally:
            await store.close()
        table = Table(title="Users")
        table.add_column("ID")
        table.add_column("Email")
        table.add_column("Role")
        table.add_column("Active")
        for profile in users:
            table.add_row(profile.id, profile.email, str(profile.role), "yes" if profile.is_active else "no")
        Console().print(table)

    asyncio.run(_list())


@user.command("show")
@click.argument("user_id")
@click.pass_context
def user_show(ctx: click.Context, user_id: str) -> None:
    """Show one user."""
    config = _config(ctx)

    async def _show() -> None:
        store = SQLiteUserStore(config.db_path)
        await store.initialize()
        try:
            profile = await store.get_user(user_id)
        finally:
            await store.close()
        if profile is None:
            click.echo(f"Error: User {user_id} not found", err=True)
            sys.exit(1)
        Console().print(
            Panel(
                f"Email: {profile.email}\n"
                f"Name: {profile.display_name or '-'}\n"
                f"Role: {ROLE_HIERARCHY[profile.role].label} ({profile.role})\n"
                f"Active: {'yes' if profile.is_active else 'no'}",
                title=f"User {profile.id}",
            )
        )

    asyncio.run(_show())


@main.command()
@click.argument("user_id")
@click.option("--minutes", type=int, default=None, help="Token lifetime")
@click.pass_context
def token(ctx: click.Context, user_id: str, minutes: int | None) -> None:
    """Issue a session token for USER_ID."""
    config = _config(ctx)
    click.echo(create_token(user_id, secret=config.jwt_secret, exp_minutes=minutes or config.token_exp_minutes))


@main.command()
@click.option("--token", "bearer", required=True, help="Session token")
@click.pass_context
def access(ctx: click.Context, bearer: str) -> None:
    """Show team-page access for the holder of a session token."""
    config = _config(ctx)

    async def _access() -> None:
        store = SQLiteUserStore(config.db_path)
        await store.initialize()
        try:
            result = await check_manager_access(JWTSessionProvider(bearer, config.jwt_secret), store)
        except LoginRequired as e:
            click.echo(f"Not signed in, redirect to {e.redirect_to}", err=True)
            sys.exit(1)
        finally:
            await store.close()
        click.echo(result.model_dump_json(indent=2))

    asyncio.run(_access())
