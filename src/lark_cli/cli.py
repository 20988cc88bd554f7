"""Lark CLI - Thin wrapper around operations module."""

import json
import os
import sys
from functools import wraps
from typing import Annotated, Callable

import typer

from lark_cli import __version__
from lark_cli import operations
from lark_cli.authregistry import parse_service_list
from lark_cli.errors import LarkClientError
from lark_cli.logging_config import configure_logging

# Main app
app = typer.Typer(
    name="lark",
    help="Lark CLI - Work with docs, sheets, mail, chat, calendar, wiki and bases.",
    no_args_is_help=True,
    add_completion=False,
)

# Auth subcommand group
auth_app = typer.Typer(
    help="Auth requirements - explain which services, tokens and scopes commands need.",
    no_args_is_help=True,
)
app.add_typer(auth_app, name="auth")

auth_user_app = typer.Typer(
    help="User OAuth - service profiles, scope selection and authorization URLs.",
    no_args_is_help=True,
)
auth_app.add_typer(auth_user_app, name="user")

auth_user_scopes_app = typer.Typer(
    help="Manage default user OAuth scopes stored in the config file.",
    no_args_is_help=True,
)
auth_user_app.add_typer(auth_user_scopes_app, name="scopes")


def output_json(data: dict) -> None:
    """Output JSON to stdout."""
    print(json.dumps(data, indent=2, default=str))


def output_error(message: str, exit_code: int = 1) -> None:
    """Output error and exit."""
    print(json.dumps({"error": message}), file=sys.stderr)
    raise typer.Exit(exit_code)


def lark_command(func: Callable) -> Callable:
    """Decorator to handle common error patterns for Lark CLI commands."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (LarkClientError, ValueError) as e:
            output_error(str(e))
    return wrapper


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        output_json({"version": __version__})
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version", "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log resolution details to stderr."),
    ] = False,
) -> None:
    """Lark CLI - Work with the Lark/Feishu workspace platform."""
    configure_logging("DEBUG" if verbose else os.environ.get("LARK_LOG_LEVEL", "WARNING"))


# =============================================================================
# Auth Commands
# =============================================================================


@auth_app.command("explain")
@lark_command
def auth_explain_cmd(
    command: Annotated[list[str], typer.Argument(help="Command path, e.g. 'drive list'")],
) -> None:
    """Explain auth requirements for a command."""
    output_json(operations.explain_command(" ".join(command)))


@auth_app.command("relogin")
@lark_command
def auth_relogin_cmd(
    command: Annotated[list[str], typer.Argument(help="Command path, e.g. 'mail send'")],
) -> None:
    """Recommend a user re-login command granting the scopes a command needs."""
    command_str = " ".join(command)
    result = operations.relogin_command_for_command(command_str)
    if result is None:
        output_json({
            "command": command_str,
            "relogin_required": False,
            "message": "Command has no user OAuth requirements.",
        })
        return
    output_json({"relogin_required": True, **result})


@auth_app.command("services")
@lark_command
def auth_services_cmd() -> None:
    """List every known service with its auth metadata."""
    output_json(operations.list_services())


@auth_app.command("audit")
@lark_command
def auth_audit_cmd(
    services: Annotated[
        list[str] | None,
        typer.Argument(help="Services to check (default: all)"),
    ] = None,
) -> None:
    """List services that need a user token but have no declared scopes."""
    output_json(operations.audit_services(parse_service_list(services)))


@auth_app.command("status")
@lark_command
def auth_status_cmd() -> None:
    """Show configuration sources used for auth."""
    output_json(operations.config_status())


# =============================================================================
# User OAuth Commands
# =============================================================================


@auth_user_app.command("services")
@lark_command
def auth_user_services_cmd() -> None:
    """List built-in OAuth service profiles, aliases and defaults."""
    output_json(operations.list_user_oauth_service_profiles())


@auth_user_app.command("suggest")
@lark_command
def auth_user_suggest_cmd(
    services: Annotated[
        list[str] | None,
        typer.Option("--services", "-s", help="Services (repeat or comma-separate)"),
    ] = None,
    readonly: Annotated[bool, typer.Option("--readonly", help="Prefer read-only scopes")] = False,
) -> None:
    """Preview suggested user OAuth scopes for services."""
    output_json(operations.suggest_user_scopes(parse_service_list(services), readonly))


@auth_user_app.command("url")
@lark_command
def auth_user_url_cmd(
    scopes: Annotated[
        str | None,
        typer.Option("--scopes", help="Explicit scopes (space/comma-separated)"),
    ] = None,
    services: Annotated[
        list[str] | None,
        typer.Option("--services", "-s", help="Services or aliases (all, user)"),
    ] = None,
    readonly: Annotated[bool, typer.Option("--readonly", help="Request read-only scopes")] = False,
    drive_scope: Annotated[
        str | None,
        typer.Option("--drive-scope", help="Scope level: full or readonly"),
    ] = None,
    force_consent: Annotated[
        bool,
        typer.Option("--force-consent", help="Ask the user to consent again"),
    ] = False,
    incremental: Annotated[
        bool,
        typer.Option(
            "--incremental/--no-incremental",
            help="Include already granted scopes (--no-incremental requests the full set)",
        ),
    ] = True,
    granted_scopes: Annotated[
        str | None,
        typer.Option("--granted-scopes", help="Scopes of the current user token, requested only if missing"),
    ] = None,
) -> None:
    """Print the user authorization URL for the resolved scopes."""
    services_given = services is not None
    if scopes is not None and (services_given or readonly or drive_scope is not None):
        output_error("--scopes cannot be combined with --services, --readonly or --drive-scope.")
    output_json(operations.user_authorize_url(
        scopes,
        parse_service_list(services) if services_given else None,
        readonly,
        drive_scope,
        force_consent,
        incremental=incremental,
        granted_scopes=granted_scopes,
    ))


# =============================================================================
# Default User Scopes
# =============================================================================


@auth_user_scopes_app.command("list")
@lark_command
def scopes_list_cmd() -> None:
    """List default user OAuth scopes."""
    output_json(operations.user_scopes_list())


@auth_user_scopes_app.command("set")
@lark_command
def scopes_set_cmd(
    scopes: Annotated[list[str], typer.Argument(help="OAuth scopes")],
) -> None:
    """Set default user OAuth scopes."""
    output_json(operations.user_scopes_set(" ".join(scopes)))


@auth_user_scopes_app.command("add")
@lark_command
def scopes_add_cmd(
    scopes: Annotated[list[str], typer.Argument(help="OAuth scopes")],
) -> None:
    """Add default user OAuth scopes."""
    output_json(operations.user_scopes_add(" ".join(scopes)))


@auth_user_scopes_app.command("remove")
@lark_command
def scopes_remove_cmd(
    scopes: Annotated[list[str], typer.Argument(help="OAuth scopes")],
) -> None:
    """Remove default user OAuth scopes."""
    output_json(operations.user_scopes_remove(" ".join(scopes)))


if __name__ == "__main__":
    app()
