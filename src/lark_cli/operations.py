"""Lark CLI operations - auth requirement queries returning JSON-ready dicts.

The CLI is a thin wrapper around these functions.
"""

import logging
import secrets

from lark_cli import config
from lark_cli.auth.authorize import build_user_authorize_url
from lark_cli.auth.scopes import (
    DEFAULT_USER_OAUTH_SCOPE,
    canonicalize_user_oauth_scopes,
    ensure_offline_access,
    join_scopes,
    requested_user_oauth_scopes,
    resolve_user_oauth_scopes,
)
from lark_cli.authregistry import (
    DEFAULT_USER_OAUTH_SERVICES,
    DRIVE_SCOPE_VALUES,
    REGISTRY,
    USER_OAUTH_SERVICE_ALIASES,
    list_user_oauth_services,
    normalize_service_list,
    parse_scope_list,
    required_user_scopes_report,
    requirements_for_command,
    services_missing_required_user_scopes,
    suggested_user_oauth_scopes,
)
from lark_cli.errors import LarkAuthError, ScopeRequestError

logger = logging.getLogger(__name__)

LOGIN_COMMAND = "lark auth user login"


def _login_command(scopes: list[str], force_consent: bool = False) -> str:
    command = f'{LOGIN_COMMAND} --scopes "{" ".join(scopes)}"'
    if force_consent:
        command += " --force-consent"
    return command


# =============================================================================
# Command Requirements
# =============================================================================


def explain_command(command: str) -> dict:
    """Explain the auth requirements of a CLI command.

    Args:
        command: Command path without the binary name, e.g. "drive list".

    Returns:
        Dict with services, token types, offline flag, required and
        suggested user scopes, and a suggested login command.

    Raises:
        LarkAuthError: If the command has no mapping.
        UnknownServiceError: If the mapping references an unknown service.
    """
    command = " ".join(command.split())
    requirements = requirements_for_command(command, command_map=config.get_command_service_map())
    if requirements is None:
        raise LarkAuthError(f"no auth registry mapping found for command {command!r}")

    required_scopes, undeclared = required_user_scopes_report(requirements.services)

    suggested_scopes: list[str] = []
    suggested_command = ""
    if requirements.requires_user:
        suggested_scopes = list(required_scopes)
        if requirements.requires_offline:
            suggested_scopes = ensure_offline_access(suggested_scopes)
        if suggested_scopes:
            suggested_command = _login_command(suggested_scopes)

    return {
        "command": requirements.command,
        "services": requirements.services,
        "token_types": [str(tt) for tt in requirements.token_types],
        "requires_offline": requirements.requires_offline,
        "required_user_scopes": required_scopes,
        "services_missing_required_user_scopes": undeclared,
        "suggested_user_login_scopes": suggested_scopes,
        "suggested_user_login_command": suggested_command,
    }


def user_oauth_scopes_for_command(command: str) -> dict | None:
    """Recommended user OAuth scopes for a command.

    Returns:
        Dict with the canonical command, services, scopes (including
        offline_access) and services with undeclared scopes, or None if the
        command is unknown or does not use a user token.
    """
    command = command.strip()
    if not command:
        return None
    requirements = requirements_for_command(command, command_map=config.get_command_service_map())
    if requirements is None or not requirements.requires_user:
        return None

    required_scopes, undeclared = required_user_scopes_report(requirements.services)
    return {
        "command": requirements.command,
        "services": requirements.services,
        "scopes": ensure_offline_access(required_scopes),
        "undeclared": undeclared,
    }


def relogin_command_for_command(command: str) -> dict | None:
    """Recommended re-login command after a command failed on missing scopes.

    Returns:
        Dict with ``command`` (the login command line) and ``note``, or None
        when no recommendation applies.
    """
    result = user_oauth_scopes_for_command(command)
    if result is None:
        return None

    command = result["command"]
    services = ", ".join(result["services"])
    if result["undeclared"]:
        note = (
            f"required by command {command!r} (services: {services}; "
            f"missing scope declarations for: {', '.join(result['undeclared'])})"
        )
    else:
        note = f"required by command {command!r} (services: {services})"

    return {
        "command": _login_command(result["scopes"], force_consent=True),
        "note": note,
        "scopes": result["scopes"],
    }


# =============================================================================
# Service Registry
# =============================================================================


def list_services() -> dict:
    """List every registered service with its auth metadata."""
    services = []
    for name in REGISTRY.all_service_names():
        definition = REGISTRY.lookup(name)
        services.append(definition.model_dump(mode="json"))
    return {"count": len(services), "services": services}


def audit_services(services: list[str] | None = None) -> dict:
    """Report services that need a user token but have undeclared scopes.

    Args:
        services: Services to check (default: all registered services).
    """
    checked = normalize_service_list(services) or REGISTRY.all_service_names()
    missing = services_missing_required_user_scopes(checked)
    return {
        "checked": sorted(checked),
        "missing_required_user_scopes": missing,
        "count": len(missing),
    }


# =============================================================================
# User OAuth
# =============================================================================


def list_user_oauth_service_profiles() -> dict:
    """Describe the services usable in services-based user OAuth flows."""
    services = list_user_oauth_services()
    service_scopes = {}
    required_scopes = {}
    for name in services:
        definition = REGISTRY.lookup(name)
        service_scopes[name] = definition.user_scopes.model_dump(mode="json")
        required = definition.required_user_scopes
        required_scopes[name] = list(required) if required is not None else None
    return {
        "services": services,
        "default_services": list(DEFAULT_USER_OAUTH_SERVICES),
        "service_aliases": {alias: list(names) for alias, names in USER_OAUTH_SERVICE_ALIASES.items()},
        "service_scopes": service_scopes,
        "service_required_user_scopes": required_scopes,
        "drive_scope_values": list(DRIVE_SCOPE_VALUES),
    }


def suggest_user_scopes(services: list[str] | None = None, readonly: bool = False) -> dict:
    """Preview the user OAuth scopes for a service selection."""
    selected = normalize_service_list(services) or list(DEFAULT_USER_OAUTH_SERVICES)
    scopes = suggested_user_oauth_scopes(selected, readonly)
    return {
        "services": selected,
        "readonly": readonly,
        "scopes": scopes,
    }


def user_authorize_url(
    scopes: str | None = None,
    services: list[str] | None = None,
    readonly: bool = False,
    drive_scope: str | None = None,
    force_consent: bool = False,
    state: str | None = None,
    incremental: bool = True,
    granted_scopes: str | None = None,
) -> dict:
    """Build the user authorization URL for the resolved scope set.

    With ``incremental`` the server is asked to merge the new grant with the
    scopes already granted, and only scopes missing from ``granted_scopes``
    (the scope string of the current user token) are requested.

    Raises:
        LarkConfigError: If no app ID is configured.
        ScopeRequestError: If the scope request is invalid.
    """
    resolved, source = resolve_user_oauth_scopes(scopes, services, readonly, drive_scope)
    requested = requested_user_oauth_scopes(resolved, granted_scopes, incremental)
    state = state or secrets.token_urlsafe(32)
    url = build_user_authorize_url(
        config.get_base_url(),
        config.get_app_id(),
        config.get_redirect_uri(),
        state=state,
        scope=join_scopes(requested),
        prompt="consent" if force_consent else "",
        include_granted_scopes=incremental,
    )
    logger.debug(
        "Authorization URL built with %d of %d scopes from %s",
        len(requested), len(resolved), source,
    )
    return {
        "url": url,
        "scopes": resolved,
        "requested_scopes": requested,
        "incremental": incremental,
        "source": source,
        "state": state,
    }


# =============================================================================
# Default User Scopes (config)
# =============================================================================


def _current_user_scopes() -> list[str]:
    return config.get_user_scopes() or [DEFAULT_USER_OAUTH_SCOPE]


def user_scopes_list() -> dict:
    """Show the user scopes a login without flags would request."""
    scopes, source = resolve_user_oauth_scopes()
    return {
        "config_path": str(config.get_config_path()),
        "scopes": scopes,
        "source": source,
    }


def _parse_required(raw: str) -> list[str]:
    parsed = parse_scope_list(raw)
    if not parsed:
        raise ScopeRequestError("scopes must not be empty")
    return parsed


def user_scopes_set(raw: str) -> dict:
    """Replace the configured default user scopes."""
    scopes = ensure_offline_access(_parse_required(raw))
    path = config.save_user_scopes(scopes)
    return {"config_path": str(path), "scopes": scopes, "message": "saved user scopes"}


def user_scopes_add(raw: str) -> dict:
    """Add scopes to the configured default user scopes."""
    added = _parse_required(raw)
    scopes = canonicalize_user_oauth_scopes([*_current_user_scopes(), *added])
    path = config.save_user_scopes(scopes)
    return {"config_path": str(path), "scopes": scopes, "message": "added user scopes"}


def user_scopes_remove(raw: str) -> dict:
    """Remove scopes from the configured default user scopes.

    ``offline_access`` is always kept.
    """
    removed = set(_parse_required(raw))
    remaining = [s for s in _current_user_scopes() if s not in removed]
    scopes = canonicalize_user_oauth_scopes(remaining)
    path = config.save_user_scopes(scopes)
    return {"config_path": str(path), "scopes": scopes, "message": "removed user scopes"}


def config_status() -> dict:
    """Configuration status (paths, env vars, base URL)."""
    return config.get_config_status()
