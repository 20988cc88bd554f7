"""User OAuth scope lists as sent to the authorization endpoint."""

from __future__ import annotations

from collections.abc import Iterable

from lark_cli import config
from lark_cli.authregistry.aliases import DEFAULT_USER_OAUTH_SERVICES
from lark_cli.authregistry.normalize import normalize_strings, parse_scope_list
from lark_cli.authregistry.user_oauth import user_oauth_scopes_from_services
from lark_cli.errors import ScopeRequestError

# Always requested so that a refresh token is issued.
DEFAULT_USER_OAUTH_SCOPE = "offline_access"


def canonicalize_user_oauth_scopes(scopes: Iterable[str] | None) -> list[str]:
    """Return ``offline_access`` followed by the other scopes, sorted and unique."""
    rest = sorted(s for s in normalize_strings(scopes) if s != DEFAULT_USER_OAUTH_SCOPE)
    return [DEFAULT_USER_OAUTH_SCOPE, *rest]


ensure_offline_access = canonicalize_user_oauth_scopes


def join_scopes(scopes: Iterable[str] | None) -> str:
    """Space-joined canonical scope string."""
    return " ".join(canonicalize_user_oauth_scopes(scopes))


def requested_user_oauth_scopes(
    scopes: Iterable[str] | None,
    granted_scope: str | None = None,
    incremental: bool = False,
) -> list[str]:
    """Scopes to request, optionally only those not granted yet.

    Args:
        scopes: Desired scopes.
        granted_scope: Space/comma separated scopes of the current token.
        incremental: Request only the delta over ``granted_scope``.
    """
    scopes = normalize_strings(scopes)
    if not incremental or not (granted_scope or "").strip():
        return canonicalize_user_oauth_scopes(scopes)
    granted = set(parse_scope_list(granted_scope))
    delta = [s for s in scopes if s == DEFAULT_USER_OAUTH_SCOPE or s not in granted]
    return canonicalize_user_oauth_scopes(delta)


def resolve_user_oauth_scopes(
    scopes: str | None = None,
    services: list[str] | None = None,
    readonly: bool = False,
    drive_scope: str | None = None,
) -> tuple[list[str], str]:
    """Decide which user scopes to request and where they came from.

    Resolution order:
        1. Explicit ``scopes`` string -> "flag"
        2. ``services``/``readonly``/``drive_scope`` given (even empty)
           -> "services"
        3. ``user_scopes`` in the config file -> "config"
        4. ``offline_access`` only -> "default"

    Returns:
        Tuple of (canonical scopes, source)

    Raises:
        ScopeRequestError: If explicit scopes are empty or the services-based
            request is invalid.
    """
    if scopes is not None:
        explicit = parse_scope_list(scopes)
        if not explicit:
            raise ScopeRequestError("scopes must not be empty")
        return canonicalize_user_oauth_scopes(explicit), "flag"

    if services is not None or readonly or drive_scope is not None:
        selected = services or list(DEFAULT_USER_OAUTH_SERVICES)
        resolved = user_oauth_scopes_from_services(selected, readonly, drive_scope)
        return canonicalize_user_oauth_scopes(resolved), "services"

    configured = config.get_user_scopes()
    if configured:
        return canonicalize_user_oauth_scopes(configured), "config"

    return [DEFAULT_USER_OAUTH_SCOPE], "default"
