"""User OAuth scope selection for a set of services.

Two policies live here and they intentionally disagree on fallbacks:

- ``suggested_user_oauth_scopes`` (preview/display) uses the requested
  variant if the service declares it and otherwise drops straight to the
  minimal ``required_user_scopes``. The opposite variant is never used.
- ``user_oauth_scopes_from_services`` (building an authorization request)
  falls back to the opposite variant before the minimal scopes, and fails
  when a service declares nothing at all.

Both return sorted, de-duplicated scope lists so that authorization URLs and
scope diffs are stable.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from lark_cli.authregistry.aliases import DEFAULT_USER_OAUTH_SERVICES, expand_aliases
from lark_cli.authregistry.normalize import normalize_service_list, unique_sorted
from lark_cli.authregistry.registry import REGISTRY, ServiceDefinition, ServiceRegistry
from lark_cli.errors import ScopeRequestError, UnknownServiceError

logger = logging.getLogger(__name__)

DRIVE_SCOPE_FULL = "full"
DRIVE_SCOPE_READONLY = "readonly"
DRIVE_SCOPE_VALUES = (DRIVE_SCOPE_FULL, DRIVE_SCOPE_READONLY)

_SERVICES_HINT = "use `lark auth user services` to list supported services"


def suggested_user_oauth_scopes(
    services: Iterable[str] | None,
    readonly: bool = False,
    registry: ServiceRegistry | None = None,
) -> list[str]:
    """Suggest user OAuth scopes for display.

    For each service the requested variant is used when declared; otherwise
    the service's minimal ``required_user_scopes`` (which may contribute
    nothing).

    Raises:
        UnknownServiceError: If a service is not in the registry.
    """
    if registry is None:
        registry = REGISTRY
    scopes: list[str] = []
    for name in normalize_service_list(services):
        definition = registry.lookup(name)
        if definition is None:
            raise UnknownServiceError(name)
        variants = definition.user_scopes
        if readonly and variants.readonly:
            scopes.extend(variants.readonly)
        elif not readonly and variants.full:
            scopes.extend(variants.full)
        else:
            scopes.extend(definition.required_user_scopes or ())
    return unique_sorted(scopes)


def resolve_drive_scope(readonly: bool = False, drive_scope: str | None = "") -> str:
    """Validate the login-flow flags and return ``full`` or ``readonly``.

    Raises:
        ScopeRequestError: For ``file``, unknown values, or ``readonly``
            combined with an explicit drive scope.
    """
    drive_scope = (drive_scope or "").strip().lower()
    if drive_scope:
        if drive_scope == "file":
            raise ScopeRequestError("drive-scope file is not supported; use full or readonly")
        if drive_scope not in DRIVE_SCOPE_VALUES:
            raise ScopeRequestError(f"invalid drive-scope {drive_scope!r} (use full or readonly)")
    if readonly:
        if drive_scope:
            raise ScopeRequestError("drive-scope cannot be combined with --readonly")
        return DRIVE_SCOPE_READONLY
    return drive_scope or DRIVE_SCOPE_FULL


def _login_scopes_for(definition: ServiceDefinition, request: str) -> Sequence[str]:
    variants = definition.user_scopes
    if request == DRIVE_SCOPE_READONLY:
        order = (variants.readonly, variants.full)
    else:
        order = (variants.full, variants.readonly)
    for candidate in (*order, definition.required_user_scopes or ()):
        if candidate:
            return candidate
    raise ScopeRequestError(f"service {definition.name!r} does not declare user OAuth scopes yet")


def user_oauth_scopes_from_services(
    services: Iterable[str] | None,
    readonly: bool = False,
    drive_scope: str | None = "",
    *,
    registry: ServiceRegistry | None = None,
    aliases: Mapping[str, Sequence[str]] | None = None,
) -> list[str]:
    """Compute the user OAuth scopes to request in a login flow.

    Args:
        services: Service names or aliases (``all``, ``user``). An empty
            selection uses DEFAULT_USER_OAUTH_SERVICES.
        readonly: Request read-only variants.
        drive_scope: Explicit ``full`` or ``readonly``; exclusive with
            ``readonly``.
        registry: Service registry to resolve against.
        aliases: Alias table (default: USER_OAUTH_SERVICE_ALIASES).

    Returns:
        Sorted, de-duplicated scope list.

    Raises:
        ScopeRequestError: Invalid flags, a service that does not use user
            tokens, or a service without any declared scopes.
        UnknownServiceError: If a service is not in the registry.
    """
    request = resolve_drive_scope(readonly, drive_scope)
    if registry is None:
        registry = REGISTRY

    names = expand_aliases(services, aliases)
    if not names:
        names = list(DEFAULT_USER_OAUTH_SERVICES)

    scopes: list[str] = []
    for name in names:
        definition = registry.lookup(name)
        if definition is None:
            raise UnknownServiceError(name, hint=_SERVICES_HINT)
        if not definition.requires_user:
            raise ScopeRequestError(f"service {name!r} does not require user OAuth")
        scopes.extend(_login_scopes_for(definition, request))

    logger.debug("User OAuth scopes for %s (%s): %s", names, request, scopes)
    return unique_sorted(scopes)


def list_user_oauth_services(registry: ServiceRegistry | None = None) -> list[str]:
    """Services usable in services-based user OAuth flows, sorted.

    Services that require a user token but declare no scopes at all are left
    out so that no guessed scope strings are suggested.
    """
    if registry is None:
        registry = REGISTRY
    return sorted(
        name
        for name, definition in registry.services.items()
        if definition.requires_user and definition.declares_user_scopes
    )
