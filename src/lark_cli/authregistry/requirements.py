"""Aggregate auth requirements across a set of services.

Every function raises UnknownServiceError as soon as it meets a service the
registry does not know; nothing is aggregated past that point.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from lark_cli.authregistry.audit import services_missing_required_user_scopes
from lark_cli.authregistry.commands import CommandServiceMap, services_for_command
from lark_cli.authregistry.normalize import (
    normalize_command_path,
    normalize_service_list,
    unique_sorted,
)
from lark_cli.authregistry.registry import (
    REGISTRY,
    ServiceRegistry,
    TokenType,
)
from lark_cli.errors import UnknownServiceError

logger = logging.getLogger(__name__)


class CommandRequirements(BaseModel):
    """Declared auth requirements of a CLI command."""

    model_config = ConfigDict(frozen=True)
    command: str
    services: list[str]
    token_types: list[TokenType]
    requires_offline: bool
    required_user_scopes: list[str]

    @property
    def requires_user(self) -> bool:
        return TokenType.USER in self.token_types


def _definitions(services: Iterable[str] | None, registry: ServiceRegistry | None):
    """Yield (name, definition) in normalized input order, failing on unknown names."""
    if registry is None:
        registry = REGISTRY
    for name in normalize_service_list(services):
        definition = registry.lookup(name)
        if definition is None:
            raise UnknownServiceError(name)
        yield name, definition


def token_types_from_services(
    services: Iterable[str] | None,
    registry: ServiceRegistry | None = None,
) -> list[TokenType]:
    """Sorted, de-duplicated union of the token types the services declare."""
    values: list[str] = []
    for _, definition in _definitions(services, registry):
        values.extend(tt.value for tt in definition.token_types)
    return [TokenType(value) for value in unique_sorted(values)]


def requires_offline_from_services(
    services: Iterable[str] | None,
    registry: ServiceRegistry | None = None,
) -> bool:
    """Report whether any service requires offline access.

    Services are checked in input order and the check stops at the first
    service that requires it, so an unknown service listed before that one
    raises while an unknown service listed after it does not.
    """
    for _, definition in _definitions(services, registry):
        if definition.requires_offline:
            return True
    return False


def required_user_scopes_from_services(
    services: Iterable[str] | None,
    registry: ServiceRegistry | None = None,
) -> list[str]:
    """Sorted union of the minimal user scopes declared by the services.

    Services with undeclared or empty scopes contribute nothing.
    """
    scopes: list[str] = []
    for _, definition in _definitions(services, registry):
        scopes.extend(definition.required_user_scopes or ())
    return unique_sorted(scopes)


def required_user_scopes_report(
    services: Iterable[str] | None,
    registry: ServiceRegistry | None = None,
) -> tuple[list[str], list[str]]:
    """Return the minimal user scope union and the services with undeclared scopes."""
    services = normalize_service_list(services)
    scopes = required_user_scopes_from_services(services, registry)
    undeclared = services_missing_required_user_scopes(services, registry)
    return scopes, undeclared


def requirements_for_command(
    command: str,
    *,
    registry: ServiceRegistry | None = None,
    command_map: CommandServiceMap | None = None,
) -> CommandRequirements | None:
    """Resolve a command's auth requirements.

    Args:
        command: Space-separated command path, e.g. ``"drive list"``.
        registry: Service registry to aggregate against.
        command_map: Command map to resolve the command with.

    Returns:
        CommandRequirements, or None if the command has no mapping.

    Raises:
        UnknownServiceError: The command is mapped, but to a service the
            registry does not define. ``error.command`` is set.
    """
    services = services_for_command(command, command_map)
    if services is None:
        return None
    command = normalize_command_path(command.split())

    try:
        token_types = token_types_from_services(services, registry)
        requires_offline = requires_offline_from_services(services, registry)
        required_user_scopes = required_user_scopes_from_services(services, registry)
    except UnknownServiceError as e:
        e.command = command
        raise

    logger.debug(
        "Command %r -> services=%s token_types=%s offline=%s",
        command, services, [str(tt) for tt in token_types], requires_offline,
    )
    return CommandRequirements(
        command=command,
        services=services,
        token_types=token_types,
        requires_offline=requires_offline,
        required_user_scopes=required_user_scopes,
    )
