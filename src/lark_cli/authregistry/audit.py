"""Find services whose user OAuth scopes have not been declared yet."""

from collections.abc import Iterable

from lark_cli.authregistry.normalize import normalize_service_list, unique_sorted
from lark_cli.authregistry.registry import REGISTRY, ServiceRegistry
from lark_cli.errors import UnknownServiceError


def services_missing_required_user_scopes(
    services: Iterable[str] | None,
    registry: ServiceRegistry | None = None,
) -> list[str]:
    """Return the services that need a user token but have undeclared scopes.

    A service is flagged only when ``required_user_scopes`` is None. A service
    that declares an empty tuple is considered declared. Services that do not
    require a user token are skipped.

    Raises:
        UnknownServiceError: If a service is not in the registry.
    """
    if registry is None:
        registry = REGISTRY
    missing = []
    for name in normalize_service_list(services):
        definition = registry.lookup(name)
        if definition is None:
            raise UnknownServiceError(name)
        if not definition.requires_user:
            continue
        if definition.required_user_scopes is None:
            missing.append(name)
    return unique_sorted(missing)
