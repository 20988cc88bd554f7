"""Auth registry: services, command mappings and OAuth scope resolution."""

from lark_cli.authregistry.aliases import (
    DEFAULT_USER_OAUTH_SERVICES,
    USER_OAUTH_SERVICE_ALIASES,
    expand_aliases,
)
from lark_cli.authregistry.audit import services_missing_required_user_scopes
from lark_cli.authregistry.commands import (
    COMMAND_SERVICES,
    DEFAULT_COMMAND_MAP,
    CommandServiceMap,
    services_for_command,
    services_for_command_path,
)
from lark_cli.authregistry.normalize import (
    normalize_command_path,
    normalize_service_list,
    parse_scope_list,
    parse_service_list,
    unique_sorted,
)
from lark_cli.authregistry.registry import (
    REGISTRY,
    SERVICES,
    ScopeVariants,
    ServiceDefinition,
    ServiceRegistry,
    TokenType,
    all_service_names,
    lookup,
)
from lark_cli.authregistry.requirements import (
    CommandRequirements,
    required_user_scopes_from_services,
    required_user_scopes_report,
    requirements_for_command,
    requires_offline_from_services,
    token_types_from_services,
)
from lark_cli.authregistry.user_oauth import (
    DRIVE_SCOPE_VALUES,
    list_user_oauth_services,
    resolve_drive_scope,
    suggested_user_oauth_scopes,
    user_oauth_scopes_from_services,
)

__all__ = [
    "COMMAND_SERVICES",
    "CommandRequirements",
    "CommandServiceMap",
    "DEFAULT_COMMAND_MAP",
    "DEFAULT_USER_OAUTH_SERVICES",
    "DRIVE_SCOPE_VALUES",
    "REGISTRY",
    "SERVICES",
    "ScopeVariants",
    "ServiceDefinition",
    "ServiceRegistry",
    "TokenType",
    "USER_OAUTH_SERVICE_ALIASES",
    "all_service_names",
    "expand_aliases",
    "list_user_oauth_services",
    "lookup",
    "normalize_command_path",
    "normalize_service_list",
    "parse_scope_list",
    "parse_service_list",
    "required_user_scopes_from_services",
    "required_user_scopes_report",
    "requirements_for_command",
    "requires_offline_from_services",
    "resolve_drive_scope",
    "services_for_command",
    "services_for_command_path",
    "services_missing_required_user_scopes",
    "suggested_user_oauth_scopes",
    "token_types_from_services",
    "unique_sorted",
    "user_oauth_scopes_from_services",
]
