"""Service registry: the fixed set of known services and their auth metadata.

Services are capabilities (drive, docs, mail, ...) rather than concrete CLI
commands; commands map to services in ``commands.py``.

Not every service declares its user OAuth scopes yet. ``required_user_scopes``
is ``None`` for those, which is different from an empty tuple (declared, no
scopes needed). The auditor in ``audit.py`` relies on that difference.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenType(str, Enum):
    """Access token kinds a service may require."""

    TENANT = "tenant"
    USER = "user"

    def __str__(self) -> str:
        return self.value


_MODEL_CONFIG = ConfigDict(frozen=True)


class ScopeVariants(BaseModel):
    """OAuth scope variants requested during user login flows."""

    model_config = _MODEL_CONFIG
    full: tuple[str, ...] = Field(default=(), description="Scopes for full access")
    readonly: tuple[str, ...] = Field(default=(), description="Scopes for read-only access")


class ServiceDefinition(BaseModel):
    """Auth metadata for one service."""

    model_config = _MODEL_CONFIG
    name: str = Field(..., min_length=1)
    token_types: tuple[TokenType, ...] = ()
    # None: not declared yet. (): declared, no scopes needed.
    required_user_scopes: Optional[tuple[str, ...]] = None
    user_scopes: ScopeVariants = ScopeVariants()
    requires_offline: bool = False

    @property
    def requires_user(self) -> bool:
        return TokenType.USER in self.token_types

    @property
    def declares_user_scopes(self) -> bool:
        """True if any variant or minimal scope set is non-empty."""
        return bool(
            self.user_scopes.full
            or self.user_scopes.readonly
            or self.required_user_scopes
        )


class ServiceRegistry:
    """Read-only mapping of service name to ServiceDefinition.

    Alternative registries are built with ``with_services`` and passed to the
    resolution functions explicitly; the production snapshot is never mutated.
    """

    def __init__(self, services: Iterable[ServiceDefinition]):
        table: dict[str, ServiceDefinition] = {}
        for service in services:
            if service.name in table:
                raise ValueError(f"duplicate service {service.name!r}")
            if service.name != service.name.strip().lower():
                raise ValueError(f"service name must be lowercase: {service.name!r}")
            table[service.name] = service
        self._services: Mapping[str, ServiceDefinition] = MappingProxyType(table)

    def __contains__(self, name: object) -> bool:
        return name in self._services

    def __len__(self) -> int:
        return len(self._services)

    @property
    def services(self) -> Mapping[str, ServiceDefinition]:
        return self._services

    def lookup(self, name: str) -> ServiceDefinition | None:
        """Return the definition for ``name`` or None if unknown."""
        return self._services.get(name)

    def all_service_names(self) -> list[str]:
        """All registered service names, sorted."""
        return sorted(self._services)

    def with_services(self, *services: ServiceDefinition, remove: Iterable[str] = ()) -> ServiceRegistry:
        """Return a copy with ``services`` added or replaced and ``remove`` dropped."""
        dropped = set(remove)
        table = {name: svc for name, svc in self._services.items() if name not in dropped}
        for service in services:
            table[service.name] = service
        return ServiceRegistry(table.values())


_TENANT = TokenType.TENANT
_USER = TokenType.USER

# Scope sets shared by docs and docx
_DOCX_FULL = (
    "docx:document.block:convert",
    "docx:document:create",
    "docx:document:readonly",
    "docx:document:write_only",
)

_MAIL_READ = (
    "mail:user_mailbox.message:readonly",
    "mail:user_mailbox.message.subject:read",
    "mail:user_mailbox.message.address:read",
    "mail:user_mailbox.message.body:read",
)

_DRIVE_PERMISSION_SCOPES = (
    "docs:permission.member:create",
    "docs:permission.member:delete",
    "docs:permission.member:retrieve",
    "docs:permission.member:update",
    "docs:permission.setting:write_only",
)

# Keep this list stable and append-only where possible.
SERVICES: tuple[ServiceDefinition, ...] = (
    ServiceDefinition(name="base", token_types=(_TENANT,)),
    ServiceDefinition(
        name="calendar",
        token_types=(_TENANT, _USER),
        required_user_scopes=("calendar:calendar",),
        user_scopes=ScopeVariants(
            full=("calendar:calendar",),
            readonly=("calendar:calendar:readonly",),
        ),
    ),
    # "docs" is the legacy name used by existing commands; "docx" is the API
    # surface name for the same capability. Keep them aligned.
    ServiceDefinition(
        name="docs",
        token_types=(_TENANT, _USER),
        required_user_scopes=("docx:document:readonly",),
        user_scopes=ScopeVariants(full=_DOCX_FULL, readonly=("docx:document:readonly",)),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="docx",
        token_types=(_TENANT, _USER),
        required_user_scopes=("docx:document:readonly",),
        user_scopes=ScopeVariants(full=_DOCX_FULL, readonly=("docx:document:readonly",)),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="drive",
        token_types=(_TENANT, _USER),
        required_user_scopes=("drive:drive",),
        user_scopes=ScopeVariants(
            full=("drive:drive",),
            readonly=("drive:drive:readonly",),
        ),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="drive-comment-read",
        token_types=(_TENANT, _USER),
        required_user_scopes=("docs:document.comment:read",),
        user_scopes=ScopeVariants(
            full=("docs:document.comment:read",),
            readonly=("docs:document.comment:read",),
        ),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="drive-comment-write",
        token_types=(_TENANT, _USER),
        required_user_scopes=("docs:document.comment:create", "docs:document.comment:update"),
        user_scopes=ScopeVariants(
            full=("docs:document.comment:create", "docs:document.comment:update"),
        ),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="drive-download",
        token_types=(_TENANT, _USER),
        required_user_scopes=("drive:file:download",),
        user_scopes=ScopeVariants(
            full=("drive:file:download",),
            readonly=("drive:file:download",),
        ),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="drive-export",
        token_types=(_TENANT, _USER),
        required_user_scopes=("drive:export:readonly",),
        requires_offline=True,
    ),
    # drive.metadata covers file/folder metadata; space:document:retrieve is
    # required by the list endpoints.
    ServiceDefinition(
        name="drive-metadata",
        token_types=(_TENANT, _USER),
        required_user_scopes=("drive:drive.metadata:readonly", "space:document:retrieve"),
        user_scopes=ScopeVariants(
            full=("drive:drive.metadata:readonly", "space:document:retrieve"),
            readonly=("drive:drive.metadata:readonly", "space:document:retrieve"),
        ),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="drive-permissions",
        token_types=(_TENANT, _USER),
        required_user_scopes=_DRIVE_PERMISSION_SCOPES,
        user_scopes=ScopeVariants(
            full=_DRIVE_PERMISSION_SCOPES,
            readonly=("docs:permission.member:retrieve",),
        ),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="drive-search",
        token_types=(_USER,),
        required_user_scopes=("drive:drive.search:readonly",),
        user_scopes=ScopeVariants(
            full=("drive:drive.search:readonly",),
            readonly=("drive:drive.search:readonly",),
        ),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="drive-upload",
        token_types=(_TENANT, _USER),
        required_user_scopes=("drive:file:upload",),
        user_scopes=ScopeVariants(full=("drive:file:upload",)),
        requires_offline=True,
    ),
    ServiceDefinition(name="im", token_types=(_TENANT,)),
    ServiceDefinition(
        name="mail",
        token_types=(_TENANT, _USER),
        required_user_scopes=_MAIL_READ,
        user_scopes=ScopeVariants(
            full=("mail:user_mailbox.message:readonly", "mail:user_mailbox.message:send"),
            readonly=("mail:user_mailbox.message:readonly",),
        ),
        requires_offline=True,
    ),
    ServiceDefinition(name="mail-public", token_types=(_TENANT,)),
    ServiceDefinition(
        name="mail-send",
        token_types=(_USER,),
        required_user_scopes=("mail:user_mailbox.message:send",),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="search-docs",
        token_types=(_USER,),
        required_user_scopes=("search:docs:read",),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="search-message",
        token_types=(_USER,),
        required_user_scopes=("im:message:readonly", "search:message"),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="search-user",
        token_types=(_USER,),
        required_user_scopes=(
            "contact:contact.base:readonly",
            "contact:user.employee_id:readonly",
            "contact:user:search",
        ),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="sheets",
        token_types=(_TENANT, _USER),
        required_user_scopes=("sheets:spreadsheet:read",),
        user_scopes=ScopeVariants(
            full=(
                "sheets:spreadsheet.meta:read",
                "sheets:spreadsheet:create",
                "sheets:spreadsheet:read",
                "sheets:spreadsheet:write_only",
            ),
            readonly=("sheets:spreadsheet:readonly",),
        ),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="task",
        token_types=(_TENANT, _USER),
        required_user_scopes=("task:task:read",),
        user_scopes=ScopeVariants(full=("task:task:write",), readonly=("task:task:read",)),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="task-write",
        token_types=(_TENANT, _USER),
        required_user_scopes=("task:task:write",),
        user_scopes=ScopeVariants(full=("task:task:write",)),
        requires_offline=True,
    ),
    # Tasklist APIs require the read scope even when write is granted.
    ServiceDefinition(
        name="tasklist",
        token_types=(_TENANT, _USER),
        required_user_scopes=("task:tasklist:read",),
        user_scopes=ScopeVariants(
            full=("task:tasklist:read", "task:tasklist:write"),
            readonly=("task:tasklist:read",),
        ),
        requires_offline=True,
    ),
    ServiceDefinition(
        name="tasklist-write",
        token_types=(_TENANT, _USER),
        required_user_scopes=("task:tasklist:write",),
        user_scopes=ScopeVariants(full=("task:tasklist:read", "task:tasklist:write")),
        requires_offline=True,
    ),
    # Only confirmed OAuth scopes; some VC privilege strings seen in API
    # errors are not selectable in the developer console.
    ServiceDefinition(
        name="vc-meeting",
        token_types=(_USER,),
        required_user_scopes=("vc:meeting:readonly",),
        user_scopes=ScopeVariants(readonly=("vc:meeting:readonly",)),
        requires_offline=True,
    ),
    # Minimal wiki scopes are not confirmed yet.
    ServiceDefinition(
        name="wiki",
        token_types=(_TENANT, _USER),
        user_scopes=ScopeVariants(full=("wiki:wiki",), readonly=("wiki:wiki:readonly",)),
        requires_offline=True,
    ),
)

REGISTRY = ServiceRegistry(SERVICES)


def lookup(name: str, registry: ServiceRegistry | None = None) -> ServiceDefinition | None:
    """Look up a service definition by name."""
    if registry is None:
        registry = REGISTRY
    return registry.lookup(name)


def all_service_names(registry: ServiceRegistry | None = None) -> list[str]:
    """Return every registered service name in sorted order."""
    if registry is None:
        registry = REGISTRY
    return registry.all_service_names()
