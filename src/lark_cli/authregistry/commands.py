"""Command path to service mapping.

Keys are normalized, space-separated command paths; values are service names
from the registry. Lookup is exact: ``drive list`` only resolves because it
has its own entry, there is no fallback to ``drive``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType

from lark_cli.authregistry.normalize import (
    normalize_command_path,
    normalize_service_list,
    unique_sorted,
)

logger = logging.getLogger(__name__)

COMMAND_SERVICES: dict[str, tuple[str, ...]] = {
    # Drive ("My Space")
    "drive": ("drive",),
    "drive list": ("drive",),
    "drive info": ("drive",),
    "drive urls": ("drive",),
    "drive search": ("drive", "search-docs"),
    "drive download": ("drive-download",),
    "drive upload": ("drive-upload",),
    "drive export": ("drive-export",),
    "drive share": ("drive-permissions",),
    "drive permissions": ("drive-permissions",),
    "drive permissions list": ("drive-permissions",),
    "drive permissions add": ("drive-permissions",),
    "drive permissions update": ("drive-permissions",),
    "drive permissions delete": ("drive-permissions",),
    "drive comment": ("drive",),
    "drive comment list": ("drive-comment-read",),
    "drive comment get": ("drive-comment-read",),
    "drive comment replies": ("drive-comment-read",),
    "drive comment create": ("drive-comment-write",),
    "drive comment reply": ("drive-comment-write",),
    "drive comment update": ("drive-comment-write",),
    # Docs
    "docs": ("docs",),
    "docs info": ("docs",),
    "docs cat": ("docs",),
    "docs create": ("docs",),
    "docs overwrite": ("docs",),
    "docs convert": ("docs",),
    "docs export": ("drive-export",),
    "docs blocks": ("docs",),
    "docs blocks list": ("docs",),
    "docs blocks get": ("docs",),
    "docs blocks update": ("docs",),
    # Sheets
    "sheets": ("sheets",),
    "sheets info": ("sheets",),
    "sheets read": ("sheets",),
    "sheets update": ("sheets",),
    "sheets append": ("sheets",),
    "sheets clear": ("sheets",),
    "sheets create": ("sheets",),
    "sheets delete": ("sheets",),
    # Mail
    "mail": ("mail",),
    "mail list": ("mail",),
    "mail info": ("mail",),
    "mail send": ("mail-send",),
    "mail public-mailboxes": ("mail-public",),
    "mail mailboxes": ("mail-public",),
    # Wiki
    "wiki": ("wiki",),
    "wiki node": ("wiki",),
    "wiki node get": ("wiki",),
    "wiki node list": ("wiki",),
    "wiki node create": ("wiki",),
    "wiki node move": ("wiki",),
    "wiki space": ("wiki",),
    "wiki space list": ("wiki",),
    # Base (bitable)
    "base": ("base",),
    "bases": ("base",),
    "base table": ("base",),
    "base record": ("base",),
    "base field": ("base",),
    "base view": ("base",),
    # Calendar
    "calendar": ("calendar",),
    "calendars": ("calendar",),
    "calendar list": ("calendar",),
    "calendar create": ("calendar",),
    "calendar update": ("calendar",),
    "calendar delete": ("calendar",),
    # Tasks
    "tasks": ("task",),
    "tasks list": ("task",),
    "tasks info": ("task",),
    "tasks create": ("task-write",),
    "tasks update": ("task-write",),
    "tasks delete": ("task-write",),
    "tasklists": ("tasklist",),
    "tasklists list": ("tasklist",),
    "tasklists info": ("tasklist",),
    "tasklists create": ("tasklist-write",),
    "tasklists update": ("tasklist-write",),
    "tasklists delete": ("tasklist-write",),
    # Chat and messages
    "chats": ("im",),
    "chats list": ("im",),
    "chats get": ("im",),
    "chats create": ("im",),
    "chats update": ("im",),
    "chats announcement": ("im",),
    "messages": ("im",),
    "messages list": ("im",),
    "messages send": ("im",),
    "messages reply": ("im",),
    "messages pin": ("im",),
    "messages unpin": ("im",),
    "messages reactions": ("im",),
    "messages search": ("search-message",),
    "msg": ("im",),
    "msg list": ("im",),
    "msg send": ("im",),
    "msg reply": ("im",),
    "msg search": ("search-message",),
    # Contacts
    "users search": ("search-user",),
    # Meetings
    "meetings": ("vc-meeting",),
    "meetings list": ("vc-meeting",),
    "meetings info": ("vc-meeting",),
    # Internal aliases, not exposed as CLI roots
    "im": ("im",),
}


class CommandServiceMap:
    """Read-only command path -> service names table."""

    def __init__(self, entries: Mapping[str, Sequence[str]]):
        self._entries: Mapping[str, tuple[str, ...]] = MappingProxyType(
            {key: tuple(services) for key, services in entries.items()}
        )

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> tuple[str, ...] | None:
        return self._entries.get(key)

    def with_overrides(self, overrides: Mapping[str, Iterable[str]] | None) -> CommandServiceMap:
        """Return a new map with ``overrides`` merged over these entries.

        Override keys are normalized like command paths and values like
        service lists. Entries that normalize to nothing are skipped.
        """
        if not overrides:
            return self
        merged = dict(self._entries)
        for key, services in overrides.items():
            path = normalize_command_path(key.split())
            names = normalize_service_list(services)
            if not path or not names:
                logger.warning("Ignoring invalid command service override %r -> %r", key, services)
                continue
            merged[path] = tuple(names)
        return CommandServiceMap(merged)


DEFAULT_COMMAND_MAP = CommandServiceMap(COMMAND_SERVICES)


def services_for_command_path(
    path: Sequence[str] | None,
    command_map: CommandServiceMap | None = None,
) -> list[str] | None:
    """Return the services mapped to a command path.

    Args:
        path: Command words, e.g. ``["drive", "list"]``. Case and surrounding
            whitespace are ignored.
        command_map: Table to resolve against (default: DEFAULT_COMMAND_MAP).

    Returns:
        Sorted, de-duplicated service names, or None when the path is invalid
        or has no exact mapping.
    """
    if command_map is None:
        command_map = DEFAULT_COMMAND_MAP
    key = normalize_command_path(path)
    if not key:
        return None
    services = command_map.get(key)
    if services is None:
        logger.debug("No service mapping for command %r", key)
        return None
    return unique_sorted(services)


def services_for_command(
    command: str,
    command_map: CommandServiceMap | None = None,
) -> list[str] | None:
    """Like ``services_for_command_path`` for a space-separated command string."""
    return services_for_command_path(command.split(), command_map)
