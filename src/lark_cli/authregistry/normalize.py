"""String list normalization shared by the auth registry.

Outputs that callers can observe go through ``unique_sorted`` so results do
not depend on input order. ``normalize_service_list`` keeps first-seen order
for the places where iteration order matters.
"""

import re
from collections.abc import Iterable

# Separators accepted in scope and service lists typed on the command line
_LIST_SPLIT_PATTERN = re.compile(r"[,\s]+")


def normalize_command_path(tokens: str | Iterable[str] | None) -> str:
    """Canonicalize a command path.

    Each token is trimmed and lowercased. An empty path, or a path with any
    token that is empty after trimming, is invalid.

    Args:
        tokens: Command words, e.g. ``["drive", "list"]``. A plain string is
            split on whitespace.

    Returns:
        Tokens joined by single spaces, or ``""`` when the path is invalid.
    """
    if isinstance(tokens, str):
        tokens = tokens.split()
    if not tokens:
        return ""
    parts = []
    for token in tokens:
        token = token.strip().lower()
        if not token:
            return ""
        parts.append(token)
    return " ".join(parts)


def normalize_service_list(names: Iterable[str] | None) -> list[str]:
    """Trim, lowercase and de-duplicate service names, keeping first-seen order."""
    seen: set[str] = set()
    out = []
    for name in names or ():
        name = name.strip().lower()
        if not name or name in seen:
            continue
        seen.add(name)
        out.append(name)
    return out


def normalize_strings(items: Iterable[str] | None) -> list[str]:
    """Trim and de-duplicate strings, keeping first-seen order and case."""
    seen: set[str] = set()
    out = []
    for item in items or ():
        item = item.strip()
        if not item or item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out


def unique_sorted(items: Iterable[str] | None) -> list[str]:
    """Trim, drop empties, de-duplicate and sort."""
    return sorted(normalize_strings(items))


def parse_scope_list(raw: str | None) -> list[str]:
    """Split a comma/whitespace separated scope string."""
    if not raw or not raw.strip():
        return []
    return normalize_strings(_LIST_SPLIT_PATTERN.split(raw))


def parse_service_list(raw: Iterable[str] | None) -> list[str]:
    """Split CLI service entries (``-s drive,mail -s wiki``) into service names."""
    parts: list[str] = []
    for entry in raw or ():
        parts.extend(_LIST_SPLIT_PATTERN.split(entry))
    return normalize_service_list(parts)
