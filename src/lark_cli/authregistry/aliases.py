"""User-facing service aliases for services-based user OAuth flows."""

from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType

from lark_cli.authregistry.normalize import normalize_service_list

# Services used when a services-based login selects nothing
DEFAULT_USER_OAUTH_SERVICES: tuple[str, ...] = ("drive",)

USER_OAUTH_SERVICE_ALIASES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "all": ("drive", "docx", "sheets"),
    "user": ("drive", "docx", "sheets"),
})


def expand_aliases(
    names: Iterable[str] | None,
    aliases: Mapping[str, Sequence[str]] | None = None,
) -> list[str]:
    """Expand aliases such as ``all`` into concrete service names.

    Input and output are normalized (trimmed, lowercased, de-duplicated in
    first-seen order). Expansion is a single level: names produced by an
    alias are never expanded again.
    """
    if aliases is None:
        aliases = USER_OAUTH_SERVICE_ALIASES
    expanded: list[str] = []
    for name in normalize_service_list(names):
        expanded.extend(aliases.get(name, (name,)))
    return normalize_service_list(expanded)
