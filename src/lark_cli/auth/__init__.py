"""User OAuth helpers: scope lists and authorization URLs."""

from lark_cli.auth.authorize import build_user_authorize_url
from lark_cli.auth.scopes import (
    DEFAULT_USER_OAUTH_SCOPE,
    canonicalize_user_oauth_scopes,
    ensure_offline_access,
    join_scopes,
    requested_user_oauth_scopes,
    resolve_user_oauth_scopes,
)

__all__ = [
    "DEFAULT_USER_OAUTH_SCOPE",
    "build_user_authorize_url",
    "canonicalize_user_oauth_scopes",
    "ensure_offline_access",
    "join_scopes",
    "requested_user_oauth_scopes",
    "resolve_user_oauth_scopes",
]
