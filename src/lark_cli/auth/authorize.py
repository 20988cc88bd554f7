"""User authorization URL for the open platform OAuth flow."""

import httpx

AUTHORIZE_PATH = "/open-apis/authen/v1/authorize"


def build_user_authorize_url(
    base_url: str,
    app_id: str,
    redirect_uri: str,
    state: str = "",
    scope: str = "",
    prompt: str = "",
    include_granted_scopes: bool = False,
) -> str:
    """Build the URL the user opens to grant access.

    Args:
        base_url: Open platform base URL, e.g. https://open.feishu.cn
        app_id: Application (client) ID
        redirect_uri: Registered redirect URI
        state: Opaque CSRF state echoed back on the callback
        scope: Space-separated scopes
        prompt: Optional prompt, e.g. "consent"
        include_granted_scopes: Ask the server to merge with granted scopes

    Returns:
        The authorization URL.

    Raises:
        ValueError: If base_url is not an absolute http(s) URL.
    """
    try:
        base = httpx.URL(base_url)
    except httpx.InvalidURL as e:
        raise ValueError(f"invalid base URL {base_url!r}: {e}") from e
    if base.scheme not in ("http", "https") or not base.host:
        raise ValueError(f"invalid base URL {base_url!r}")

    params = {
        "client_id": app_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
    }
    if state:
        params["state"] = state
    if scope:
        params["scope"] = scope
    if prompt:
        params["prompt"] = prompt
    if include_granted_scopes:
        params["include_granted_scopes"] = "true"

    return str(base.copy_with(path=AUTHORIZE_PATH, params=params))
