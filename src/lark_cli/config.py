"""Configuration file and environment handling for the Lark CLI."""

import json
import logging
import os
from pathlib import Path
from typing import Any

from lark_cli.authregistry.commands import DEFAULT_COMMAND_MAP, CommandServiceMap
from lark_cli.authregistry.normalize import normalize_strings
from lark_cli.errors import LarkConfigError

logger = logging.getLogger(__name__)

# Config file location (override with LARK_CONFIG)
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "lark-cli" / "config.json"

DEFAULT_BASE_URL = "https://open.feishu.cn"
DEFAULT_REDIRECT_URI = "http://localhost:17653/callback"


def get_config_path() -> Path:
    """Return the config file path, honouring LARK_CONFIG."""
    override = os.environ.get("LARK_CONFIG")
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


def load_config() -> dict[str, Any]:
    """Load configuration from the config file, or {} if missing/unreadable."""
    path = get_config_path()
    if path.exists():
        try:
            with open(path) as f:
                config = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable config %s: %s", path, e)
            return {}
        if isinstance(config, dict):
            return config
        logger.warning("Ignoring config %s: top level is not an object", path)
    return {}


def save_config(config: dict) -> Path:
    """Save config dict to file with owner-only permissions.

    Returns:
        Path to the config file
    """
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(config, f, indent=2)
    # Secure permissions (Unix only, no-op on Windows)
    try:
        path.chmod(0o600)
    except OSError:
        pass
    return path


def get_app_id() -> str:
    """Get the app ID from LARK_APP_ID or the config file.

    Raises:
        LarkConfigError: If no app ID is configured
    """
    app_id = os.environ.get("LARK_APP_ID") or load_config().get("app_id")
    if not app_id:
        raise LarkConfigError(
            "Missing app ID. Set LARK_APP_ID or add app_id to "
            f"{get_config_path()}"
        )
    return str(app_id)


def get_base_url() -> str:
    """Get the open platform base URL (LARK_BASE_URL, config, then default)."""
    base_url = os.environ.get("LARK_BASE_URL") or load_config().get("base_url")
    return str(base_url or DEFAULT_BASE_URL).rstrip("/")


def get_redirect_uri() -> str:
    """Get the OAuth redirect URI from the config file or the default."""
    return str(load_config().get("redirect_uri") or DEFAULT_REDIRECT_URI)


def get_user_scopes() -> list[str]:
    """Get the configured default user OAuth scopes (may be empty)."""
    raw = load_config().get("user_scopes") or []
    if isinstance(raw, str):
        raw = raw.split()
    if not isinstance(raw, list):
        raise LarkConfigError(f"user_scopes in {get_config_path()} must be a list of strings")
    return normalize_strings(str(scope) for scope in raw)


def save_user_scopes(scopes: list[str]) -> Path:
    """Persist default user OAuth scopes, preserving other settings."""
    config = load_config()
    config["user_scopes"] = list(scopes)
    return save_config(config)


def get_command_service_overrides() -> dict[str, list[str]]:
    """Read ``command_services`` overrides from the config file.

    Entries that are not a list of strings are skipped with a warning.
    """
    raw = load_config().get("command_services") or {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring command_services: expected an object")
        return {}
    overrides = {}
    for command, services in raw.items():
        if isinstance(services, str):
            services = [services]
        if not isinstance(services, list) or not all(isinstance(s, str) for s in services):
            logger.warning("Ignoring command_services entry %r: expected a list of service names", command)
            continue
        overrides[str(command)] = services
    return overrides


def get_command_service_map() -> CommandServiceMap:
    """Default command map merged with configured overrides."""
    return DEFAULT_COMMAND_MAP.with_overrides(get_command_service_overrides())


def get_config_status() -> dict:
    """Summarize configuration state for status output."""
    path = get_config_path()
    env_vars_set = [name for name in ("LARK_APP_ID", "LARK_BASE_URL", "LARK_CONFIG") if os.environ.get(name)]
    return {
        "config_path": str(path),
        "has_config_file": path.exists(),
        "env_vars_set": env_vars_set,
        "base_url": get_base_url(),
    }
