"""Basic tests for the lark CLI."""

import json

import httpx
from typer.testing import CliRunner

runner = CliRunner()


def invoke(*args: str):
    from lark_cli.cli import app

    return runner.invoke(app, list(args))


def test_import_cli():
    """Test that the CLI module can be imported."""
    from lark_cli.cli import app

    assert app.info.name == "lark"


def test_auth_subcommands_exist():
    """Test that auth subcommands exist."""
    from lark_cli.cli import auth_app, auth_user_app, auth_user_scopes_app

    auth_commands = [cmd.name for cmd in auth_app.registered_commands]
    assert auth_commands == ["explain", "relogin", "services", "audit", "status"]

    user_commands = [cmd.name for cmd in auth_user_app.registered_commands]
    assert user_commands == ["services", "suggest", "url"]

    scope_commands = [cmd.name for cmd in auth_user_scopes_app.registered_commands]
    assert scope_commands == ["list", "set", "add", "remove"]


def test_output_helpers(capsys):
    """Test CLI output helper functions."""
    from lark_cli.cli import output_json

    output_json({"test": "value", "count": 42})
    parsed = json.loads(capsys.readouterr().out)
    assert parsed == {"test": "value", "count": 42}


def test_version():
    result = invoke("--version")
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"version": "0.3.0"}


# =============================================================================
# auth explain / relogin
# =============================================================================


def test_explain_drive_list():
    result = invoke("auth", "explain", "drive", "list")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["command"] == "drive list"
    assert data["services"] == ["drive"]
    assert data["token_types"] == ["tenant", "user"]
    assert data["requires_offline"] is True
    assert data["required_user_scopes"] == ["drive:drive"]
    assert data["services_missing_required_user_scopes"] == []
    assert data["suggested_user_login_scopes"] == ["offline_access", "drive:drive"]
    assert data["suggested_user_login_command"] == (
        'lark auth user login --scopes "offline_access drive:drive"'
    )


def test_explain_quoted_command():
    result = invoke("auth", "explain", "  Drive   LIST ")
    assert result.exit_code == 0
    assert json.loads(result.stdout)["services"] == ["drive"]


def test_explain_tenant_only_command():
    result = invoke("auth", "explain", "chats", "list")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["services"] == ["im"]
    assert data["token_types"] == ["tenant"]
    assert data["requires_offline"] is False
    assert data["required_user_scopes"] == []
    assert data["suggested_user_login_scopes"] == []
    assert data["suggested_user_login_command"] == ""


def test_explain_undeclared_service():
    result = invoke("auth", "explain", "wiki", "node", "list")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["services"] == ["wiki"]
    assert data["required_user_scopes"] == []
    assert data["services_missing_required_user_scopes"] == ["wiki"]


def test_explain_unknown_command():
    result = invoke("auth", "explain", "nope", "list")
    assert result.exit_code == 1


def test_explain_uses_configured_overrides(isolated_config):
    isolated_config.write_text(json.dumps({"command_services": {"chats list": ["search-message"]}}))
    result = invoke("auth", "explain", "chats", "list")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["services"] == ["search-message"]
    assert data["token_types"] == ["user"]


def test_explain_override_with_unknown_service(isolated_config):
    isolated_config.write_text(json.dumps({"command_services": {"chats list": ["ghost"]}}))
    result = invoke("auth", "explain", "chats", "list")
    assert result.exit_code == 1


def test_relogin_mail_send():
    result = invoke("auth", "relogin", "mail", "send")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["relogin_required"] is True
    assert data["scopes"] == ["offline_access", "mail:user_mailbox.message:send"]
    assert data["command"] == (
        'lark auth user login --scopes "offline_access mail:user_mailbox.message:send"'
        " --force-consent"
    )
    assert "mail-send" in data["note"]


def test_relogin_notes_undeclared_services():
    result = invoke("auth", "relogin", "wiki")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["scopes"] == ["offline_access"]
    assert "missing scope declarations for: wiki" in data["note"]


def test_relogin_tenant_only_command():
    result = invoke("auth", "relogin", "chats", "list")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["relogin_required"] is False
    assert data["command"] == "chats list"


# =============================================================================
# auth services / audit / status
# =============================================================================


def test_services_listing():
    result = invoke("auth", "services")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    names = [svc["name"] for svc in data["services"]]
    assert names == sorted(names)
    assert data["count"] == len(names)

    drive = next(svc for svc in data["services"] if svc["name"] == "drive")
    assert drive["token_types"] == ["tenant", "user"]
    assert drive["user_scopes"]["readonly"] == ["drive:drive:readonly"]


def test_audit_all():
    result = invoke("auth", "audit")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["missing_required_user_scopes"] == ["wiki"]
    assert data["count"] == 1


def test_audit_selected():
    result = invoke("auth", "audit", "drive", "im")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["checked"] == ["drive", "im"]
    assert data["missing_required_user_scopes"] == []


def test_audit_unknown_service():
    result = invoke("auth", "audit", "ghost")
    assert result.exit_code == 1


def test_status(isolated_config):
    result = invoke("auth", "status")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["config_path"] == str(isolated_config)
    assert data["has_config_file"] is False


# =============================================================================
# auth user
# =============================================================================


def test_user_services():
    result = invoke("auth", "user", "services")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert "drive" in data["services"]
    assert "wiki" in data["services"]
    assert "im" not in data["services"]
    assert data["default_services"] == ["drive"]
    assert data["service_aliases"]["all"] == ["drive", "docx", "sheets"]
    assert data["service_required_user_scopes"]["wiki"] is None
    assert data["drive_scope_values"] == ["full", "readonly"]


def test_user_suggest_readonly():
    result = invoke("auth", "user", "suggest", "-s", "drive,mail", "--readonly")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["services"] == ["drive", "mail"]
    assert data["scopes"] == ["drive:drive:readonly", "mail:user_mailbox.message:readonly"]


def test_user_suggest_default_services():
    result = invoke("auth", "user", "suggest")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["services"] == ["drive"]
    assert data["scopes"] == ["drive:drive"]


def test_user_url(monkeypatch):
    monkeypatch.setenv("LARK_APP_ID", "cli_test")
    result = invoke("auth", "user", "url", "-s", "drive", "--force-consent")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["scopes"] == ["offline_access", "drive:drive"]
    assert data["source"] == "services"

    url = httpx.URL(data["url"])
    assert url.host == "open.feishu.cn"
    assert url.params["client_id"] == "cli_test"
    assert url.params["scope"] == "offline_access drive:drive"
    assert url.params["state"] == data["state"]
    assert url.params["prompt"] == "consent"


def test_user_url_incremental_requests_missing_scopes(monkeypatch):
    monkeypatch.setenv("LARK_APP_ID", "cli_test")
    result = invoke(
        "auth", "user", "url", "-s", "drive,mail", "--readonly",
        "--granted-scopes", "offline_access drive:drive:readonly",
    )
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["incremental"] is True
    assert data["scopes"] == [
        "offline_access",
        "drive:drive:readonly",
        "mail:user_mailbox.message:readonly",
    ]
    assert data["requested_scopes"] == ["offline_access", "mail:user_mailbox.message:readonly"]

    url = httpx.URL(data["url"])
    assert url.params["scope"] == "offline_access mail:user_mailbox.message:readonly"
    assert url.params["include_granted_scopes"] == "true"


def test_user_url_no_incremental_requests_full_set(monkeypatch):
    monkeypatch.setenv("LARK_APP_ID", "cli_test")
    result = invoke(
        "auth", "user", "url", "-s", "drive", "--no-incremental",
        "--granted-scopes", "offline_access drive:drive",
    )
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["incremental"] is False
    assert data["requested_scopes"] == ["offline_access", "drive:drive"]

    url = httpx.URL(data["url"])
    assert url.params["scope"] == "offline_access drive:drive"
    assert "include_granted_scopes" not in url.params


def test_user_url_empty_flags_select_services_mode(isolated_config, monkeypatch):
    monkeypatch.setenv("LARK_APP_ID", "cli_test")
    isolated_config.write_text(json.dumps({"user_scopes": ["wiki:wiki"]}))

    for flags in (["--drive-scope", ""], ["-s", ""]):
        result = invoke("auth", "user", "url", *flags)
        assert result.exit_code == 0, flags
        data = json.loads(result.stdout)
        assert data["source"] == "services", flags
        assert data["scopes"] == ["offline_access", "drive:drive"], flags

    result = invoke("auth", "user", "url")
    assert json.loads(result.stdout)["source"] == "config"


def test_user_url_without_app_id():
    result = invoke("auth", "user", "url", "--scopes", "drive:drive")
    assert result.exit_code == 1


def test_user_url_rejects_file_drive_scope(monkeypatch):
    monkeypatch.setenv("LARK_APP_ID", "cli_test")
    result = invoke("auth", "user", "url", "--drive-scope", "file")
    assert result.exit_code == 1


def test_user_url_rejects_mixed_flags(monkeypatch):
    monkeypatch.setenv("LARK_APP_ID", "cli_test")
    result = invoke("auth", "user", "url", "--scopes", "drive:drive", "-s", "drive")
    assert result.exit_code == 1


def test_user_scopes_flow(isolated_config):
    result = invoke("auth", "user", "scopes", "list")
    assert json.loads(result.stdout)["source"] == "default"

    result = invoke("auth", "user", "scopes", "set", "drive:drive")
    assert result.exit_code == 0
    assert json.loads(result.stdout)["scopes"] == ["offline_access", "drive:drive"]

    result = invoke("auth", "user", "scopes", "add", "wiki:wiki,drive:drive")
    assert result.exit_code == 0
    assert json.loads(result.stdout)["scopes"] == ["offline_access", "drive:drive", "wiki:wiki"]

    result = invoke("auth", "user", "scopes", "remove", "drive:drive", "offline_access")
    assert result.exit_code == 0
    assert json.loads(result.stdout)["scopes"] == ["offline_access", "wiki:wiki"]

    result = invoke("auth", "user", "scopes", "list")
    data = json.loads(result.stdout)
    assert data["scopes"] == ["offline_access", "wiki:wiki"]
    assert data["source"] == "config"
    assert json.loads(isolated_config.read_text())["user_scopes"] == ["offline_access", "wiki:wiki"]


def test_user_scopes_set_empty():
    result = invoke("auth", "user", "scopes", "set", " , ")
    assert result.exit_code == 1
