"""Tests for the missing-scope auditor."""

import pytest

from lark_cli.authregistry import (
    REGISTRY,
    ServiceDefinition,
    all_service_names,
    services_missing_required_user_scopes,
)
from lark_cli.errors import UnknownServiceError


def test_flags_only_undeclared_user_services():
    # drive and mail declare scopes, wiki does not, base is tenant-only
    missing = services_missing_required_user_scopes(["drive", "mail", "wiki", "base"])
    assert missing == ["wiki"]


def test_whole_registry():
    assert services_missing_required_user_scopes(all_service_names()) == ["wiki"]


def test_empty_list_is_declared():
    registry = REGISTRY.with_services(
        ServiceDefinition(name="test-none", token_types=["user"], required_user_scopes=None),
        ServiceDefinition(name="test-empty", token_types=["user"], required_user_scopes=[]),
        ServiceDefinition(name="test-tenant", token_types=["tenant"], required_user_scopes=None),
    )
    missing = services_missing_required_user_scopes(
        ["test-tenant", "test-empty", "test-none"], registry
    )
    assert missing == ["test-none"]


def test_output_sorted_and_unique():
    registry = REGISTRY.with_services(
        ServiceDefinition(name="zz-svc", token_types=["user"]),
        ServiceDefinition(name="aa-svc", token_types=["user"]),
    )
    missing = services_missing_required_user_scopes(["zz-svc", "AA-svc", "zz-svc"], registry)
    assert missing == ["aa-svc", "zz-svc"]


def test_unknown_service():
    with pytest.raises(UnknownServiceError):
        services_missing_required_user_scopes(["nope"])
