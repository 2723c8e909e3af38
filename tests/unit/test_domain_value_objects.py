"""Tests for capability value objects (PermissionKey, MenuKey, ActionKey)."""

import pytest

from gatekeeper.domain.value_objects import ActionKey, MenuKey, PermissionKey


def test_permission_key_str_is_resource_colon_action() -> None:
    key = PermissionKey(resource="users", action="create")
    assert str(key) == "users:create"


def test_permission_key_parse_round_trips() -> None:
    key = PermissionKey.parse("tenant-users:read")
    assert key.resource == "tenant-users"
    assert key.action == "read"


@pytest.mark.parametrize(
    "raw",
    ["users", "users:", ":create", "Users:create", "users:create:extra", "users:*", "*:*"],
)
def test_permission_key_parse_rejects_malformed(raw: str) -> None:
    with pytest.raises(ValueError):
        PermissionKey.parse(raw)


def test_permission_key_rejects_overlong_segment() -> None:
    with pytest.raises(ValueError, match="at most"):
        PermissionKey(resource="a" * 101, action="read")


def test_menu_and_action_keys_accept_hyphens_and_underscores() -> None:
    assert MenuKey("system-roles").value == "system-roles"
    assert ActionKey("manage_permissions").value == "manage_permissions"


def test_menu_key_rejects_empty() -> None:
    with pytest.raises(ValueError, match="non-empty"):
        MenuKey("")


def test_value_objects_are_equal_by_value() -> None:
    assert PermissionKey("users", "create") == PermissionKey.parse("users:create")
    assert MenuKey("users") == MenuKey("users")
