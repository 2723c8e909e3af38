"""Unit tests for ownership checks (cross-space, cross-tenant, space match)."""

import logging

import pytest

from gatekeeper.application.dtos.permission import PermissionResult
from gatekeeper.application.dtos.user import UserResult
from gatekeeper.application.services.ownership import (
    can_read_role,
    check_can_read_role,
    check_permission_space,
    check_role_ownership,
    check_user_matches_role,
)
from gatekeeper.domain.entities import Principal, SystemRole, TenantRole
from gatekeeper.domain.enums import RecordStatus, Space, UserStatus
from gatekeeper.domain.exceptions import (
    PermissionDeniedException,
    SecurityViolationException,
    UserSpaceMismatchException,
)

SYSTEM_ROLE = SystemRole(id="sr", name="Ops", description=None, status=RecordStatus.ACTIVE)
T1_ROLE = TenantRole(
    id="tr1", name="Tenant Admin", description=None, status=RecordStatus.ACTIVE, tenant_id="t1"
)
T2_ROLE = TenantRole(
    id="tr2", name="Tenant Admin", description=None, status=RecordStatus.ACTIVE, tenant_id="t2"
)


def _permission(key: str, space: Space) -> PermissionResult:
    resource, action = key.split(":")
    return PermissionResult(
        id=f"p-{key}",
        permission_key=key,
        resource=resource,
        action=action,
        description=None,
        space=space,
        menu_key=resource,
        status=RecordStatus.ACTIVE,
    )


def test_system_principal_may_modify_system_role() -> None:
    check_role_ownership(Principal.system("u"), SYSTEM_ROLE)


def test_system_principal_may_not_modify_tenant_role() -> None:
    with pytest.raises(PermissionDeniedException) as exc_info:
        check_role_ownership(Principal.system("u"), T1_ROLE)
    assert "system principal cannot modify tenant roles" in exc_info.value.message


def test_tenant_principal_may_not_modify_system_role() -> None:
    with pytest.raises(PermissionDeniedException):
        check_role_ownership(Principal("u", "t1"), SYSTEM_ROLE)


def test_tenant_principal_may_not_modify_other_tenant_role() -> None:
    with pytest.raises(PermissionDeniedException) as exc_info:
        check_role_ownership(Principal("u", "t1"), T2_ROLE)
    assert "another tenant" in exc_info.value.message
    assert "t2" not in exc_info.value.message


def test_tenant_principal_may_modify_own_tenant_role() -> None:
    check_role_ownership(Principal("u", "t1"), T1_ROLE)


def test_permission_space_mismatch_is_security_violation_and_logged(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        with pytest.raises(SecurityViolationException):
            check_permission_space(SYSTEM_ROLE, _permission("tenant-users:read", Space.TENANT))
    assert "Security violation" in caplog.text


def test_permission_space_match_passes() -> None:
    check_permission_space(T1_ROLE, _permission("users:create", Space.TENANT))


def test_user_must_match_role_space_and_tenant() -> None:
    system_user = UserResult(id="u1", tenant_id=None, email="a@x", status=UserStatus.ACTIVE)
    t1_user = UserResult(id="u2", tenant_id="t1", email="b@x", status=UserStatus.ACTIVE)
    check_user_matches_role(system_user, SYSTEM_ROLE)
    check_user_matches_role(t1_user, T1_ROLE)
    with pytest.raises(UserSpaceMismatchException):
        check_user_matches_role(system_user, T1_ROLE)
    with pytest.raises(UserSpaceMismatchException):
        check_user_matches_role(t1_user, T2_ROLE)


def test_read_visibility() -> None:
    assert can_read_role(Principal.system("u"), T2_ROLE)
    assert can_read_role(Principal("u", "t1"), SYSTEM_ROLE)
    assert can_read_role(Principal("u", "t1"), T1_ROLE)
    assert not can_read_role(Principal("u", "t1"), T2_ROLE)
    with pytest.raises(PermissionDeniedException):
        check_can_read_role(Principal("u", "t1"), T2_ROLE)
