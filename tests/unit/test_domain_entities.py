"""Tests for Principal and the Role variant (SystemRole | TenantRole)."""

import pytest

from gatekeeper.domain.entities import (
    Principal,
    SystemRole,
    TenantRole,
    role_from_fields,
)
from gatekeeper.domain.enums import RecordStatus, Space
from gatekeeper.domain.exceptions import InvalidRoleSpaceException


def test_principal_without_tenant_is_system_space() -> None:
    principal = Principal.system("u-1")
    assert principal.is_system is True
    assert principal.space == Space.SYSTEM


def test_principal_with_tenant_is_tenant_space() -> None:
    principal = Principal(user_id="u-1", tenant_id="t-1")
    assert principal.is_system is False
    assert principal.space == Space.TENANT


def test_system_role_has_no_tenant() -> None:
    role = SystemRole(id="r1", name="Ops", description=None, status=RecordStatus.ACTIVE)
    assert role.space == Space.SYSTEM
    assert role.tenant_id is None
    assert role.kind == "system"
    assert role.is_active is True


def test_tenant_role_requires_tenant() -> None:
    with pytest.raises(InvalidRoleSpaceException):
        TenantRole(
            id="r1", name="Admin", description=None, status=RecordStatus.ACTIVE, tenant_id=""
        )


def test_tenant_role_space_and_kind() -> None:
    role = TenantRole(
        id="r1", name="Admin", description=None, status=RecordStatus.INACTIVE, tenant_id="t1"
    )
    assert role.space == Space.TENANT
    assert role.kind == "tenant"
    assert role.is_active is False


def test_role_from_fields_builds_variant_by_space() -> None:
    system = role_from_fields(
        id="r1", name="Ops", description=None, space="system", tenant_id=None, status="active"
    )
    tenant = role_from_fields(
        id="r2", name="Admin", description="d", space="tenant", tenant_id="t1", status="active"
    )
    assert isinstance(system, SystemRole)
    assert isinstance(tenant, TenantRole)
    assert tenant.tenant_id == "t1"


@pytest.mark.parametrize(
    ("space", "tenant_id"),
    [("system", "t1"), ("tenant", None), ("global", None)],
)
def test_role_from_fields_rejects_inconsistent_rows(space: str, tenant_id: str | None) -> None:
    with pytest.raises(InvalidRoleSpaceException) as exc_info:
        role_from_fields(
            id="r1",
            name="Bad",
            description=None,
            space=space,
            tenant_id=tenant_id,
            status="active",
        )
    assert exc_info.value.error_code == "INVALID_ROLE_SPACE"


def test_enum_values_helpers() -> None:
    assert Space.values() == ["system", "tenant"]
    assert RecordStatus.values() == ["active", "inactive"]
