"""Access evaluation integration tests: tenant isolation, status and expiry filtering."""

from datetime import UTC, datetime, timedelta

import pytest

from gatekeeper.application.dtos.access import AccessContext
from gatekeeper.application.dtos.role import RoleUpdate
from gatekeeper.domain.entities import Principal
from gatekeeper.domain.enums import RecordStatus, Space, TenantStatus, UserStatus
from gatekeeper.infrastructure.persistence.models import UserRole
from gatekeeper.infrastructure.persistence.repositories import (
    ModuleRepository,
    TenantRepository,
    UserRepository,
)
from gatekeeper.shared.utils.datetime import utc_now

SYSTEM_ADMIN = Principal.system("sys-admin")


async def _tenant_admin_setup(access, make_tenant, make_user, make_permission):
    """Tenant acme with user u1 holding a role that grants users:create."""
    tenant = await make_tenant("acme")
    user = await make_user("u1@acme.test", tenant.id)
    await make_permission("users:create", Space.TENANT)
    principal = Principal("acme-admin", tenant.id)
    role = (
        await access.create_role("Tenant Admin", None, Space.TENANT, tenant.id, principal=principal)
    ).unwrap()
    await access.grant_permission(role.id, "users:create", principal)
    await access.assign_role(user.id, role.id, principal)
    return tenant, user, role, principal


@pytest.mark.requires_db
async def test_permission_follows_own_tenant_role_only(
    access, make_tenant, make_user, make_permission
) -> None:
    """u1 of T1 gets users:create only via T1's role, never via T2's identically named role."""
    t1 = await make_tenant("t1")
    t2 = await make_tenant("t2")
    u1 = await make_user("u1@t1.test", t1.id)
    await make_permission("users:create", Space.TENANT)
    t1_admin = Principal("t1-admin", t1.id)
    t2_admin = Principal("t2-admin", t2.id)
    r1 = (
        await access.create_role("Tenant Admin", None, Space.TENANT, t1.id, principal=t1_admin)
    ).unwrap()
    r2 = (
        await access.create_role("Tenant Admin", None, Space.TENANT, t2.id, principal=t2_admin)
    ).unwrap()
    await access.grant_permission(r2.id, "users:create", t2_admin)
    await access.assign_role(u1.id, r1.id, t1_admin)

    assert await access.has_permission(u1.id, "users", "create") is False

    await access.grant_permission(r1.id, "users:create", t1_admin)
    assert await access.has_permission(u1.id, "users", "create") is True

    await access.revoke_permission(r1.id, "users:create", t1_admin)
    assert await access.has_permission(u1.id, "users", "create") is False


@pytest.mark.requires_db
async def test_unknown_user_has_nothing(access) -> None:
    assert await access.has_permission("ghost", "users", "create") is False
    assert await access.get_user_permissions("ghost") == {}


@pytest.mark.requires_db
async def test_inactive_role_grants_nothing(
    access, make_tenant, make_user, make_permission
) -> None:
    _, user, role, principal = await _tenant_admin_setup(
        access, make_tenant, make_user, make_permission
    )
    await access.registry.deactivate_role(role.id, principal)
    assert await access.has_permission(user.id, "users", "create") is False

    await access.update_role(role.id, RoleUpdate(status=RecordStatus.ACTIVE), principal)
    assert await access.has_permission(user.id, "users", "create") is True


@pytest.mark.requires_db
async def test_inactive_permission_grants_nothing(
    access, make_tenant, make_user, make_permission
) -> None:
    _, user, _, _ = await _tenant_admin_setup(access, make_tenant, make_user, make_permission)
    await access.catalog.deactivate_permission(SYSTEM_ADMIN, "users:create")
    assert await access.has_permission(user.id, "users", "create") is False


@pytest.mark.requires_db
async def test_inactive_user_or_tenant_grants_nothing(
    db_session, access, make_tenant, make_user, make_permission
) -> None:
    tenant, user, _, _ = await _tenant_admin_setup(
        access, make_tenant, make_user, make_permission
    )
    await UserRepository(db_session).set_status(user.id, UserStatus.SUSPENDED)
    assert await access.has_permission(user.id, "users", "create") is False

    await UserRepository(db_session).set_status(user.id, UserStatus.ACTIVE)
    assert await access.has_permission(user.id, "users", "create") is True

    await TenantRepository(db_session).set_status(tenant.id, TenantStatus.SUSPENDED)
    assert await access.has_permission(user.id, "users", "create") is False


@pytest.mark.requires_db
async def test_expired_assignment_is_filtered_and_renewed_on_reassign(
    db_session, access, make_tenant, make_user, make_permission
) -> None:
    tenant = await make_tenant("acme")
    user = await make_user("temp@acme.test", tenant.id)
    await make_permission("reports:view", Space.TENANT)
    principal = Principal("acme-admin", tenant.id)
    role = (
        await access.create_role("Viewer", None, Space.TENANT, tenant.id, principal=principal)
    ).unwrap()
    await access.grant_permission(role.id, "reports:view", principal)
    db_session.add(
        UserRole(
            user_id=user.id,
            role_id=role.id,
            assigned_by="acme-admin",
            expires_at=utc_now() - timedelta(hours=1),
        )
    )
    await db_session.flush()

    assert await access.has_permission(user.id, "reports", "view") is False
    assert await access.get_user_permissions(user.id) == {}
    assert await access.get_user_permission_keys(user.id) == set()

    result = await access.assign_role(
        user.id, role.id, principal, expires_at=utc_now() + timedelta(days=1)
    )
    assert result.is_ok
    assert await access.has_permission(user.id, "reports", "view") is True
    assert await access.get_user_permissions(user.id) == {"reports": ["view"]}


@pytest.mark.requires_db
async def test_assign_with_future_expiry_is_effective(
    access, make_tenant, make_user, make_permission
) -> None:
    tenant = await make_tenant("acme")
    user = await make_user("temp@acme.test", tenant.id)
    await make_permission("reports:view", Space.TENANT)
    principal = Principal("acme-admin", tenant.id)
    role = (
        await access.create_role("Viewer", None, Space.TENANT, tenant.id, principal=principal)
    ).unwrap()
    await access.grant_permission(role.id, "reports:view", principal)

    await access.assign_role(user.id, role.id, principal, expires_at=utc_now() + timedelta(hours=2))

    assert await access.get_user_permission_keys(user.id) == {"reports:view"}


@pytest.mark.requires_db
async def test_menu_views_and_inactive_module(
    db_session, access, make_user, make_permission
) -> None:
    user = await make_user("ops@platform.test")
    await make_permission("system_roles:view", Space.SYSTEM, menu_key="system-roles")
    await make_permission("system_roles:edit", Space.SYSTEM, menu_key="system-roles")
    await make_permission("audit:view", Space.SYSTEM)
    await ModuleRepository(db_session).create_module(
        menu_key="audit", display_name="Audit Log", space=Space.SYSTEM, action_keys=["view"]
    )
    role = (await access.create_role("Ops", None, Space.SYSTEM, principal=SYSTEM_ADMIN)).unwrap()
    await access.bulk_replace_permissions(
        role.id, ["system_roles:view", "system_roles:edit", "audit:view"], SYSTEM_ADMIN
    )
    await access.assign_role(user.id, role.id, SYSTEM_ADMIN)

    assert await access.get_user_permissions(user.id) == {
        "audit": ["view"],
        "system-roles": ["edit", "view"],
    }
    assert await access.has_action(user.id, "system-roles", "edit") is True
    assert await access.has_menu_access(user.id, "audit") is True

    await access.catalog.deactivate_module(SYSTEM_ADMIN, "audit")

    assert await access.has_menu_access(user.id, "audit") is False
    assert await access.has_action(user.id, "audit", "view") is False
    assert await access.has_permission(user.id, "audit", "view") is True
    assert "audit" not in await access.get_user_permissions(user.id)


@pytest.mark.requires_db
async def test_check_with_constraints(access, make_user, make_permission) -> None:
    user = await make_user("ops@platform.test")
    await make_permission("audit:export", Space.SYSTEM)
    role = (await access.create_role("Ops", None, Space.SYSTEM, principal=SYSTEM_ADMIN)).unwrap()
    await access.grant_permission(
        role.id,
        "audit:export",
        SYSTEM_ADMIN,
        {"allowed_ips": ["10.0.0.0/8"], "allowed_hours": list(range(8, 18)), "max_records": 500},
    )
    await access.assign_role(user.id, role.id, SYSTEM_ADMIN)
    at_ten = datetime(2026, 1, 5, 10, 0, tzinfo=UTC)

    allowed = await access.check_with_constraints(
        user.id, "audit", "export", AccessContext(ip_address="10.1.2.3", at=at_ten, record_count=10)
    )
    wrong_ip = await access.check_with_constraints(
        user.id, "audit", "export", AccessContext(ip_address="192.0.2.1", at=at_ten)
    )
    too_late = await access.check_with_constraints(
        user.id, "audit", "export", AccessContext(ip_address="10.1.2.3", at=at_ten.replace(hour=22))
    )
    too_many = await access.check_with_constraints(
        user.id, "audit", "export", AccessContext(ip_address="10.1.2.3", at=at_ten, record_count=501)
    )
    not_granted = await access.check_with_constraints(user.id, "audit", "view")

    assert allowed.allowed is True
    assert (wrong_ip.allowed, wrong_ip.reason) == (False, "IP not allowed")
    assert too_late.reason == "Outside allowed hours"
    assert too_many.reason == "Record limit exceeded"
    assert not_granted.reason == "Permission not found"
    assert await access.has_permission(user.id, "audit", "export") is True
