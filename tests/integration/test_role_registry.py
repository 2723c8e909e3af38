"""Role registry integration tests: space invariant, ownership, listing."""

import pytest
from sqlalchemy import func, select

from gatekeeper.application.dtos.pagination import PageParams
from gatekeeper.application.dtos.role import RoleUpdate
from gatekeeper.application.result import Err
from gatekeeper.domain.entities import Principal, SystemRole, TenantRole
from gatekeeper.domain.enums import RecordStatus, Space, TenantStatus
from gatekeeper.domain.exceptions import (
    InvalidRoleSpaceException,
    PermissionDeniedException,
    ResourceNotFoundException,
    ValidationException,
)
from gatekeeper.infrastructure.persistence.models import UserRole
from gatekeeper.infrastructure.persistence.repositories import ModuleRepository

SYSTEM_ADMIN = Principal.system("sys-admin")


@pytest.mark.requires_db
async def test_create_system_role(access, audit_hook) -> None:
    role = (
        await access.create_role("Support", "Platform support", Space.SYSTEM, principal=SYSTEM_ADMIN)
    ).unwrap()
    assert isinstance(role, SystemRole)
    assert role.tenant_id is None
    assert role.status == RecordStatus.ACTIVE
    assert audit_hook.events[-1]["action"] == "created"
    assert audit_hook.events[-1]["details"]["after"]["name"] == "Support"


@pytest.mark.requires_db
async def test_create_role_space_tenant_mismatch(access, make_tenant) -> None:
    tenant = await make_tenant("acme")
    with_tenant = await access.create_role(
        "Bad", None, Space.SYSTEM, tenant.id, principal=SYSTEM_ADMIN
    )
    without_tenant = await access.create_role(
        "Bad", None, Space.TENANT, None, principal=Principal("x", tenant.id)
    )
    unknown_space = await access.create_role("Bad", None, "global", principal=SYSTEM_ADMIN)
    assert isinstance(with_tenant.error, InvalidRoleSpaceException)
    assert isinstance(without_tenant.error, InvalidRoleSpaceException)
    assert isinstance(unknown_space.error, InvalidRoleSpaceException)


@pytest.mark.requires_db
async def test_create_tenant_role_requires_active_tenant(access, make_tenant) -> None:
    suspended = await make_tenant("frozen", status=TenantStatus.SUSPENDED)
    missing = await access.create_role(
        "Clerk", None, Space.TENANT, "no-such-tenant", principal=Principal("x", "no-such-tenant")
    )
    inactive = await access.create_role(
        "Clerk", None, Space.TENANT, suspended.id, principal=Principal("x", suspended.id)
    )
    assert isinstance(missing.error, InvalidRoleSpaceException)
    assert isinstance(inactive.error, InvalidRoleSpaceException)


@pytest.mark.requires_db
async def test_create_role_in_other_space_or_tenant_is_denied(access, make_tenant) -> None:
    acme = await make_tenant("acme")
    globex = await make_tenant("globex")
    system_for_tenant = await access.create_role(
        "Clerk", None, Space.TENANT, acme.id, principal=SYSTEM_ADMIN
    )
    cross_tenant = await access.create_role(
        "Clerk", None, Space.TENANT, acme.id, principal=Principal("g", globex.id)
    )
    assert isinstance(system_for_tenant.error, PermissionDeniedException)
    assert isinstance(cross_tenant.error, PermissionDeniedException)


@pytest.mark.requires_db
async def test_role_names_unique_per_tenant_and_among_system_roles(access, make_tenant) -> None:
    acme = await make_tenant("acme")
    globex = await make_tenant("globex")
    acme_admin = Principal("a", acme.id)
    assert (await access.create_role("Admin", None, Space.TENANT, acme.id, principal=acme_admin)).is_ok
    assert (
        await access.create_role("Admin", None, Space.TENANT, globex.id, principal=Principal("g", globex.id))
    ).is_ok
    assert (await access.create_role("Admin", None, Space.SYSTEM, principal=SYSTEM_ADMIN)).is_ok

    duplicate_tenant = await access.create_role(
        "Admin", None, Space.TENANT, acme.id, principal=acme_admin
    )
    duplicate_system = await access.create_role("Admin", None, Space.SYSTEM, principal=SYSTEM_ADMIN)
    blank = await access.create_role("   ", None, Space.SYSTEM, principal=SYSTEM_ADMIN)
    assert isinstance(duplicate_tenant.error, ValidationException)
    assert isinstance(duplicate_system.error, ValidationException)
    assert isinstance(blank.error, ValidationException)


@pytest.mark.requires_db
async def test_system_principal_cannot_delete_tenant_role(access, make_tenant) -> None:
    """Deleting a tenant role as a system principal is denied and the role survives."""
    tenant = await make_tenant("acme")
    tenant_admin = Principal("acme-admin", tenant.id)
    role = (
        await access.create_role("Clerk", None, Space.TENANT, tenant.id, principal=tenant_admin)
    ).unwrap()

    result = await access.delete_role(role.id, SYSTEM_ADMIN)

    assert isinstance(result, Err)
    assert isinstance(result.error, PermissionDeniedException)
    assert (await access.get_role(role.id, SYSTEM_ADMIN)).unwrap().id == role.id


@pytest.mark.requires_db
async def test_delete_role_removes_links(db_session, access, make_tenant, make_user) -> None:
    tenant = await make_tenant("acme")
    user = await make_user("u@acme.test", tenant.id)
    principal = Principal("acme-admin", tenant.id)
    role = (
        await access.create_role("Clerk", None, Space.TENANT, tenant.id, principal=principal)
    ).unwrap()
    await access.assign_role(user.id, role.id, principal)

    assert (await access.delete_role(role.id, principal)).is_ok

    missing = await access.get_role(role.id, principal)
    assert isinstance(missing.error, ResourceNotFoundException)
    remaining = (
        await db_session.execute(
            select(func.count()).select_from(UserRole).where(UserRole.role_id == role.id)
        )
    ).scalar_one()
    assert remaining == 0


@pytest.mark.requires_db
async def test_update_role_rejects_space_or_tenant_change(access, make_tenant) -> None:
    acme = await make_tenant("acme")
    globex = await make_tenant("globex")
    principal = Principal("acme-admin", acme.id)
    role = (
        await access.create_role("Clerk", None, Space.TENANT, acme.id, principal=principal)
    ).unwrap()

    to_system = await access.update_role(role.id, RoleUpdate(space="system"), principal)
    to_globex = await access.update_role(role.id, RoleUpdate(tenant_id=globex.id), principal)
    renamed = await access.update_role(
        role.id, RoleUpdate(name="Senior Clerk", description="Can approve"), principal
    )

    assert isinstance(to_system.error, InvalidRoleSpaceException)
    assert isinstance(to_globex.error, InvalidRoleSpaceException)
    updated = renamed.unwrap()
    assert isinstance(updated, TenantRole)
    assert (updated.name, updated.description, updated.tenant_id) == (
        "Senior Clerk",
        "Can approve",
        acme.id,
    )


@pytest.mark.requires_db
async def test_tenant_principal_reads_own_and_system_roles(access, make_tenant) -> None:
    acme = await make_tenant("acme")
    globex = await make_tenant("globex")
    acme_admin = Principal("a", acme.id)
    system_role = (await access.create_role("Ops", None, Space.SYSTEM, principal=SYSTEM_ADMIN)).unwrap()
    globex_role = (
        await access.create_role("Clerk", None, Space.TENANT, globex.id, principal=Principal("g", globex.id))
    ).unwrap()

    assert (await access.get_role(system_role.id, acme_admin)).is_ok
    hidden = await access.get_role(globex_role.id, acme_admin)
    assert isinstance(hidden.error, PermissionDeniedException)


@pytest.mark.requires_db
async def test_list_roles_visibility_order_and_pagination(access, make_tenant) -> None:
    acme = await make_tenant("acme")
    globex = await make_tenant("globex")
    acme_admin = Principal("a", acme.id)
    for name in ("Zeta", "Alpha", "Mid"):
        await access.create_role(name, None, Space.TENANT, acme.id, principal=acme_admin)
    await access.create_role("Ops", None, Space.SYSTEM, principal=SYSTEM_ADMIN)
    await access.create_role("Hidden", None, Space.TENANT, globex.id, principal=Principal("g", globex.id))
    alpha = next(
        r
        for r in (await access.list_roles(acme_admin)).unwrap().items
        if r.name == "Alpha"
    )
    await access.registry.deactivate_role(alpha.id, acme_admin)

    page = (await access.list_roles(acme_admin, PageParams(page=1, limit=3))).unwrap()
    assert page.total == 4
    assert page.pages == 2
    assert page.has_next is True
    assert [r.name for r in page.items] == ["Ops", "Mid", "Zeta"]

    second = (await access.list_roles(acme_admin, PageParams(page=2, limit=3))).unwrap()
    assert [r.name for r in second.items] == ["Alpha"]

    active_only = (
        await access.list_roles(acme_admin, PageParams(include_inactive=False, space=Space.TENANT))
    ).unwrap()
    assert [r.name for r in active_only.items] == ["Mid", "Zeta"]

    everything = (await access.list_roles(SYSTEM_ADMIN)).unwrap()
    assert everything.total == 5


@pytest.mark.requires_db
async def test_list_roles_clamps_limit(access) -> None:
    page = (await access.list_roles(SYSTEM_ADMIN, PageParams(limit=10_000))).unwrap()
    assert page.limit == 100


@pytest.mark.requires_db
async def test_permission_matrix(db_session, access, make_permission) -> None:
    await ModuleRepository(db_session).create_module(
        menu_key="audit", display_name="Audit Log", space=Space.SYSTEM, action_keys=["view", "purge"]
    )
    await make_permission("audit:view", Space.SYSTEM)
    role = (await access.create_role("Ops", None, Space.SYSTEM, principal=SYSTEM_ADMIN)).unwrap()
    await access.grant_permission(role.id, "audit:view", SYSTEM_ADMIN)

    rows = await access.registry.get_permission_matrix(role.id, SYSTEM_ADMIN)

    assert [row.menu_key for row in rows] == ["audit"]
    assert rows[0].actions["view"] is True
    assert rows[0].actions["export"] is False
    assert rows[0].actions["purge"] is False
