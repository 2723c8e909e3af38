"""Delegation integration tests: effective while active, gone once revoked or expired."""

from datetime import timedelta

import pytest

from gatekeeper.domain.entities import Principal
from gatekeeper.domain.enums import DelegationStatus, Space
from gatekeeper.domain.exceptions import (
    PermissionDeniedException,
    UserSpaceMismatchException,
    ValidationException,
)
from gatekeeper.infrastructure.persistence.models import PermissionDelegation
from gatekeeper.shared.utils.datetime import utc_now


async def _setup(access, make_tenant, make_user, make_permission):
    tenant = await make_tenant("acme")
    manager = await make_user("manager@acme.test", tenant.id)
    deputy = await make_user("deputy@acme.test", tenant.id)
    await make_permission("reports:approve", Space.TENANT)
    admin = Principal("acme-admin", tenant.id)
    role = (
        await access.create_role("Approver", None, Space.TENANT, tenant.id, principal=admin)
    ).unwrap()
    await access.grant_permission(role.id, "reports:approve", admin)
    await access.assign_role(manager.id, role.id, admin)
    return tenant, manager, deputy, role


@pytest.mark.requires_db
async def test_delegated_role_is_effective_until_revoked(
    access, make_tenant, make_user, make_permission, audit_hook
) -> None:
    tenant, manager, deputy, role = await _setup(access, make_tenant, make_user, make_permission)
    as_manager = Principal(manager.id, tenant.id)
    assert await access.has_permission(deputy.id, "reports", "approve") is False

    delegation = (
        await access.delegate_role(
            as_manager, deputy.id, role.id, utc_now() + timedelta(days=3), "Annual leave"
        )
    ).unwrap()

    assert delegation.status == DelegationStatus.ACTIVE
    assert delegation.tenant_id == tenant.id
    assert await access.has_permission(deputy.id, "reports", "approve") is True
    active = await access.delegations.list_active_delegations(deputy.id)
    assert [d.id for d in active] == [delegation.id]

    revoked = (await access.revoke_delegation(delegation.id, as_manager)).unwrap()
    again = (await access.revoke_delegation(delegation.id, as_manager)).unwrap()

    assert revoked.status == DelegationStatus.REVOKED
    assert revoked.revoked_at is not None
    assert again.status == DelegationStatus.REVOKED
    assert await access.has_permission(deputy.id, "reports", "approve") is False
    assert audit_hook.actions().count("delegated") == 1
    assert [e for e in audit_hook.events if e["entity_type"] == "delegation"][-1][
        "action"
    ] == "revoked"


@pytest.mark.requires_db
async def test_expired_delegation_is_not_effective(
    db_session, access, make_tenant, make_user, make_permission
) -> None:
    tenant, manager, deputy, role = await _setup(access, make_tenant, make_user, make_permission)
    db_session.add(
        PermissionDelegation(
            tenant_id=tenant.id,
            delegated_by=manager.id,
            delegated_to=deputy.id,
            role_id=role.id,
            expires_at=utc_now() - timedelta(minutes=5),
            status=DelegationStatus.ACTIVE.value,
        )
    )
    await db_session.flush()

    assert await access.has_permission(deputy.id, "reports", "approve") is False
    assert await access.delegations.list_active_delegations(deputy.id) == []


@pytest.mark.requires_db
async def test_delegation_preconditions(
    access, make_tenant, make_user, make_permission
) -> None:
    tenant, manager, deputy, role = await _setup(access, make_tenant, make_user, make_permission)
    outsider = await make_user("root@platform.test")
    as_manager = Principal(manager.id, tenant.id)
    as_deputy = Principal(deputy.id, tenant.id)
    later = utc_now() + timedelta(days=1)

    past = await access.delegate_role(as_manager, deputy.id, role.id, utc_now() - timedelta(seconds=1))
    to_self = await access.delegate_role(as_manager, manager.id, role.id, later)
    not_held = await access.delegate_role(as_deputy, manager.id, role.id, later)
    wrong_space = await access.delegate_role(as_manager, outsider.id, role.id, later)

    assert isinstance(past.error, ValidationException)
    assert isinstance(to_self.error, ValidationException)
    assert isinstance(not_held.error, PermissionDeniedException)
    assert "does not hold" in not_held.error.message
    assert isinstance(wrong_space.error, UserSpaceMismatchException)
