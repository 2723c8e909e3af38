"""Ownership rules applied before any role or link mutation.

Checks run in a fixed order: cross-space, cross-tenant, then (on attach)
permission/role space match. The first two raise PermissionDeniedException;
the third raises SecurityViolationException and is always logged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gatekeeper.domain.entities import Principal, Role, TenantRole
from gatekeeper.domain.enums import Space
from gatekeeper.domain.exceptions import (
    PermissionDeniedException,
    SecurityViolationException,
    UserSpaceMismatchException,
)
from gatekeeper.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from gatekeeper.application.dtos.permission import PermissionResult
    from gatekeeper.application.dtos.user import UserResult

logger = get_logger(__name__)


def check_cross_space(principal: Principal, role: Role) -> None:
    """Check 1: system principals act only on system roles, tenant principals on tenant roles."""
    if principal.space != role.space:
        raise PermissionDeniedException(
            role.name,
            role.space.value,
            f"{principal.space.value} principal cannot modify {role.space.value} roles",
        )


def check_cross_tenant(principal: Principal, role: Role) -> None:
    """Check 2: a tenant principal acts only on roles of its own tenant."""
    if principal.tenant_id is None:
        return
    if not isinstance(role, TenantRole) or role.tenant_id != principal.tenant_id:
        raise PermissionDeniedException(
            role.name, role.space.value, "role belongs to another tenant"
        )


def check_role_ownership(principal: Principal, role: Role) -> None:
    """Run checks 1 and 2 in order. Raises PermissionDeniedException."""
    check_cross_space(principal, role)
    check_cross_tenant(principal, role)


def check_permission_space(role: Role, permission: PermissionResult) -> None:
    """Check 3: the permission's space must equal the role's space."""
    if permission.space != role.space:
        logger.warning(
            "Security violation: %s permission %s rejected for %s role %s",
            permission.space.value,
            permission.permission_key,
            role.space.value,
            role.id,
        )
        raise SecurityViolationException(
            role_id=role.id,
            role_space=role.space.value,
            permission_key=permission.permission_key,
            permission_space=permission.space.value,
        )


def check_user_matches_role(user: UserResult, role: Role) -> None:
    """A user may only hold roles of its own space (and tenant)."""
    if user.space != role.space or user.tenant_id != role.tenant_id:
        logger.warning(
            "Security violation: user %s (%s) cannot hold %s role %s",
            user.id,
            user.space.value,
            role.space.value,
            role.id,
        )
        raise UserSpaceMismatchException(user.id, role.id, role.space.value)


def can_read_role(principal: Principal, role: Role) -> bool:
    """System principals read every role; tenant principals read their own and system roles."""
    if principal.is_system:
        return True
    if role.space == Space.SYSTEM:
        return True
    return role.tenant_id == principal.tenant_id


def check_can_read_role(principal: Principal, role: Role) -> None:
    if not can_read_role(principal, role):
        raise PermissionDeniedException(
            role.name, role.space.value, "role belongs to another tenant"
        )
