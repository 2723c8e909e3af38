"""Resolves a user's effective grants from the database (implements IPermissionResolver)."""

from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.application.dtos.access import ResolvedGrant
from gatekeeper.domain.enums import (
    DelegationStatus,
    RecordStatus,
    Space,
    TenantStatus,
    UserStatus,
)
from gatekeeper.infrastructure.persistence.models.delegation import (
    PermissionDelegation,
)
from gatekeeper.infrastructure.persistence.models.module import Module
from gatekeeper.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserRole,
)
from gatekeeper.infrastructure.persistence.models.role import Role
from gatekeeper.infrastructure.persistence.models.tenant import Tenant
from gatekeeper.infrastructure.persistence.models.user import User
from gatekeeper.shared.utils.datetime import utc_now


class PermissionResolver:
    """Single role-resolution path for every access check.

    active user (and active tenant) -> roles from non-expired assignments and
    in-effect delegations -> active roles in the user's own space/tenant ->
    active links -> active permissions of the role's space.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_user_grants(self, user_id: str) -> list[ResolvedGrant]:
        user = (
            await self.db.execute(
                select(User.status, User.tenant_id).where(User.id == user_id)
            )
        ).one_or_none()
        if user is None or user.status != UserStatus.ACTIVE.value:
            return []
        if user.tenant_id is not None:
            tenant_status = (
                await self.db.execute(
                    select(Tenant.status).where(Tenant.id == user.tenant_id)
                )
            ).scalar_one_or_none()
            if tenant_status != TenantStatus.ACTIVE.value:
                return []

        now = utc_now()
        assigned = select(UserRole.role_id).where(
            UserRole.user_id == user_id,
            or_(UserRole.expires_at.is_(None), UserRole.expires_at > now),
        )
        delegated = select(PermissionDelegation.role_id).where(
            PermissionDelegation.delegated_to == user_id,
            PermissionDelegation.status == DelegationStatus.ACTIVE.value,
            PermissionDelegation.revoked_at.is_(None),
            PermissionDelegation.expires_at > now,
        )
        if user.tenant_id is None:
            space_match = [Role.space == Space.SYSTEM.value, Role.tenant_id.is_(None)]
        else:
            space_match = [
                Role.space == Space.TENANT.value,
                Role.tenant_id == user.tenant_id,
            ]
        effective_menu = func.coalesce(Permission.menu_key, Permission.resource)
        query = (
            select(
                Role.id,
                Permission.permission_key,
                effective_menu.label("menu_key"),
                Permission.action,
                RolePermission.constraints,
                Module.status.label("module_status"),
            )
            .select_from(Role)
            .join(RolePermission, RolePermission.role_id == Role.id)
            .join(Permission, Permission.id == RolePermission.permission_id)
            .outerjoin(Module, Module.menu_key == effective_menu)
            .where(
                or_(Role.id.in_(assigned), Role.id.in_(delegated)),
                Role.status == RecordStatus.ACTIVE.value,
                *space_match,
                RolePermission.status == RecordStatus.ACTIVE.value,
                Permission.status == RecordStatus.ACTIVE.value,
                Permission.space == Role.space,
            )
        )
        result = await self.db.execute(query)
        return [
            ResolvedGrant(
                role_id=row.id,
                permission_key=row.permission_key,
                menu_key=row.menu_key,
                action=row.action,
                constraints=row.constraints,
                menu_visible=row.module_status in (None, RecordStatus.ACTIVE.value),
            )
            for row in result.all()
        ]
