"""RolePermission repository: the single role -> permission link table.

Both the flat-key and the menu/action views are read from these rows.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.application.dtos.permission import RolePermissionResult
from gatekeeper.domain.enums import RecordStatus
from gatekeeper.infrastructure.persistence.database import insert_ignore
from gatekeeper.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
)
from gatekeeper.infrastructure.persistence.repositories.permission_repo import (
    _permission_to_result,
)


class RolePermissionRepository:
    """Grant, revoke and replace links for a role. Ownership is checked by the caller."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def grant(
        self,
        role_id: str,
        permission_id: str,
        granted_by: str | None,
        constraints: dict[str, Any] | None = None,
    ) -> bool:
        """Insert the link, or re-activate / re-constrain an existing one.

        Returns True when a row was inserted or changed.
        """
        result = await self.db.execute(
            insert_ignore(
                self.db,
                RolePermission,
                {
                    "role_id": role_id,
                    "permission_id": permission_id,
                    "status": RecordStatus.ACTIVE.value,
                    "constraints": constraints,
                    "granted_by": granted_by,
                },
                ["role_id", "permission_id"],
            )
        )
        if result.rowcount:
            return True
        existing = (
            await self.db.execute(
                select(RolePermission).where(
                    RolePermission.role_id == role_id,
                    RolePermission.permission_id == permission_id,
                )
            )
        ).scalar_one()
        changed = False
        if existing.status != RecordStatus.ACTIVE.value:
            existing.status = RecordStatus.ACTIVE.value
            existing.granted_by = granted_by
            changed = True
        if constraints is not None and existing.constraints != constraints:
            existing.constraints = constraints
            changed = True
        if changed:
            await self.db.flush()
        return changed

    async def revoke(self, role_id: str, permission_id: str) -> bool:
        result = await self.db.execute(
            delete(RolePermission).where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
            )
        )
        return bool(result.rowcount)

    async def delete_all_for_role(self, role_id: str) -> int:
        result = await self.db.execute(
            delete(RolePermission).where(RolePermission.role_id == role_id)
        )
        return result.rowcount or 0

    async def insert_links(
        self, role_id: str, permission_ids: Iterable[str], granted_by: str | None
    ) -> int:
        """Insert fresh links (caller has cleared the role first)."""
        links = [
            RolePermission(
                role_id=role_id,
                permission_id=permission_id,
                status=RecordStatus.ACTIVE.value,
                granted_by=granted_by,
            )
            for permission_id in dict.fromkeys(permission_ids)
        ]
        if not links:
            return 0
        self.db.add_all(links)
        await self.db.flush()
        return len(links)

    async def list_for_role(
        self, role_id: str, *, include_inactive: bool = False
    ) -> list[RolePermissionResult]:
        q = (
            select(RolePermission, Permission)
            .join(Permission, Permission.id == RolePermission.permission_id)
            .where(RolePermission.role_id == role_id)
        )
        if not include_inactive:
            q = q.where(RolePermission.status == RecordStatus.ACTIVE.value)
        result = await self.db.execute(q.order_by(Permission.permission_key))
        return [
            RolePermissionResult(
                permission=_permission_to_result(permission),
                status=RecordStatus(link.status),
                constraints=link.constraints,
            )
            for link, permission in result.all()
        ]
