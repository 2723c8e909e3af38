"""Permission repository. Read methods return PermissionResult."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.application.dtos.permission import PermissionResult
from gatekeeper.domain.enums import RecordStatus, Space
from gatekeeper.infrastructure.persistence.models.permission import Permission
from gatekeeper.infrastructure.persistence.repositories.base import BaseRepository


def _permission_to_result(p: Permission) -> PermissionResult:
    return PermissionResult(
        id=p.id,
        permission_key=p.permission_key,
        resource=p.resource,
        action=p.action,
        description=p.description,
        space=Space(p.space),
        menu_key=p.effective_menu_key,
        status=RecordStatus(p.status),
    )


class PermissionRepository(BaseRepository[Permission]):
    """Catalog permissions. Keys are global (not tenant-scoped)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Permission)

    async def get_by_key(self, permission_key: str) -> PermissionResult | None:
        result = await self.db.execute(
            select(Permission).where(Permission.permission_key == permission_key)
        )
        row = result.scalar_one_or_none()
        return _permission_to_result(row) if row else None

    async def get_by_keys(
        self, permission_keys: Iterable[str]
    ) -> dict[str, PermissionResult]:
        """Return found permissions keyed by permission_key; missing keys are absent."""
        keys = list(permission_keys)
        if not keys:
            return {}
        result = await self.db.execute(
            select(Permission).where(Permission.permission_key.in_(keys))
        )
        return {
            p.permission_key: _permission_to_result(p) for p in result.scalars().all()
        }

    async def get_by_menu_action(
        self, menu_key: str, action: str
    ) -> PermissionResult | None:
        """Resolve the menu form (menu_key, action) to its canonical permission."""
        active_first = case(
            (Permission.status == RecordStatus.ACTIVE.value, 0), else_=1
        )
        result = await self.db.execute(
            select(Permission)
            .where(
                func.coalesce(Permission.menu_key, Permission.resource) == menu_key,
                Permission.action == action,
            )
            .order_by(active_first, Permission.permission_key)
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return _permission_to_result(row) if row else None

    async def list_permissions(
        self, space: Space | None = None, *, include_inactive: bool = False
    ) -> list[PermissionResult]:
        q = select(Permission)
        if space is not None:
            q = q.where(Permission.space == space.value)
        if not include_inactive:
            q = q.where(Permission.status == RecordStatus.ACTIVE.value)
        result = await self.db.execute(
            q.order_by(Permission.resource, Permission.action)
        )
        return [_permission_to_result(p) for p in result.scalars().all()]

    async def create_permission(
        self,
        resource: str,
        action: str,
        space: Space,
        description: str | None = None,
        menu_key: str | None = None,
    ) -> PermissionResult:
        created = await self.create(
            Permission(
                permission_key=f"{resource}:{action}",
                resource=resource,
                action=action,
                space=space.value,
                description=description,
                menu_key=menu_key,
                status=RecordStatus.ACTIVE.value,
            )
        )
        return _permission_to_result(created)

    async def set_status(
        self, permission_key: str, status: RecordStatus
    ) -> PermissionResult | None:
        result = await self.db.execute(
            select(Permission).where(Permission.permission_key == permission_key)
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        row.status = status.value
        return _permission_to_result(await self.update(row))
