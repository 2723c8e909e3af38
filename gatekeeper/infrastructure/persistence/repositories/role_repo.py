"""Role repository. Read methods return the domain Role variant."""

from __future__ import annotations

from sqlalchemy import case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.domain.entities import Role, role_from_fields
from gatekeeper.domain.enums import RecordStatus, Space
from gatekeeper.infrastructure.persistence.models.role import Role as RoleModel
from gatekeeper.infrastructure.persistence.repositories.base import BaseRepository


def _role_to_entity(r: RoleModel) -> Role:
    """Map ORM row to the domain variant. Raises InvalidRoleSpaceException on bad rows."""
    return role_from_fields(
        id=r.id,
        name=r.name,
        description=r.description,
        space=r.space,
        tenant_id=r.tenant_id,
        status=r.status,
    )


class RoleRepository(BaseRepository[RoleModel]):
    """Role rows. Visibility and ownership are decided by the caller."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, RoleModel)

    async def get_role(self, role_id: str) -> Role | None:
        row = await self.get_entity_by_id(role_id)
        return _role_to_entity(row) if row else None

    async def get_role_for_update(self, role_id: str) -> Role | None:
        """Return role with its row locked (SELECT .. FOR UPDATE) until commit."""
        row = await self.get_entity_by_id(role_id, for_update=True)
        return _role_to_entity(row) if row else None

    async def name_exists(
        self, name: str, tenant_id: str | None, exclude_id: str | None = None
    ) -> bool:
        q = select(RoleModel.id).where(RoleModel.name == name)
        if tenant_id is None:
            q = q.where(RoleModel.tenant_id.is_(None))
        else:
            q = q.where(RoleModel.tenant_id == tenant_id)
        if exclude_id is not None:
            q = q.where(RoleModel.id != exclude_id)
        result = await self.db.execute(q.limit(1))
        return result.scalar_one_or_none() is not None

    async def create_role(
        self,
        name: str,
        description: str | None,
        space: Space,
        tenant_id: str | None,
    ) -> Role:
        created = await self.create(
            RoleModel(
                name=name,
                description=description,
                space=space.value,
                tenant_id=tenant_id,
                status=RecordStatus.ACTIVE.value,
            )
        )
        return _role_to_entity(created)

    async def update_role(
        self,
        role_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        status: RecordStatus | None = None,
    ) -> Role | None:
        """Apply non-None fields. Space and tenant are never written here."""
        row = await self.get_entity_by_id(role_id)
        if row is None:
            return None
        if name is not None:
            row.name = name
        if description is not None:
            row.description = description
        if status is not None:
            row.status = status.value
        return _role_to_entity(await self.update(row))

    async def delete_role(self, role_id: str) -> bool:
        row = await self.get_entity_by_id(role_id)
        if row is None:
            return False
        await self.delete(row)
        return True

    async def list_roles(
        self,
        *,
        visible_to_tenant: str | None,
        space: Space | None,
        include_inactive: bool,
        skip: int,
        limit: int,
    ) -> tuple[list[Role], int]:
        """Return (page, total) ordered by status (active first), space, name, id.

        visible_to_tenant None means every role; otherwise the tenant's own
        roles plus system roles.
        """
        q = select(RoleModel)
        if visible_to_tenant is not None:
            q = q.where(
                or_(
                    RoleModel.tenant_id == visible_to_tenant,
                    RoleModel.space == Space.SYSTEM.value,
                )
            )
        if space is not None:
            q = q.where(RoleModel.space == space.value)
        if not include_inactive:
            q = q.where(RoleModel.status == RecordStatus.ACTIVE.value)
        total = (
            await self.db.execute(select(func.count()).select_from(q.subquery()))
        ).scalar_one()
        status_rank = case((RoleModel.status == RecordStatus.ACTIVE.value, 0), else_=1)
        result = await self.db.execute(
            q.order_by(status_rank, RoleModel.space, RoleModel.name, RoleModel.id)
            .offset(skip)
            .limit(limit)
        )
        return [_role_to_entity(r) for r in result.scalars().all()], total
