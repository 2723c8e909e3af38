"""Tenant repository. Read methods return TenantResult."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.application.dtos.user import TenantResult
from gatekeeper.domain.enums import TenantStatus
from gatekeeper.infrastructure.persistence.models.tenant import Tenant
from gatekeeper.infrastructure.persistence.repositories.base import BaseRepository


def _tenant_to_result(t: Tenant) -> TenantResult:
    return TenantResult(
        id=t.id, code=t.code, name=t.name, status=TenantStatus(t.status)
    )


class TenantRepository(BaseRepository[Tenant]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Tenant)

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        row = await self.get_entity_by_id(tenant_id)
        return _tenant_to_result(row) if row else None

    async def get_by_code(self, code: str) -> TenantResult | None:
        result = await self.db.execute(select(Tenant).where(Tenant.code == code))
        row = result.scalar_one_or_none()
        return _tenant_to_result(row) if row else None

    async def create_tenant(
        self, code: str, name: str, status: TenantStatus = TenantStatus.ACTIVE
    ) -> TenantResult:
        created = await self.create(Tenant(code=code, name=name, status=status.value))
        return _tenant_to_result(created)

    async def set_status(self, tenant_id: str, status: TenantStatus) -> TenantResult | None:
        row = await self.get_entity_by_id(tenant_id)
        if row is None:
            return None
        row.status = status.value
        return _tenant_to_result(await self.update(row))
