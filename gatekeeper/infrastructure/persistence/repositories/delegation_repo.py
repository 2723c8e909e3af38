"""PermissionDelegation repository. Read methods return DelegationResult."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.application.dtos.delegation import DelegationResult
from gatekeeper.domain.enums import DelegationStatus
from gatekeeper.infrastructure.persistence.models.delegation import (
    PermissionDelegation,
)
from gatekeeper.infrastructure.persistence.repositories.base import BaseRepository
from gatekeeper.shared.utils.datetime import ensure_utc, utc_now


def _delegation_to_result(d: PermissionDelegation) -> DelegationResult:
    return DelegationResult(
        id=d.id,
        tenant_id=d.tenant_id,
        delegated_by=d.delegated_by,
        delegated_to=d.delegated_to,
        role_id=d.role_id,
        reason=d.reason,
        expires_at=ensure_utc(d.expires_at),
        status=DelegationStatus(d.status),
        revoked_at=ensure_utc(d.revoked_at),
    )


class DelegationRepository(BaseRepository[PermissionDelegation]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, PermissionDelegation)

    async def create_delegation(
        self,
        tenant_id: str | None,
        delegated_by: str,
        delegated_to: str,
        role_id: str,
        expires_at: datetime,
        reason: str | None = None,
    ) -> DelegationResult:
        created = await self.create(
            PermissionDelegation(
                tenant_id=tenant_id,
                delegated_by=delegated_by,
                delegated_to=delegated_to,
                role_id=role_id,
                expires_at=expires_at,
                reason=reason,
                status=DelegationStatus.ACTIVE.value,
            )
        )
        return _delegation_to_result(created)

    async def get_by_id(self, delegation_id: str) -> DelegationResult | None:
        row = await self.get_entity_by_id(delegation_id)
        return _delegation_to_result(row) if row else None

    async def revoke(
        self, delegation_id: str, revoked_by: str | None
    ) -> DelegationResult | None:
        row = await self.get_entity_by_id(delegation_id)
        if row is None:
            return None
        row.status = DelegationStatus.REVOKED.value
        row.revoked_at = utc_now()
        row.revoked_by = revoked_by
        return _delegation_to_result(await self.update(row))

    async def list_active_for_user(self, user_id: str) -> list[DelegationResult]:
        result = await self.db.execute(
            select(PermissionDelegation)
            .where(
                PermissionDelegation.delegated_to == user_id,
                PermissionDelegation.status == DelegationStatus.ACTIVE.value,
                PermissionDelegation.revoked_at.is_(None),
                PermissionDelegation.expires_at > utc_now(),
            )
            .order_by(PermissionDelegation.expires_at)
        )
        return [_delegation_to_result(d) for d in result.scalars().all()]
