"""UserRole repository: user -> role assignments with optional expiry."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.infrastructure.persistence.database import insert_ignore
from gatekeeper.infrastructure.persistence.models.permission import UserRole
from gatekeeper.shared.utils.datetime import is_expired, utc_now


class UserRoleRepository:
    """Assign/unassign roles. Expired rows stay until unassigned and are filtered on read."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def assign(
        self,
        user_id: str,
        role_id: str,
        assigned_by: str | None,
        expires_at: datetime | None = None,
    ) -> bool:
        """Insert the assignment; renew it if the existing one has expired.

        Returns True when a row was inserted or renewed.
        """
        now = utc_now()
        result = await self.db.execute(
            insert_ignore(
                self.db,
                UserRole,
                {
                    "user_id": user_id,
                    "role_id": role_id,
                    "assigned_by": assigned_by,
                    "assigned_at": now,
                    "expires_at": expires_at,
                },
                ["user_id", "role_id"],
            )
        )
        if result.rowcount:
            return True
        existing = (
            await self.db.execute(
                select(UserRole).where(
                    UserRole.user_id == user_id, UserRole.role_id == role_id
                )
            )
        ).scalar_one()
        if not is_expired(existing.expires_at, now):
            return False
        existing.expires_at = expires_at
        existing.assigned_by = assigned_by
        existing.assigned_at = now
        await self.db.flush()
        return True

    async def unassign(self, user_id: str, role_id: str) -> bool:
        result = await self.db.execute(
            delete(UserRole).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        )
        return bool(result.rowcount)

    async def holds_role(self, user_id: str, role_id: str) -> bool:
        result = await self.db.execute(
            select(UserRole.id)
            .where(
                UserRole.user_id == user_id,
                UserRole.role_id == role_id,
                or_(UserRole.expires_at.is_(None), UserRole.expires_at > utc_now()),
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None
