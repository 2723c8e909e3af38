"""Audit log writer (implements IAuditHook): appends rows to audit_log."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.infrastructure.persistence.database import atomic
from gatekeeper.infrastructure.persistence.models.audit_log import AuditLog
from gatekeeper.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class AuditLogService:
    """Records engine mutations. Never raises: failures are logged and dropped.

    Each entry is written in its own transaction or savepoint, so a failed
    write leaves the caller's session usable.
    """

    def __init__(self, db: AsyncSession, *, enabled: bool = True) -> None:
        self.db = db
        self.enabled = enabled

    async def record(
        self,
        actor_id: str | None,
        tenant_id: str | None,
        action: str,
        entity_type: str,
        entity_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        if not self.enabled:
            return
        try:
            async with atomic(self.db):
                self.db.add(
                    AuditLog(
                        actor_id=actor_id,
                        tenant_id=tenant_id,
                        action=action,
                        entity_type=entity_type,
                        entity_id=entity_id,
                        details=details,
                    )
                )
                await self.db.flush()
        except Exception as e:
            logger.warning(
                "Failed to write audit log for %s.%s (%s): %s",
                entity_type,
                action,
                entity_id,
                str(e),
                exc_info=True,
            )
