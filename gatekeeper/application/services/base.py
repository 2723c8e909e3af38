"""Shared plumbing for engine write services: audit emission."""

from __future__ import annotations

from typing import Any

from gatekeeper.application.interfaces.services import IAuditHook
from gatekeeper.domain.entities import Principal
from gatekeeper.shared.enums import AuditAction
from gatekeeper.shared.telemetry.logging import get_logger

_logger = get_logger(__name__)


class AuditedService:
    """Base for services that record successful mutations through the audit hook.

    When audit_hook is None, nothing is recorded. Hook failures are logged
    and never propagate to the caller.
    """

    def __init__(self, audit_hook: IAuditHook | None = None) -> None:
        self._audit_hook = audit_hook

    async def _record(
        self,
        principal: Principal,
        action: AuditAction,
        entity_type: str,
        entity_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        if self._audit_hook is None:
            return
        try:
            await self._audit_hook.record(
                actor_id=principal.user_id,
                tenant_id=principal.tenant_id,
                action=action.value,
                entity_type=entity_type,
                entity_id=entity_id,
                details=details,
            )
        except Exception as e:
            _logger.warning(
                "Failed to record audit event for %s.%s: %s",
                entity_type,
                action.value,
                str(e),
                exc_info=True,
            )
