"""DTOs for delegations."""

from dataclasses import dataclass
from datetime import datetime

from gatekeeper.domain.enums import DelegationStatus


@dataclass(frozen=True)
class DelegationResult:
    id: str
    tenant_id: str | None
    delegated_by: str
    delegated_to: str
    role_id: str
    reason: str | None
    expires_at: datetime
    status: DelegationStatus
    revoked_at: datetime | None = None
