"""Audit log ORM model. Append-only record of engine mutations."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Connection, DateTime, String, event, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, Mapper, mapped_column

from gatekeeper.infrastructure.persistence.database import Base
from gatekeeper.shared.utils.generators import generate_cuid


class AuditLog(Base):
    """Audit entry: who did what, when, to which role/user. No update/delete."""

    __tablename__ = "audit_log"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=generate_cuid)
    # No FK: entries outlive deleted tenants and users.
    tenant_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    actor_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    action: Mapped[str] = mapped_column(String, nullable=False)
    entity_type: Mapped[str] = mapped_column(String, nullable=False)
    entity_id: Mapped[str] = mapped_column(String, nullable=False)
    details: Mapped[dict[str, Any] | None] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"), nullable=False
    )


@event.listens_for(AuditLog, "before_update")
def _prevent_audit_log_updates(
    _mapper: Mapper[Any], _connection: Connection, _target: AuditLog
) -> None:
    """Audit log entries are append-only; updates are forbidden."""
    raise ValueError("Audit log entries are immutable and cannot be updated.")


@event.listens_for(AuditLog, "before_delete")
def _prevent_audit_log_deletes(
    _mapper: Mapper[Any], _connection: Connection, _target: AuditLog
) -> None:
    """Audit log entries cannot be deleted."""
    raise ValueError("Audit log entries cannot be deleted.")
