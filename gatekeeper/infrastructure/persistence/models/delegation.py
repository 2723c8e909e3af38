"""PermissionDelegation ORM model: time-boxed, revocable role grant between users."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gatekeeper.domain.enums import DelegationStatus
from gatekeeper.infrastructure.persistence.database import Base
from gatekeeper.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
    status_check,
)


class PermissionDelegation(CuidMixin, TimestampMixin, Base):
    """Delegation. Table: permission_delegation. Expires at expires_at; revoked via status."""

    __tablename__ = "permission_delegation"

    tenant_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=True
    )
    delegated_by: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    delegated_to: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("role.id", ondelete="CASCADE"), nullable=False
    )
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    revoked_by: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=DelegationStatus.ACTIVE.value
    )

    __table_args__ = (
        status_check("status", DelegationStatus.values(), "delegation_status_check"),
        Index("ix_permission_delegation_to", "delegated_to", "status"),
    )
