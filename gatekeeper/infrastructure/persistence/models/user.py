"""User ORM model (principal). Null tenant_id means a system-space user."""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from gatekeeper.domain.enums import UserStatus
from gatekeeper.infrastructure.persistence.database import Base
from gatekeeper.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
    status_check,
)


class User(CuidMixin, TimestampMixin, Base):
    """User. Table: app_user. Effective space is derived from tenant_id, never stored."""

    __tablename__ = "app_user"

    tenant_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=True, index=True
    )
    email: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=UserStatus.ACTIVE.value
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_app_user_tenant_email"),
        status_check("status", UserStatus.values(), "app_user_status_check"),
    )
