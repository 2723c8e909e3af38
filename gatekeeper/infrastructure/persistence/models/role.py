"""Role ORM model. Space-bound: system roles have no tenant, tenant roles exactly one."""

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from gatekeeper.domain.enums import RecordStatus, Space
from gatekeeper.infrastructure.persistence.database import Base
from gatekeeper.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
    status_check,
)

ROLE_SPACE_CHECK = (
    "(space = 'system' AND tenant_id IS NULL) OR "
    "(space = 'tenant' AND tenant_id IS NOT NULL)"
)


class Role(CuidMixin, TimestampMixin, Base):
    """Role. Table: role. Name unique per tenant (and among system roles)."""

    __tablename__ = "role"

    tenant_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    space: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=RecordStatus.ACTIVE.value
    )

    __table_args__ = (
        CheckConstraint(ROLE_SPACE_CHECK, name="role_space_tenant_check"),
        status_check("space", Space.values(), "role_space_check"),
        status_check("status", RecordStatus.values(), "role_status_check"),
        # NULL tenant_ids never collide in a plain unique index, so system and
        # tenant names get separate partial indexes.
        Index(
            "uq_role_tenant_name",
            "tenant_id",
            "name",
            unique=True,
            postgresql_where=text("tenant_id IS NOT NULL"),
            sqlite_where=text("tenant_id IS NOT NULL"),
        ),
        Index(
            "uq_role_system_name",
            "name",
            unique=True,
            postgresql_where=text("tenant_id IS NULL"),
            sqlite_where=text("tenant_id IS NULL"),
        ),
    )
