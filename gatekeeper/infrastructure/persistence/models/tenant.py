"""Tenant ORM model. Root of the tenant isolation boundary."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from gatekeeper.domain.enums import TenantStatus
from gatekeeper.infrastructure.persistence.database import Base
from gatekeeper.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
    status_check,
)


class Tenant(CuidMixin, TimestampMixin, Base):
    """Tenant. Table: tenant. Status: active, suspended, archived."""

    __tablename__ = "tenant"

    code: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=TenantStatus.ACTIVE.value, index=True
    )

    __table_args__ = (
        status_check("status", TenantStatus.values(), "tenant_status_check"),
    )
