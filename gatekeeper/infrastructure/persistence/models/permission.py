"""Permission, RolePermission, and UserRole ORM models (RBAC core).

One canonical permission row per capability carries both its flat key
(resource:action) and its menu form (menu_key or resource, action), so the
two representations are derived from a single role_permission link table.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from gatekeeper.domain.enums import RecordStatus, Space
from gatekeeper.infrastructure.persistence.database import Base
from gatekeeper.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    TimestampMixin,
    status_check,
)


class Permission(CuidMixin, TimestampMixin, Base):
    """Permission. Table: permission. Unique permission_key == 'resource:action'."""

    __tablename__ = "permission"

    permission_key: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    resource: Mapped[str] = mapped_column(String, nullable=False)
    action: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    space: Mapped[str] = mapped_column(String, nullable=False, index=True)
    # Menu the capability appears under; None means the resource name.
    menu_key: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=RecordStatus.ACTIVE.value
    )

    __table_args__ = (
        status_check("space", Space.values(), "permission_space_check"),
        status_check("status", RecordStatus.values(), "permission_status_check"),
        CheckConstraint(
            "permission_key = resource || ':' || action",
            name="permission_key_format_check",
        ),
        Index("ix_permission_resource_action", "resource", "action"),
    )

    @property
    def effective_menu_key(self) -> str:
        return self.menu_key or self.resource


class RolePermission(CuidMixin, CreatedAtMixin, Base):
    """Role-permission link. Table: role_permission. Optional constraint payload."""

    __tablename__ = "role_permission"

    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("role.id", ondelete="CASCADE"), nullable=False
    )
    permission_id: Mapped[str] = mapped_column(
        String, ForeignKey("permission.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=RecordStatus.ACTIVE.value
    )
    constraints: Mapped[dict[str, Any] | None] = mapped_column(
        JSON(none_as_null=True), nullable=True
    )
    granted_by: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
        status_check("status", RecordStatus.values(), "role_permission_status_check"),
        Index("ix_role_permission_role", "role_id"),
    )


class UserRole(CuidMixin, Base):
    """User-role assignment. Table: user_role. Expired rows are filtered, not deleted."""

    __tablename__ = "user_role"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("role.id", ondelete="CASCADE"), nullable=False
    )
    assigned_by: Mapped[str | None] = mapped_column(String, nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("user_id", "role_id", name="uq_user_role"),
        Index("ix_user_role_user", "user_id"),
    )
