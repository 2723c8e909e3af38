"""Module ORM model: navigable menu entry (catalog metadata only).

Role permissions do not reference modules; a capability may be granted
before its module row exists.
"""

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gatekeeper.domain.enums import RecordStatus, Space
from gatekeeper.infrastructure.persistence.database import Base
from gatekeeper.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
    status_check,
)


class Module(CuidMixin, TimestampMixin, Base):
    """Module. Table: module. Unique menu_key."""

    __tablename__ = "module"

    menu_key: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String, nullable=True)
    route_path: Mapped[str | None] = mapped_column(String, nullable=True)
    parent_menu_key: Mapped[str | None] = mapped_column(String, nullable=True)
    menu_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    space: Mapped[str] = mapped_column(String, nullable=False, index=True)
    action_keys: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=RecordStatus.ACTIVE.value
    )

    __table_args__ = (
        status_check("space", Space.values(), "module_space_check"),
        status_check("status", RecordStatus.values(), "module_status_check"),
    )
