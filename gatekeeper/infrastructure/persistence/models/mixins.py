"""SQLAlchemy mixins for common model patterns.

Provides: CuidMixin, TimestampMixin, CreatedAtMixin, and a helper for
status CHECK constraints built from domain enums.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from gatekeeper.shared.utils.generators import generate_cuid


class CuidMixin:
    """Mixin for models using CUID as primary key."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class CreatedAtMixin:
    """Mixin for created_at only (link and append-only tables)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )


class TimestampMixin(CreatedAtMixin):
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


def status_check(column: str, values: list[str], name: str) -> CheckConstraint:
    """CHECK constraint restricting column to the given enum values."""
    quoted = ", ".join("'{}'".format(v.replace("'", "''")) for v in values)
    return CheckConstraint(f"{column} IN ({quoted})", name=name)
