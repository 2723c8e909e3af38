"""DTOs for access evaluation and bulk grant results."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class AccessContext:
    """Call context evaluated against grant constraints.

    Attributes:
        ip_address: Source address of the request, if known.
        at: Evaluation time (defaults to now, UTC).
        record_count: Number of records the operation touches, if known.
    """

    ip_address: str | None = None
    at: datetime | None = None
    record_count: int | None = None


@dataclass(frozen=True)
class ConstraintDecision:
    """Result of check_with_constraints. reason is set when allowed is False."""

    allowed: bool
    reason: str | None = None


@dataclass(frozen=True)
class BulkReplaceResult:
    """Result of bulk_replace_permissions."""

    granted_count: int
    not_found_keys: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ResolvedGrant:
    """One permission reachable by a user through an active role.

    menu_visible is False when the permission's module row exists but is
    inactive; flat-key checks ignore it, menu checks honor it.
    """

    role_id: str
    permission_key: str
    menu_key: str
    action: str
    constraints: dict[str, Any] | None = field(default=None, compare=False)
    menu_visible: bool = True
