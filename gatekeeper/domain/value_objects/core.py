"""Domain value objects for capability identifiers.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass

# Lowercase identifiers with optional hyphens/underscores (e.g. tenant-users, line_items).
_SEGMENT_RE = re.compile(r"^[a-z0-9]+([_-][a-z0-9]+)*$")
_MAX_SEGMENT_LENGTH = 100


def _validate_segment(value: str, field_name: str) -> None:
    """Validate a single key segment. Raises ValueError on failure."""
    if not value:
        raise ValueError(f"{field_name} must be a non-empty string")
    if len(value) > _MAX_SEGMENT_LENGTH:
        raise ValueError(f"{field_name} must be at most {_MAX_SEGMENT_LENGTH} characters")
    if not _SEGMENT_RE.match(value):
        raise ValueError(
            f"{field_name} must be lowercase alphanumeric with optional hyphens "
            f"or underscores (got {value!r})"
        )


@dataclass(frozen=True)
class PermissionKey:
    """Flat capability key `resource:action` (e.g. users:create).

    Wildcards are not part of the key grammar; evaluation is exact-match.
    """

    resource: str
    action: str

    def __post_init__(self) -> None:
        _validate_segment(self.resource, "Permission resource")
        _validate_segment(self.action, "Permission action")

    @classmethod
    def parse(cls, key: str) -> "PermissionKey":
        """Parse 'resource:action'. Raises ValueError when malformed."""
        resource, sep, action = key.partition(":")
        if not sep:
            raise ValueError(f"Permission key must be 'resource:action' (got {key!r})")
        return cls(resource=resource, action=action)

    def __str__(self) -> str:
        return f"{self.resource}:{self.action}"


@dataclass(frozen=True)
class MenuKey:
    """Navigation identifier of a capability group (e.g. tenant-users)."""

    value: str

    def __post_init__(self) -> None:
        _validate_segment(self.value, "Menu key")


@dataclass(frozen=True)
class ActionKey:
    """Action within a menu (e.g. view, approve)."""

    value: str

    def __post_init__(self) -> None:
        _validate_segment(self.value, "Action key")
