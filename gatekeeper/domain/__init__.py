"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure. Used by application and infrastructure
layers.
"""

from gatekeeper.domain.entities import (
    Principal,
    Role,
    SystemRole,
    TenantRole,
    role_from_fields,
)
from gatekeeper.domain.enums import (
    DelegationStatus,
    RecordStatus,
    Space,
    TenantStatus,
    UserStatus,
)
from gatekeeper.domain.exceptions import (
    GatekeeperException,
    InvalidRoleSpaceException,
    PermissionDeniedException,
    ResourceNotFoundException,
    SecurityViolationException,
    SqlNotConfiguredException,
    StorageFailureException,
    UserSpaceMismatchException,
    ValidationException,
)
from gatekeeper.domain.value_objects import ActionKey, MenuKey, PermissionKey

__all__ = [
    # Entities
    "Principal",
    "Role",
    "SystemRole",
    "TenantRole",
    "role_from_fields",
    # Enums
    "DelegationStatus",
    "RecordStatus",
    "Space",
    "TenantStatus",
    "UserStatus",
    # Exceptions
    "GatekeeperException",
    "InvalidRoleSpaceException",
    "PermissionDeniedException",
    "ResourceNotFoundException",
    "SecurityViolationException",
    "SqlNotConfiguredException",
    "StorageFailureException",
    "UserSpaceMismatchException",
    "ValidationException",
    # Value objects
    "ActionKey",
    "MenuKey",
    "PermissionKey",
]
