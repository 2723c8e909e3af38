"""Role domain entity as a tagged variant.

A role is either a SystemRole (no tenant) or a TenantRole (exactly one
tenant). The space is derived from the variant, so a role whose space and
tenant reference disagree cannot be constructed.
"""

from dataclasses import dataclass
from typing import Literal

from gatekeeper.domain.enums import RecordStatus, Space
from gatekeeper.domain.exceptions import InvalidRoleSpaceException


@dataclass(frozen=True, kw_only=True)
class _RoleBase:
    id: str
    name: str
    description: str | None
    status: RecordStatus

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE


@dataclass(frozen=True, kw_only=True)
class SystemRole(_RoleBase):
    """Platform-wide role. Mutable only by system principals."""

    kind: Literal["system"] = "system"

    @property
    def space(self) -> Space:
        return Space.SYSTEM

    @property
    def tenant_id(self) -> None:
        return None


@dataclass(frozen=True, kw_only=True)
class TenantRole(_RoleBase):
    """Role bound to one tenant. Mutable only by principals of that tenant."""

    tenant_id: str
    kind: Literal["tenant"] = "tenant"

    def __post_init__(self) -> None:
        if not self.tenant_id:
            raise InvalidRoleSpaceException(
                "Tenant role requires a tenant reference", space=Space.TENANT.value
            )

    @property
    def space(self) -> Space:
        return Space.TENANT


Role = SystemRole | TenantRole


def role_from_fields(
    *,
    id: str,
    name: str,
    description: str | None,
    space: str,
    tenant_id: str | None,
    status: str,
) -> Role:
    """Build the role variant from stored fields.

    Raises:
        InvalidRoleSpaceException: If space and tenant reference disagree.
    """
    try:
        role_space = Space(space)
    except ValueError:
        raise InvalidRoleSpaceException(
            f"Unknown role space {space!r} on role {id}", space=space
        ) from None
    record_status = RecordStatus(status)
    if role_space == Space.SYSTEM:
        if tenant_id is not None:
            raise InvalidRoleSpaceException(
                f"System role {id} must not reference a tenant",
                space=role_space.value,
                tenant_id=tenant_id,
            )
        return SystemRole(
            id=id, name=name, description=description, status=record_status
        )
    if tenant_id is None:
        raise InvalidRoleSpaceException(
            f"Tenant role {id} must reference a tenant", space=role_space.value
        )
    return TenantRole(
        id=id,
        name=name,
        description=description,
        status=record_status,
        tenant_id=tenant_id,
    )
