"""DTOs for users and tenants (no dependency on ORM)."""

from dataclasses import dataclass

from gatekeeper.domain.enums import Space, TenantStatus, UserStatus


@dataclass(frozen=True)
class UserResult:
    """User read-model. tenant_id None means a system-space user."""

    id: str
    tenant_id: str | None
    email: str
    status: UserStatus

    @property
    def space(self) -> Space:
        return Space.SYSTEM if self.tenant_id is None else Space.TENANT

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE


@dataclass(frozen=True)
class TenantResult:
    """Tenant read-model."""

    id: str
    code: str
    name: str
    status: TenantStatus

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE
