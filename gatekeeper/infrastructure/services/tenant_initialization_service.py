"""Default catalog seeding and per-tenant role provisioning."""

from __future__ import annotations

from typing import TypedDict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.domain.enums import RecordStatus, Space, TenantStatus
from gatekeeper.domain.exceptions import (
    InvalidRoleSpaceException,
    ResourceNotFoundException,
)
from gatekeeper.infrastructure.persistence.database import atomic
from gatekeeper.infrastructure.persistence.models.module import Module
from gatekeeper.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
)
from gatekeeper.infrastructure.persistence.models.role import Role
from gatekeeper.infrastructure.persistence.models.tenant import Tenant
from gatekeeper.shared.telemetry.logging import get_logger
from gatekeeper.shared.utils.generators import generate_cuid

logger = get_logger(__name__)


class ModuleData(TypedDict):
    """Menu module configuration for the default catalog."""

    display_name: str
    space: str
    route_path: str
    menu_order: int
    action_keys: list[str]


# (permission_key, menu_key or None, description); resource/action come from the key.
SYSTEM_PERMISSIONS: list[tuple[str, str | None, str]] = [
    ("tenants:view", None, "View tenants"),
    ("tenants:create", None, "Create tenants"),
    ("tenants:edit", None, "Update tenants"),
    ("tenants:delete", None, "Suspend or delete tenants"),
    ("system_roles:view", "system-roles", "View system roles"),
    ("system_roles:create", "system-roles", "Create system roles"),
    ("system_roles:edit", "system-roles", "Update system roles and their permissions"),
    ("system_roles:delete", "system-roles", "Delete system roles"),
    ("system_users:view", "system-users", "View system users"),
    ("system_users:create", "system-users", "Create system users"),
    ("system_users:edit", "system-users", "Update system users"),
    ("audit:view", None, "View the audit log"),
    ("audit:export", None, "Export the audit log"),
]

TENANT_PERMISSIONS: list[tuple[str, str | None, str]] = [
    ("dashboard:view", None, "View the dashboard"),
    ("users:view", None, "View tenant users"),
    ("users:create", None, "Create tenant users"),
    ("users:edit", None, "Update tenant users"),
    ("users:delete", None, "Deactivate tenant users"),
    ("roles:view", None, "View tenant roles"),
    ("roles:create", None, "Create tenant roles"),
    ("roles:edit", None, "Update tenant roles and their permissions"),
    ("roles:delete", None, "Delete tenant roles"),
    ("roles:assign", None, "Assign roles to users"),
    ("reports:view", None, "View reports"),
    ("reports:export", None, "Export reports"),
    ("settings:view", None, "View tenant settings"),
    ("settings:edit", None, "Update tenant settings"),
]

DEFAULT_MODULES: dict[str, ModuleData] = {
    "tenants": {
        "display_name": "Tenants",
        "space": Space.SYSTEM.value,
        "route_path": "/system/tenants",
        "menu_order": 10,
        "action_keys": ["view", "create", "edit", "delete"],
    },
    "system-roles": {
        "display_name": "System Roles",
        "space": Space.SYSTEM.value,
        "route_path": "/system/roles",
        "menu_order": 20,
        "action_keys": ["view", "create", "edit", "delete"],
    },
    "system-users": {
        "display_name": "System Users",
        "space": Space.SYSTEM.value,
        "route_path": "/system/users",
        "menu_order": 30,
        "action_keys": ["view", "create", "edit"],
    },
    "audit": {
        "display_name": "Audit Log",
        "space": Space.SYSTEM.value,
        "route_path": "/system/audit",
        "menu_order": 40,
        "action_keys": ["view", "export"],
    },
    "dashboard": {
        "display_name": "Dashboard",
        "space": Space.TENANT.value,
        "route_path": "/dashboard",
        "menu_order": 10,
        "action_keys": ["view"],
    },
    "users": {
        "display_name": "Users",
        "space": Space.TENANT.value,
        "route_path": "/users",
        "menu_order": 20,
        "action_keys": ["view", "create", "edit", "delete"],
    },
    "roles": {
        "display_name": "Roles",
        "space": Space.TENANT.value,
        "route_path": "/roles",
        "menu_order": 30,
        "action_keys": ["view", "create", "edit", "delete", "assign"],
    },
    "reports": {
        "display_name": "Reports",
        "space": Space.TENANT.value,
        "route_path": "/reports",
        "menu_order": 40,
        "action_keys": ["view", "export"],
    },
    "settings": {
        "display_name": "Settings",
        "space": Space.TENANT.value,
        "route_path": "/settings",
        "menu_order": 50,
        "action_keys": ["view", "edit"],
    },
}

SUPER_ADMIN_ROLE = "Super Admin"
TENANT_ADMIN_ROLE = "Tenant Admin"


class CatalogSeeder:
    """Inserts the default permissions, modules and the Super Admin system role.

    Idempotent: rows that already exist (by permission key, menu key or role
    name) are left untouched.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def seed(self) -> dict[str, int]:
        """Returns counts of newly created rows per kind."""
        async with atomic(self.db):
            created_permissions = await self._seed_permissions()
            created_modules = await self._seed_modules()
            created_links = await self._seed_super_admin()
        logger.info(
            "Catalog seeded: %d permissions, %d modules, %d super admin grants",
            created_permissions,
            created_modules,
            created_links,
        )
        return {
            "permissions": created_permissions,
            "modules": created_modules,
            "super_admin_grants": created_links,
        }

    async def _seed_permissions(self) -> int:
        existing = set(
            (await self.db.execute(select(Permission.permission_key))).scalars().all()
        )
        created = 0
        for space, rows in (
            (Space.SYSTEM, SYSTEM_PERMISSIONS),
            (Space.TENANT, TENANT_PERMISSIONS),
        ):
            for key, menu_key, description in rows:
                if key in existing:
                    continue
                resource, action = key.split(":", 1)
                self.db.add(
                    Permission(
                        permission_key=key,
                        resource=resource,
                        action=action,
                        description=description,
                        space=space.value,
                        menu_key=menu_key,
                        status=RecordStatus.ACTIVE.value,
                    )
                )
                created += 1
        await self.db.flush()
        return created

    async def _seed_modules(self) -> int:
        existing = set((await self.db.execute(select(Module.menu_key))).scalars().all())
        created = 0
        for menu_key, data in DEFAULT_MODULES.items():
            if menu_key in existing:
                continue
            self.db.add(
                Module(
                    menu_key=menu_key,
                    display_name=data["display_name"],
                    route_path=data["route_path"],
                    menu_order=data["menu_order"],
                    space=data["space"],
                    action_keys=list(data["action_keys"]),
                    status=RecordStatus.ACTIVE.value,
                )
            )
            created += 1
        await self.db.flush()
        return created

    async def _seed_super_admin(self) -> int:
        role_id = (
            await self.db.execute(
                select(Role.id).where(
                    Role.tenant_id.is_(None), Role.name == SUPER_ADMIN_ROLE
                )
            )
        ).scalar_one_or_none()
        if role_id is None:
            role_id = generate_cuid()
            self.db.add(
                Role(
                    id=role_id,
                    tenant_id=None,
                    name=SUPER_ADMIN_ROLE,
                    description="Full access to the system space",
                    space=Space.SYSTEM.value,
                    status=RecordStatus.ACTIVE.value,
                )
            )
            await self.db.flush()
        return await _link_space_permissions(self.db, role_id, Space.SYSTEM)


class TenantInitializationService:
    """Provisions the default roles of a newly created tenant."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def initialize_tenant_roles(self, tenant_id: str) -> str:
        """Create "Tenant Admin" holding every tenant-space permission. Returns its id.

        Re-running for the same tenant only links permissions added since.
        """
        async with atomic(self.db):
            tenant = await self.db.get(Tenant, tenant_id)
            if tenant is None:
                raise ResourceNotFoundException("tenant", tenant_id)
            if tenant.status != TenantStatus.ACTIVE.value:
                raise InvalidRoleSpaceException(
                    f"Tenant {tenant_id} is not active",
                    space=Space.TENANT.value,
                    tenant_id=tenant_id,
                )
            role_id = (
                await self.db.execute(
                    select(Role.id).where(
                        Role.tenant_id == tenant_id, Role.name == TENANT_ADMIN_ROLE
                    )
                )
            ).scalar_one_or_none()
            if role_id is None:
                role_id = generate_cuid()
                self.db.add(
                    Role(
                        id=role_id,
                        tenant_id=tenant_id,
                        name=TENANT_ADMIN_ROLE,
                        description="Full access within the tenant",
                        space=Space.TENANT.value,
                        status=RecordStatus.ACTIVE.value,
                    )
                )
                await self.db.flush()
            linked = await _link_space_permissions(self.db, role_id, Space.TENANT)
        logger.info(
            "Tenant %s roles initialized (%d new grants)", tenant_id, linked
        )
        return role_id


async def _link_space_permissions(db: AsyncSession, role_id: str, space: Space) -> int:
    """Link every active permission of `space` not yet linked to the role."""
    linked = select(RolePermission.permission_id).where(
        RolePermission.role_id == role_id
    )
    result = await db.execute(
        select(Permission.id).where(
            Permission.space == space.value,
            Permission.status == RecordStatus.ACTIVE.value,
            Permission.id.not_in(linked),
        )
    )
    permission_ids = list(result.scalars().all())
    db.add_all(
        RolePermission(
            role_id=role_id,
            permission_id=permission_id,
            status=RecordStatus.ACTIVE.value,
        )
        for permission_id in permission_ids
    )
    await db.flush()
    return len(permission_ids)
