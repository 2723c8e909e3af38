"""Infrastructure services: permission resolution, audit log, seeding."""

from gatekeeper.infrastructure.services.audit_log_service import AuditLogService
from gatekeeper.infrastructure.services.permission_resolver import PermissionResolver
from gatekeeper.infrastructure.services.tenant_initialization_service import (
    CatalogSeeder,
    TenantInitializationService,
)

__all__ = [
    "AuditLogService",
    "CatalogSeeder",
    "PermissionResolver",
    "TenantInitializationService",
]
