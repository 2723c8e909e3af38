"""Engine services (application layer)."""

from gatekeeper.application.services.access_control import AccessControl
from gatekeeper.application.services.access_evaluator import AccessEvaluator
from gatekeeper.application.services.delegation_service import DelegationService
from gatekeeper.application.services.grant_revoke_engine import GrantRevokeEngine
from gatekeeper.application.services.permission_catalog_service import (
    PermissionCatalogService,
)
from gatekeeper.application.services.role_registry_service import RoleRegistryService

__all__ = [
    "AccessControl",
    "AccessEvaluator",
    "DelegationService",
    "GrantRevokeEngine",
    "PermissionCatalogService",
    "RoleRegistryService",
]
