"""Composition root: builds the AccessControl facade from infrastructure.

Application services depend only on ports (IUnitOfWork, IAuditHook,
IPermissionResolver) and repositories; this module supplies the SQLAlchemy
implementations bound to one caller-owned session.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.application.interfaces.services import IAuditHook
from gatekeeper.application.services import (
    AccessControl,
    AccessEvaluator,
    DelegationService,
    GrantRevokeEngine,
    PermissionCatalogService,
    RoleRegistryService,
)
from gatekeeper.core.config import Settings, get_settings
from gatekeeper.infrastructure.persistence.repositories import (
    DelegationRepository,
    ModuleRepository,
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    TenantRepository,
    UserRepository,
    UserRoleRepository,
)
from gatekeeper.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork
from gatekeeper.infrastructure.services.audit_log_service import AuditLogService
from gatekeeper.infrastructure.services.permission_resolver import PermissionResolver
from gatekeeper.shared.utils.datetime import resolve_timezone


def build_access_control(
    session: AsyncSession,
    audit_hook: IAuditHook | None = None,
    settings: Settings | None = None,
) -> AccessControl:
    """Wire every engine service to `session`.

    Each successful write commits on its own, even after earlier reads on
    the session. When the caller began the transaction explicitly
    (session.begin() or get_db_transactional), writes run as SAVEPOINTs and
    nothing is durable until the caller commits.

    When no audit hook is given, the audit_log table writer is used
    (disabled when settings.audit_enabled is False).
    """
    settings = settings or get_settings()
    if audit_hook is None:
        audit_hook = AuditLogService(session, enabled=settings.audit_enabled)

    uow = SqlAlchemyUnitOfWork(session)
    role_repo = RoleRepository(session)
    tenant_repo = TenantRepository(session)
    user_repo = UserRepository(session)
    permission_repo = PermissionRepository(session)
    module_repo = ModuleRepository(session)
    role_permission_repo = RolePermissionRepository(session)
    user_role_repo = UserRoleRepository(session)
    delegation_repo = DelegationRepository(session)

    return AccessControl(
        catalog=PermissionCatalogService(
            uow, permission_repo, module_repo, audit_hook
        ),
        registry=RoleRegistryService(
            uow,
            role_repo,
            tenant_repo,
            role_permission_repo,
            module_repo,
            audit_hook,
            default_page_size=settings.default_page_size,
            max_page_size=settings.max_page_size,
        ),
        engine=GrantRevokeEngine(
            uow,
            role_repo,
            permission_repo,
            role_permission_repo,
            user_repo,
            user_role_repo,
            audit_hook,
        ),
        evaluator=AccessEvaluator(
            PermissionResolver(session),
            constraint_timezone=resolve_timezone(settings.constraint_timezone),
        ),
        delegations=DelegationService(
            uow, role_repo, user_repo, user_role_repo, delegation_repo, audit_hook
        ),
    )
