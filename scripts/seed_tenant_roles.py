"""Provision default roles (Tenant Admin) for an existing tenant.

Usage:
    python -m scripts.seed_tenant_roles <tenant_id_or_code>
Resolves tenant by id or code. Run scripts.seed_catalog first so the
tenant-space permissions exist.
"""

import asyncio
import sys
from contextlib import aclosing

from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.core.config import get_settings
from gatekeeper.domain.exceptions import GatekeeperException, ResourceNotFoundException
from gatekeeper.infrastructure.persistence import get_db_transactional
from gatekeeper.infrastructure.persistence.repositories import TenantRepository
from gatekeeper.infrastructure.services.tenant_initialization_service import (
    TenantInitializationService,
)
from gatekeeper.shared.telemetry.logging import setup_logging


async def _provision(session: AsyncSession, tenant_arg: str) -> tuple[str, str]:
    tenant_repo = TenantRepository(session)
    tenant = await tenant_repo.get_by_id(tenant_arg) or await tenant_repo.get_by_code(
        tenant_arg
    )
    if not tenant:
        raise ResourceNotFoundException("tenant", tenant_arg)
    role_id = await TenantInitializationService(session).initialize_tenant_roles(
        tenant.id
    )
    return role_id, f"{tenant.id} ({tenant.code})"


async def main() -> None:
    """Create the tenant's default roles."""
    if len(sys.argv) < 2:
        print(
            "Usage: python -m scripts.seed_tenant_roles <tenant_id_or_code>",
            file=sys.stderr,
        )
        sys.exit(1)
    tenant_arg = sys.argv[1]

    get_settings()
    setup_logging()

    try:
        async with aclosing(get_db_transactional()) as sessions:
            async for session in sessions:
                role_id, label = await _provision(session, tenant_arg)
    except GatekeeperException as e:
        print(f"{e.error_code}: {e.message}", file=sys.stderr)
        sys.exit(1)
    print(f"Provisioned Tenant Admin role {role_id} for tenant {label}")


if __name__ == "__main__":
    asyncio.run(main())
