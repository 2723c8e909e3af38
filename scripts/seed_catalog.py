"""Seed the default permission catalog, menu modules and the Super Admin system role.

Usage:
    python -m scripts.seed_catalog
Idempotent: existing permissions, modules and links are left untouched.
Requires DATABASE_URL and a migrated schema (alembic upgrade head).
"""

import asyncio
import sys
from contextlib import aclosing

from gatekeeper.core.config import get_settings
from gatekeeper.domain.exceptions import GatekeeperException
from gatekeeper.infrastructure.persistence import get_db_transactional
from gatekeeper.infrastructure.services.tenant_initialization_service import (
    CatalogSeeder,
)
from gatekeeper.shared.telemetry.logging import setup_logging


async def main() -> None:
    """Seed the catalog in one transaction."""
    get_settings()
    setup_logging()

    try:
        async with aclosing(get_db_transactional()) as sessions:
            async for session in sessions:
                counts = await CatalogSeeder(session).seed()
    except GatekeeperException as e:
        print(f"{e.error_code}: {e.message}", file=sys.stderr)
        sys.exit(1)
    print(
        f"Seeded catalog: {counts['permissions']} permissions, "
        f"{counts['modules']} modules, {counts['super_admin_grants']} super admin grants"
    )


if __name__ == "__main__":
    asyncio.run(main())
