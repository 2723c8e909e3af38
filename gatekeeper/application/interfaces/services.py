"""Service interfaces (ports) for the application layer.

Protocols define contracts for collaborators the engine consumes: the unit
of work (transaction boundary), the audit hook and the permission resolver.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from gatekeeper.application.dtos.access import ResolvedGrant


# Unit of work interface
class IUnitOfWork(Protocol):
    """Explicit transaction boundary passed into every write operation."""

    def atomic(self, operation: str = "write") -> AbstractAsyncContextManager[Any]:
        """Open an all-or-nothing block; roll back everything on exception.

        Storage errors raised inside the block surface as
        StorageFailureException naming the operation.
        """


# Audit hook interface
class IAuditHook(Protocol):
    """Fire-and-forget recorder for successful mutations.

    Implementations should not raise; callers still guard the call so that a
    failing hook never fails the mutation.
    """

    async def record(
        self,
        actor_id: str | None,
        tenant_id: str | None,
        action: str,
        entity_type: str,
        entity_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Record one mutation (who, what, when, before/after summary)."""


# Permission resolver interface
class IPermissionResolver(Protocol):
    """Single role-resolution path shared by every access check."""

    async def get_user_grants(self, user_id: str) -> list[ResolvedGrant]:
        """Return every active grant reachable by the user right now."""
