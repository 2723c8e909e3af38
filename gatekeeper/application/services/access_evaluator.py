"""Access evaluator: read-only answers to "may this user do X?".

All checks share one role-resolution path (IPermissionResolver) and fail
closed: any internal error yields False / an empty result, never an
exception.
"""

from __future__ import annotations

from datetime import UTC, tzinfo

from gatekeeper.application.dtos.access import (
    AccessContext,
    ConstraintDecision,
    ResolvedGrant,
)
from gatekeeper.application.interfaces.services import IPermissionResolver
from gatekeeper.application.services.constraints import (
    REASON_ERROR,
    REASON_NOT_GRANTED,
    evaluate_grant,
)
from gatekeeper.shared.telemetry.logging import get_logger
from gatekeeper.shared.telemetry.tracing import set_span_error, traced

logger = get_logger(__name__)


class AccessEvaluator:
    """Permission checks over the flat-key and menu/action forms."""

    def __init__(
        self,
        permission_resolver: IPermissionResolver,
        constraint_timezone: tzinfo = UTC,
    ) -> None:
        self.permission_resolver = permission_resolver
        self.constraint_timezone = constraint_timezone

    @traced("access.has_permission")
    async def has_permission(self, user_id: str, resource: str, action: str) -> bool:
        """True if an active role of the user holds exactly resource:action."""
        key = f"{resource}:{action}"
        try:
            grants = await self.permission_resolver.get_user_grants(user_id)
        except Exception as e:
            self._log_failure("has_permission", user_id, e)
            return False
        return any(g.permission_key == key for g in grants)

    @traced("access.has_menu_access")
    async def has_menu_access(self, user_id: str, menu_key: str) -> bool:
        """True if the user holds any action under the menu."""
        try:
            grants = await self._menu_grants(user_id)
        except Exception as e:
            self._log_failure("has_menu_access", user_id, e)
            return False
        return any(g.menu_key == menu_key for g in grants)

    @traced("access.has_action")
    async def has_action(self, user_id: str, menu_key: str, action_key: str) -> bool:
        """True if the user holds action_key under the menu."""
        try:
            grants = await self._menu_grants(user_id)
        except Exception as e:
            self._log_failure("has_action", user_id, e)
            return False
        return any(g.menu_key == menu_key and g.action == action_key for g in grants)

    @traced("access.get_user_permissions")
    async def get_user_permissions(self, user_id: str) -> dict[str, list[str]]:
        """Menu key -> sorted action keys the user holds (empty on failure)."""
        try:
            grants = await self._menu_grants(user_id)
        except Exception as e:
            self._log_failure("get_user_permissions", user_id, e)
            return {}
        menus: dict[str, set[str]] = {}
        for grant in grants:
            menus.setdefault(grant.menu_key, set()).add(grant.action)
        return {menu: sorted(actions) for menu, actions in sorted(menus.items())}

    @traced("access.get_user_permission_keys")
    async def get_user_permission_keys(self, user_id: str) -> set[str]:
        """Flat resource:action keys the user holds (empty on failure)."""
        try:
            grants = await self.permission_resolver.get_user_grants(user_id)
        except Exception as e:
            self._log_failure("get_user_permission_keys", user_id, e)
            return set()
        return {g.permission_key for g in grants}

    @traced("access.check_with_constraints")
    async def check_with_constraints(
        self,
        user_id: str,
        menu_key: str,
        action_key: str,
        context: AccessContext | None = None,
    ) -> ConstraintDecision:
        """Base menu/action check plus grant constraints evaluated against context.

        Each matching grant is evaluated on its own; access is allowed when
        at least one grant allows. Without a matching grant the decision is
        a denial, whatever the constraints.
        """
        ctx = context or AccessContext()
        try:
            grants = await self._menu_grants(user_id)
            matching = [
                g for g in grants if g.menu_key == menu_key and g.action == action_key
            ]
            if not matching:
                return ConstraintDecision(False, REASON_NOT_GRANTED)
            first_denial: ConstraintDecision | None = None
            for grant in matching:
                decision = evaluate_grant(grant.constraints, ctx, self.constraint_timezone)
                if decision.allowed:
                    return decision
                first_denial = first_denial or decision
            return first_denial or ConstraintDecision(False, REASON_NOT_GRANTED)
        except Exception as e:
            self._log_failure("check_with_constraints", user_id, e)
            return ConstraintDecision(False, REASON_ERROR)

    async def _menu_grants(self, user_id: str) -> list[ResolvedGrant]:
        grants = await self.permission_resolver.get_user_grants(user_id)
        return [g for g in grants if g.menu_visible]

    @staticmethod
    def _log_failure(operation: str, user_id: str, error: Exception) -> None:
        set_span_error(error)
        logger.error(
            "Access check %s failed for user %s; denying", operation, user_id, exc_info=True
        )
