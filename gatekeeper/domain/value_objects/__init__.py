"""Domain value objects (immutable, self-validating)."""

from gatekeeper.domain.value_objects.core import ActionKey, MenuKey, PermissionKey

__all__ = ["ActionKey", "MenuKey", "PermissionKey"]
