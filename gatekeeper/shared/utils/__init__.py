"""Small helpers (datetime, id generation)."""

from gatekeeper.shared.utils.datetime import ensure_utc, resolve_timezone, utc_now
from gatekeeper.shared.utils.generators import generate_cuid

__all__ = ["ensure_utc", "generate_cuid", "resolve_timezone", "utc_now"]
