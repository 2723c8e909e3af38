"""Principal: the already-authenticated caller identity."""

from dataclasses import dataclass

from gatekeeper.domain.enums import Space


@dataclass(frozen=True)
class Principal:
    """Caller identity supplied by the authentication layer.

    A null tenant_id means the principal acts in system space. The engine
    trusts this as identity, not as authorization.
    """

    user_id: str
    tenant_id: str | None = None

    @property
    def space(self) -> Space:
        return Space.SYSTEM if self.tenant_id is None else Space.TENANT

    @property
    def is_system(self) -> bool:
        return self.tenant_id is None

    @classmethod
    def system(cls, user_id: str) -> "Principal":
        return cls(user_id=user_id, tenant_id=None)
