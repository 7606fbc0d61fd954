"""Role predicates computed from a verified claim set.

All checks are plain equality on the role name snapshot carried by the token.
They accept ``None`` for unauthenticated requests and then return False.
"""

from dataclasses import dataclass
from enum import Enum

from gatekeeper.core.security import ClaimSet


class RoleName(str, Enum):
    """Role names known to the service. Other names may exist in the store."""

    ADMIN = "admin"
    CLIENT = "client"
    GUEST = "guest"
    MODERATOR = "moderator"
    EDITOR = "editor"

    @classmethod
    def values(cls) -> list[str]:
        return [role.value for role in cls]


def has_role(claims: ClaimSet | None, role: RoleName | str) -> bool:
    """True when the claims carry exactly this role name."""
    if claims is None:
        return False
    name = role.value if isinstance(role, RoleName) else role
    return claims.role == name


def is_admin_or_self(claims: ClaimSet | None, user_id: int | str) -> bool:
    """True for admins and for the user the claims were issued to."""
    if claims is None:
        return False
    return has_role(claims, RoleName.ADMIN) or claims.sub == str(user_id)


@dataclass(frozen=True)
class RoleChecks:
    """Role predicates for one request, computed once from its claims."""

    claims: ClaimSet | None = None

    @classmethod
    def from_claims(cls, claims: ClaimSet | None) -> "RoleChecks":
        return cls(claims=claims)

    @property
    def is_authenticated(self) -> bool:
        return self.claims is not None

    @property
    def is_admin(self) -> bool:
        return has_role(self.claims, RoleName.ADMIN)

    @property
    def is_client(self) -> bool:
        return has_role(self.claims, RoleName.CLIENT)

    @property
    def is_moderator(self) -> bool:
        return has_role(self.claims, RoleName.MODERATOR)

    @property
    def is_editor(self) -> bool:
        return has_role(self.claims, RoleName.EDITOR)

    @property
    def is_guest(self) -> bool:
        return has_role(self.claims, RoleName.GUEST)

    def any_of(self, *roles: RoleName | str) -> bool:
        return any(has_role(self.claims, role) for role in roles)

    def is_admin_or_self(self, user_id: int | str) -> bool:
        return is_admin_or_self(self.claims, user_id)
