"""Role-based authorization gate.

A single policy function decides whether an identity may proceed. The two
entry points used by the API are ``require_authenticated`` (any recognized
role) and ``require_admin`` (ADMIN only). Decisions are plain values: the
HTTP layer turns a denied decision into a 401 or 403 response.
"""
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Optional

UNAUTHENTICATED_DETAIL = "Unauthorized - Please login"
FORBIDDEN_DETAIL = "Forbidden - Insufficient permissions"


class Role(str, Enum):
    """Roles known to the dashboard."""
    ADMIN = "ADMIN"
    USER = "USER"


@dataclass(frozen=True)
class Identity:
    """The resolved caller for one request."""

    id: str
    role: Role
    name: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class AuthDecision:
    """Outcome of a policy check. status_code/detail are set only when denied."""

    authorized: bool
    identity: Optional[Identity] = None
    status_code: Optional[int] = None
    detail: Optional[str] = None


def check_role(identity: Optional[Identity], allowed_roles: Iterable[Role]) -> AuthDecision:
    """Return an authorized decision if identity's role is in allowed_roles.

    No identity -> 401; identity with a role outside allowed_roles -> 403.
    """
    if identity is None:
        return AuthDecision(authorized=False, status_code=401, detail=UNAUTHENTICATED_DETAIL)
    if identity.role not in frozenset(allowed_roles):
        return AuthDecision(authorized=False, status_code=403, detail=FORBIDDEN_DETAIL)
    return AuthDecision(authorized=True, identity=identity)


def require_authenticated(identity: Optional[Identity]) -> AuthDecision:
    """Pass for any recognized role (ADMIN or USER)."""
    return check_role(identity, (Role.ADMIN, Role.USER))


def require_admin(identity: Optional[Identity]) -> AuthDecision:
    """Pass only for ADMIN."""
    return check_role(identity, (Role.ADMIN,))
