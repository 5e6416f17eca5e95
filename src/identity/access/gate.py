"""Authorization gate.

A ``Principal`` is built once per request and handed explicitly to every
check; there is no process-wide notion of the current user. Each check
either returns quietly or raises ``Unauthenticated`` / ``Forbidden``.
"""

from dataclasses import dataclass, field

from shared.errors import Forbidden, Unauthenticated


@dataclass(frozen=True)
class Principal:
    user_id: str
    username: str
    roles: frozenset[str] = field(default_factory=frozenset)
    permissions: frozenset[str] = field(default_factory=frozenset)

    def can(self, permission: str) -> bool:
        return permission in self.permissions

    def owns(self, owner_id) -> bool:
        return owner_id is not None and str(owner_id) == self.user_id


def require_login(principal: Principal | None) -> Principal:
    if principal is None:
        raise Unauthenticated()
    return principal


def require_permission(principal: Principal | None, permission: str) -> Principal:
    principal = require_login(principal)
    if not principal.can(permission):
        raise Forbidden(f"Permission denied: {permission} required")
    return principal


def require_owner_or_permission(principal: Principal | None, owner_id, blanket: str, scoped: str) -> Principal:
    """Allow holders of ``blanket``, or holders of ``scoped`` who own the resource."""
    principal = require_login(principal)
    if principal.can(blanket):
        return principal
    if principal.can(scoped) and principal.owns(owner_id):
        return principal
    raise Forbidden("You do not have permission to modify this resource")


def forbid_self(principal: Principal | None, user_id) -> Principal:
    principal = require_login(principal)
    if principal.owns(user_id):
        raise Forbidden("You cannot delete your own account")
    return principal
