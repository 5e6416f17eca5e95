"""RBAC resolution: from a user to the permission names they hold.

The walk is User -> UserRole -> Role -> RolePermission -> Permission. Roles
do not nest, so this is a two-hop join rather than a closure. Memberships
that point at deleted roles or permissions are skipped. Nothing here is
cached; every call reads the store.

All functions expect the identity domain context to be active.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from identity.access.gate import Principal
from identity.permission.permission import Permission
from identity.role.role import Role
from identity.user.user import User

logger = structlog.get_logger(__name__)


def _load_user(user_id):
    try:
        return current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError:
        return None


def _roles_of(user) -> list:
    repo = current_domain.repository_for(Role)
    roles = []
    for role_id in user.role_ids():
        try:
            roles.append(repo.get(role_id))
        except ObjectNotFoundError:
            logger.warning("Skipping membership of missing role", user_id=str(user.id), role_id=role_id)
    return roles


def _permissions_of(role) -> list:
    repo = current_domain.repository_for(Permission)
    permissions = []
    for permission_id in role.permission_ids():
        try:
            permissions.append(repo.get(permission_id))
        except ObjectNotFoundError:
            logger.warning("Skipping grant of missing permission", role=role.name, permission_id=permission_id)
    return permissions


def effective_permissions(user_id) -> set[str]:
    """Union of the permission names of every role held by the user."""
    user = _load_user(user_id)
    if user is None:
        return set()

    names = set()
    for role in _roles_of(user):
        names.update(permission.name for permission in _permissions_of(role))
    return names


def has_permission(user_id, name: str) -> bool:
    return name in effective_permissions(user_id)


def role_names(user_id) -> list[str]:
    user = _load_user(user_id)
    if user is None:
        return []
    return sorted(role.name for role in _roles_of(user))


def has_role(user_id, role_name: str) -> bool:
    return role_name in role_names(user_id)


def permissions_of_role(role_id) -> list:
    """Permissions granted by one role, sorted by name."""
    role = current_domain.repository_for(Role).get(role_id)
    return sorted(_permissions_of(role), key=lambda permission: permission.name)


def load_principal(user_id) -> Principal | None:
    """Build the request principal. Unknown and inactive users yield ``None``."""
    user = _load_user(user_id)
    if user is None or not user.is_active:
        return None

    roles = _roles_of(user)
    permissions = set()
    for role in roles:
        permissions.update(permission.name for permission in _permissions_of(role))

    return Principal(
        user_id=str(user.id),
        username=user.username,
        roles=frozenset(role.name for role in roles),
        permissions=frozenset(permissions),
    )
