"""Default permission catalogue and system roles.

``seed_access_control`` is idempotent: existing permissions and roles are
left in place and only missing grants are added to the system roles.
"""

import structlog
from protean.utils.globals import current_domain

from identity.permission.permission import Permission
from identity.role.role import Role

logger = structlog.get_logger(__name__)

DEFAULT_PERMISSIONS = {
    "view_roles": "View roles and their permissions",
    "manage_roles": "Create, update and delete roles",
    "assign_permissions": "Assign permissions to roles",
    "assign_roles": "Assign roles to users",
    "view_permissions": "View the permission catalogue",
    "manage_permissions": "Create, update and delete permissions",
    "view_users": "View user accounts",
    "manage_users": "Activate, deactivate and delete user accounts",
    "place_orders": "Use the cart and place orders",
    "manage_orders": "View all orders and change their status",
    "manage_products": "Create, update and delete products and adjust stock",
    "manage_services": "Create, update and delete any service",
    "manage_own_services": "Create services and manage the ones you own",
}

SYSTEM_ROLES = {
    "admin": ("Full administrative access", tuple(DEFAULT_PERMISSIONS)),
    "customer": ("Default role for registered users", ("place_orders", "manage_own_services")),
}


def seed_access_control() -> dict:
    """Create missing permissions and system roles. Returns what was created."""
    permission_repo = current_domain.repository_for(Permission)
    role_repo = current_domain.repository_for(Role)
    created = {"permissions": [], "roles": []}

    permissions = {}
    for name, description in DEFAULT_PERMISSIONS.items():
        permission = permission_repo.find_by_name(name)
        if permission is None:
            permission = Permission(name=name, description=description)
            permission_repo.add(permission)
            created["permissions"].append(name)
        permissions[name] = permission

    for name, (description, granted) in SYSTEM_ROLES.items():
        role = role_repo.find_by_name(name)
        if role is None:
            role = Role.create(name=name, description=description, is_system=True)
            created["roles"].append(name)

        held = set(role.permission_ids())
        wanted = [permissions[p].id for p in granted]
        if not set(wanted) <= held:
            role.replace_permissions(list(held) + [pid for pid in wanted if pid not in held])
        role_repo.add(role)

    logger.info("Seeded access control", **created)
    return created
