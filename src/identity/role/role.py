"""Role aggregate with the RolePermission membership entity.

A Role is a named bundle of permissions. Roles do not nest: a user's
effective permissions are the union of the permissions of their roles.
System roles (``admin``, ``customer``) are created by seeding and cannot be
renamed or deleted.
"""

import json
from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, HasMany, Identifier, String

from identity.domain import identity
from shared.errors import Forbidden


@identity.entity(part_of="Role")
class RolePermission:
    """Grants one permission to the owning role (a ``role_permission`` row)."""

    permission_id: Identifier(required=True)


@identity.aggregate
class Role:
    name: String(required=True, max_length=50, unique=True)
    description: String(max_length=255)
    is_system: Boolean(default=False)
    permissions: HasMany(RolePermission)
    created_at: DateTime(default=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, name, description=None, is_system=False):
        from identity.role.events import RoleCreated

        role = cls(name=name, description=description, is_system=is_system)
        role.raise_(RoleCreated(role_id=role.id, name=role.name, is_system=role.is_system))
        return role

    def permission_ids(self) -> list[str]:
        return [str(grant.permission_id) for grant in self.permissions]

    def update(self, name=None, description=None):
        if name is not None and name != self.name:
            if self.is_system:
                raise Forbidden("Cannot rename system role")
            self.name = name
        if description is not None:
            self.description = description

    def ensure_deletable(self):
        if self.is_system:
            raise Forbidden("Cannot delete system role")

    def replace_permissions(self, permission_ids):
        """Swap the whole grant set for ``permission_ids``; duplicates collapse."""
        from identity.role.events import RolePermissionsAssigned

        for grant in list(self.permissions):
            self.remove_permissions(grant)

        unique_ids = list(dict.fromkeys(str(pid) for pid in permission_ids))
        if unique_ids:
            self.add_permissions([RolePermission(permission_id=pid) for pid in unique_ids])

        self.raise_(
            RolePermissionsAssigned(
                role_id=self.id,
                permission_ids=json.dumps(unique_ids),
                assigned_at=datetime.now(UTC),
            )
        )

    def revoke_permission(self, permission_id) -> bool:
        """Drop a single grant. Returns whether the role held it."""
        for grant in list(self.permissions):
            if str(grant.permission_id) == str(permission_id):
                self.remove_permissions(grant)
                return True
        return False


@identity.repository(part_of=Role)
class RoleRepository:
    def find_by_name(self, name):
        items = self._dao.query.filter(name=name).all().items
        return items[0] if items else None

    def listing(self, offset=0, limit=100):
        return self._dao.query.order_by("name").offset(offset).limit(limit).all()
