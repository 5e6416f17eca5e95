"""Domain events for the Role aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String, Text

from identity.domain import identity


@identity.event(part_of="Role")
class RoleCreated:
    __version__ = 1

    role_id: Identifier(required=True)
    name: String(required=True)
    is_system: Boolean(default=False)


@identity.event(part_of="Role")
class RolePermissionsAssigned:
    """The role's permission set was replaced wholesale."""

    __version__ = 1

    role_id: Identifier(required=True)
    permission_ids: Text(required=True)  # JSON list of permission ids
    assigned_at: DateTime(required=True)
