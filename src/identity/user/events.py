"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String, Text

from identity.domain import identity


@identity.event(part_of="User")
class UserRegistered:
    """A new account was created through self-registration."""

    __version__ = 1

    user_id: Identifier(required=True)
    username: String(required=True)
    email: String(required=True)
    registered_at: DateTime(required=True)


@identity.event(part_of="User")
class UserRolesAssigned:
    __version__ = 1

    user_id: Identifier(required=True)
    role_ids: Text(required=True)  # JSON list of role ids
    assigned_at: DateTime(required=True)


@identity.event(part_of="User")
class UserDeactivated:
    __version__ = 1

    user_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)
