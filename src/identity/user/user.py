"""User aggregate with the UserRole membership entity."""

import json
from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, HasMany, Identifier, String

from identity.domain import identity
from identity.shared.email import EmailAddress


@identity.entity(part_of="User")
class UserRole:
    """Places the owning user in one role (a ``user_role`` row)."""

    role_id: Identifier(required=True)


@identity.aggregate
class User:
    """A person who can sign in. Carries credentials and role memberships.

    Permissions are never stored on the user; they are derived from the
    roles at request time by ``identity.access.resolver``.
    """

    username: String(required=True, max_length=50, unique=True)
    email: String(required=True, max_length=254, unique=True)
    phone: String(max_length=20)
    password_hash: String(required=True, max_length=255)
    is_active: Boolean(default=True)
    roles: HasMany(UserRole)
    created_at: DateTime(default=lambda: datetime.now(UTC))
    updated_at: DateTime(default=lambda: datetime.now(UTC))

    @classmethod
    def register(cls, username, email, password_hash, phone=None, role_ids=()):
        from identity.user.events import UserRegistered

        address = EmailAddress(address=email).normalised
        user = cls(
            username=username.strip(),
            email=address,
            phone=phone,
            password_hash=password_hash,
        )
        if role_ids:
            user.add_roles([UserRole(role_id=rid) for rid in role_ids])

        user.raise_(
            UserRegistered(
                user_id=user.id,
                username=user.username,
                email=user.email,
                registered_at=user.created_at,
            )
        )
        return user

    def update_profile(self, username=None, email=None, phone=None):
        if username is not None:
            self.username = username.strip()
        if email is not None:
            self.email = EmailAddress(address=email).normalised
        if phone is not None:
            self.phone = phone
        self.updated_at = datetime.now(UTC)

    def change_password(self, password_hash):
        self.password_hash = password_hash
        self.updated_at = datetime.now(UTC)

    def activate(self):
        self.is_active = True
        self.updated_at = datetime.now(UTC)

    def deactivate(self):
        from identity.user.events import UserDeactivated

        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(UserDeactivated(user_id=self.id, deactivated_at=self.updated_at))

    def role_ids(self) -> list[str]:
        return [str(membership.role_id) for membership in self.roles]

    def replace_roles(self, role_ids):
        """Swap every membership for ``role_ids``; duplicates collapse."""
        from identity.user.events import UserRolesAssigned

        for membership in list(self.roles):
            self.remove_roles(membership)

        unique_ids = list(dict.fromkeys(str(rid) for rid in role_ids))
        if unique_ids:
            self.add_roles([UserRole(role_id=rid) for rid in unique_ids])

        self.raise_(
            UserRolesAssigned(
                user_id=self.id,
                role_ids=json.dumps(unique_ids),
                assigned_at=datetime.now(UTC),
            )
        )

    def revoke_role(self, role_id) -> bool:
        for membership in list(self.roles):
            if str(membership.role_id) == str(role_id):
                self.remove_roles(membership)
                return True
        return False


@identity.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email):
        items = self._dao.query.filter(email=email.strip().lower()).all().items
        return items[0] if items else None

    def find_by_username(self, username):
        items = self._dao.query.filter(username=username.strip()).all().items
        return items[0] if items else None

    def find_by_login(self, login):
        """Look a user up by email or username, whichever ``login`` looks like."""
        if "@" in login:
            return self.find_by_email(login)
        return self.find_by_username(login)

    def listing(self, offset=0, limit=100):
        return self._dao.query.order_by("username").offset(offset).limit(limit).all()
