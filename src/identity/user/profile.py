"""Profile maintenance by the account owner."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.access.credentials import hash_password, verify_password
from identity.domain import identity
from identity.user.user import User
from shared.errors import Conflict, Unauthenticated


@identity.command(part_of="User")
class UpdateProfile:
    user_id: Identifier(required=True)
    username: String(max_length=50)
    email: String(max_length=254)
    phone: String(max_length=20)


@identity.command(part_of="User")
class ChangePassword:
    """Replace the password after verifying the current one."""

    user_id: Identifier(required=True)
    current_password: String(required=True, max_length=128)
    new_password: String(required=True, max_length=128)


@identity.command_handler(part_of=User)
class ManageProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        if command.email and command.email.strip().lower() != user.email:
            other = repo.find_by_email(command.email)
            if other is not None and other.id != user.id:
                raise Conflict("Email already exists")

        if command.username and command.username.strip() != user.username:
            other = repo.find_by_username(command.username)
            if other is not None and other.id != user.id:
                raise Conflict("Username already exists")

        user.update_profile(
            username=command.username or None,
            email=command.email or None,
            phone=command.phone,
        )
        repo.add(user)

    @handle(ChangePassword)
    def change_password(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        if not verify_password(command.current_password, user.password_hash):
            raise Unauthenticated("Current password is incorrect")

        user.change_password(hash_password(command.new_password))
        repo.add(user)
