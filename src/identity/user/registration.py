"""Self-service registration: command and handler."""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from identity.access.credentials import hash_password
from identity.domain import identity
from identity.role.role import Role
from identity.user.user import User
from shared.errors import Conflict

logger = structlog.get_logger(__name__)

DEFAULT_ROLE = "customer"


@identity.command(part_of="User")
class RegisterUser:
    """Create an account. The new user joins the ``customer`` role when it exists."""

    username: String(required=True, max_length=50)
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)
    phone: String(max_length=20)


@identity.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)

        if repo.find_by_email(command.email) is not None:
            raise Conflict("Email already exists")
        if repo.find_by_username(command.username) is not None:
            raise Conflict("Username already exists")

        default_role = current_domain.repository_for(Role).find_by_name(DEFAULT_ROLE)
        if default_role is None:
            logger.warning("Default role missing, user registered without roles", role=DEFAULT_ROLE)

        user = User.register(
            username=command.username,
            email=command.email,
            password_hash=hash_password(command.password),
            phone=command.phone,
            role_ids=[default_role.id] if default_role else (),
        )
        repo.add(user)

        logger.info("Registered user", user_id=str(user.id), username=user.username)
        return str(user.id)
