"""Account administration: activation and deletion."""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.user.user import User

logger = structlog.get_logger(__name__)


@identity.command(part_of="User")
class SetUserStatus:
    user_id: Identifier(required=True)
    is_active: Boolean(required=True)


@identity.command(part_of="User")
class DeleteUser:
    user_id: Identifier(required=True)


@identity.command_handler(part_of=User)
class AdministerUsersHandler:
    @handle(SetUserStatus)
    def set_user_status(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        if command.is_active:
            user.activate()
        else:
            user.deactivate()
        repo.add(user)

        logger.info("Changed user status", user_id=str(user.id), is_active=user.is_active)

    @handle(DeleteUser)
    def delete_user(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        for membership in list(user.roles):
            user.remove_roles(membership)
        repo.add(user)
        repo._dao.delete(user)

        logger.info("Deleted user", user_id=str(command.user_id))
