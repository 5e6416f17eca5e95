"""Role lifecycle: create, update and delete."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.role.role import Role
from identity.user.user import User
from shared.errors import Conflict
from shared.query import scan

logger = structlog.get_logger(__name__)


@identity.command(part_of="Role")
class CreateRole:
    name: String(required=True, max_length=50)
    description: String(max_length=255)


@identity.command(part_of="Role")
class UpdateRole:
    role_id: Identifier(required=True)
    name: String(max_length=50)
    description: String(max_length=255)


@identity.command(part_of="Role")
class DeleteRole:
    """Delete a non-system role and drop it from every user holding it."""

    role_id: Identifier(required=True)


@identity.command_handler(part_of=Role)
class ManageRolesHandler:
    @handle(CreateRole)
    def create_role(self, command):
        repo = current_domain.repository_for(Role)
        if repo.find_by_name(command.name) is not None:
            raise Conflict("Role name already exists")

        role = Role.create(name=command.name, description=command.description)
        repo.add(role)
        return str(role.id)

    @handle(UpdateRole)
    def update_role(self, command):
        repo = current_domain.repository_for(Role)
        role = repo.get(command.role_id)

        if command.name and command.name != role.name and repo.find_by_name(command.name) is not None:
            raise Conflict("Role name already exists")

        role.update(name=command.name or None, description=command.description)
        repo.add(role)

    @handle(DeleteRole)
    def delete_role(self, command):
        repo = current_domain.repository_for(Role)
        role = repo.get(command.role_id)
        role.ensure_deletable()

        user_repo = current_domain.repository_for(User)
        for user in list(scan(user_repo._dao.query)):
            if user.revoke_role(role.id):
                user_repo.add(user)

        for grant in list(role.permissions):
            role.remove_permissions(grant)
        repo.add(role)
        repo._dao.delete(role)

        logger.info("Deleted role", role=role.name)
