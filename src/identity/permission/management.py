"""Permission catalogue management: create, update and delete."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.permission.permission import Permission
from identity.role.role import Role
from shared.errors import Conflict
from shared.query import scan

logger = structlog.get_logger(__name__)


@identity.command(part_of="Permission")
class CreatePermission:
    name: String(required=True, max_length=100)
    description: String(max_length=255)


@identity.command(part_of="Permission")
class UpdatePermission:
    permission_id: Identifier(required=True)
    name: String(max_length=100)
    description: String(max_length=255)


@identity.command(part_of="Permission")
class DeletePermission:
    """Remove a permission and strip it from every role that grants it."""

    permission_id: Identifier(required=True)


@identity.command_handler(part_of=Permission)
class ManagePermissionsHandler:
    @handle(CreatePermission)
    def create_permission(self, command):
        repo = current_domain.repository_for(Permission)
        if repo.find_by_name(command.name) is not None:
            raise Conflict("Permission name already exists")

        permission = Permission(name=command.name, description=command.description)
        repo.add(permission)
        return str(permission.id)

    @handle(UpdatePermission)
    def update_permission(self, command):
        repo = current_domain.repository_for(Permission)
        permission = repo.get(command.permission_id)

        if command.name and command.name != permission.name:
            existing = repo.find_by_name(command.name)
            if existing is not None:
                raise Conflict("Permission name already exists")

        permission.update(name=command.name, description=command.description)
        repo.add(permission)

    @handle(DeletePermission)
    def delete_permission(self, command):
        repo = current_domain.repository_for(Permission)
        permission = repo.get(command.permission_id)

        role_repo = current_domain.repository_for(Role)
        for role in list(scan(role_repo._dao.query)):
            if role.revoke_permission(permission.id):
                role_repo.add(role)
                logger.info("Revoked deleted permission from role", role=role.name, permission=permission.name)

        repo._dao.delete(permission)
