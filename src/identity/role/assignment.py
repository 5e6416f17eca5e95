"""Bulk replacement of a role's permission set."""

import structlog
from protean import handle
from protean.fields import Identifier, List, String
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.permission.permission import Permission
from identity.role.role import Role
from identity.shared.references import MatchBy, resolve_references

logger = structlog.get_logger(__name__)


@identity.command(part_of="Role")
class AssignRolePermissions:
    """Replace every permission of a role.

    ``permissions`` holds names when ``match_by`` is ``"name"`` and
    identifiers when it is ``"id"``. An empty list clears the role.
    """

    role_id: Identifier(required=True)
    permissions: List(content_type=String)
    match_by: String(choices=MatchBy, default=MatchBy.NAME.value)


@identity.command_handler(part_of=Role)
class AssignRolePermissionsHandler:
    @handle(AssignRolePermissions)
    def assign_permissions(self, command):
        repo = current_domain.repository_for(Role)
        role = repo.get(command.role_id)

        permissions, unresolved = resolve_references(
            current_domain.repository_for(Permission),
            command.permissions,
            command.match_by,
        )
        if unresolved:
            logger.warning(
                "Skipped unknown permissions during assignment",
                role=role.name,
                unresolved=unresolved,
            )

        role.replace_permissions([permission.id for permission in permissions])
        repo.add(role)

        return {
            "assigned": sorted(permission.name for permission in permissions),
            "unresolved": unresolved,
        }
