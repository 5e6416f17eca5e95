"""Bulk replacement of a user's role memberships."""

import structlog
from protean import handle
from protean.fields import Identifier, List, String
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.role.role import Role
from identity.shared.references import MatchBy, resolve_references
from identity.user.user import User

logger = structlog.get_logger(__name__)


@identity.command(part_of="User")
class AssignUserRoles:
    """Replace every role of a user; ``roles`` holds names or ids per ``match_by``."""

    user_id: Identifier(required=True)
    roles: List(content_type=String)
    match_by: String(choices=MatchBy, default=MatchBy.NAME.value)


@identity.command_handler(part_of=User)
class AssignUserRolesHandler:
    @handle(AssignUserRoles)
    def assign_roles(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        roles, unresolved = resolve_references(
            current_domain.repository_for(Role),
            command.roles,
            command.match_by,
        )
        if unresolved:
            logger.warning("Skipped unknown roles during assignment", user_id=str(user.id), unresolved=unresolved)

        user.replace_roles([role.id for role in roles])
        repo.add(user)

        return {
            "assigned": sorted(role.name for role in roles),
            "unresolved": unresolved,
        }
