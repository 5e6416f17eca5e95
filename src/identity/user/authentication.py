"""Credential checks that turn a login and password into a bearer token."""

import structlog
from protean.utils.globals import current_domain

from identity.access.credentials import issue_access_token, verify_password
from identity.user.user import User
from shared.errors import Forbidden, Unauthenticated

logger = structlog.get_logger(__name__)


def authenticate(login: str, password: str) -> tuple[User, str]:
    """Verify ``login`` (email or username) and ``password``.

    Returns the user together with a freshly signed access token. Unknown
    logins and wrong passwords are indistinguishable to the caller.
    """
    user = current_domain.repository_for(User).find_by_login(login)

    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt", login=login)
        raise Unauthenticated("Invalid credentials")

    if not user.is_active:
        raise Forbidden("Account is deactivated")

    return user, issue_access_token(user.id)
