"""FastAPI dependencies that turn a bearer token into a ``Principal``.

Routers of any domain can depend on these; the identity domain context is
pushed here for the lookup, so callers need not be inside it.
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from identity.access.credentials import read_access_token
from identity.access.gate import Principal, require_login, require_permission
from identity.access.resolver import load_principal
from identity.domain import identity

bearer_scheme = HTTPBearer(auto_error=False)


async def current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal | None:
    if credentials is None:
        return None

    user_id = read_access_token(credentials.credentials)
    with identity.domain_context():
        return load_principal(user_id)


async def authenticated(principal: Principal | None = Depends(current_principal)) -> Principal:
    return require_login(principal)


class Requires:
    """Dependency that demands one permission: ``Depends(Requires("manage_orders"))``."""

    def __init__(self, permission: str):
        self.permission = permission

    async def __call__(self, principal: Principal | None = Depends(current_principal)) -> Principal:
        return require_permission(principal, self.permission)
