"""Identity domain API package."""

from identity.api.routes import auth_router, permission_router, role_router, user_router

__all__ = ["auth_router", "user_router", "role_router", "permission_router"]
