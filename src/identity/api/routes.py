"""FastAPI endpoints for the Identity domain: auth, users, roles and permissions."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from protean.utils.globals import current_domain

from identity.access.dependencies import Requires, authenticated, current_principal
from identity.access.gate import Principal, forbid_self, require_login, require_permission
from identity.access.resolver import effective_permissions, has_permission, permissions_of_role, role_names
from identity.api.schemas import (
    AssignPermissionsRequest,
    AssignRolesRequest,
    ChangePasswordRequest,
    CreatePermissionRequest,
    CreateRoleRequest,
    LoginRequest,
    RegisterRequest,
    UpdatePermissionRequest,
    UpdateProfileRequest,
    UpdateRoleRequest,
    UserStatusRequest,
)
from identity.permission.management import CreatePermission, DeletePermission, UpdatePermission
from identity.permission.permission import Permission
from identity.role.assignment import AssignRolePermissions
from identity.role.management import CreateRole, DeleteRole, UpdateRole
from identity.role.role import Role
from identity.shared.references import MatchBy
from identity.user.administration import DeleteUser, SetUserStatus
from identity.user.authentication import authenticate
from identity.user.profile import ChangePassword, UpdateProfile
from identity.user.registration import RegisterUser
from identity.user.role_assignment import AssignUserRoles
from identity.user.user import User
from shared.api import envelope, parse_body
from shared.query import scan


def _user_data(user) -> dict[str, Any]:
    return {
        "id": str(user.id),
        "username": user.username,
        "email": user.email,
        "phone": user.phone,
        "is_active": user.is_active,
        "created_at": user.created_at,
    }


def _role_data(role) -> dict[str, Any]:
    return {
        "id": str(role.id),
        "name": role.name,
        "description": role.description,
        "is_system": role.is_system,
    }


def _permission_data(permission) -> dict[str, Any]:
    return {
        "id": str(permission.id),
        "name": permission.name,
        "description": permission.description,
    }


def _page(result, serializer, page: int, per_page: int) -> dict[str, Any]:
    return {
        "items": [serializer(record) for record in result.items],
        "page": page,
        "per_page": per_page,
        "total": result.total,
    }


# ---------------------------------------------------------------------------
# Auth Router
# ---------------------------------------------------------------------------
auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/register", status_code=201)
async def register(body: RegisterRequest):
    command = RegisterUser(
        username=body.username,
        email=body.email,
        password=body.password,
        phone=body.phone,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return envelope("Registration successful", {"user_id": user_id}, status_code=201)


@auth_router.post("/login")
async def login(body: LoginRequest):
    user, token = authenticate(body.login, body.password)
    return envelope(
        "Login successful",
        {
            "access_token": token,
            "token_type": "bearer",
            "user": _user_data(user),
            "roles": role_names(user.id),
        },
    )


# ---------------------------------------------------------------------------
# User Router
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.get("/me")
async def get_profile(principal: Principal = Depends(authenticated)):
    user = current_domain.repository_for(User).get(principal.user_id)
    data = _user_data(user)
    data["roles"] = sorted(principal.roles)
    data["permissions"] = sorted(principal.permissions)
    return envelope("Profile retrieved", data)


@user_router.put("/me")
async def update_profile(body: UpdateProfileRequest, principal: Principal = Depends(authenticated)):
    command = UpdateProfile(
        user_id=principal.user_id,
        username=body.username,
        email=body.email,
        phone=body.phone,
    )
    current_domain.process(command, asynchronous=False)
    user = current_domain.repository_for(User).get(principal.user_id)
    return envelope("Profile updated", _user_data(user))


@user_router.put("/me/password")
async def change_password(body: ChangePasswordRequest, principal: Principal = Depends(authenticated)):
    command = ChangePassword(
        user_id=principal.user_id,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    current_domain.process(command, asynchronous=False)
    return envelope("Password changed")


@user_router.get("")
async def list_users(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    principal: Principal = Depends(Requires("view_users")),
):
    result = current_domain.repository_for(User).listing(offset=(page - 1) * per_page, limit=per_page)
    return envelope("Users retrieved", _page(result, _user_data, page, per_page))


@user_router.put("/status")
async def set_user_status(
    body: UserStatusRequest,
    user_id: str = Query(..., alias="id"),
    principal: Principal = Depends(Requires("manage_users")),
):
    if not body.is_active:
        forbid_self(principal, user_id)
    current_domain.process(SetUserStatus(user_id=user_id, is_active=body.is_active), asynchronous=False)
    return envelope("User activated" if body.is_active else "User deactivated")


@user_router.delete("")
async def delete_user(
    user_id: str = Query(..., alias="id"),
    principal: Principal = Depends(Requires("manage_users")),
):
    forbid_self(principal, user_id)
    current_domain.process(DeleteUser(user_id=user_id), asynchronous=False)
    return envelope("User deleted")


@user_router.post("/roles")
async def assign_user_roles(
    body: AssignRolesRequest,
    user_id: str = Query(..., alias="id"),
    principal: Principal = Depends(Requires("assign_roles")),
):
    if body.roles is not None:
        command = AssignUserRoles(user_id=user_id, roles=body.roles, match_by=MatchBy.NAME.value)
    else:
        command = AssignUserRoles(user_id=user_id, roles=body.role_ids, match_by=MatchBy.ID.value)
    result = current_domain.process(command, asynchronous=False)
    return envelope("Roles assigned successfully", result)


@user_router.get("/roles")
async def get_user_roles(
    user_id: str = Query(..., alias="id"),
    principal: Principal | None = Depends(current_principal),
):
    principal = require_login(principal)
    if not principal.owns(user_id):
        require_permission(principal, "view_users")

    user = current_domain.repository_for(User).get(user_id)
    return envelope("User roles retrieved", {"user_id": str(user.id), "roles": role_names(user.id)})


# ---------------------------------------------------------------------------
# Role Router
# ---------------------------------------------------------------------------
role_router = APIRouter(prefix="/roles", tags=["roles"])


@role_router.get("")
async def list_roles(
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    principal: Principal = Depends(Requires("view_roles")),
):
    result = current_domain.repository_for(Role).listing(offset=(page - 1) * per_page, limit=per_page)
    return envelope("Roles retrieved", _page(result, _role_data, page, per_page))


@role_router.get("/detail")
async def get_role(role_id: str = Query(..., alias="id"), principal: Principal = Depends(Requires("view_roles"))):
    role = current_domain.repository_for(Role).get(role_id)
    data = _role_data(role)
    data["permissions"] = [permission.name for permission in permissions_of_role(role.id)]
    return envelope("Role retrieved", data)


@role_router.post("")
async def create_role_or_assign_permissions(
    payload: dict[str, Any] = Body(...),
    role_id: str | None = Query(None, alias="id"),
    principal: Principal | None = Depends(current_principal),
):
    """Without ``id`` the body creates a role; with ``id`` it replaces that role's permissions."""
    if role_id is None:
        require_permission(principal, "manage_roles")
        body = parse_body(CreateRoleRequest, payload)
        new_id = current_domain.process(
            CreateRole(name=body.name, description=body.description), asynchronous=False
        )
        return envelope("Role created", {"role_id": new_id}, status_code=201)

    require_permission(principal, "assign_permissions")
    body = parse_body(AssignPermissionsRequest, payload)
    if body.permissions is not None:
        command = AssignRolePermissions(role_id=role_id, permissions=body.permissions, match_by=MatchBy.NAME.value)
    else:
        command = AssignRolePermissions(role_id=role_id, permissions=body.permission_ids, match_by=MatchBy.ID.value)
    result = current_domain.process(command, asynchronous=False)
    return envelope("Permissions assigned successfully", result)


@role_router.put("/detail")
async def update_role(
    body: UpdateRoleRequest,
    role_id: str = Query(..., alias="id"),
    principal: Principal = Depends(Requires("manage_roles")),
):
    command = UpdateRole(role_id=role_id, name=body.name, description=body.description)
    current_domain.process(command, asynchronous=False)
    return envelope("Role updated", _role_data(current_domain.repository_for(Role).get(role_id)))


@role_router.delete("/detail")
async def delete_role(role_id: str = Query(..., alias="id"), principal: Principal = Depends(Requires("manage_roles"))):
    current_domain.process(DeleteRole(role_id=role_id), asynchronous=False)
    return envelope("Role deleted")


@role_router.get("/permissions")
async def get_role_permissions(
    role_id: str = Query(..., alias="id"),
    principal: Principal = Depends(Requires("view_roles")),
):
    permissions = permissions_of_role(role_id)
    return envelope("Role permissions retrieved", [_permission_data(p) for p in permissions])


@role_router.get("/users")
async def get_role_users(role_id: str = Query(..., alias="id"), principal: Principal = Depends(Requires("view_roles"))):
    role = current_domain.repository_for(Role).get(role_id)
    users = [
        _user_data(user)
        for user in scan(current_domain.repository_for(User)._dao.query)
        if str(role.id) in user.role_ids()
    ]
    return envelope("Role users retrieved", users)


# ---------------------------------------------------------------------------
# Permission Router
# ---------------------------------------------------------------------------
permission_router = APIRouter(prefix="/permissions", tags=["permissions"])


@permission_router.get("")
async def list_permissions(
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    principal: Principal = Depends(Requires("view_permissions")),
):
    result = current_domain.repository_for(Permission).listing(offset=(page - 1) * per_page, limit=per_page)
    return envelope("Permissions retrieved", _page(result, _permission_data, page, per_page))


@permission_router.get("/detail")
async def get_permission(
    permission_id: str = Query(..., alias="id"),
    principal: Principal = Depends(Requires("view_permissions")),
):
    permission = current_domain.repository_for(Permission).get(permission_id)
    return envelope("Permission retrieved", _permission_data(permission))


@permission_router.post("", status_code=201)
async def create_permission(
    body: CreatePermissionRequest,
    principal: Principal = Depends(Requires("manage_permissions")),
):
    new_id = current_domain.process(
        CreatePermission(name=body.name, description=body.description), asynchronous=False
    )
    return envelope("Permission created", {"permission_id": new_id}, status_code=201)


@permission_router.put("/detail")
async def update_permission(
    body: UpdatePermissionRequest,
    permission_id: str = Query(..., alias="id"),
    principal: Principal = Depends(Requires("manage_permissions")),
):
    command = UpdatePermission(permission_id=permission_id, name=body.name, description=body.description)
    current_domain.process(command, asynchronous=False)
    permission = current_domain.repository_for(Permission).get(permission_id)
    return envelope("Permission updated", _permission_data(permission))


@permission_router.delete("/detail")
async def delete_permission(
    permission_id: str = Query(..., alias="id"),
    principal: Principal = Depends(Requires("manage_permissions")),
):
    current_domain.process(DeletePermission(permission_id=permission_id), asynchronous=False)
    return envelope("Permission deleted")


@permission_router.get("/user")
async def get_user_permissions(
    user_id: str | None = Query(None),
    principal: Principal = Depends(authenticated),
):
    """The caller's own permissions, or another user's for holders of ``view_users``."""
    target = user_id or principal.user_id
    if not principal.owns(target):
        require_permission(principal, "view_users")
    return envelope("User permissions retrieved", {"user_id": target, "permissions": sorted(effective_permissions(target))})


@permission_router.get("/check")
async def check_permission(
    permission: str = Query(..., min_length=1),
    user_id: str | None = Query(None),
    principal: Principal = Depends(authenticated),
):
    target = user_id or principal.user_id
    if not principal.owns(target):
        require_permission(principal, "view_users")
    return envelope(
        "Permission checked",
        {"user_id": target, "permission": permission, "has_permission": has_permission(target, permission)},
    )
