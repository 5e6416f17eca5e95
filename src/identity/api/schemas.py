"""Pydantic request schemas for the Identity API."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

# --- Auth & users ---


class RegisterRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "username": "jane",
                    "email": "jane.doe@example.com",
                    "password": "s3cret-pass",
                    "phone": "+1-555-0123",
                }
            ]
        }
    }

    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=6, max_length=128)
    phone: str | None = Field(None, max_length=20)


class LoginRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"login": "jane.doe@example.com", "password": "s3cret-pass"}]}}

    login: str = Field(..., min_length=1, max_length=254, description="Email address or username")
    password: str = Field(..., min_length=1, max_length=128)


class UpdateProfileRequest(BaseModel):
    username: str | None = Field(None, min_length=3, max_length=50)
    email: str | None = Field(None, max_length=254)
    phone: str | None = Field(None, max_length=20)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=6, max_length=128)


class UserStatusRequest(BaseModel):
    is_active: bool


class AssignRolesRequest(BaseModel):
    """Either role names or role ids; names win when both are sent."""

    model_config = {"json_schema_extra": {"examples": [{"roles": ["customer"]}, {"role_ids": ["4f1c..."]}]}}

    roles: list[str] | None = None
    role_ids: list[str] | None = None

    @model_validator(mode="after")
    def one_list_required(self):
        if self.roles is None and self.role_ids is None:
            raise ValueError("Provide either roles or role_ids")
        return self


# --- Roles ---


class CreateRoleRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"name": "vendor", "description": "Sells services"}]}}

    name: str = Field(..., min_length=1, max_length=50)
    description: str | None = Field(None, max_length=255)


class UpdateRoleRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = Field(None, max_length=255)


class AssignPermissionsRequest(BaseModel):
    """Either permission names or permission ids; names win when both are sent."""

    model_config = {"json_schema_extra": {"examples": [{"permissions": ["place_orders", "view_roles"]}]}}

    permissions: list[str] | None = None
    permission_ids: list[str] | None = None

    @model_validator(mode="after")
    def one_list_required(self):
        if self.permissions is None and self.permission_ids is None:
            raise ValueError("Provide either permissions or permission_ids")
        return self


# --- Permissions ---


class CreatePermissionRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=255)


class UpdatePermissionRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=255)
