"""Shared BDD fixtures and step definitions for the Identity domain."""

import pytest
from identity.permission.management import CreatePermission
from identity.role.assignment import AssignRolePermissions
from identity.role.management import CreateRole
from identity.user.registration import RegisterUser
from identity.user.role_assignment import AssignUserRoles
from protean import current_domain
from pytest_bdd import given, parsers


def names(text):
    return [name.strip() for name in text.split(",") if name.strip()]


@pytest.fixture()
def users():
    """User ids by username."""
    return {}


@pytest.fixture()
def roles():
    """Role ids by name."""
    return {}


@pytest.fixture()
def outcome():
    return {"result": None}


@given(parsers.cfparse('the permissions "{permission_names}" exist'))
def permissions_exist(permission_names):
    for name in names(permission_names):
        current_domain.process(CreatePermission(name=name), asynchronous=False)


@given(parsers.cfparse('a role "{name}" granting "{permission_names}"'))
def role_granting(roles, name, permission_names):
    roles[name] = current_domain.process(CreateRole(name=name), asynchronous=False)
    current_domain.process(
        AssignRolePermissions(role_id=roles[name], permissions=names(permission_names)),
        asynchronous=False,
    )


@given(parsers.cfparse('a user "{username}" holding "{role_names}"'))
def user_holding(users, username, role_names):
    users[username] = current_domain.process(
        RegisterUser(username=username, email=f"{username}@example.com", password="secret123"),
        asynchronous=False,
    )
    current_domain.process(AssignUserRoles(user_id=users[username], roles=names(role_names)), asynchronous=False)
