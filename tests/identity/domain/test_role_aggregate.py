import json

import pytest
from identity.role.events import RoleCreated, RolePermissionsAssigned
from identity.role.role import Role
from shared.errors import Forbidden


class TestRoleCreation:
    def test_create_raises_role_created(self):
        role = Role.create(name="vendor", description="Sells services")
        assert role.is_system is False
        assert isinstance(role._events[0], RoleCreated)
        assert role._events[0].name == "vendor"


class TestPermissionGrants:
    def test_replace_permissions(self):
        role = Role.create(name="vendor")
        role.replace_permissions(["perm-1", "perm-2"])
        assert sorted(role.permission_ids()) == ["perm-1", "perm-2"]

        role.replace_permissions(["perm-3"])
        assert role.permission_ids() == ["perm-3"]

    def test_replace_permissions_collapses_duplicates(self):
        role = Role.create(name="vendor")
        role.replace_permissions(["perm-1", "perm-1"])
        assert role.permission_ids() == ["perm-1"]

    def test_empty_assignment_clears_grants(self):
        role = Role.create(name="vendor")
        role.replace_permissions(["perm-1"])
        role.replace_permissions([])
        assert role.permission_ids() == []

    def test_assignment_raises_event(self):
        role = Role.create(name="vendor")
        role.replace_permissions(["perm-1"])
        event = role._events[-1]
        assert isinstance(event, RolePermissionsAssigned)
        assert json.loads(event.permission_ids) == ["perm-1"]

    def test_revoke_permission(self):
        role = Role.create(name="vendor")
        role.replace_permissions(["perm-1", "perm-2"])
        assert role.revoke_permission("perm-2") is True
        assert role.revoke_permission("perm-2") is False
        assert role.permission_ids() == ["perm-1"]


class TestSystemRoles:
    def test_system_role_cannot_be_renamed(self):
        role = Role.create(name="admin", is_system=True)
        with pytest.raises(Forbidden):
            role.update(name="root")

    def test_system_role_description_can_change(self):
        role = Role.create(name="admin", is_system=True)
        role.update(description="Everything")
        assert role.description == "Everything"

    def test_system_role_cannot_be_deleted(self):
        role = Role.create(name="customer", is_system=True)
        with pytest.raises(Forbidden) as exc:
            role.ensure_deletable()
        assert exc.value.message == "Cannot delete system role"

    def test_regular_role_can_be_renamed(self):
        role = Role.create(name="vendor")
        role.update(name="seller")
        assert role.name == "seller"
