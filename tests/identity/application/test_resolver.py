"""Effective permissions: the union over a user's roles."""

from identity.access import resolver
from identity.permission.management import CreatePermission, DeletePermission
from identity.role.assignment import AssignRolePermissions
from identity.role.management import CreateRole, DeleteRole
from identity.user.registration import RegisterUser
from identity.user.role_assignment import AssignUserRoles
from identity.user.user import User
from protean import current_domain


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _role(name, permissions):
    role_id = _process(CreateRole(name=name))
    _process(AssignRolePermissions(role_id=role_id, permissions=permissions))
    return role_id


def _user(username="jane", roles=()):
    user_id = _process(RegisterUser(username=username, email=f"{username}@example.com", password="secret123"))
    _process(AssignUserRoles(user_id=user_id, roles=list(roles)))
    return user_id


def _permissions(*names):
    for name in names:
        _process(CreatePermission(name=name))


class TestEffectivePermissions:
    def test_union_over_roles(self):
        _permissions("p1", "p2", "p3")
        _role("first", ["p1", "p2"])
        _role("second", ["p2", "p3"])
        user_id = _user(roles=["first", "second"])

        assert resolver.effective_permissions(user_id) == {"p1", "p2", "p3"}

    def test_user_without_roles_has_nothing(self):
        user_id = _user()
        assert resolver.effective_permissions(user_id) == set()

    def test_unknown_user_has_nothing(self):
        assert resolver.effective_permissions("missing") == set()
        assert resolver.has_permission("missing", "p1") is False

    def test_has_permission_and_has_role(self):
        _permissions("p1")
        _role("first", ["p1"])
        user_id = _user(roles=["first"])

        assert resolver.has_permission(user_id, "p1") is True
        assert resolver.has_permission(user_id, "p2") is False
        assert resolver.has_role(user_id, "first") is True
        assert resolver.role_names(user_id) == ["first"]

    def test_roles_do_not_nest(self):
        _permissions("p1")
        _role("outer", [])
        _role("inner", ["p1"])
        user_id = _user(roles=["outer"])

        assert resolver.effective_permissions(user_id) == set()

    def test_changes_are_visible_on_next_call(self):
        _permissions("p1", "p2")
        role_id = _role("first", ["p1"])
        user_id = _user(roles=["first"])
        assert resolver.effective_permissions(user_id) == {"p1"}

        _process(AssignRolePermissions(role_id=role_id, permissions=["p2"]))
        assert resolver.effective_permissions(user_id) == {"p2"}


class TestDeletionCleanup:
    def test_deleted_permission_disappears_from_roles(self):
        _permissions("p1", "p2")
        role_id = _role("first", ["p1", "p2"])
        user_id = _user(roles=["first"])

        p1 = next(p for p in resolver.permissions_of_role(role_id) if p.name == "p1")
        _process(DeletePermission(permission_id=p1.id))

        assert [p.name for p in resolver.permissions_of_role(role_id)] == ["p2"]
        assert resolver.effective_permissions(user_id) == {"p2"}

    def test_deleted_role_disappears_from_users(self):
        _permissions("p1")
        role_id = _role("first", ["p1"])
        user_id = _user(roles=["first"])

        _process(DeleteRole(role_id=role_id))

        assert current_domain.repository_for(User).get(user_id).role_ids() == []
        assert resolver.effective_permissions(user_id) == set()


class TestLoadPrincipal:
    def test_principal_carries_roles_and_permissions(self):
        _permissions("p1")
        _role("first", ["p1"])
        user_id = _user(roles=["first"])

        principal = resolver.load_principal(user_id)
        assert principal.user_id == user_id
        assert principal.username == "jane"
        assert principal.roles == frozenset({"first"})
        assert principal.permissions == frozenset({"p1"})

    def test_inactive_user_has_no_principal(self):
        user_id = _user()
        repo = current_domain.repository_for(User)
        user = repo.get(user_id)
        user.deactivate()
        repo.add(user)

        assert resolver.load_principal(user_id) is None
