import pytest

from app.core.permissions import (
    Permission,
    ROLE_PERMISSIONS,
    ROLE_RANK,
    has_permission,
    permissions_for,
    role_at_least,
)
from app.models.user import UserRole
from app.schemas.auth import Principal


def principal(role: UserRole, active: bool = True) -> Principal:
    return Principal(id="u1", name="Test", email="t@escola.com", role=role, is_active=active)


@pytest.mark.parametrize("role", list(UserRole))
@pytest.mark.parametrize("tag", list(Permission))
def test_inactive_principal_has_no_permissions(role, tag):
    assert has_permission(principal(role, active=False), tag) is False


@pytest.mark.parametrize("role", list(UserRole))
def test_inactive_principal_fails_role_checks(role):
    assert has_permission(principal(role, active=False), UserRole.Student) is False
    assert permissions_for(principal(role, active=False)) == frozenset()


def test_no_principal_is_denied():
    assert has_permission(None, Permission.DashboardView) is False
    assert has_permission(None, UserRole.Student) is False


@pytest.mark.parametrize(
    "actual, required, expected",
    [
        (UserRole.Direction, UserRole.Student, True),
        (UserRole.Direction, UserRole.Staff, True),
        (UserRole.Direction, UserRole.Direction, True),
        (UserRole.Staff, UserRole.Student, True),
        (UserRole.Staff, UserRole.Staff, True),
        (UserRole.Staff, UserRole.Direction, False),
        (UserRole.Student, UserRole.Student, True),
        (UserRole.Student, UserRole.Staff, False),
        (UserRole.Student, UserRole.Direction, False),
    ],
)
def test_role_hierarchy(actual, required, expected):
    assert has_permission(principal(actual), required) is expected
    assert (ROLE_RANK[actual] >= ROLE_RANK[required]) is expected


def test_rank_order():
    assert ROLE_RANK[UserRole.Student] < ROLE_RANK[UserRole.Staff] < ROLE_RANK[UserRole.Direction]


def test_grant_sets_nest():
    assert role_at_least(UserRole.Staff, UserRole.Student)
    assert not role_at_least(UserRole.Student, UserRole.Staff)
    assert ROLE_PERMISSIONS[UserRole.Student] < ROLE_PERMISSIONS[UserRole.Staff] < ROLE_PERMISSIONS[UserRole.Direction]


def test_capability_table():
    student, staff, direction = (principal(r) for r in (UserRole.Student, UserRole.Staff, UserRole.Direction))

    assert has_permission(student, "reports:create")
    assert not has_permission(student, "users:manage")

    assert has_permission(staff, Permission.VisitorsManage)
    assert not has_permission(staff, Permission.UsersManage)

    assert has_permission(direction, Permission.ReportsCreate)
    assert has_permission(direction, Permission.UsersManage)


def test_everyone_can_read_most_collections():
    for role in UserRole:
        p = principal(role)
        for tag in ("reports:view_all", "visitors:view", "notices:view_all", "campaigns:view_all", "drills:view"):
            assert has_permission(p, tag), (role, tag)


def test_list_queries_are_any_match():
    student = principal(UserRole.Student)
    assert has_permission(student, ["users:manage", "reports:create"])
    assert not has_permission(student, ["users:manage", "emergency:trigger"])
    assert has_permission(principal(UserRole.Staff), [UserRole.Direction, Permission.EmergencyTrigger])
    assert not has_permission(student, [])


def test_raw_role_strings_are_roles():
    assert has_permission(principal(UserRole.Direction), ["direcao"])
    assert not has_permission(principal(UserRole.Staff), "direcao")


def test_unknown_tags_are_denied():
    assert not has_permission(principal(UserRole.Direction), "reports:delete_everything")
    assert not has_permission(principal(UserRole.Direction), "")
