# app/core/permissions.py

from enum import Enum
from typing import Iterable, Union

from app.models.user import UserRole


class Permission(str, Enum):
    ReportsCreate = "reports:create"
    ReportsView = "reports:view"
    ReportsViewAll = "reports:view_all"
    ReportsManage = "reports:manage"
    UsersView = "users:view"
    UsersViewAll = "users:view_all"
    UsersManage = "users:manage"
    VisitorsRegister = "visitors:register"
    VisitorsManage = "visitors:manage"
    VisitorsView = "visitors:view"
    EmergencyTrigger = "emergency:trigger"
    EmergencyManage = "emergency:manage"
    CampaignsView = "campaigns:view"
    CampaignsViewAll = "campaigns:view_all"
    CampaignsManage = "campaigns:manage"
    ChecklistView = "checklist:view"
    ChecklistComplete = "checklist:complete"
    ChecklistManage = "checklist:manage"
    DrillsParticipate = "drills:participate"
    DrillsManage = "drills:manage"
    DrillsView = "drills:view"
    NoticesView = "notices:view"
    NoticesViewAll = "notices:view_all"
    NoticesCreate = "notices:create"
    NoticesManage = "notices:manage"
    DashboardView = "dashboard:view"
    DashboardAdmin = "dashboard:admin"


P = Permission

# ----------------------------------------------------------------------
# Capability table: the single source of truth for authorization.
# Most collections are readable by every role on purpose.
# ----------------------------------------------------------------------
_STUDENT = frozenset({
    P.ReportsCreate, P.ReportsView, P.ReportsViewAll,
    P.CampaignsView, P.CampaignsViewAll,
    P.DashboardView,
    P.VisitorsView,
    P.NoticesView, P.NoticesViewAll,
    P.ChecklistView,
    P.DrillsParticipate, P.DrillsView,
})

_STAFF = _STUDENT | {
    P.ReportsManage,
    P.UsersView,
    P.VisitorsRegister, P.VisitorsManage,
    P.EmergencyTrigger,
    P.CampaignsManage,
    P.ChecklistComplete, P.ChecklistManage,
    P.DrillsManage,
    P.NoticesCreate,
}

_DIRECTION = _STAFF | {
    P.UsersViewAll, P.UsersManage,
    P.EmergencyManage,
    P.NoticesManage,
    P.DashboardAdmin,
}

ROLE_PERMISSIONS: dict[UserRole, frozenset[Permission]] = {
    UserRole.Student: _STUDENT,
    UserRole.Staff: frozenset(_STAFF),
    UserRole.Direction: frozenset(_DIRECTION),
}


def role_at_least(actual: UserRole, required: UserRole) -> bool:
    """
    Seniority derived from the capability table: a role is at least as
    senior as another when it holds every grant the other holds.
    """
    return ROLE_PERMISSIONS[required] <= ROLE_PERMISSIONS[actual]


# 1 = least senior. Used for display and sorting only.
ROLE_RANK: dict[UserRole, int] = {
    role: sum(role_at_least(role, other) for other in UserRole)
    for role in UserRole
}


PermissionQuery = Union[UserRole, Permission, str]


def _coerce(query: PermissionQuery) -> UserRole | Permission | None:
    if isinstance(query, (UserRole, Permission)):
        return query
    value = str(query).strip()
    for enum in (UserRole, Permission):
        try:
            return enum(value)
        except ValueError:
            continue
    return None


def permissions_for(principal) -> frozenset[Permission]:
    if principal is None or not principal.is_active:
        return frozenset()
    return ROLE_PERMISSIONS.get(principal.role, frozenset())


def has_permission(
    principal,
    query: PermissionQuery | Iterable[PermissionQuery],
) -> bool:
    """
    Accepts a role, a capability tag, or an iterable mixing both.
    Roles are "at least this senior"; tags are table lookups.
    Iterables match if any entry matches.
    """
    granted = permissions_for(principal)
    if not granted:
        return False

    if isinstance(query, (str, UserRole, Permission)):
        queries = [query]
    else:
        queries = list(query)

    for raw in queries:
        item = _coerce(raw)
        if isinstance(item, UserRole):
            if role_at_least(principal.role, item):
                return True
        elif isinstance(item, Permission):
            if item in granted:
                return True
    return False
