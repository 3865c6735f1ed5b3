"""
Role-based access control.
"""

from rest_framework.permissions import BasePermission

from freightplan.exceptions import PlanningError
from freightplan.models import Role

ROLE_PERMISSIONS: dict[str, set[str]] = {
    Role.DEMAND_PLANNER: {"demand:read", "demand:write", "repositories:read"},
    Role.SUPPLY_PLANNER: {"supply:read", "supply:write", "repositories:read"},
    Role.ADMIN: {"*"},
}


def has_permission(role: str, action: str) -> bool:
    """True if role may perform action (e.g. 'demand:write')."""
    permissions = ROLE_PERMISSIONS.get(role, set())
    return "*" in permissions or action in permissions


class HasPlanningSession(BasePermission):
    """
    DRF permission: the request resolves to a planning session.

    The session is stored on request.planning_session for the view.
    """

    def has_permission(self, request, view) -> bool:
        from freightplan.conf import get_session_backend

        session = get_session_backend().get_session(request)
        if session is None:
            raise PlanningError("UNAUTHORIZED")
        request.planning_session = session
        return True
