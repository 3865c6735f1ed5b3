"""
Django Freightplan - multi-tenant freight demand and supply planning.

Demand planners forecast loads per client, route and truck type; supply
planners commit supplier capacity to routes; the gap between the two is
computed per route and period.

Usage:
    from freightplan import planner, PlanningError

    targets = planner.compute_gaps(org, week.pk)
    for target in targets:
        print(f"{target.route_key}: {target.gap['total']} ({target.gap_percent}%)")
"""

from freightplan.exceptions import PlanningError


def __getattr__(name):
    """Lazy import to avoid AppRegistryNotReady errors."""
    if name in ("planner", "Planner"):
        from freightplan.service import Planner

        return Planner
    if name == "RouteKey":
        from freightplan.routes import RouteKey

        return RouteKey
    if name == "GapTarget":
        from freightplan.results import GapTarget

        return GapTarget
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["planner", "Planner", "PlanningError", "RouteKey", "GapTarget"]
__version__ = "0.1.0"
