"""
Notification Protocol: tells the other side of the planning table that
something changed.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class NotificationBackend(Protocol):
    """Planner notifications. Failures never affect the triggering write."""

    def notify_supply_planners_of_demand(
        self,
        forecast_id: int,
        client_name: str,
        route_key: str,
        actor_name: str,
    ) -> None:
        """A new demand forecast was entered."""
        ...

    def notify_demand_planners_of_supply(
        self,
        commitment_id: int,
        route_key: str,
        supplier_name: str,
        actor_name: str,
        planning_week_id: int,
    ) -> None:
        """A supplier committed capacity to a route."""
        ...
