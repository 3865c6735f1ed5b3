"""
Freightplan Input Types.

Typed payloads for store operations, built by the API serializers (or
directly by Python callers). Quantities are keyed by period name:
'day1'..'day7' and 'week1'..'week5'.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DemandForecastInput:
    planning_week_id: int
    client_id: int
    pickup_city_id: int
    dropoff_city_id: int
    truck_type_ids: tuple[int, ...]
    quantities: dict[str, int] = field(default_factory=dict)
    demand_category_id: int | None = None


@dataclass(frozen=True)
class DemandForecastPatch:
    """Only the provided periods are changed."""

    quantities: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SupplyCommitmentInput:
    planning_week_id: int
    supplier_id: int
    route_key: str
    quantities: dict[str, int] = field(default_factory=dict)
    truck_type_id: int | None = None


@dataclass(frozen=True)
class SupplyCommitmentPatch:
    """Only the provided periods are changed."""

    quantities: dict[str, int] = field(default_factory=dict)
