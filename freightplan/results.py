"""
Freightplan Result Types.

Structured results for gap computation, dispatch sheets, week summaries,
paging and bulk operations.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from freightplan.routes import RouteKey

FILL_RISK = "FILL RISK"
CAPACITY_FILLED = "CAPACITY FILLED"


# ══════════════════════════════════════════════════════════════
# PAGING
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Page:
    """One page of a listing."""

    items: list
    page: int
    page_size: int
    total_count: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    def pagination(self) -> dict:
        return {
            "page": self.page,
            "page_size": self.page_size,
            "total_count": self.total_count,
            "total_pages": self.total_pages,
            "has_next_page": self.has_next_page,
            "has_previous_page": self.has_previous_page,
        }


# ══════════════════════════════════════════════════════════════
# GAPS
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ClientBreakdown:
    """One client's demand on a route."""

    client_id: int
    client_name: str
    quantities: dict[str, int]
    total: int


@dataclass(frozen=True)
class CommitmentRow:
    """One supplier commitment on a route."""

    id: int
    supplier_id: int
    supplier_name: str
    truck_type_id: int | None
    truck_type_name: str | None
    quantities: dict[str, int]
    total: int


@dataclass(frozen=True)
class TruckTypeRef:
    id: int
    name: str


@dataclass
class GapTarget:
    """
    Demand vs committed capacity for one route in one period.

    target/committed/gap are keyed by period ('day1'.., or 'week1'..) plus
    'total'. A positive gap means unfilled demand; negative gaps (over
    commitment) are reported as-is.
    """

    route_key: RouteKey
    target: dict[str, int]
    committed: dict[str, int]
    gap: dict[str, int]
    gap_percent: int
    capacity_percent: int
    forecast_count: int
    clients: list[ClientBreakdown] = field(default_factory=list)
    commitments: list[CommitmentRow] = field(default_factory=list)
    truck_types: list[TruckTypeRef] = field(default_factory=list)

    @property
    def status(self) -> str:
        return FILL_RISK if self.gap["total"] > 0 else CAPACITY_FILLED

    def as_dict(self) -> dict[str, Any]:
        pickup, dropoff = self.route_key.decode()
        return {
            "route_key": str(self.route_key),
            "pickup": pickup,
            "dropoff": dropoff,
            "target": dict(self.target),
            "committed": dict(self.committed),
            "gap": dict(self.gap),
            "gap_percent": self.gap_percent,
            "capacity_percent": self.capacity_percent,
            "forecast_count": self.forecast_count,
            "status": self.status,
            "clients": [
                {
                    "client_id": c.client_id,
                    "client_name": c.client_name,
                    **c.quantities,
                    "total": c.total,
                }
                for c in self.clients
            ],
            "commitments": [
                {
                    "id": row.id,
                    "supplier_id": row.supplier_id,
                    "supplier_name": row.supplier_name,
                    "truck_type_id": row.truck_type_id,
                    "truck_type_name": row.truck_type_name,
                    **row.quantities,
                    "total": row.total,
                }
                for row in self.commitments
            ],
            "truck_types": [{"id": t.id, "name": t.name} for t in self.truck_types],
        }


# ══════════════════════════════════════════════════════════════
# DISPATCH AND SUMMARY
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class DispatchRoute:
    """One commitment line on a supplier's dispatch sheet."""

    commitment_id: int
    route_key: RouteKey
    truck_type_name: str | None
    plan: dict[str, int]


@dataclass
class SupplierDispatch:
    """Everything one supplier has committed in a period."""

    supplier_id: int
    supplier_name: str
    routes: list[DispatchRoute]
    totals: dict[str, int]


@dataclass
class DispatchSheet:
    """
    Committed supply per supplier, sorted by supplier name.

    Every plan/totals dict is keyed by period plus 'total';
    grand_totals sums all suppliers.
    """

    suppliers: list[SupplierDispatch]
    grand_totals: dict[str, int]

    def as_dict(self) -> dict[str, Any]:
        return {
            "suppliers": [
                {
                    "supplier_id": s.supplier_id,
                    "supplier_name": s.supplier_name,
                    "routes": [
                        {
                            "commitment_id": r.commitment_id,
                            "route_key": str(r.route_key),
                            "truck_type_name": r.truck_type_name,
                            "plan": dict(r.plan),
                        }
                        for r in s.routes
                    ],
                    "totals": dict(s.totals),
                }
                for s in self.suppliers
            ],
            "grand_totals": dict(self.grand_totals),
        }


@dataclass(frozen=True)
class RouteGap:
    route_key: RouteKey
    target: int
    committed: int

    @property
    def gap(self) -> int:
        return self.target - self.committed


@dataclass(frozen=True)
class RecentForecast:
    id: int
    route_key: RouteKey
    client_name: str
    total_qty: int
    created_at: Any


@dataclass
class WeekSummary:
    """Headline numbers for one planning period."""

    week: Any
    total_demand: int
    total_committed: int
    active_routes: int
    top_gap_routes: list[RouteGap] = field(default_factory=list)
    recent_forecasts: list[RecentForecast] = field(default_factory=list)

    @property
    def supply_gap(self) -> int:
        return self.total_demand - self.total_committed

    @property
    def gap_percent(self) -> int:
        if self.total_demand <= 0:
            return 0
        return round(self.supply_gap / self.total_demand * 100)

    def as_dict(self) -> dict[str, Any]:
        week = self.week
        return {
            "week": {
                "id": week.pk,
                "week_number": week.week_number,
                "year": week.year,
                "week_start": week.week_start.isoformat(),
                "week_end": week.week_end.isoformat(),
                "display": week.display,
                "is_locked": week.is_locked,
            },
            "metrics": {
                "total_demand": self.total_demand,
                "total_committed": self.total_committed,
                "supply_gap": self.supply_gap,
                "gap_percent": self.gap_percent,
                "active_routes": self.active_routes,
            },
            "top_gap_routes": [
                {
                    "route_key": str(r.route_key),
                    "target": r.target,
                    "committed": r.committed,
                    "gap": r.gap,
                }
                for r in self.top_gap_routes
            ],
            "recent_forecasts": [
                {
                    "id": f.id,
                    "route_key": str(f.route_key),
                    "client_name": f.client_name,
                    "total_qty": f.total_qty,
                    "created_at": f.created_at.isoformat(),
                }
                for f in self.recent_forecasts
            ],
        }


# ══════════════════════════════════════════════════════════════
# BULK OPERATIONS
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class DependencyInfo:
    """What references a repository entity."""

    id: int
    name: str
    forecast_count: int = 0
    commitment_count: int = 0

    @property
    def has_dependencies(self) -> bool:
        return self.forecast_count > 0 or self.commitment_count > 0

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "has_dependencies": self.has_dependencies,
            "forecast_count": self.forecast_count,
            "commitment_count": self.commitment_count,
        }


@dataclass(frozen=True)
class BulkProgress:
    """Progress after one committed batch."""

    completed: int
    total: int
    estimated_seconds_remaining: float | None = None

    @property
    def percent(self) -> int:
        return round(self.completed / self.total * 100) if self.total else 100


@dataclass(frozen=True)
class BulkError:
    """A batch that failed to commit."""

    ids: tuple[int, ...]
    message: str

    def as_dict(self) -> dict:
        return {"ids": list(self.ids), "message": self.message}


@dataclass
class BulkResult:
    """
    Outcome of a bulk delete.

    deleted + skipped + ids in errors account for every requested id.
    """

    deleted: int = 0
    skipped: int = 0
    errors: list[BulkError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def as_dict(self) -> dict:
        return {
            "deleted": self.deleted,
            "skipped": self.skipped,
            "errors": [e.as_dict() for e in self.errors],
        }
