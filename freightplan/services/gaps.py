"""
Gap aggregation -- demand targets vs committed supply, per route.

For one planning week, forecasts and commitments are grouped by route key
and summed per period:

    target[p]    = Σ forecast quantity[p]
    committed[p] = Σ commitment quantity[p]
    gap[p]       = target[p] - committed[p]

Totals are sums of the stored row totals. The same data also rolls up per
supplier (dispatch_sheet) and per period (week_summary). Read-only: nothing
is written.
"""

import logging
from collections import defaultdict

from django.db.models import Sum

from freightplan.models import DemandForecast, PlanningWeek, SupplyCommitment
from freightplan.quantities import DAY_PERIODS, WEEK_PERIODS
from freightplan.results import (
    ClientBreakdown,
    CommitmentRow,
    DispatchRoute,
    DispatchSheet,
    GapTarget,
    RecentForecast,
    RouteGap,
    SupplierDispatch,
    TruckTypeRef,
    WeekSummary,
)
from freightplan.services.weeks import PlanningPeriods
from freightplan.tenancy import TenantScope

logger = logging.getLogger(__name__)

TOP_GAP_ROUTES = 5
RECENT_FORECASTS = 5


def percent(part: int, whole: int) -> int:
    """round(part / whole * 100), 0 when whole is 0."""
    if whole <= 0:
        return 0
    return round(part / whole * 100)


def _sum_periods(rows, periods, suffix, total_field) -> dict[str, int]:
    sums = {p: sum(getattr(row, f"{p}_{suffix}") for row in rows) for p in periods}
    sums["total"] = sum(getattr(row, total_field) for row in rows)
    return sums


def _periods(scope) -> tuple[str, ...]:
    return WEEK_PERIODS if scope.organization.is_monthly else DAY_PERIODS


class GapEngine:
    """Gap computation and per-period rollups."""

    @classmethod
    def compute_gaps(
        cls,
        tenant,
        planning_week_id: int,
        planner_ids=None,
        client_ids=None,
        category_ids=None,
        truck_type_ids=None,
    ) -> list[GapTarget]:
        """
        Compute gap targets for every route in the week, sorted by route key.

        Periods are day1..day7 for weekly-cycle organizations and
        week1..week5 for monthly-cycle ones.

        The optional filters narrow the demand side only; commitments are
        never filtered. When a demand filter is given, routes without a
        matching forecast are left out.
        """
        scope = TenantScope.of(tenant)
        week = scope.get(PlanningWeek, planning_week_id, label="Planning week")
        periods = _periods(scope)

        forecasts = scope.filter(DemandForecast, planning_week=week)
        if planner_ids:
            forecasts = forecasts.filter(created_by_id__in=planner_ids)
        if client_ids:
            forecasts = forecasts.filter(party_id__in=client_ids)
        if category_ids:
            forecasts = forecasts.filter(demand_category_id__in=category_ids)
        if truck_type_ids:
            forecasts = forecasts.filter(resource_types__in=truck_type_ids).distinct()
        forecasts = forecasts.select_related("party").prefetch_related("resource_types")

        commitments = scope.filter(SupplyCommitment, planning_week=week).select_related(
            "party", "resource_type"
        )

        forecasts_by_route = defaultdict(list)
        for forecast in forecasts.order_by("party__name", "pk"):
            forecasts_by_route[forecast.route_key].append(forecast)

        commitments_by_route = defaultdict(list)
        for commitment in commitments.order_by("party__name", "pk"):
            commitments_by_route[commitment.route_key].append(commitment)

        filtered = any((planner_ids, client_ids, category_ids, truck_type_ids))
        if filtered:
            route_keys = set(forecasts_by_route)
        else:
            route_keys = set(forecasts_by_route) | set(commitments_by_route)

        targets = [
            cls._build_target(
                route_key,
                forecasts_by_route.get(route_key, []),
                commitments_by_route.get(route_key, []),
                periods,
            )
            for route_key in sorted(route_keys)
        ]

        logger.debug(
            f"Computed {len(targets)} gap targets for week {week.pk}",
            extra={"organization": scope.organization_id, "planning_week": week.pk},
        )

        return targets

    @classmethod
    def _build_target(cls, route_key, forecasts, commitments, periods) -> GapTarget:
        target = _sum_periods(forecasts, periods, "qty", "total_qty")
        committed = _sum_periods(commitments, periods, "committed", "total_committed")
        gap = {key: target[key] - committed[key] for key in target}

        return GapTarget(
            route_key=route_key,
            target=target,
            committed=committed,
            gap=gap,
            gap_percent=percent(gap["total"], target["total"]),
            capacity_percent=percent(committed["total"], target["total"]),
            forecast_count=len(forecasts),
            clients=cls._client_breakdown(forecasts, periods),
            commitments=[
                CommitmentRow(
                    id=c.pk,
                    supplier_id=c.party_id,
                    supplier_name=c.party.name,
                    truck_type_id=c.resource_type_id,
                    truck_type_name=c.resource_type.name if c.resource_type else None,
                    quantities={p: getattr(c, f"{p}_committed") for p in periods},
                    total=c.total_committed,
                )
                for c in commitments
            ],
            truck_types=cls._truck_types(forecasts),
        )

    @classmethod
    def _client_breakdown(cls, forecasts, periods) -> list[ClientBreakdown]:
        by_client = defaultdict(list)
        for forecast in forecasts:
            by_client[forecast.party_id].append(forecast)

        breakdown = []
        for client_forecasts in by_client.values():
            sums = _sum_periods(client_forecasts, periods, "qty", "total_qty")
            total = sums.pop("total")
            party = client_forecasts[0].party
            breakdown.append(
                ClientBreakdown(client_id=party.pk, client_name=party.name, quantities=sums, total=total)
            )
        return breakdown

    @classmethod
    def _truck_types(cls, forecasts) -> list[TruckTypeRef]:
        seen = {}
        for forecast in forecasts:
            for resource_type in forecast.resource_types.all():
                seen.setdefault(resource_type.pk, TruckTypeRef(id=resource_type.pk, name=resource_type.name))
        return sorted(seen.values(), key=lambda ref: ref.name)

    @classmethod
    def dispatch_sheet(cls, tenant, planning_week_id: int) -> DispatchSheet:
        """
        Committed supply grouped per supplier, for handing out to carriers.

        Suppliers are sorted by name; within a supplier, lines are sorted by
        route key. Periods follow the organization's cycle like compute_gaps().
        """
        scope = TenantScope.of(tenant)
        week = scope.get(PlanningWeek, planning_week_id, label="Planning week")
        periods = _periods(scope)

        commitments = list(
            scope.filter(SupplyCommitment, planning_week=week)
            .select_related("party", "resource_type")
            .order_by("party__name", "party_id", "route_key", "pk")
        )

        by_supplier = defaultdict(list)
        for commitment in commitments:
            by_supplier[commitment.party_id].append(commitment)

        suppliers = []
        for rows in by_supplier.values():
            party = rows[0].party
            suppliers.append(
                SupplierDispatch(
                    supplier_id=party.pk,
                    supplier_name=party.name,
                    routes=[
                        DispatchRoute(
                            commitment_id=c.pk,
                            route_key=c.route_key,
                            truck_type_name=c.resource_type.name if c.resource_type else None,
                            plan=_sum_periods([c], periods, "committed", "total_committed"),
                        )
                        for c in rows
                    ],
                    totals=_sum_periods(rows, periods, "committed", "total_committed"),
                )
            )

        return DispatchSheet(
            suppliers=suppliers,
            grand_totals=_sum_periods(commitments, periods, "committed", "total_committed"),
        )

    @classmethod
    def week_summary(cls, tenant, planning_week_id: int | None = None, today=None) -> WeekSummary:
        """
        Headline demand/supply numbers for a period (default: the current one).

        Only routes with demand count as active and can appear in
        top_gap_routes; total_committed includes every commitment.
        """
        scope = TenantScope.of(tenant)
        if planning_week_id is None:
            week = PlanningPeriods.period_for_date(scope, today)
        else:
            week = scope.get(PlanningWeek, planning_week_id, label="Planning week")

        forecasts = scope.filter(DemandForecast, planning_week=week)
        demand_by_route = {
            row["route_key"]: row["total"]
            for row in forecasts.order_by().values("route_key").annotate(total=Sum("total_qty"))
        }
        committed_by_route = {
            row["route_key"]: row["total"]
            for row in scope.filter(SupplyCommitment, planning_week=week)
            .order_by()
            .values("route_key")
            .annotate(total=Sum("total_committed"))
        }

        route_gaps = sorted(
            (
                RouteGap(route_key=key, target=total, committed=committed_by_route.get(key, 0))
                for key, total in demand_by_route.items()
            ),
            key=lambda r: (-r.gap, r.route_key),
        )

        recent = forecasts.select_related("party").order_by("-created_at", "-pk")[:RECENT_FORECASTS]

        return WeekSummary(
            week=week,
            total_demand=sum(demand_by_route.values()),
            total_committed=sum(committed_by_route.values()),
            active_routes=len(demand_by_route),
            top_gap_routes=route_gaps[:TOP_GAP_ROUTES],
            recent_forecasts=[
                RecentForecast(
                    id=f.pk,
                    route_key=f.route_key,
                    client_name=f.party.name,
                    total_qty=f.total_qty,
                    created_at=f.created_at,
                )
                for f in recent
            ],
        )
