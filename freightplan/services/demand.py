"""
Demand forecast store -- create, update, delete, get, list.

Every write runs in one transaction holding a row lock on the planning
week, so it serializes with lock_period(): a write either commits before
the lock or fails with LOCKED after it.

All methods are @classmethod so the mixin can be composed into Planner
without instantiation.
"""

import logging

from django.db import IntegrityError, transaction

from freightplan.exceptions import PlanningError
from freightplan.inputs import DemandForecastInput, DemandForecastPatch
from freightplan.models import (
    DemandCategory,
    DemandForecast,
    Location,
    Party,
    PartyRole,
    PlanningWeek,
    ResourceType,
    resource_type_signature,
)
from freightplan.quantities import clean_quantities
from freightplan.results import Page
from freightplan.routes import RouteKey
from freightplan.services.base import apply_quantities, lock_week_for_write, page_window
from freightplan.services.cascade import CascadeRules
from freightplan.signals import (
    forecast_created,
    forecast_deleted,
    forecast_updated,
    send_on_commit,
)
from freightplan.tenancy import TenantScope

logger = logging.getLogger(__name__)


def _with_relations(queryset):
    return queryset.select_related(
        "party", "pickup_location", "dropoff_location", "demand_category", "planning_week"
    ).prefetch_related("resource_types")


class DemandStore:
    """Demand forecast operations."""

    @classmethod
    def create_forecast(cls, tenant, data: DemandForecastInput, user=None) -> DemandForecast:
        """
        Create a forecast.

        Raises:
            PlanningError(VALIDATION_ERROR): bad quantities or no truck type
            PlanningError(NOT_FOUND): week, client, city, truck type or category
                absent or outside the organization
            PlanningError(LOCKED): the planning week is locked
            PlanningError(DUPLICATE): same client, route and truck-type set
                already forecast for the week
        """
        scope = TenantScope.of(tenant)
        quantities = clean_quantities(data.quantities)
        truck_type_ids = tuple(dict.fromkeys(data.truck_type_ids or ()))
        if not truck_type_ids:
            raise PlanningError("VALIDATION_ERROR", "At least one truck type is required")

        with transaction.atomic():
            week = lock_week_for_write(scope, data.planning_week_id)

            client = scope.require(
                Party, data.client_id, label="Client", party_role=PartyRole.CUSTOMER, is_active=True
            )
            pickup = scope.require(Location, data.pickup_city_id, label="Pickup city", is_active=True)
            dropoff = scope.require(Location, data.dropoff_city_id, label="Dropoff city", is_active=True)

            resource_types = list(scope.filter(ResourceType, pk__in=truck_type_ids, is_active=True))
            if len(resource_types) != len(truck_type_ids):
                found = {rt.pk for rt in resource_types}
                raise PlanningError(
                    "NOT_FOUND",
                    "Truck type not found",
                    ids=[pk for pk in truck_type_ids if pk not in found],
                )

            category = None
            if data.demand_category_id:
                category = scope.require(
                    DemandCategory, data.demand_category_id, label="Category", is_active=True
                )

            route_key = RouteKey.encode(pickup.name, dropoff.name)
            signature = resource_type_signature(truck_type_ids)

            duplicate = scope.filter(
                DemandForecast,
                planning_week=week,
                party=client,
                pickup_location=pickup,
                dropoff_location=dropoff,
                resource_type_signature=signature,
            ).exists()
            if duplicate:
                raise PlanningError("DUPLICATE", route_key=str(route_key), client_id=client.pk)

            forecast = DemandForecast(
                **scope.data(
                    planning_week=week,
                    party=client,
                    pickup_location=pickup,
                    dropoff_location=dropoff,
                    demand_category=category,
                    route_key=route_key,
                    resource_type_signature=signature,
                    created_by=user,
                ),
                **{f"{period}_qty": qty for period, qty in quantities.items()},
            )
            forecast.recompute_total()

            # The unique constraint catches inserts racing the check above
            try:
                with transaction.atomic():
                    forecast.save()
            except IntegrityError:
                raise PlanningError("DUPLICATE", route_key=str(route_key), client_id=client.pk)

            forecast.resource_types.set(resource_types)
            send_on_commit(forecast_created, sender=DemandForecast, forecast=forecast, user=user)

        logger.info(
            f"Created forecast {forecast.pk} on {route_key}",
            extra={
                "organization": scope.organization_id,
                "forecast": forecast.pk,
                "route_key": str(route_key),
                "total_qty": forecast.total_qty,
            },
        )

        return cls.get_forecast(scope, forecast.pk)

    @classmethod
    def update_forecast(
        cls, tenant, forecast_id: int, patch: DemandForecastPatch, user=None
    ) -> DemandForecast:
        """
        Change the quantities of a forecast.

        Only the periods present in patch.quantities are touched; the total
        is recomputed and only changed columns are written.
        """
        scope = TenantScope.of(tenant)
        quantities = clean_quantities(patch.quantities)

        forecast = scope.get(DemandForecast, forecast_id, label="Forecast")

        with transaction.atomic():
            # Week first, then the row: a delete that won the race leaves NOT_FOUND
            lock_week_for_write(scope, forecast.planning_week_id)
            forecast = scope.get(DemandForecast, forecast_id, label="Forecast", for_update=True)

            changed = apply_quantities(forecast, quantities, "qty")
            if changed:
                old_total = forecast.total_qty
                if forecast.recompute_total() != old_total:
                    changed.append("total_qty")
                forecast.save(update_fields=[*changed, "updated_at"])
                send_on_commit(
                    forecast_updated,
                    sender=DemandForecast,
                    forecast=forecast,
                    user=user,
                    changed_fields=changed,
                )

        if changed:
            logger.info(
                f"Updated forecast {forecast.pk}",
                extra={
                    "organization": scope.organization_id,
                    "forecast": forecast.pk,
                    "changed_fields": changed,
                    "total_qty": forecast.total_qty,
                },
            )

        return cls.get_forecast(scope, forecast.pk)

    @classmethod
    def delete_forecast(cls, tenant, forecast_id: int, user=None) -> int:
        """
        Delete a forecast and cascade to orphaned commitments.

        Returns:
            Number of supply commitments removed because no forecast is left
            on the route in that week.
        """
        scope = TenantScope.of(tenant)

        forecast = scope.get(DemandForecast, forecast_id, label="Forecast")

        with transaction.atomic():
            week = lock_week_for_write(scope, forecast.planning_week_id)
            forecast = scope.get(DemandForecast, forecast_id, label="Forecast", for_update=True)
            route_key = forecast.route_key

            forecast.delete()
            cascaded = CascadeRules.cascade_after_forecast_delete(scope, week.pk, route_key)

            send_on_commit(
                forecast_deleted,
                sender=DemandForecast,
                forecast_id=forecast_id,
                route_key=route_key,
                planning_week_id=week.pk,
                user=user,
                cascaded=cascaded,
            )

        logger.info(
            f"Deleted forecast {forecast_id} on {route_key}",
            extra={
                "organization": scope.organization_id,
                "forecast": forecast_id,
                "route_key": str(route_key),
                "cascaded_commitments": cascaded,
            },
        )

        return cascaded

    @classmethod
    def get_forecast(cls, tenant, forecast_id: int) -> DemandForecast:
        scope = TenantScope.of(tenant)
        return scope.get(_with_relations(DemandForecast.objects.all()), forecast_id, label="Forecast")

    @classmethod
    def list_forecasts(
        cls,
        tenant,
        planning_week_id: int | None = None,
        client_id: int | None = None,
        route_key: str | None = None,
        demand_category_id: int | None = None,
        created_by_id: int | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> Page:
        """
        List forecasts, one page at a time.

        Related rows are loaded with one in_bulk query per relation type,
        plus one prefetch for truck types.
        """
        scope = TenantScope.of(tenant)
        page, page_size = page_window(page, page_size)

        queryset = scope.filter(DemandForecast)
        if planning_week_id:
            queryset = queryset.filter(planning_week_id=planning_week_id)
        if client_id:
            queryset = queryset.filter(party_id=client_id)
        if route_key:
            queryset = queryset.filter(route_key=RouteKey.parse(route_key))
        if demand_category_id:
            queryset = queryset.filter(demand_category_id=demand_category_id)
        if created_by_id:
            queryset = queryset.filter(created_by_id=created_by_id)

        total_count = queryset.count()
        offset = (page - 1) * page_size
        forecasts = list(
            queryset.order_by("party_id", "route_key", "pk")
            .prefetch_related("resource_types")[offset : offset + page_size]
        )

        parties = Party.objects.in_bulk({f.party_id for f in forecasts})
        locations = Location.objects.in_bulk(
            {f.pickup_location_id for f in forecasts} | {f.dropoff_location_id for f in forecasts}
        )
        categories = DemandCategory.objects.in_bulk(
            {f.demand_category_id for f in forecasts if f.demand_category_id}
        )
        weeks = PlanningWeek.objects.in_bulk({f.planning_week_id for f in forecasts})

        for forecast in forecasts:
            forecast.party = parties[forecast.party_id]
            forecast.pickup_location = locations[forecast.pickup_location_id]
            forecast.dropoff_location = locations[forecast.dropoff_location_id]
            forecast.planning_week = weeks[forecast.planning_week_id]
            if forecast.demand_category_id:
                forecast.demand_category = categories[forecast.demand_category_id]

        return Page(items=forecasts, page=page, page_size=page_size, total_count=total_count)
