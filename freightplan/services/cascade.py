"""
Cascade rules -- keep supply commitments tied to existing demand.

A commitment is meaningful only while at least one forecast exists on its
route in the same planning week. When the last forecast on a route goes,
the route's commitments go with it.
"""

import logging

from django.db import transaction

from freightplan.models import DemandForecast, PlanningWeek, SupplyCommitment
from freightplan.routes import RouteKey
from freightplan.services.base import lock_week_for_write
from freightplan.signals import orphaned_commitments_removed, send_on_commit
from freightplan.tenancy import TenantScope

logger = logging.getLogger(__name__)


class CascadeRules:
    """Commitment/forecast consistency operations."""

    @classmethod
    def cascade_after_forecast_delete(cls, tenant, planning_week_id: int, route_key: RouteKey) -> int:
        """
        Delete the route's commitments if no forecast is left on it.

        Called inside the forecast delete transaction, after the delete.
        Returns the number of commitments removed.
        """
        scope = TenantScope.of(tenant)

        remaining = scope.filter(
            DemandForecast, planning_week_id=planning_week_id, route_key=route_key
        ).count()
        if remaining:
            return 0

        _, per_model = scope.filter(
            SupplyCommitment, planning_week_id=planning_week_id, route_key=route_key
        ).delete()
        cascaded = per_model.get(SupplyCommitment._meta.label, 0)

        if cascaded:
            logger.info(
                f"Cascade deleted {cascaded} commitments on {route_key}",
                extra={
                    "organization": scope.organization_id,
                    "planning_week": planning_week_id,
                    "route_key": str(route_key),
                    "cascaded_commitments": cascaded,
                },
            )

        return cascaded

    @classmethod
    def cleanup_orphaned_commitments(cls, tenant, planning_week_id: int, user=None) -> int:
        """
        Remove commitments whose route has no forecast in the week.

        Repairs data written before the cascade rule existed, or imported
        around it. Holds the week row lock like any other commitment write,
        so a locked week raises LOCKED and nothing is removed.
        Returns the number of commitments removed.
        """
        scope = TenantScope.of(tenant)
        scope.get(PlanningWeek, planning_week_id, label="Planning week")

        with transaction.atomic():
            week = lock_week_for_write(scope, planning_week_id)
            demand_routes = set(
                scope.filter(DemandForecast, planning_week=week)
                .values_list("route_key", flat=True)
                .distinct()
            )
            commitment_ids = list(
                scope.filter(SupplyCommitment, planning_week=week)
                .exclude(route_key__in=[str(key) for key in demand_routes])
                .values_list("pk", flat=True)
            )
            deleted = 0
            if commitment_ids:
                _, per_model = scope.filter(SupplyCommitment, pk__in=commitment_ids).delete()
                deleted = per_model.get(SupplyCommitment._meta.label, 0)
                send_on_commit(
                    orphaned_commitments_removed,
                    sender=SupplyCommitment,
                    commitment_ids=commitment_ids,
                    planning_week_id=week.pk,
                    user=user,
                    deleted=deleted,
                )

        logger.info(
            f"Removed {deleted} orphaned commitments",
            extra={
                "organization": scope.organization_id,
                "planning_week": planning_week_id,
                "deleted": deleted,
            },
        )

        return deleted
