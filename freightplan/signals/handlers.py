"""
Freightplan Signal Handlers.

Connects planning signals to the configured audit and notification backends.

This module is imported in apps.py to register handlers.
"""

import logging

from django.dispatch import receiver

from freightplan.conf import get_audit_backend, get_notification_backend
from freightplan.signals import (
    commitment_created,
    commitment_deleted,
    commitment_updated,
    forecast_created,
    forecast_deleted,
    forecast_updated,
    orphaned_commitments_removed,
)

logger = logging.getLogger(__name__)


def _user_id(user):
    return getattr(user, "pk", None)


def _actor_name(user) -> str:
    if user is None:
        return "Someone"
    return user.get_full_name() or user.get_username()


def _audit(user, action, entity_type, entity_id, metadata):
    backend = get_audit_backend()
    if backend is None:
        return
    backend.create_audit_log(
        user_id=_user_id(user),
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        metadata=metadata,
    )


# ── Audit ──


@receiver(forecast_created)
def audit_forecast_created(sender, forecast, user, **kwargs):
    _audit(
        user,
        "CREATE",
        "DemandForecast",
        forecast.pk,
        {"route_key": str(forecast.route_key), "total_qty": forecast.total_qty},
    )


@receiver(forecast_updated)
def audit_forecast_updated(sender, forecast, user, changed_fields, **kwargs):
    _audit(
        user,
        "UPDATE",
        "DemandForecast",
        forecast.pk,
        {"changed_fields": list(changed_fields), "total_qty": forecast.total_qty},
    )


@receiver(forecast_deleted)
def audit_forecast_deleted(sender, forecast_id, route_key, planning_week_id, user, cascaded, **kwargs):
    _audit(
        user,
        "DELETE",
        "DemandForecast",
        forecast_id,
        {
            "route_key": str(route_key),
            "planning_week_id": planning_week_id,
            "cascaded_commitments": cascaded,
        },
    )


@receiver(commitment_created)
def audit_commitment_created(sender, commitment, user, **kwargs):
    _audit(
        user,
        "CREATE",
        "SupplyCommitment",
        commitment.pk,
        {"route_key": str(commitment.route_key), "total_committed": commitment.total_committed},
    )


@receiver(commitment_updated)
def audit_commitment_updated(sender, commitment, user, changed_fields, **kwargs):
    _audit(
        user,
        "UPDATE",
        "SupplyCommitment",
        commitment.pk,
        {"changed_fields": list(changed_fields), "total_committed": commitment.total_committed},
    )


@receiver(commitment_deleted)
def audit_commitment_deleted(sender, commitment_id, route_key, planning_week_id, user, **kwargs):
    _audit(
        user,
        "DELETE",
        "SupplyCommitment",
        commitment_id,
        {"route_key": str(route_key), "planning_week_id": planning_week_id},
    )


@receiver(orphaned_commitments_removed)
def audit_orphaned_commitments_removed(sender, commitment_ids, planning_week_id, user, deleted, **kwargs):
    for commitment_id in commitment_ids:
        _audit(
            user,
            "DELETE",
            "SupplyCommitment",
            commitment_id,
            {"planning_week_id": planning_week_id, "reason": "orphaned", "batch_size": deleted},
        )


# ── Notifications ──


@receiver(forecast_created)
def notify_supply_planners(sender, forecast, user, **kwargs):
    """Tell supply planners a new forecast needs capacity."""
    backend = get_notification_backend()
    if backend is None:
        return

    backend.notify_supply_planners_of_demand(
        forecast_id=forecast.pk,
        client_name=forecast.party.name,
        route_key=str(forecast.route_key),
        actor_name=_actor_name(user),
    )
    logger.info(
        f"Supply planners notified of forecast {forecast.pk}",
        extra={"forecast": forecast.pk, "route_key": str(forecast.route_key)},
    )


@receiver(commitment_created)
def notify_demand_planners(sender, commitment, user, **kwargs):
    """Tell demand planners capacity was committed to their route."""
    backend = get_notification_backend()
    if backend is None:
        return

    backend.notify_demand_planners_of_supply(
        commitment_id=commitment.pk,
        route_key=str(commitment.route_key),
        supplier_name=commitment.party.name,
        actor_name=_actor_name(user),
        planning_week_id=commitment.planning_week_id,
    )
    logger.info(
        f"Demand planners notified of commitment {commitment.pk}",
        extra={"commitment": commitment.pk, "route_key": str(commitment.route_key)},
    )
