"""
Logging backends -- write audit entries and notifications to the log.

Use these adapters for development or testing when no audit store or
notification service is wired in.

Configuration:
    FREIGHTPLAN = {
        "AUDIT_BACKEND": "freightplan.adapters.noop.LoggingAuditBackend",
        "NOTIFICATION_BACKEND": "freightplan.adapters.noop.LoggingNotificationBackend",
    }
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class LoggingAuditBackend:
    """AuditBackend that only logs."""

    def create_audit_log(
        self,
        user_id: int | None,
        action: str,
        entity_type: str,
        entity_id: int,
        metadata: dict[str, Any],
    ) -> None:
        logger.info(
            f"Audit {action} {entity_type} {entity_id}",
            extra={
                "user_id": user_id,
                "action": action,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "metadata": metadata,
            },
        )


class LoggingNotificationBackend:
    """NotificationBackend that only logs."""

    def notify_supply_planners_of_demand(
        self, forecast_id: int, client_name: str, route_key: str, actor_name: str
    ) -> None:
        logger.info(
            f"New demand from {client_name} on {route_key}",
            extra={"forecast_id": forecast_id, "actor": actor_name},
        )

    def notify_demand_planners_of_supply(
        self,
        commitment_id: int,
        route_key: str,
        supplier_name: str,
        actor_name: str,
        planning_week_id: int,
    ) -> None:
        logger.info(
            f"{supplier_name} committed capacity on {route_key}",
            extra={
                "commitment_id": commitment_id,
                "actor": actor_name,
                "planning_week_id": planning_week_id,
            },
        )
