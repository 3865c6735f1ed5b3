"""
Freightplan Signals.

All communication with external collaborators (audit log, notifications)
happens via signals sent after the triggering transaction commits. A failing
receiver is logged and never affects the write.

Signals:
    forecast_created / forecast_updated / forecast_deleted
    commitment_created / commitment_updated / commitment_deleted
    orphaned_commitments_removed
"""

import logging
from functools import partial

from django.db import transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)

# Sent when planner.create_forecast() commits
# Args: forecast, user
forecast_created = Signal()

# Sent when planner.update_forecast() commits
# Args: forecast, user, changed_fields
forecast_updated = Signal()

# Sent when planner.delete_forecast() commits
# Args: forecast_id, route_key, planning_week_id, user, cascaded
forecast_deleted = Signal()

# Sent when planner.create_commitment() commits
# Args: commitment, user
commitment_created = Signal()

# Sent when planner.update_commitment() commits
# Args: commitment, user, changed_fields
commitment_updated = Signal()

# Sent when planner.delete_commitment() commits
# Args: commitment_id, route_key, planning_week_id, user
commitment_deleted = Signal()

# Sent when planner.cleanup_orphaned_commitments() commits a removal
# Args: commitment_ids, planning_week_id, user, deleted
orphaned_commitments_removed = Signal()


def _send(signal, sender, **kwargs):
    for receiver, response in signal.send_robust(sender=sender, **kwargs):
        if isinstance(response, Exception):
            logger.error(
                f"Signal receiver {getattr(receiver, '__name__', receiver)} failed: {response}",
                exc_info=(type(response), response, response.__traceback__),
            )


def send_on_commit(signal, sender, **kwargs) -> None:
    """Send signal once the current transaction commits."""
    transaction.on_commit(partial(_send, signal, sender, **kwargs))


__all__ = [
    "forecast_created",
    "forecast_updated",
    "forecast_deleted",
    "commitment_created",
    "commitment_updated",
    "commitment_deleted",
    "orphaned_commitments_removed",
    "send_on_commit",
]
