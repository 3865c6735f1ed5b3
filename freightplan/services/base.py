"""
Helpers shared by the forecast and commitment stores.
"""

import logging

from freightplan.conf import get_setting
from freightplan.exceptions import PlanningError
from freightplan.models import PlanningWeek

logger = logging.getLogger(__name__)


def lock_week_for_write(scope, planning_week_id) -> PlanningWeek:
    """
    Row-lock a planning period for the rest of the current transaction.

    Must be called inside transaction.atomic(). Raises NOT_FOUND if the
    period is absent or out of tenant, LOCKED if it is closed for edits.
    """
    week = scope.require(
        PlanningWeek.objects.select_for_update(), planning_week_id, label="Planning week"
    )
    if week.is_locked:
        logger.info(
            f"Rejected write to locked planning week {week.pk}",
            extra={"organization": scope.organization_id, "planning_week": week.pk},
        )
        raise PlanningError("LOCKED", planning_week_id=week.pk)
    return week


def page_window(page, page_size) -> tuple[int, int]:
    """Clamp (page, page_size) to the configured bounds."""
    page_size = page_size or get_setting("DEFAULT_PAGE_SIZE")
    try:
        page, page_size = int(page or 1), int(page_size)
    except (TypeError, ValueError):
        raise PlanningError("VALIDATION_ERROR", "page and page_size must be integers")
    if page < 1 or page_size < 1:
        raise PlanningError("VALIDATION_ERROR", "page and page_size must be positive")
    return page, min(page_size, get_setting("MAX_PAGE_SIZE"))


def apply_quantities(instance, quantities: dict[str, int], suffix: str) -> list[str]:
    """Set period quantities on instance; return the names of changed fields."""
    changed = []
    for period, qty in quantities.items():
        field_name = f"{period}_{suffix}"
        if getattr(instance, field_name) != qty:
            setattr(instance, field_name, qty)
            changed.append(field_name)
    return changed
