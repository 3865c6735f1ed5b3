"""
Quantity fields and total derivation.

Weekly-cycle tenants plan seven daily quantities; monthly-cycle tenants plan
five weekly quantities. The stored total prefers the daily sum when it is
non-zero and falls back to the weekly sum otherwise.
"""

from collections.abc import Iterable, Mapping

from freightplan.exceptions import PlanningError

DAY_PERIODS = tuple(f"day{n}" for n in range(1, 8))
WEEK_PERIODS = tuple(f"week{n}" for n in range(1, 6))

FORECAST_DAY_FIELDS = tuple(f"{p}_qty" for p in DAY_PERIODS)
FORECAST_WEEK_FIELDS = tuple(f"{p}_qty" for p in WEEK_PERIODS)
FORECAST_QTY_FIELDS = FORECAST_DAY_FIELDS + FORECAST_WEEK_FIELDS

COMMITMENT_DAY_FIELDS = tuple(f"{p}_committed" for p in DAY_PERIODS)
COMMITMENT_WEEK_FIELDS = tuple(f"{p}_committed" for p in WEEK_PERIODS)
COMMITMENT_QTY_FIELDS = COMMITMENT_DAY_FIELDS + COMMITMENT_WEEK_FIELDS


def derive_total(day_values: Iterable[int], week_values: Iterable[int]) -> int:
    """Day-sum if non-zero, else week-sum."""
    day_total = sum(v or 0 for v in day_values)
    if day_total > 0:
        return day_total
    return sum(v or 0 for v in week_values)


def total_from_fields(
    values: Mapping[str, int], day_fields: Iterable[str], week_fields: Iterable[str]
) -> int:
    """derive_total() over a mapping of field name → quantity."""
    return derive_total(
        (values.get(f, 0) for f in day_fields),
        (values.get(f, 0) for f in week_fields),
    )


def clean_quantities(values: Mapping[str, int] | None) -> dict[str, int]:
    """
    Validate a period → quantity mapping ('day1': 10, 'week2': 4, ...).

    Raises PlanningError(VALIDATION_ERROR) on unknown periods or negative,
    non-integer quantities.
    """
    cleaned = {}
    for period, qty in (values or {}).items():
        if period not in DAY_PERIODS and period not in WEEK_PERIODS:
            raise PlanningError("VALIDATION_ERROR", f"Unknown period '{period}'", period=period)
        if isinstance(qty, bool) or not isinstance(qty, int) or qty < 0:
            raise PlanningError(
                "VALIDATION_ERROR",
                "Quantities must be non-negative integers",
                period=period,
                quantity=qty,
            )
        cleaned[period] = qty
    return cleaned
