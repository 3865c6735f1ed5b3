"""
Planning period service -- resolve, create lazily, lock and unlock periods.

Weekly-cycle organizations plan in weeks starting on their configured
week_start_day; monthly-cycle organizations plan in calendar months
(week_number then holds the month number).

All methods are @classmethod so the mixin can be composed into Planner
without instantiation.
"""

import calendar
import logging
from datetime import date, timedelta

from django.utils import timezone

from freightplan.conf import get_setting
from freightplan.models import PlanningCycle, PlanningWeek, WeekStartDay
from freightplan.tenancy import TenantScope

logger = logging.getLogger(__name__)

# date.weekday() of the first day of the week
WEEKDAY = {
    WeekStartDay.MONDAY: 0,
    WeekStartDay.SATURDAY: 5,
    WeekStartDay.SUNDAY: 6,
}


def start_of_week(day: date, week_start_day: str) -> date:
    offset = (day.weekday() - WEEKDAY[week_start_day]) % 7
    return day - timedelta(days=offset)


def week_bounds(day: date, week_start_day: str) -> tuple[date, date, int, int]:
    """
    (week_start, week_end, week_number, year) of the week containing day.

    Week 1 is the week containing January 1st. The week's year is the
    year of its last day, so a week straddling New Year belongs to the
    new year.
    """
    week_start = start_of_week(day, week_start_day)
    week_end = week_start + timedelta(days=6)
    year = week_end.year
    first_week_start = start_of_week(date(year, 1, 1), week_start_day)
    week_number = (week_start - first_week_start).days // 7 + 1
    return week_start, week_end, week_number, year


def month_bounds(day: date) -> tuple[date, date, int, int]:
    """(month_start, month_end, month_number, year) of the month containing day."""
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last_day), day.month, day.year


def add_months(day: date, months: int) -> date:
    month_index = day.month - 1 + months
    year, month = day.year + month_index // 12, month_index % 12 + 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


class PlanningPeriods:
    """Planning period operations."""

    @classmethod
    def period_for_date(cls, tenant, day: date | None = None) -> PlanningWeek:
        """
        Get or create the planning period containing day (default: today).
        """
        scope = TenantScope.of(tenant)
        organization = scope.organization
        day = day or timezone.localdate()

        if organization.planning_cycle == PlanningCycle.MONTHLY:
            start, end, number, year = month_bounds(day)
        else:
            start, end, number, year = week_bounds(day, organization.week_start_day)

        week, created = PlanningWeek.objects.get_or_create(
            organization_id=scope.organization_id,
            year=year,
            week_number=number,
            defaults={"week_start": start, "week_end": end},
        )

        if created:
            logger.info(
                f"Created planning period {week.display}",
                extra={
                    "organization": scope.organization_id,
                    "planning_week": week.pk,
                    "year": year,
                    "week_number": number,
                },
            )

        return week

    @classmethod
    def upcoming_periods(cls, tenant, count: int | None = None, today: date | None = None) -> list[PlanningWeek]:
        """
        Current period plus the next count-1 periods, created as needed.
        """
        scope = TenantScope.of(tenant)
        count = count or get_setting("UPCOMING_PERIODS")
        today = today or timezone.localdate()

        if scope.organization.planning_cycle == PlanningCycle.MONTHLY:
            days = [add_months(today, i) for i in range(count)]
        else:
            days = [today + timedelta(weeks=i) for i in range(count)]

        return [cls.period_for_date(scope, day) for day in days]

    @classmethod
    def get_period(cls, tenant, planning_week_id: int) -> PlanningWeek:
        return TenantScope.of(tenant).get(PlanningWeek, planning_week_id, label="Planning week")

    @classmethod
    def lock_period(cls, tenant, planning_week_id: int, user=None) -> PlanningWeek:
        """Lock a period. Subsequent forecast/commitment writes fail with LOCKED."""
        week = cls.get_period(tenant, planning_week_id)
        week.lock(user)
        return week

    @classmethod
    def unlock_period(cls, tenant, planning_week_id: int, user=None) -> PlanningWeek:
        week = cls.get_period(tenant, planning_week_id)
        week.unlock(user)
        return week
