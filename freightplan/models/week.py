"""
PlanningWeek model.

One planning period (a week, or a month for monthly-cycle organizations).
The is_locked flag gates every write to the period's forecasts and
commitments.
"""

import logging
from datetime import timedelta

from django.db import models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

logger = logging.getLogger(__name__)


class PlanningWeek(models.Model):
    """
    Planning period.

    For monthly organizations week_number holds the month number (1-12).
    """

    organization = models.ForeignKey(
        "freightplan.Organization",
        on_delete=models.CASCADE,
        related_name="planning_weeks",
        verbose_name=_("Organization"),
    )
    week_start = models.DateField(verbose_name=_("Start"))
    week_end = models.DateField(verbose_name=_("End"))
    week_number = models.PositiveSmallIntegerField(verbose_name=_("Week number"))
    year = models.PositiveSmallIntegerField(verbose_name=_("Year"))

    is_locked = models.BooleanField(default=False, verbose_name=_("Locked"))
    locked_at = models.DateTimeField(null=True, blank=True, verbose_name=_("locked at"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))

    history = HistoricalRecords()

    class Meta:
        db_table = "freightplan_planning_week"
        verbose_name = _("Planning week")
        verbose_name_plural = _("Planning weeks")
        ordering = ["week_start"]
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "year", "week_number"],
                name="freightplan_unique_planning_week",
            ),
        ]

    def __str__(self) -> str:
        return self.display

    @property
    def is_full_month(self) -> bool:
        return (
            self.week_start.day == 1
            and self.week_start.month == self.week_end.month
            and (self.week_end + timedelta(days=1)).day == 1
        )

    @property
    def display(self) -> str:
        # 'March 2026 (Mar 1 - Mar 31)' or 'Mar 1 - Mar 7, 2026'
        start, end = self.week_start, self.week_end
        if self.is_full_month:
            return f"{start:%B %Y} ({start:%b} {start.day} - {end:%b} {end.day})"
        return f"{start:%b} {start.day} - {end:%b} {end.day}, {end.year}"

    def lock(self, user=None):
        """Close the period for edits."""
        with transaction.atomic():
            week = PlanningWeek.objects.select_for_update().get(pk=self.pk)
            if week.is_locked:
                self.is_locked, self.locked_at = True, week.locked_at
                return
            week.is_locked = True
            week.locked_at = timezone.now()
            week.save(update_fields=["is_locked", "locked_at"])
            self.is_locked, self.locked_at = week.is_locked, week.locked_at

        logger.info(
            f"Planning week {self.pk} locked",
            extra={
                "planning_week": self.pk,
                "organization": self.organization_id,
                "user": getattr(user, "username", None),
            },
        )

    def unlock(self, user=None):
        """Reopen the period for edits."""
        with transaction.atomic():
            week = PlanningWeek.objects.select_for_update().get(pk=self.pk)
            week.is_locked = False
            week.locked_at = None
            week.save(update_fields=["is_locked", "locked_at"])
            self.is_locked, self.locked_at = False, None

        logger.info(
            f"Planning week {self.pk} unlocked",
            extra={
                "planning_week": self.pk,
                "organization": self.organization_id,
                "user": getattr(user, "username", None),
            },
        )
