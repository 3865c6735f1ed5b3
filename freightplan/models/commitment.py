"""
SupplyCommitment model.

Capacity a supplier commits to a route in a planning period. Joined to
demand by route_key, not by foreign key: one route may be served by
forecasts of several clients.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from freightplan.models.fields import RouteKeyField
from freightplan.quantities import (
    COMMITMENT_DAY_FIELDS,
    COMMITMENT_WEEK_FIELDS,
    DAY_PERIODS,
    WEEK_PERIODS,
    derive_total,
)


class SupplyCommitment(models.Model):
    """Supplier commitment on a route."""

    organization = models.ForeignKey(
        "freightplan.Organization",
        on_delete=models.CASCADE,
        related_name="commitments",
        verbose_name=_("Organization"),
    )
    planning_week = models.ForeignKey(
        "freightplan.PlanningWeek",
        on_delete=models.PROTECT,
        related_name="commitments",
        verbose_name=_("Planning week"),
    )
    party = models.ForeignKey(
        "freightplan.Party",
        on_delete=models.PROTECT,
        related_name="commitments",
        verbose_name=_("Supplier"),
    )
    route_key = RouteKeyField(db_index=True, verbose_name=_("Route"))
    resource_type = models.ForeignKey(
        "freightplan.ResourceType",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="commitments",
        verbose_name=_("Truck type"),
    )

    day1_committed = models.PositiveIntegerField(default=0, verbose_name=_("Day 1"))
    day2_committed = models.PositiveIntegerField(default=0, verbose_name=_("Day 2"))
    day3_committed = models.PositiveIntegerField(default=0, verbose_name=_("Day 3"))
    day4_committed = models.PositiveIntegerField(default=0, verbose_name=_("Day 4"))
    day5_committed = models.PositiveIntegerField(default=0, verbose_name=_("Day 5"))
    day6_committed = models.PositiveIntegerField(default=0, verbose_name=_("Day 6"))
    day7_committed = models.PositiveIntegerField(default=0, verbose_name=_("Day 7"))

    week1_committed = models.PositiveIntegerField(default=0, verbose_name=_("Week 1"))
    week2_committed = models.PositiveIntegerField(default=0, verbose_name=_("Week 2"))
    week3_committed = models.PositiveIntegerField(default=0, verbose_name=_("Week 3"))
    week4_committed = models.PositiveIntegerField(default=0, verbose_name=_("Week 4"))
    week5_committed = models.PositiveIntegerField(default=0, verbose_name=_("Week 5"))

    total_committed = models.PositiveIntegerField(default=0, verbose_name=_("Total"))

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="supply_commitments",
        verbose_name=_("Created by"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    history = HistoricalRecords()

    class Meta:
        db_table = "freightplan_supply_commitment"
        verbose_name = _("Supply commitment")
        verbose_name_plural = _("Supply commitments")
        ordering = ["route_key", "party__name"]
        indexes = [
            models.Index(
                fields=["organization", "planning_week", "route_key"],
                name="fp_commitment_week_route_idx",
            ),
            models.Index(fields=["organization", "party"], name="fp_commitment_party_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.route_key} - {self.total_committed}"

    @property
    def day_quantities(self) -> dict[str, int]:
        return {p: getattr(self, f"{p}_committed") for p in DAY_PERIODS}

    @property
    def week_quantities(self) -> dict[str, int]:
        return {p: getattr(self, f"{p}_committed") for p in WEEK_PERIODS}

    def recompute_total(self) -> int:
        self.total_committed = derive_total(
            (getattr(self, f) for f in COMMITMENT_DAY_FIELDS),
            (getattr(self, f) for f in COMMITMENT_WEEK_FIELDS),
        )
        return self.total_committed
