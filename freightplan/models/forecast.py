"""
DemandForecast model.

Forecasted loads for one client on one directed route in one planning
period, with one or more truck types.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from freightplan.models.fields import RouteKeyField
from freightplan.quantities import (
    DAY_PERIODS,
    FORECAST_DAY_FIELDS,
    FORECAST_WEEK_FIELDS,
    WEEK_PERIODS,
    derive_total,
)


def resource_type_signature(resource_type_ids) -> str:
    """Order-independent signature of a truck-type set: '3,7,12'."""
    return ",".join(str(pk) for pk in sorted({int(pk) for pk in resource_type_ids}))


class DemandForecast(models.Model):
    """
    Demand forecast for one client, route and truck-type set.

    route_key and total_qty are derived and denormalized on write.
    resource_type_signature mirrors the truck-type M2M so that the
    uniqueness invariant can be enforced by the database.
    """

    organization = models.ForeignKey(
        "freightplan.Organization",
        on_delete=models.CASCADE,
        related_name="forecasts",
        verbose_name=_("Organization"),
    )
    planning_week = models.ForeignKey(
        "freightplan.PlanningWeek",
        on_delete=models.PROTECT,
        related_name="forecasts",
        verbose_name=_("Planning week"),
    )
    party = models.ForeignKey(
        "freightplan.Party",
        on_delete=models.PROTECT,
        related_name="forecasts",
        verbose_name=_("Client"),
    )
    pickup_location = models.ForeignKey(
        "freightplan.Location",
        on_delete=models.PROTECT,
        related_name="pickup_forecasts",
        verbose_name=_("Pickup"),
    )
    dropoff_location = models.ForeignKey(
        "freightplan.Location",
        on_delete=models.PROTECT,
        related_name="dropoff_forecasts",
        verbose_name=_("Dropoff"),
    )
    resource_types = models.ManyToManyField(
        "freightplan.ResourceType",
        related_name="forecasts",
        verbose_name=_("Truck types"),
    )
    resource_type_signature = models.CharField(
        max_length=255,
        verbose_name=_("Truck type signature"),
    )
    demand_category = models.ForeignKey(
        "freightplan.DemandCategory",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="forecasts",
        verbose_name=_("Category"),
    )

    route_key = RouteKeyField(db_index=True, verbose_name=_("Route"))

    # Daily quantities (weekly cycle)
    day1_qty = models.PositiveIntegerField(default=0, verbose_name=_("Day 1"))
    day2_qty = models.PositiveIntegerField(default=0, verbose_name=_("Day 2"))
    day3_qty = models.PositiveIntegerField(default=0, verbose_name=_("Day 3"))
    day4_qty = models.PositiveIntegerField(default=0, verbose_name=_("Day 4"))
    day5_qty = models.PositiveIntegerField(default=0, verbose_name=_("Day 5"))
    day6_qty = models.PositiveIntegerField(default=0, verbose_name=_("Day 6"))
    day7_qty = models.PositiveIntegerField(default=0, verbose_name=_("Day 7"))

    # Weekly quantities (monthly cycle)
    week1_qty = models.PositiveIntegerField(default=0, verbose_name=_("Week 1"))
    week2_qty = models.PositiveIntegerField(default=0, verbose_name=_("Week 2"))
    week3_qty = models.PositiveIntegerField(default=0, verbose_name=_("Week 3"))
    week4_qty = models.PositiveIntegerField(default=0, verbose_name=_("Week 4"))
    week5_qty = models.PositiveIntegerField(default=0, verbose_name=_("Week 5"))

    total_qty = models.PositiveIntegerField(default=0, verbose_name=_("Total"))

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="demand_forecasts",
        verbose_name=_("Created by"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    history = HistoricalRecords()

    class Meta:
        db_table = "freightplan_demand_forecast"
        verbose_name = _("Demand forecast")
        verbose_name_plural = _("Demand forecasts")
        ordering = ["party_id", "route_key"]
        constraints = [
            models.UniqueConstraint(
                fields=[
                    "organization",
                    "planning_week",
                    "party",
                    "pickup_location",
                    "dropoff_location",
                    "resource_type_signature",
                ],
                name="freightplan_unique_forecast",
            ),
        ]
        indexes = [
            models.Index(
                fields=["organization", "planning_week", "route_key"],
                name="fp_forecast_week_route_idx",
            ),
            models.Index(fields=["organization", "party"], name="fp_forecast_party_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.route_key} - {self.total_qty}"

    @property
    def day_quantities(self) -> dict[str, int]:
        return {p: getattr(self, f"{p}_qty") for p in DAY_PERIODS}

    @property
    def week_quantities(self) -> dict[str, int]:
        return {p: getattr(self, f"{p}_qty") for p in WEEK_PERIODS}

    def recompute_total(self) -> int:
        self.total_qty = derive_total(
            (getattr(self, f) for f in FORECAST_DAY_FIELDS),
            (getattr(self, f) for f in FORECAST_WEEK_FIELDS),
        )
        return self.total_qty
