"""
Organization (tenant) and Membership models.

Organization is the isolation boundary: every planning row carries one.
Membership binds a user to an organization with a planning role and is the
default source for request sessions.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class PlanningCycle(models.TextChoices):
    """How an organization slices its planning periods."""

    WEEKLY = "weekly", _("Weekly (daily quantities)")
    MONTHLY = "monthly", _("Monthly (weekly quantities)")


class WeekStartDay(models.TextChoices):
    SUNDAY = "sunday", _("Sunday")
    MONDAY = "monday", _("Monday")
    SATURDAY = "saturday", _("Saturday")


class Role(models.TextChoices):
    """Planning roles."""

    DEMAND_PLANNER = "demand_planner", _("Demand planner")
    SUPPLY_PLANNER = "supply_planner", _("Supply planner")
    ADMIN = "admin", _("Admin")


class Organization(models.Model):
    """Tenant."""

    name = models.CharField(max_length=200, verbose_name=_("Name"))
    slug = models.SlugField(unique=True, max_length=100, verbose_name=_("Slug"))

    planning_cycle = models.CharField(
        max_length=20,
        choices=PlanningCycle.choices,
        default=PlanningCycle.WEEKLY,
        verbose_name=_("Planning cycle"),
    )
    week_start_day = models.CharField(
        max_length=20,
        choices=WeekStartDay.choices,
        default=WeekStartDay.SUNDAY,
        verbose_name=_("Week starts on"),
    )

    is_active = models.BooleanField(default=True, verbose_name=_("Active"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))

    class Meta:
        db_table = "freightplan_organization"
        verbose_name = _("Organization")
        verbose_name_plural = _("Organizations")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    @property
    def is_monthly(self) -> bool:
        return self.planning_cycle == PlanningCycle.MONTHLY


class Membership(models.Model):
    """User membership in an organization."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="planning_memberships",
        verbose_name=_("User"),
    )
    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="memberships",
        verbose_name=_("Organization"),
    )
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.DEMAND_PLANNER,
        verbose_name=_("Role"),
    )
    is_current = models.BooleanField(
        default=True,
        verbose_name=_("Current"),
        help_text=_("Organization used for this user's requests"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))

    class Meta:
        db_table = "freightplan_membership"
        verbose_name = _("Membership")
        verbose_name_plural = _("Memberships")
        unique_together = [["user", "organization"]]

    def __str__(self) -> str:
        return f"{self.user} @ {self.organization} ({self.role})"
