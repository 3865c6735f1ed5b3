"""
Freightplan Admin: Basic Django admin for planning data.

Planning weeks, forecasts and commitments use SimpleHistoryAdmin so their
change history is browsable.
"""

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _
from simple_history.admin import SimpleHistoryAdmin

from freightplan.exceptions import PlanningError
from freightplan.models import (
    DemandCategory,
    DemandForecast,
    Location,
    Membership,
    Organization,
    Party,
    PlanningWeek,
    ResourceType,
    SupplyCommitment,
)
from freightplan.quantities import COMMITMENT_QTY_FIELDS, FORECAST_QTY_FIELDS


# ── Organization ──


class MembershipInline(admin.TabularInline):
    """Inline for organization members."""

    model = Membership
    extra = 1
    fields = ("user", "role", "is_current")
    raw_id_fields = ("user",)


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "planning_cycle", "week_start_day", "is_active")
    list_filter = ("planning_cycle", "is_active")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}
    inlines = [MembershipInline]


# ── Planning weeks ──


@admin.register(PlanningWeek)
class PlanningWeekAdmin(SimpleHistoryAdmin):
    """Admin for planning periods, with lock and cleanup actions."""

    list_display = ("display", "organization", "year", "week_number", "is_locked")
    list_filter = ("organization", "is_locked", "year")
    date_hierarchy = "week_start"
    readonly_fields = ("locked_at", "created_at")
    actions = ["lock_weeks", "unlock_weeks", "cleanup_orphaned_commitments"]

    @admin.action(description=_("Lock selected weeks"))
    def lock_weeks(self, request, queryset):
        for week in queryset:
            week.lock(request.user)
        self.message_user(request, _("%d week(s) locked.") % queryset.count())

    @admin.action(description=_("Unlock selected weeks"))
    def unlock_weeks(self, request, queryset):
        for week in queryset:
            week.unlock(request.user)
        self.message_user(request, _("%d week(s) unlocked.") % queryset.count())

    @admin.action(description=_("Remove commitments on routes without demand"))
    def cleanup_orphaned_commitments(self, request, queryset):
        from freightplan.service import Planner

        removed = 0
        for week in queryset:
            try:
                removed += Planner.cleanup_orphaned_commitments(
                    week.organization_id, week.pk, user=request.user
                )
            except PlanningError as e:
                self.message_user(request, e.message, level=messages.ERROR)
        self.message_user(request, _("%d orphaned commitment(s) removed.") % removed)


# ── Repositories ──


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "region", "organization", "is_active")
    list_filter = ("organization", "is_active", "region")
    search_fields = ("name", "code")


@admin.register(Party)
class PartyAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "party_role", "organization", "is_active")
    list_filter = ("organization", "party_role", "is_active")
    search_fields = ("name", "code")


@admin.register(ResourceType)
class ResourceTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "organization", "is_active")
    list_filter = ("organization", "is_active")
    search_fields = ("name",)


@admin.register(DemandCategory)
class DemandCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "organization", "is_active")
    list_filter = ("organization", "is_active")


# ── Forecasts and commitments ──


@admin.register(DemandForecast)
class DemandForecastAdmin(SimpleHistoryAdmin):
    """
    Admin for demand forecasts.

    route_key, total and truck-type signature are derived; edit forecasts
    through the API so the lock and duplicate rules apply.
    """

    list_display = ("route_key", "party", "planning_week", "total_qty", "created_by")
    list_filter = ("organization", "planning_week")
    search_fields = ("route_key", "party__name")
    raw_id_fields = ("party", "pickup_location", "dropoff_location", "planning_week", "created_by")
    readonly_fields = (
        "route_key",
        "resource_type_signature",
        "total_qty",
        *FORECAST_QTY_FIELDS,
        "created_at",
        "updated_at",
    )


@admin.register(SupplyCommitment)
class SupplyCommitmentAdmin(SimpleHistoryAdmin):
    """Admin for supply commitments."""

    list_display = ("route_key", "party", "planning_week", "total_committed", "resource_type")
    list_filter = ("organization", "planning_week")
    search_fields = ("route_key", "party__name")
    raw_id_fields = ("party", "planning_week", "created_by")
    readonly_fields = ("total_committed", *COMMITMENT_QTY_FIELDS, "created_at", "updated_at")
