"""
Initial schema for Freightplan.

- Organization, Membership
- PlanningWeek
- Location, Party, ResourceType, DemandCategory
- DemandForecast, SupplyCommitment
- History tracking for PlanningWeek, DemandForecast, SupplyCommitment
"""

import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models

import freightplan.models.fields


def historical_fk(to):
    return models.ForeignKey(
        blank=True,
        db_constraint=False,
        null=True,
        on_delete=django.db.models.deletion.DO_NOTHING,
        related_name="+",
        to=to,
    )


HISTORY_FIELDS = [
    ("history_id", models.AutoField(primary_key=True, serialize=False)),
    ("history_date", models.DateTimeField(db_index=True)),
    ("history_change_reason", models.CharField(max_length=100, null=True)),
    (
        "history_type",
        models.CharField(
            choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")],
            max_length=1,
        ),
    ),
]

HISTORY_OPTIONS = {
    "ordering": ("-history_date", "-history_id"),
    "get_latest_by": ("history_date", "history_id"),
}


def history_user():
    return (
        "history_user",
        models.ForeignKey(
            null=True,
            on_delete=django.db.models.deletion.SET_NULL,
            related_name="+",
            to=settings.AUTH_USER_MODEL,
        ),
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        # ── Tenancy ──
        migrations.CreateModel(
            name="Organization",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("slug", models.SlugField(max_length=100, unique=True, verbose_name="Slug")),
                (
                    "planning_cycle",
                    models.CharField(
                        choices=[("weekly", "Weekly (daily quantities)"), ("monthly", "Monthly (weekly quantities)")],
                        default="weekly",
                        max_length=20,
                        verbose_name="Planning cycle",
                    ),
                ),
                (
                    "week_start_day",
                    models.CharField(
                        choices=[("sunday", "Sunday"), ("monday", "Monday"), ("saturday", "Saturday")],
                        default="sunday",
                        max_length=20,
                        verbose_name="Week starts on",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "Organization",
                "verbose_name_plural": "Organizations",
                "db_table": "freightplan_organization",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Membership",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("demand_planner", "Demand planner"),
                            ("supply_planner", "Supply planner"),
                            ("admin", "Admin"),
                        ],
                        default="demand_planner",
                        max_length=20,
                        verbose_name="Role",
                    ),
                ),
                (
                    "is_current",
                    models.BooleanField(
                        default=True,
                        help_text="Organization used for this user's requests",
                        verbose_name="Current",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="memberships",
                        to="freightplan.organization",
                        verbose_name="Organization",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="planning_memberships",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="User",
                    ),
                ),
            ],
            options={
                "verbose_name": "Membership",
                "verbose_name_plural": "Memberships",
                "db_table": "freightplan_membership",
                "unique_together": {("user", "organization")},
            },
        ),
        # ── Planning weeks ──
        migrations.CreateModel(
            name="PlanningWeek",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("week_start", models.DateField(verbose_name="Start")),
                ("week_end", models.DateField(verbose_name="End")),
                ("week_number", models.PositiveSmallIntegerField(verbose_name="Week number")),
                ("year", models.PositiveSmallIntegerField(verbose_name="Year")),
                ("is_locked", models.BooleanField(default=False, verbose_name="Locked")),
                ("locked_at", models.DateTimeField(blank=True, null=True, verbose_name="locked at")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="planning_weeks",
                        to="freightplan.organization",
                        verbose_name="Organization",
                    ),
                ),
            ],
            options={
                "verbose_name": "Planning week",
                "verbose_name_plural": "Planning weeks",
                "db_table": "freightplan_planning_week",
                "ordering": ["week_start"],
            },
        ),
        migrations.AddConstraint(
            model_name="planningweek",
            constraint=models.UniqueConstraint(
                fields=("organization", "year", "week_number"),
                name="freightplan_unique_planning_week",
            ),
        ),
        migrations.CreateModel(
            name="HistoricalPlanningWeek",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                ("week_start", models.DateField(verbose_name="Start")),
                ("week_end", models.DateField(verbose_name="End")),
                ("week_number", models.PositiveSmallIntegerField(verbose_name="Week number")),
                ("year", models.PositiveSmallIntegerField(verbose_name="Year")),
                ("is_locked", models.BooleanField(default=False, verbose_name="Locked")),
                ("locked_at", models.DateTimeField(blank=True, null=True, verbose_name="locked at")),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="created at")),
                *HISTORY_FIELDS,
                ("organization", historical_fk("freightplan.organization")),
                history_user(),
            ],
            options={
                "verbose_name": "historical Planning week",
                "verbose_name_plural": "historical Planning weeks",
                **HISTORY_OPTIONS,
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        # ── Repositories ──
        migrations.CreateModel(
            name="Location",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("code", models.CharField(blank=True, max_length=50, verbose_name="Code")),
                ("region", models.CharField(blank=True, max_length=100, verbose_name="Region")),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="Active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="locations",
                        to="freightplan.organization",
                        verbose_name="Organization",
                    ),
                ),
            ],
            options={
                "verbose_name": "Location",
                "verbose_name_plural": "Locations",
                "db_table": "freightplan_location",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Party",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("code", models.CharField(blank=True, max_length=50, verbose_name="Code")),
                (
                    "party_role",
                    models.CharField(
                        choices=[("customer", "Customer"), ("supplier", "Supplier")],
                        db_index=True,
                        max_length=20,
                        verbose_name="Role",
                    ),
                ),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="Active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="parties",
                        to="freightplan.organization",
                        verbose_name="Organization",
                    ),
                ),
            ],
            options={
                "verbose_name": "Party",
                "verbose_name_plural": "Parties",
                "db_table": "freightplan_party",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="ResourceType",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="Active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="resource_types",
                        to="freightplan.organization",
                        verbose_name="Organization",
                    ),
                ),
            ],
            options={
                "verbose_name": "Truck type",
                "verbose_name_plural": "Truck types",
                "db_table": "freightplan_resource_type",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="DemandCategory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("code", models.CharField(blank=True, max_length=50, verbose_name="Code")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="demand_categories",
                        to="freightplan.organization",
                        verbose_name="Organization",
                    ),
                ),
            ],
            options={
                "verbose_name": "Demand category",
                "verbose_name_plural": "Demand categories",
                "db_table": "freightplan_demand_category",
                "ordering": ["name"],
            },
        ),
        # ── Demand forecasts ──
        migrations.CreateModel(
            name="DemandForecast",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("resource_type_signature", models.CharField(max_length=255, verbose_name="Truck type signature")),
                ("route_key", freightplan.models.fields.RouteKeyField(db_index=True, max_length=255, verbose_name="Route")),
                ("day1_qty", models.PositiveIntegerField(default=0, verbose_name="Day 1")),
                ("day2_qty", models.PositiveIntegerField(default=0, verbose_name="Day 2")),
                ("day3_qty", models.PositiveIntegerField(default=0, verbose_name="Day 3")),
                ("day4_qty", models.PositiveIntegerField(default=0, verbose_name="Day 4")),
                ("day5_qty", models.PositiveIntegerField(default=0, verbose_name="Day 5")),
                ("day6_qty", models.PositiveIntegerField(default=0, verbose_name="Day 6")),
                ("day7_qty", models.PositiveIntegerField(default=0, verbose_name="Day 7")),
                ("week1_qty", models.PositiveIntegerField(default=0, verbose_name="Week 1")),
                ("week2_qty", models.PositiveIntegerField(default=0, verbose_name="Week 2")),
                ("week3_qty", models.PositiveIntegerField(default=0, verbose_name="Week 3")),
                ("week4_qty", models.PositiveIntegerField(default=0, verbose_name="Week 4")),
                ("week5_qty", models.PositiveIntegerField(default=0, verbose_name="Week 5")),
                ("total_qty", models.PositiveIntegerField(default=0, verbose_name="Total")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="demand_forecasts",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Created by",
                    ),
                ),
                (
                    "demand_category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="forecasts",
                        to="freightplan.demandcategory",
                        verbose_name="Category",
                    ),
                ),
                (
                    "dropoff_location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="dropoff_forecasts",
                        to="freightplan.location",
                        verbose_name="Dropoff",
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="forecasts",
                        to="freightplan.organization",
                        verbose_name="Organization",
                    ),
                ),
                (
                    "party",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="forecasts",
                        to="freightplan.party",
                        verbose_name="Client",
                    ),
                ),
                (
                    "pickup_location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="pickup_forecasts",
                        to="freightplan.location",
                        verbose_name="Pickup",
                    ),
                ),
                (
                    "planning_week",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="forecasts",
                        to="freightplan.planningweek",
                        verbose_name="Planning week",
                    ),
                ),
                (
                    "resource_types",
                    models.ManyToManyField(
                        related_name="forecasts",
                        to="freightplan.resourcetype",
                        verbose_name="Truck types",
                    ),
                ),
            ],
            options={
                "verbose_name": "Demand forecast",
                "verbose_name_plural": "Demand forecasts",
                "db_table": "freightplan_demand_forecast",
                "ordering": ["party_id", "route_key"],
                "indexes": [
                    models.Index(
                        fields=["organization", "planning_week", "route_key"],
                        name="fp_forecast_week_route_idx",
                    ),
                    models.Index(fields=["organization", "party"], name="fp_forecast_party_idx"),
                ],
            },
        ),
        migrations.AddConstraint(
            model_name="demandforecast",
            constraint=models.UniqueConstraint(
                fields=(
                    "organization",
                    "planning_week",
                    "party",
                    "pickup_location",
                    "dropoff_location",
                    "resource_type_signature",
                ),
                name="freightplan_unique_forecast",
            ),
        ),
        migrations.CreateModel(
            name="HistoricalDemandForecast",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                ("resource_type_signature", models.CharField(max_length=255, verbose_name="Truck type signature")),
                ("route_key", freightplan.models.fields.RouteKeyField(db_index=True, max_length=255, verbose_name="Route")),
                ("day1_qty", models.PositiveIntegerField(default=0, verbose_name="Day 1")),
                ("day2_qty", models.PositiveIntegerField(default=0, verbose_name="Day 2")),
                ("day3_qty", models.PositiveIntegerField(default=0, verbose_name="Day 3")),
                ("day4_qty", models.PositiveIntegerField(default=0, verbose_name="Day 4")),
                ("day5_qty", models.PositiveIntegerField(default=0, verbose_name="Day 5")),
                ("day6_qty", models.PositiveIntegerField(default=0, verbose_name="Day 6")),
                ("day7_qty", models.PositiveIntegerField(default=0, verbose_name="Day 7")),
                ("week1_qty", models.PositiveIntegerField(default=0, verbose_name="Week 1")),
                ("week2_qty", models.PositiveIntegerField(default=0, verbose_name="Week 2")),
                ("week3_qty", models.PositiveIntegerField(default=0, verbose_name="Week 3")),
                ("week4_qty", models.PositiveIntegerField(default=0, verbose_name="Week 4")),
                ("week5_qty", models.PositiveIntegerField(default=0, verbose_name="Week 5")),
                ("total_qty", models.PositiveIntegerField(default=0, verbose_name="Total")),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="created at")),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="updated at")),
                *HISTORY_FIELDS,
                ("created_by", historical_fk(settings.AUTH_USER_MODEL)),
                ("demand_category", historical_fk("freightplan.demandcategory")),
                ("dropoff_location", historical_fk("freightplan.location")),
                ("organization", historical_fk("freightplan.organization")),
                ("party", historical_fk("freightplan.party")),
                ("pickup_location", historical_fk("freightplan.location")),
                ("planning_week", historical_fk("freightplan.planningweek")),
                history_user(),
            ],
            options={
                "verbose_name": "historical Demand forecast",
                "verbose_name_plural": "historical Demand forecasts",
                **HISTORY_OPTIONS,
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        # ── Supply commitments ──
        migrations.CreateModel(
            name="SupplyCommitment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("route_key", freightplan.models.fields.RouteKeyField(db_index=True, max_length=255, verbose_name="Route")),
                ("day1_committed", models.PositiveIntegerField(default=0, verbose_name="Day 1")),
                ("day2_committed", models.PositiveIntegerField(default=0, verbose_name="Day 2")),
                ("day3_committed", models.PositiveIntegerField(default=0, verbose_name="Day 3")),
                ("day4_committed", models.PositiveIntegerField(default=0, verbose_name="Day 4")),
                ("day5_committed", models.PositiveIntegerField(default=0, verbose_name="Day 5")),
                ("day6_committed", models.PositiveIntegerField(default=0, verbose_name="Day 6")),
                ("day7_committed", models.PositiveIntegerField(default=0, verbose_name="Day 7")),
                ("week1_committed", models.PositiveIntegerField(default=0, verbose_name="Week 1")),
                ("week2_committed", models.PositiveIntegerField(default=0, verbose_name="Week 2")),
                ("week3_committed", models.PositiveIntegerField(default=0, verbose_name="Week 3")),
                ("week4_committed", models.PositiveIntegerField(default=0, verbose_name="Week 4")),
                ("week5_committed", models.PositiveIntegerField(default=0, verbose_name="Week 5")),
                ("total_committed", models.PositiveIntegerField(default=0, verbose_name="Total")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="supply_commitments",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Created by",
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="commitments",
                        to="freightplan.organization",
                        verbose_name="Organization",
                    ),
                ),
                (
                    "party",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="commitments",
                        to="freightplan.party",
                        verbose_name="Supplier",
                    ),
                ),
                (
                    "planning_week",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="commitments",
                        to="freightplan.planningweek",
                        verbose_name="Planning week",
                    ),
                ),
                (
                    "resource_type",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="commitments",
                        to="freightplan.resourcetype",
                        verbose_name="Truck type",
                    ),
                ),
            ],
            options={
                "verbose_name": "Supply commitment",
                "verbose_name_plural": "Supply commitments",
                "db_table": "freightplan_supply_commitment",
                "ordering": ["route_key", "party__name"],
                "indexes": [
                    models.Index(
                        fields=["organization", "planning_week", "route_key"],
                        name="fp_commitment_week_route_idx",
                    ),
                    models.Index(fields=["organization", "party"], name="fp_commitment_party_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="HistoricalSupplyCommitment",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                ("route_key", freightplan.models.fields.RouteKeyField(db_index=True, max_length=255, verbose_name="Route")),
                ("day1_committed", models.PositiveIntegerField(default=0, verbose_name="Day 1")),
                ("day2_committed", models.PositiveIntegerField(default=0, verbose_name="Day 2")),
                ("day3_committed", models.PositiveIntegerField(default=0, verbose_name="Day 3")),
                ("day4_committed", models.PositiveIntegerField(default=0, verbose_name="Day 4")),
                ("day5_committed", models.PositiveIntegerField(default=0, verbose_name="Day 5")),
                ("day6_committed", models.PositiveIntegerField(default=0, verbose_name="Day 6")),
                ("day7_committed", models.PositiveIntegerField(default=0, verbose_name="Day 7")),
                ("week1_committed", models.PositiveIntegerField(default=0, verbose_name="Week 1")),
                ("week2_committed", models.PositiveIntegerField(default=0, verbose_name="Week 2")),
                ("week3_committed", models.PositiveIntegerField(default=0, verbose_name="Week 3")),
                ("week4_committed", models.PositiveIntegerField(default=0, verbose_name="Week 4")),
                ("week5_committed", models.PositiveIntegerField(default=0, verbose_name="Week 5")),
                ("total_committed", models.PositiveIntegerField(default=0, verbose_name="Total")),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="created at")),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="updated at")),
                *HISTORY_FIELDS,
                ("created_by", historical_fk(settings.AUTH_USER_MODEL)),
                ("organization", historical_fk("freightplan.organization")),
                ("party", historical_fk("freightplan.party")),
                ("planning_week", historical_fk("freightplan.planningweek")),
                ("resource_type", historical_fk("freightplan.resourcetype")),
                history_user(),
            ],
            options={
                "verbose_name": "historical Supply commitment",
                "verbose_name_plural": "historical Supply commitments",
                **HISTORY_OPTIONS,
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
