"""
Freightplan API Serializers.
"""

from rest_framework import serializers

from freightplan.inputs import (
    DemandForecastInput,
    DemandForecastPatch,
    SupplyCommitmentInput,
    SupplyCommitmentPatch,
)
from freightplan.models import (
    DemandCategory,
    DemandForecast,
    Location,
    Party,
    PlanningWeek,
    ResourceType,
    SupplyCommitment,
)
from freightplan.quantities import (
    COMMITMENT_QTY_FIELDS,
    DAY_PERIODS,
    FORECAST_QTY_FIELDS,
    WEEK_PERIODS,
)

PERIODS = DAY_PERIODS + WEEK_PERIODS


class RouteKeySerializerField(serializers.Field):
    """RouteKey rendered as its canonical string."""

    def to_representation(self, value):
        return str(value)

    def to_internal_value(self, data):
        if not isinstance(data, str) or not data.strip():
            raise serializers.ValidationError("Route key is required.")
        return data


# ── Reference data ──


class PlanningWeekSerializer(serializers.ModelSerializer):
    """Serializer for PlanningWeek model."""

    display = serializers.CharField(read_only=True)

    class Meta:
        model = PlanningWeek
        fields = [
            "id",
            "week_start",
            "week_end",
            "week_number",
            "year",
            "is_locked",
            "locked_at",
            "display",
        ]
        read_only_fields = fields


class LocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Location
        fields = ["id", "name", "code", "region", "is_active"]


class PartySerializer(serializers.ModelSerializer):
    class Meta:
        model = Party
        fields = ["id", "name", "code", "party_role", "is_active"]


class ResourceTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = ResourceType
        fields = ["id", "name", "is_active"]


class DemandCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = DemandCategory
        fields = ["id", "name", "code", "is_active"]


class NamedRefSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(read_only=True)


ENTITY_SERIALIZERS = {
    Location: LocationSerializer,
    Party: PartySerializer,
    ResourceType: ResourceTypeSerializer,
    DemandCategory: DemandCategorySerializer,
}


# ── Forecasts ──


class DemandForecastSerializer(serializers.ModelSerializer):
    """Serializer for DemandForecast model (output)."""

    route_key = RouteKeySerializerField(read_only=True)
    client = NamedRefSerializer(source="party", read_only=True)
    pickup_city = NamedRefSerializer(source="pickup_location", read_only=True)
    dropoff_city = NamedRefSerializer(source="dropoff_location", read_only=True)
    truck_types = NamedRefSerializer(source="resource_types", many=True, read_only=True)
    demand_category = NamedRefSerializer(read_only=True, allow_null=True)

    class Meta:
        model = DemandForecast
        fields = [
            "id",
            "planning_week_id",
            "route_key",
            "client",
            "pickup_city",
            "dropoff_city",
            "truck_types",
            "demand_category",
            *FORECAST_QTY_FIELDS,
            "total_qty",
            "created_by_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class QuantitiesSerializer(serializers.Serializer):
    """Base for serializers carrying <period>_<suffix> quantity fields."""

    quantity_suffix = ""

    def quantities(self) -> dict[str, int]:
        """{"day1": 10, ...} for the quantity fields present in the request."""
        data = self.validated_data
        return {
            period: data[f"{period}_{self.quantity_suffix}"]
            for period in PERIODS
            if f"{period}_{self.quantity_suffix}" in data
        }


class ForecastQuantitiesSerializer(QuantitiesSerializer):
    """Forecast quantity fields, all optional."""

    day1_qty = serializers.IntegerField(min_value=0, required=False)
    day2_qty = serializers.IntegerField(min_value=0, required=False)
    day3_qty = serializers.IntegerField(min_value=0, required=False)
    day4_qty = serializers.IntegerField(min_value=0, required=False)
    day5_qty = serializers.IntegerField(min_value=0, required=False)
    day6_qty = serializers.IntegerField(min_value=0, required=False)
    day7_qty = serializers.IntegerField(min_value=0, required=False)
    week1_qty = serializers.IntegerField(min_value=0, required=False)
    week2_qty = serializers.IntegerField(min_value=0, required=False)
    week3_qty = serializers.IntegerField(min_value=0, required=False)
    week4_qty = serializers.IntegerField(min_value=0, required=False)
    week5_qty = serializers.IntegerField(min_value=0, required=False)

    quantity_suffix = "qty"


class CommitmentQuantitiesSerializer(QuantitiesSerializer):
    """Commitment quantity fields, all optional."""

    day1_committed = serializers.IntegerField(min_value=0, required=False)
    day2_committed = serializers.IntegerField(min_value=0, required=False)
    day3_committed = serializers.IntegerField(min_value=0, required=False)
    day4_committed = serializers.IntegerField(min_value=0, required=False)
    day5_committed = serializers.IntegerField(min_value=0, required=False)
    day6_committed = serializers.IntegerField(min_value=0, required=False)
    day7_committed = serializers.IntegerField(min_value=0, required=False)
    week1_committed = serializers.IntegerField(min_value=0, required=False)
    week2_committed = serializers.IntegerField(min_value=0, required=False)
    week3_committed = serializers.IntegerField(min_value=0, required=False)
    week4_committed = serializers.IntegerField(min_value=0, required=False)
    week5_committed = serializers.IntegerField(min_value=0, required=False)

    quantity_suffix = "committed"


class DemandForecastCreateSerializer(ForecastQuantitiesSerializer):
    """
    POST /demand/

    {
        "planning_week_id": 12,
        "client_id": 3,
        "pickup_city_id": 7,
        "dropoff_city_id": 9,
        "truck_type_ids": [1, 2],
        "day1_qty": 10
    }
    """

    planning_week_id = serializers.IntegerField()
    client_id = serializers.IntegerField()
    pickup_city_id = serializers.IntegerField()
    dropoff_city_id = serializers.IntegerField()
    truck_type_ids = serializers.ListField(
        child=serializers.IntegerField(), allow_empty=False
    )
    demand_category_id = serializers.IntegerField(required=False, allow_null=True)

    def to_input(self) -> DemandForecastInput:
        data = self.validated_data
        return DemandForecastInput(
            planning_week_id=data["planning_week_id"],
            client_id=data["client_id"],
            pickup_city_id=data["pickup_city_id"],
            dropoff_city_id=data["dropoff_city_id"],
            truck_type_ids=tuple(data["truck_type_ids"]),
            quantities=self.quantities(),
            demand_category_id=data.get("demand_category_id"),
        )


class DemandForecastPatchSerializer(ForecastQuantitiesSerializer):
    """PATCH /demand/{id}/ with any subset of quantity fields."""

    def to_patch(self) -> DemandForecastPatch:
        return DemandForecastPatch(quantities=self.quantities())


# ── Commitments ──


class SupplyCommitmentSerializer(serializers.ModelSerializer):
    """Serializer for SupplyCommitment model (output)."""

    route_key = RouteKeySerializerField(read_only=True)
    supplier = NamedRefSerializer(source="party", read_only=True)
    truck_type = NamedRefSerializer(source="resource_type", read_only=True, allow_null=True)

    class Meta:
        model = SupplyCommitment
        fields = [
            "id",
            "planning_week_id",
            "route_key",
            "supplier",
            "truck_type",
            *COMMITMENT_QTY_FIELDS,
            "total_committed",
            "created_by_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class SupplyCommitmentCreateSerializer(CommitmentQuantitiesSerializer):
    """POST /supply/"""

    planning_week_id = serializers.IntegerField()
    supplier_id = serializers.IntegerField()
    route_key = RouteKeySerializerField()
    truck_type_id = serializers.IntegerField(required=False, allow_null=True)

    def to_input(self) -> SupplyCommitmentInput:
        data = self.validated_data
        return SupplyCommitmentInput(
            planning_week_id=data["planning_week_id"],
            supplier_id=data["supplier_id"],
            route_key=data["route_key"],
            quantities=self.quantities(),
            truck_type_id=data.get("truck_type_id"),
        )


class SupplyCommitmentPatchSerializer(CommitmentQuantitiesSerializer):
    """PATCH /supply/{id}/"""

    def to_patch(self) -> SupplyCommitmentPatch:
        return SupplyCommitmentPatch(quantities=self.quantities())


# ── Query parameters ──


class PageQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    page_size = serializers.IntegerField(min_value=1, required=False)


class DemandQuerySerializer(PageQuerySerializer):
    planning_week_id = serializers.IntegerField(required=False)
    client_id = serializers.IntegerField(required=False)
    route_key = serializers.CharField(required=False)
    demand_category_id = serializers.IntegerField(required=False)


class SupplyQuerySerializer(PageQuerySerializer):
    planning_week_id = serializers.IntegerField(required=False)
    supplier_id = serializers.IntegerField(required=False)
    route_key = serializers.CharField(required=False)


class GapQuerySerializer(serializers.Serializer):
    """GET /supply/gaps/?planning_week_id=12&client_ids=3&client_ids=4"""

    planning_week_id = serializers.IntegerField()
    planner_ids = serializers.ListField(child=serializers.IntegerField(), required=False)
    client_ids = serializers.ListField(child=serializers.IntegerField(), required=False)
    category_ids = serializers.ListField(child=serializers.IntegerField(), required=False)
    truck_type_ids = serializers.ListField(child=serializers.IntegerField(), required=False)


class PlanningWeekQuerySerializer(serializers.Serializer):
    count = serializers.IntegerField(min_value=1, max_value=52, required=False)


class WeekQuerySerializer(serializers.Serializer):
    planning_week_id = serializers.IntegerField()


class SummaryQuerySerializer(serializers.Serializer):
    """GET /planning-weeks/summary/ defaults to the current period."""

    planning_week_id = serializers.IntegerField(required=False)


class CleanupSerializer(serializers.Serializer):
    planning_week_id = serializers.IntegerField()


class IdsSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)


class BulkDeleteSerializer(IdsSerializer):
    skip_dependencies = serializers.BooleanField(required=False, default=False)

