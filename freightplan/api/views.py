"""
Freightplan API ViewSets.

Responses use one envelope:

    {"success": true, "data": ...}
    {"success": false, "error": {"code": ..., "message": ..., "details": ...}}
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from freightplan.exceptions import PlanningError
from freightplan.permissions import HasPlanningSession, has_permission
from freightplan.service import Planner

from .exceptions import exception_handler
from .serializers import (
    ENTITY_SERIALIZERS,
    BulkDeleteSerializer,
    CleanupSerializer,
    DemandForecastCreateSerializer,
    DemandForecastPatchSerializer,
    DemandForecastSerializer,
    DemandQuerySerializer,
    GapQuerySerializer,
    IdsSerializer,
    PlanningWeekQuerySerializer,
    PlanningWeekSerializer,
    SupplyCommitmentCreateSerializer,
    SupplyCommitmentPatchSerializer,
    SupplyCommitmentSerializer,
    SupplyQuerySerializer,
    SummaryQuerySerializer,
    WeekQuerySerializer,
)


def ok(data, status_code=status.HTTP_200_OK, **extra) -> Response:
    return Response({"success": True, "data": data, **extra}, status=status_code)


def _validated(serializer_class, data):
    serializer = serializer_class(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer


class PlanningViewSet(viewsets.ViewSet):
    """
    Base ViewSet: resolves the planning session and renders errors in the
    response envelope.
    """

    permission_classes = [HasPlanningSession]
    lookup_value_regex = r"\d+"

    def get_exception_handler(self):
        return exception_handler

    @property
    def session(self):
        return self.request.planning_session

    def require(self, permission: str) -> None:
        """Raise FORBIDDEN unless the session role grants permission."""
        if not has_permission(self.session.role, permission):
            raise PlanningError("FORBIDDEN", required=permission)

    @property
    def user(self):
        return self.session.user


class DemandViewSet(PlanningViewSet):
    """
    Demand forecasts.

    list: GET /demand/?planning_week_id=&client_id=&route_key=&page=&page_size=
    create: POST /demand/
    retrieve: GET /demand/{id}/
    partial_update: PATCH /demand/{id}/
    destroy: DELETE /demand/{id}/ (cascades to orphaned commitments)
    """

    def list(self, request):
        self.require("demand:read")
        query = _validated(DemandQuerySerializer, request.query_params).validated_data
        page = Planner.list_forecasts(self.session, **query)
        return ok(
            DemandForecastSerializer(page.items, many=True).data,
            pagination=page.pagination(),
        )

    def create(self, request):
        self.require("demand:write")
        serializer = _validated(DemandForecastCreateSerializer, request.data)
        forecast = Planner.create_forecast(self.session, serializer.to_input(), user=self.user)
        return ok(DemandForecastSerializer(forecast).data, status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        self.require("demand:read")
        forecast = Planner.get_forecast(self.session, pk)
        return ok(DemandForecastSerializer(forecast).data)

    def partial_update(self, request, pk=None):
        self.require("demand:write")
        serializer = _validated(DemandForecastPatchSerializer, request.data)
        forecast = Planner.update_forecast(self.session, pk, serializer.to_patch(), user=self.user)
        return ok(DemandForecastSerializer(forecast).data)

    def destroy(self, request, pk=None):
        self.require("demand:write")
        cascaded = Planner.delete_forecast(self.session, pk, user=self.user)
        return ok({"id": int(pk), "cascaded_commitments": cascaded})


class SupplyViewSet(PlanningViewSet):
    """
    Supply commitments and gap targets.

    list: GET /supply/?planning_week_id=&supplier_id=&route_key=
    create: POST /supply/
    retrieve: GET /supply/{id}/
    partial_update: PATCH /supply/{id}/
    destroy: DELETE /supply/{id}/
    gaps: GET /supply/gaps/?planning_week_id=
    dispatch_sheet: GET /supply/dispatch/?planning_week_id=
    cleanup_orphans: POST /supply/cleanup-orphans/ (admin)
    """

    def list(self, request):
        self.require("supply:read")
        query = _validated(SupplyQuerySerializer, request.query_params).validated_data
        page = Planner.list_commitments(self.session, **query)
        return ok(
            SupplyCommitmentSerializer(page.items, many=True).data,
            pagination=page.pagination(),
        )

    def create(self, request):
        self.require("supply:write")
        serializer = _validated(SupplyCommitmentCreateSerializer, request.data)
        commitment = Planner.create_commitment(self.session, serializer.to_input(), user=self.user)
        return ok(SupplyCommitmentSerializer(commitment).data, status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        self.require("supply:read")
        commitment = Planner.get_commitment(self.session, pk)
        return ok(SupplyCommitmentSerializer(commitment).data)

    def partial_update(self, request, pk=None):
        self.require("supply:write")
        serializer = _validated(SupplyCommitmentPatchSerializer, request.data)
        commitment = Planner.update_commitment(
            self.session, pk, serializer.to_patch(), user=self.user
        )
        return ok(SupplyCommitmentSerializer(commitment).data)

    def destroy(self, request, pk=None):
        self.require("supply:write")
        Planner.delete_commitment(self.session, pk, user=self.user)
        return ok({"id": int(pk)})

    @action(detail=False, methods=["get"])
    def gaps(self, request):
        """
        Demand targets vs committed supply per route.

        GET /supply/gaps/?planning_week_id=12&client_ids=3&truck_type_ids=1
        """
        self.require("supply:read")
        query = _validated(GapQuerySerializer, request.query_params).validated_data
        targets = Planner.compute_gaps(self.session, **query)
        return ok([target.as_dict() for target in targets])

    @action(detail=False, methods=["get"], url_path="dispatch")
    def dispatch_sheet(self, request):
        """
        Committed supply per supplier.

        GET /supply/dispatch/?planning_week_id=12
        """
        self.require("supply:read")
        query = _validated(WeekQuerySerializer, request.query_params).validated_data
        sheet = Planner.dispatch_sheet(self.session, query["planning_week_id"])
        return ok(sheet.as_dict())

    @action(detail=False, methods=["post"], url_path="cleanup-orphans")
    def cleanup_orphans(self, request):
        """
        Remove commitments on routes with no demand.

        POST /supply/cleanup-orphans/
        {"planning_week_id": 12}
        """
        self.require("supply:cleanup")
        data = _validated(CleanupSerializer, request.data).validated_data
        deleted = Planner.cleanup_orphaned_commitments(
            self.session, data["planning_week_id"], user=self.user
        )
        return ok({"deleted": deleted})


class PlanningWeekViewSet(PlanningViewSet):
    """
    Planning periods.

    list: GET /planning-weeks/?count=8 (current and upcoming, created on demand)
    summary: GET /planning-weeks/summary/?planning_week_id= (default: current period)
    lock: POST /planning-weeks/{id}/lock/ (admin)
    unlock: POST /planning-weeks/{id}/unlock/ (admin)
    """

    def list(self, request):
        query = _validated(PlanningWeekQuerySerializer, request.query_params).validated_data
        weeks = Planner.upcoming_periods(self.session, count=query.get("count"))
        organization = weeks[0].organization if weeks else None
        return ok(
            PlanningWeekSerializer(weeks, many=True).data,
            meta={"planning_cycle": organization.planning_cycle if organization else None},
        )

    @action(detail=False, methods=["get"])
    def summary(self, request):
        query = _validated(SummaryQuerySerializer, request.query_params).validated_data
        summary = Planner.week_summary(self.session, query.get("planning_week_id"))
        return ok(summary.as_dict())

    @action(detail=True, methods=["post"])
    def lock(self, request, pk=None):
        self.require("planning-weeks:lock")
        week = Planner.lock_period(self.session, pk, user=self.user)
        return ok(PlanningWeekSerializer(week).data)

    @action(detail=True, methods=["post"])
    def unlock(self, request, pk=None):
        self.require("planning-weeks:lock")
        week = Planner.unlock_period(self.session, pk, user=self.user)
        return ok(PlanningWeekSerializer(week).data)


class RepositoryViewSet(PlanningViewSet):
    """
    Repository entities (subclassed per entity).

    list: GET /{entity}/
    check_dependencies_batch: POST /{entity}/check-dependencies-batch/
    bulk_delete: POST /{entity}/bulk-delete/ (admin)
    """

    entity = ""

    def list(self, request):
        self.require("repositories:read")
        queryset = Planner.list_entities(self.session, self.entity)
        serializer_class = ENTITY_SERIALIZERS[queryset.model]
        return ok(serializer_class(queryset, many=True).data)

    @action(detail=False, methods=["post"], url_path="check-dependencies-batch")
    def check_dependencies_batch(self, request):
        """
        POST /{entity}/check-dependencies-batch/
        {"ids": [1, 2, 3]}
        """
        self.require("repositories:read")
        data = _validated(IdsSerializer, request.data).validated_data
        dependencies = Planner.check_dependencies_batch(self.session, self.entity, data["ids"])
        return ok({str(pk): info.as_dict() for pk, info in dependencies.items()})

    @action(detail=False, methods=["post"], url_path="bulk-delete")
    def bulk_delete(self, request):
        """
        POST /{entity}/bulk-delete/
        {"ids": [1, 2, 3], "skip_dependencies": true}
        """
        self.require("repositories:write")
        data = _validated(BulkDeleteSerializer, request.data).validated_data
        result = Planner.bulk_delete(
            self.session,
            self.entity,
            data["ids"],
            skip_dependencies=data["skip_dependencies"],
            user=self.user,
        )
        return ok(result.as_dict())


class LocationViewSet(RepositoryViewSet):
    entity = "locations"


class ClientViewSet(RepositoryViewSet):
    entity = "clients"


class SupplierViewSet(RepositoryViewSet):
    entity = "suppliers"


class TruckTypeViewSet(RepositoryViewSet):
    entity = "truck-types"


class DemandCategoryViewSet(RepositoryViewSet):
    entity = "demand-categories"
