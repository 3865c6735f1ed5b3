"""
Freightplan hardening tests.

Tests for:
- Tenant isolation on every read and write path
- TenantScope construction and cross-tenant logging
- Write serialization against lock_period (row lock on the week)
- Settings lookup order and backend singletons
"""

import logging
from datetime import date
from unittest.mock import patch

import pytest
from rest_framework.test import APIClient

from freightplan.conf import get_audit_backend, get_setting, reset_backends
from freightplan.exceptions import PlanningError, http_status
from freightplan.inputs import DemandForecastPatch, SupplyCommitmentInput, SupplyCommitmentPatch
from freightplan.models import (
    DemandForecast,
    Location,
    Party,
    PartyRole,
    PlanningWeek,
    ResourceType,
    SupplyCommitment,
)
from freightplan.protocols import Session
from freightplan.service import Planner
from freightplan.tenancy import TenantScope


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def foreign_week(other_org):
    return PlanningWeek.objects.create(
        organization=other_org,
        week_start=date(2026, 3, 1),
        week_end=date(2026, 3, 7),
        week_number=10,
        year=2026,
    )


@pytest.fixture
def foreign_refs(other_org):
    return {
        "client": Party.objects.create(organization=other_org, name="Initech", party_role=PartyRole.CUSTOMER),
        "supplier": Party.objects.create(organization=other_org, name="Nile Cargo", party_role=PartyRole.SUPPLIER),
        "city": Location.objects.create(organization=other_org, name="Cairo"),
        "truck": ResourceType.objects.create(organization=other_org, name="Tanker"),
    }


# ═══════════════════════════════════════════════════════════════════
# Tenant isolation
# ═══════════════════════════════════════════════════════════════════


class TestTenantIsolation:
    def test_get_foreign_forecast_forbidden(self, other_org, make_forecast):
        forecast = make_forecast()

        with pytest.raises(PlanningError) as exc:
            Planner.get_forecast(other_org, forecast.pk)
        assert exc.value.code == "FORBIDDEN"

    def test_update_foreign_forecast_forbidden(self, other_org, make_forecast):
        forecast = make_forecast({"day1": 10})

        with pytest.raises(PlanningError) as exc:
            Planner.update_forecast(other_org, forecast.pk, DemandForecastPatch({"day1": 0}))

        assert exc.value.code == "FORBIDDEN"
        forecast.refresh_from_db()
        assert forecast.day1_qty == 10

    def test_delete_foreign_commitment_forbidden(self, other_org, make_commitment):
        commitment = make_commitment()

        with pytest.raises(PlanningError) as exc:
            Planner.delete_commitment(other_org, commitment.pk)
        assert exc.value.code == "FORBIDDEN"

    @pytest.mark.parametrize("field", ["client_id", "pickup_city_id", "dropoff_city_id"])
    def test_foreign_references_not_found(self, make_forecast, foreign_refs, field):
        ref = foreign_refs["client"] if field == "client_id" else foreign_refs["city"]

        with pytest.raises(PlanningError) as exc:
            make_forecast(**{field: ref.pk})
        assert exc.value.code == "NOT_FOUND"

    def test_foreign_truck_type_not_found(self, make_forecast, foreign_refs):
        with pytest.raises(PlanningError) as exc:
            make_forecast(truck_type_ids=(foreign_refs["truck"].pk,))
        assert exc.value.code == "NOT_FOUND"

    def test_foreign_week_not_found(self, make_forecast, make_commitment, foreign_week):
        with pytest.raises(PlanningError) as exc:
            make_forecast(planning_week_id=foreign_week.pk)
        assert exc.value.code == "NOT_FOUND"

        with pytest.raises(PlanningError) as exc:
            make_commitment(planning_week_id=foreign_week.pk)
        assert exc.value.code == "NOT_FOUND"

    def test_foreign_supplier_not_found(self, make_commitment, foreign_refs):
        with pytest.raises(PlanningError) as exc:
            make_commitment(supplier_id=foreign_refs["supplier"].pk)
        assert exc.value.code == "NOT_FOUND"

    def test_lists_and_gaps_scoped(self, other_org, foreign_week, make_forecast, make_commitment):
        make_forecast({"day1": 10})
        make_commitment({"day1": 5})

        assert Planner.list_forecasts(other_org).total_count == 0
        assert Planner.list_commitments(other_org).total_count == 0
        assert Planner.compute_gaps(other_org, foreign_week.pk) == []

    def test_same_route_in_two_tenants(self, org, other_org, week, foreign_week, make_forecast, foreign_refs):
        """Equal route keys never join across organizations."""
        make_forecast({"day1": 10})
        Planner.create_commitment(
            other_org,
            SupplyCommitmentInput(
                planning_week_id=foreign_week.pk,
                supplier_id=foreign_refs["supplier"].pk,
                route_key="Riyadh⇒Jeddah",
                quantities={"day1": 99},
            ),
        )

        [target] = Planner.compute_gaps(org, week.pk)

        assert target.committed["total"] == 0
        assert target.gap["total"] == 10

    def test_api_foreign_forecast_forbidden(self, other_admin, make_forecast):
        forecast = make_forecast()
        api = APIClient()
        api.force_authenticate(user=other_admin)

        response = api.get(f"/api/freightplan/demand/{forecast.pk}/")

        assert response.status_code == 403
        assert response.data["error"]["code"] == "FORBIDDEN"


# ═══════════════════════════════════════════════════════════════════
# TenantScope
# ═══════════════════════════════════════════════════════════════════


class TestTenantScope:
    def test_of_variants(self, org):
        session = Session(user_id=1, organization_id=org.pk, role="admin")

        assert TenantScope.of(org).organization_id == org.pk
        assert TenantScope.of(session).organization_id == org.pk
        assert TenantScope.of(org.pk).organization_id == org.pk
        scope = TenantScope(org.pk)
        assert TenantScope.of(scope) is scope
        assert TenantScope.of(org.pk).organization == org

    @pytest.mark.parametrize("tenant", [None, 0])
    def test_no_organization_unauthorized(self, tenant):
        with pytest.raises(PlanningError) as exc:
            TenantScope.of(tenant)
        assert exc.value.code == "UNAUTHORIZED"

    def test_data_stamps_organization(self, org):
        assert TenantScope.of(org).data(name="x") == {"organization_id": org.pk, "name": "x"}

    def test_cross_tenant_access_logged(self, other_org, make_forecast, caplog):
        forecast = make_forecast()

        with caplog.at_level(logging.WARNING, logger="freightplan.tenancy"):
            with pytest.raises(PlanningError):
                Planner.get_forecast(other_org, forecast.pk)

        assert f"Cross-tenant access denied for Forecast {forecast.pk}" in caplog.text


# ═══════════════════════════════════════════════════════════════════
# Lock serialization
# ═══════════════════════════════════════════════════════════════════


class TestLockSerialization:
    def test_week_row_locked_on_write(self, org, make_forecast):
        """Every forecast write re-reads the week with select_for_update."""
        from freightplan.services.base import lock_week_for_write

        with patch(
            "freightplan.services.demand.lock_week_for_write", wraps=lock_week_for_write
        ) as locked:
            forecast = make_forecast({"day1": 1})

        locked.assert_called_once()
        assert locked.call_args.args[1] == forecast.planning_week_id

    def test_lock_seen_by_stale_instance(self, org, week, make_forecast):
        """A write sees a lock taken after the caller loaded the week."""
        stale = PlanningWeek.objects.get(pk=week.pk)
        PlanningWeek.objects.filter(pk=week.pk).update(is_locked=True)

        assert not stale.is_locked
        with pytest.raises(PlanningError) as exc:
            make_forecast()
        assert exc.value.code == "LOCKED"
        assert DemandForecast.objects.count() == 0

    @pytest.fixture
    def delete_before_lock(self):
        """Patch a store's week lock so the row is deleted just before it is taken."""
        from freightplan.services.base import lock_week_for_write

        def install(module, model, pk):
            def delete_then_lock(scope, planning_week_id):
                model.objects.filter(pk=pk).delete()
                return lock_week_for_write(scope, planning_week_id)

            return patch(f"freightplan.services.{module}.lock_week_for_write", side_effect=delete_then_lock)

        return install

    def test_update_of_concurrently_deleted_forecast(self, org, make_forecast, delete_before_lock):
        forecast = make_forecast({"day1": 1})

        with delete_before_lock("demand", DemandForecast, forecast.pk):
            with pytest.raises(PlanningError) as exc:
                Planner.update_forecast(org, forecast.pk, DemandForecastPatch({"day1": 2}))

        assert exc.value.code == "NOT_FOUND"

    def test_second_delete_of_forecast_not_found(
        self, org, make_forecast, delete_before_lock, django_capture_on_commit_callbacks
    ):
        forecast = make_forecast({"day1": 1})

        with django_capture_on_commit_callbacks() as callbacks:
            with delete_before_lock("demand", DemandForecast, forecast.pk):
                with pytest.raises(PlanningError) as exc:
                    Planner.delete_forecast(org, forecast.pk)

        assert exc.value.code == "NOT_FOUND"
        assert callbacks == []

    def test_update_of_concurrently_deleted_commitment(self, org, make_commitment, delete_before_lock):
        commitment = make_commitment({"day1": 1})

        with delete_before_lock("supply", SupplyCommitment, commitment.pk):
            with pytest.raises(PlanningError) as exc:
                Planner.update_commitment(org, commitment.pk, SupplyCommitmentPatch({"day1": 2}))

        assert exc.value.code == "NOT_FOUND"

    def test_api_update_of_concurrently_deleted_forecast(self, admin_planner, make_forecast, delete_before_lock):
        forecast = make_forecast({"day1": 1})
        api = APIClient()
        api.force_authenticate(user=admin_planner)

        with delete_before_lock("demand", DemandForecast, forecast.pk):
            response = api.patch(f"/api/freightplan/demand/{forecast.pk}/", {"day1_qty": 2}, format="json")

        assert response.status_code == 404
        assert response.data["error"]["code"] == "NOT_FOUND"


# ═══════════════════════════════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════════════════════════════


class TestConfiguration:
    def test_dict_setting(self):
        assert get_setting("BULK_BATCH_SIZE") == 2

    def test_flat_setting(self, settings):
        settings.FREIGHTPLAN = {}
        settings.FREIGHTPLAN_MAX_PAGE_SIZE = 20

        assert get_setting("MAX_PAGE_SIZE") == 20

    def test_dict_wins_over_flat(self, settings):
        settings.FREIGHTPLAN = {"MAX_PAGE_SIZE": 30}
        settings.FREIGHTPLAN_MAX_PAGE_SIZE = 20

        assert get_setting("MAX_PAGE_SIZE") == 30

    def test_default(self, settings):
        settings.FREIGHTPLAN = {}

        assert get_setting("UPCOMING_PERIODS") == 8

    def test_backend_singleton(self):
        assert get_audit_backend() is get_audit_backend()

        first = get_audit_backend()
        reset_backends()
        assert get_audit_backend() is not first

    def test_error_status_codes(self):
        assert http_status("LOCKED") == 400
        assert http_status("DUPLICATE") == 409
        assert http_status("SOMETHING_ELSE") == 500
        assert PlanningError("NOT_FOUND").as_dict() == {"code": "NOT_FOUND", "message": "Not found"}
        assert PlanningError("LOCKED", planning_week_id=3).as_dict()["details"] == {"planning_week_id": 3}
