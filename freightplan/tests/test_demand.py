"""
Tests for the demand forecast store (freightplan.services.demand).

Covers:
- Route key and total derivation on create/update
- Duplicate prevention (pre-check and unique constraint)
- Lock invariant on every write
- Reference validation (inactive, wrong role, out of tenant)
- Listing with filters and paging
"""

from unittest.mock import patch

import pytest
from django.db import IntegrityError

from freightplan.exceptions import PlanningError
from freightplan.inputs import DemandForecastPatch
from freightplan.models import DemandCategory, DemandForecast, Location
from freightplan.routes import RouteKey
from freightplan.service import Planner


# ═══════════════════════════════════════════════════════════════════
# create_forecast
# ═══════════════════════════════════════════════════════════════════


class TestCreateForecast:
    def test_derives_route_key_and_total(self, make_forecast, demand_user):
        forecast = make_forecast({"day1": 10, "day2": 20}, user=demand_user)

        assert forecast.route_key == RouteKey("Riyadh⇒Jeddah")
        assert isinstance(forecast.route_key, RouteKey)
        assert forecast.day1_qty == 10
        assert forecast.day2_qty == 20
        assert forecast.total_qty == 30
        assert forecast.created_by == demand_user

    def test_week_quantities_used_when_no_days(self, make_forecast):
        forecast = make_forecast({"week1": 4, "week3": 6})

        assert forecast.total_qty == 10

    def test_route_key_uses_normalized_names(self, org, make_forecast):
        pickup = Location.objects.create(organization=org, name="  al   khobar ")
        forecast = make_forecast(pickup_city_id=pickup.pk)

        assert str(forecast.route_key) == "Al Khobar⇒Jeddah"

    def test_truck_types_and_signature(self, make_forecast, flatbed, reefer):
        forecast = make_forecast(truck_type_ids=(reefer.pk, flatbed.pk, reefer.pk))

        assert set(forecast.resource_types.all()) == {flatbed, reefer}
        assert forecast.resource_type_signature == ",".join(
            str(pk) for pk in sorted([flatbed.pk, reefer.pk])
        )

    def test_category(self, org, make_forecast):
        category = DemandCategory.objects.create(organization=org, name="Contract")
        forecast = make_forecast(demand_category_id=category.pk)

        assert forecast.demand_category == category

    def test_requires_truck_type(self, make_forecast):
        with pytest.raises(PlanningError) as exc:
            make_forecast(truck_type_ids=())
        assert exc.value.code == "VALIDATION_ERROR"

    def test_negative_quantity_rejected(self, make_forecast):
        with pytest.raises(PlanningError) as exc:
            make_forecast({"day1": -5})
        assert exc.value.code == "VALIDATION_ERROR"
        assert DemandForecast.objects.count() == 0

    def test_unknown_truck_type(self, make_forecast, flatbed):
        with pytest.raises(PlanningError) as exc:
            make_forecast(truck_type_ids=(flatbed.pk, 999_999))
        assert exc.value.code == "NOT_FOUND"
        assert exc.value.details["ids"] == [999_999]

    def test_supplier_is_not_a_client(self, make_forecast, supplier):
        with pytest.raises(PlanningError) as exc:
            make_forecast(client_id=supplier.pk)
        assert exc.value.code == "NOT_FOUND"

    def test_inactive_city_rejected(self, make_forecast, jeddah):
        jeddah.is_active = False
        jeddah.save()

        with pytest.raises(PlanningError) as exc:
            make_forecast()
        assert exc.value.code == "NOT_FOUND"

    def test_inactive_category_rejected(self, org, make_forecast):
        category = DemandCategory.objects.create(organization=org, name="Spot", is_active=False)

        with pytest.raises(PlanningError) as exc:
            make_forecast(demand_category_id=category.pk)

        assert exc.value.code == "NOT_FOUND"
        assert DemandForecast.objects.count() == 0

    def test_same_client_other_truck_set_allowed(self, make_forecast, flatbed, reefer):
        make_forecast()
        make_forecast(truck_type_ids=(flatbed.pk, reefer.pk))

        assert DemandForecast.objects.count() == 2

    def test_records_history(self, make_forecast):
        forecast = make_forecast({"day1": 1})

        assert forecast.history.count() == 1


class TestDuplicatePrevention:
    def test_duplicate_rejected(self, make_forecast):
        make_forecast({"day1": 10})

        with pytest.raises(PlanningError) as exc:
            make_forecast({"day1": 99})

        assert exc.value.code == "DUPLICATE"
        assert DemandForecast.objects.count() == 1

    def test_truck_type_order_does_not_matter(self, make_forecast, flatbed, reefer):
        make_forecast(truck_type_ids=(flatbed.pk, reefer.pk))

        with pytest.raises(PlanningError) as exc:
            make_forecast(truck_type_ids=(reefer.pk, flatbed.pk))
        assert exc.value.code == "DUPLICATE"

    def test_constraint_violation_reported_as_duplicate(self, make_forecast):
        """An insert racing past the pre-check still fails as DUPLICATE."""
        with patch.object(DemandForecast, "save", side_effect=IntegrityError("unique")):
            with pytest.raises(PlanningError) as exc:
                make_forecast()
        assert exc.value.code == "DUPLICATE"

    def test_database_constraint(self, make_forecast, org, week, aramco, riyadh, jeddah):
        forecast = make_forecast()

        with pytest.raises(IntegrityError):
            DemandForecast.objects.create(
                organization=org,
                planning_week=week,
                party=aramco,
                pickup_location=riyadh,
                dropoff_location=jeddah,
                route_key=forecast.route_key,
                resource_type_signature=forecast.resource_type_signature,
            )


# ═══════════════════════════════════════════════════════════════════
# Lock invariant
# ═══════════════════════════════════════════════════════════════════


class TestLockedWeek:
    def test_create_rejected(self, org, week, make_forecast):
        Planner.lock_period(org, week.pk)

        with pytest.raises(PlanningError) as exc:
            make_forecast({"day1": 10})

        assert exc.value.code == "LOCKED"
        assert DemandForecast.objects.count() == 0

    def test_update_rejected(self, org, week, make_forecast):
        forecast = make_forecast({"day1": 10})
        Planner.lock_period(org, week.pk)

        with pytest.raises(PlanningError) as exc:
            Planner.update_forecast(org, forecast.pk, DemandForecastPatch({"day1": 50}))

        assert exc.value.code == "LOCKED"
        forecast.refresh_from_db()
        assert forecast.day1_qty == 10

    def test_delete_rejected(self, org, week, make_forecast):
        forecast = make_forecast()
        Planner.lock_period(org, week.pk)

        with pytest.raises(PlanningError) as exc:
            Planner.delete_forecast(org, forecast.pk)

        assert exc.value.code == "LOCKED"
        assert DemandForecast.objects.filter(pk=forecast.pk).exists()

    def test_writes_allowed_after_unlock(self, org, week, make_forecast):
        Planner.lock_period(org, week.pk)
        Planner.unlock_period(org, week.pk)

        assert make_forecast({"day1": 1}).total_qty == 1


# ═══════════════════════════════════════════════════════════════════
# update / delete / get
# ═══════════════════════════════════════════════════════════════════


class TestUpdateForecast:
    def test_partial_update_recomputes_total(self, org, make_forecast):
        forecast = make_forecast({"day1": 10, "day2": 20})

        updated = Planner.update_forecast(org, forecast.pk, DemandForecastPatch({"day2": 5, "day3": 7}))

        assert (updated.day1_qty, updated.day2_qty, updated.day3_qty) == (10, 5, 7)
        assert updated.total_qty == 22

    def test_no_change_is_noop(self, org, make_forecast):
        forecast = make_forecast({"day1": 10})

        Planner.update_forecast(org, forecast.pk, DemandForecastPatch({"day1": 10}))

        assert forecast.history.count() == 1

    def test_missing(self, org, week):
        with pytest.raises(PlanningError) as exc:
            Planner.update_forecast(org, 999_999, DemandForecastPatch({"day1": 1}))
        assert exc.value.code == "NOT_FOUND"

    def test_unknown_period(self, org, make_forecast):
        forecast = make_forecast()

        with pytest.raises(PlanningError) as exc:
            Planner.update_forecast(org, forecast.pk, DemandForecastPatch({"day9": 1}))
        assert exc.value.code == "VALIDATION_ERROR"


class TestDeleteForecast:
    def test_delete(self, org, make_forecast):
        forecast = make_forecast()

        assert Planner.delete_forecast(org, forecast.pk) == 0
        assert not DemandForecast.objects.filter(pk=forecast.pk).exists()

    def test_missing(self, org):
        with pytest.raises(PlanningError) as exc:
            Planner.delete_forecast(org, 999_999)
        assert exc.value.code == "NOT_FOUND"


class TestGetForecast:
    def test_loads_relations(self, org, make_forecast, aramco, flatbed):
        forecast = make_forecast()

        loaded = Planner.get_forecast(org, forecast.pk)

        assert loaded.party == aramco
        assert list(loaded.resource_types.all()) == [flatbed]


# ═══════════════════════════════════════════════════════════════════
# list_forecasts
# ═══════════════════════════════════════════════════════════════════


class TestListForecasts:
    @pytest.fixture
    def forecasts(self, make_forecast, sabic, dammam, demand_user):
        return [
            make_forecast({"day1": 10}, user=demand_user),
            make_forecast({"day1": 20}, client_id=sabic.pk),
            make_forecast({"day1": 30}, dropoff_city_id=dammam.pk),
        ]

    def test_all(self, org, forecasts):
        page = Planner.list_forecasts(org)

        assert page.total_count == 3
        assert {f.pk for f in page.items} == {f.pk for f in forecasts}

    def test_filter_by_client(self, org, forecasts, sabic):
        page = Planner.list_forecasts(org, client_id=sabic.pk)

        assert [f.party.name for f in page.items] == ["SABIC"]

    def test_filter_by_route_key_normalizes(self, org, forecasts):
        page = Planner.list_forecasts(org, route_key="riyadh⇒dammam")

        assert page.total_count == 1
        assert page.items[0].dropoff_location.name == "Dammam"

    def test_filter_by_creator(self, org, forecasts, demand_user):
        page = Planner.list_forecasts(org, created_by_id=demand_user.pk)

        assert page.total_count == 1

    def test_paging(self, org, forecasts):
        page = Planner.list_forecasts(org, page=2, page_size=2)

        assert len(page.items) == 1
        assert page.total_pages == 2
        assert page.has_previous_page
        assert not page.has_next_page

    def test_relations_loaded_in_bulk(self, org, forecasts, django_assert_max_num_queries):
        with django_assert_max_num_queries(7):
            page = Planner.list_forecasts(org)
            for forecast in page.items:
                forecast.party.name
                forecast.pickup_location.name
                forecast.dropoff_location.name
                list(forecast.resource_types.all())

    def test_other_tenant_sees_nothing(self, other_org, forecasts):
        assert Planner.list_forecasts(other_org).total_count == 0

