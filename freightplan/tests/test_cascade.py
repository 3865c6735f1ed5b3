"""
Tests for the cascade rule (freightplan.services.cascade).

Commitments live only while their route has demand in the same week.
"""

from datetime import date
from unittest.mock import patch

import pytest

from freightplan.exceptions import PlanningError
from freightplan.models import PlanningWeek, SupplyCommitment
from freightplan.service import Planner


class TestCascadeOnForecastDelete:
    def test_last_forecast_removes_commitments(self, org, make_forecast, make_commitment):
        forecast = make_forecast({"day1": 10})
        make_commitment({"day1": 4})
        make_commitment({"day1": 2})

        cascaded = Planner.delete_forecast(org, forecast.pk)

        assert cascaded == 2
        assert SupplyCommitment.objects.count() == 0

    def test_other_forecast_on_route_keeps_commitments(
        self, org, make_forecast, make_commitment, sabic
    ):
        forecast = make_forecast({"day1": 10})
        make_forecast({"day1": 5}, client_id=sabic.pk)
        make_commitment({"day1": 4})

        cascaded = Planner.delete_forecast(org, forecast.pk)

        assert cascaded == 0
        assert SupplyCommitment.objects.count() == 1

    def test_other_routes_untouched(self, org, make_forecast, make_commitment):
        forecast = make_forecast()
        make_commitment(route_key="Jeddah⇒Riyadh")

        Planner.delete_forecast(org, forecast.pk)

        assert SupplyCommitment.objects.count() == 1

    def test_other_weeks_untouched(self, org, week, make_forecast, make_commitment):
        next_week = PlanningWeek.objects.create(
            organization=org,
            week_start=date(2026, 3, 8),
            week_end=date(2026, 3, 14),
            week_number=11,
            year=2026,
        )
        forecast = make_forecast()
        make_commitment(planning_week_id=next_week.pk)

        Planner.delete_forecast(org, forecast.pk)

        assert SupplyCommitment.objects.filter(planning_week=next_week).count() == 1


class TestCleanupOrphanedCommitments:
    def test_removes_only_orphans(self, org, week, make_forecast, make_commitment):
        make_forecast()
        kept = make_commitment()
        make_commitment(route_key="Jeddah⇒Dammam")
        make_commitment(route_key="Dammam⇒Jeddah")

        deleted = Planner.cleanup_orphaned_commitments(org, week.pk)

        assert deleted == 2
        assert list(SupplyCommitment.objects.values_list("pk", flat=True)) == [kept.pk]

    def test_nothing_to_clean(self, org, week):
        assert Planner.cleanup_orphaned_commitments(org, week.pk) == 0

    def test_other_tenant_week_forbidden(self, other_org, week):
        with pytest.raises(PlanningError) as exc:
            Planner.cleanup_orphaned_commitments(other_org, week.pk)
        assert exc.value.code == "FORBIDDEN"

    def test_locked_week_rejected(self, org, week, make_commitment):
        make_commitment(route_key="Jeddah⇒Dammam")
        Planner.lock_period(org, week.pk)

        with pytest.raises(PlanningError) as exc:
            Planner.cleanup_orphaned_commitments(org, week.pk)

        assert exc.value.code == "LOCKED"
        assert SupplyCommitment.objects.count() == 1

    def test_takes_week_row_lock(self, org, week, make_commitment):
        from freightplan.services.base import lock_week_for_write

        make_commitment(route_key="Jeddah⇒Dammam")
        with patch(
            "freightplan.services.cascade.lock_week_for_write", wraps=lock_week_for_write
        ) as locked:
            Planner.cleanup_orphaned_commitments(org, week.pk)

        locked.assert_called_once()
        assert locked.call_args.args[1] == week.pk
