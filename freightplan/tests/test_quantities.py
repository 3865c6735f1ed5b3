"""
Tests for quantity helpers (freightplan.quantities) and paging bounds.
"""

import pytest

from freightplan.exceptions import PlanningError
from freightplan.quantities import (
    FORECAST_DAY_FIELDS,
    FORECAST_WEEK_FIELDS,
    clean_quantities,
    derive_total,
    total_from_fields,
)
from freightplan.results import Page
from freightplan.services.base import page_window


class TestDeriveTotal:
    def test_day_sum(self):
        assert derive_total([10, 20, 0, 0, 0, 0, 5], [0] * 5) == 35

    def test_week_sum_when_days_empty(self):
        assert derive_total([0] * 7, [4, 4, 4, 4, 0]) == 16

    def test_days_win_over_weeks(self):
        assert derive_total([1, 0, 0, 0, 0, 0, 0], [100, 0, 0, 0, 0]) == 1

    def test_none_counts_as_zero(self):
        assert derive_total([None, 3], [None]) == 3

    def test_all_zero(self):
        assert derive_total([0] * 7, [0] * 5) == 0

    def test_from_fields(self):
        values = {"day1_qty": 10, "day2_qty": 20, "week1_qty": 99}
        assert total_from_fields(values, FORECAST_DAY_FIELDS, FORECAST_WEEK_FIELDS) == 30


class TestCleanQuantities:
    def test_valid(self):
        assert clean_quantities({"day1": 10, "week5": 0}) == {"day1": 10, "week5": 0}

    def test_none_is_empty(self):
        assert clean_quantities(None) == {}

    @pytest.mark.parametrize(
        "values",
        [{"day8": 1}, {"day1": -1}, {"day1": 1.5}, {"day1": "3"}, {"day1": True}],
    )
    def test_invalid(self, values):
        with pytest.raises(PlanningError) as exc:
            clean_quantities(values)
        assert exc.value.code == "VALIDATION_ERROR"


class TestPaging:
    def test_defaults(self):
        assert page_window(None, None) == (1, 50)

    def test_clamped_to_max(self):
        assert page_window(2, 10_000) == (2, 500)

    def test_rejects_zero_page(self):
        with pytest.raises(PlanningError):
            page_window(-1, 10)

    def test_rejects_garbage(self):
        with pytest.raises(PlanningError):
            page_window("x", 10)

    def test_page_metadata(self):
        page = Page(items=[], page=2, page_size=10, total_count=25)
        assert page.pagination() == {
            "page": 2,
            "page_size": 10,
            "total_count": 25,
            "total_pages": 3,
            "has_next_page": True,
            "has_previous_page": True,
        }

    def test_empty_page(self):
        page = Page(items=[], page=1, page_size=10, total_count=0)
        assert page.total_pages == 0
        assert not page.has_next_page
        assert not page.has_previous_page
