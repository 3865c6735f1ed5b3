"""
Tests for route keys (freightplan.routes).
"""

import pytest

from freightplan.exceptions import PlanningError
from freightplan.routes import SEPARATOR, RouteKey, normalize_city_name


class TestNormalizeCityName:
    def test_trims_and_title_cases(self):
        assert normalize_city_name("  riyadh ") == "Riyadh"

    def test_collapses_inner_whitespace(self):
        assert normalize_city_name("al   khobar") == "Al Khobar"

    def test_none_is_empty(self):
        assert normalize_city_name(None) == ""


class TestEncode:
    def test_canonical_form(self):
        assert RouteKey.encode("Riyadh", "Jeddah").value == f"Riyadh{SEPARATOR}Jeddah"

    def test_deterministic_across_spelling(self):
        """Equal cities give equal keys regardless of case and padding."""
        assert RouteKey.encode("riyadh", "  JEDDAH ") == RouteKey.encode("Riyadh", "Jeddah")

    def test_direction_sensitive(self):
        assert RouteKey.encode("Riyadh", "Jeddah") != RouteKey.encode("Jeddah", "Riyadh")

    def test_same_city_both_ends(self):
        key = RouteKey.encode("Dammam", "Dammam")
        assert key.decode() == ("Dammam", "Dammam")

    @pytest.mark.parametrize("pickup,dropoff", [("", "Jeddah"), ("Riyadh", "   "), (None, "Jeddah")])
    def test_missing_city_rejected(self, pickup, dropoff):
        with pytest.raises(PlanningError) as exc:
            RouteKey.encode(pickup, dropoff)
        assert exc.value.code == "VALIDATION_ERROR"

    def test_separator_in_name_rejected(self):
        with pytest.raises(PlanningError) as exc:
            RouteKey.encode(f"Riyadh{SEPARATOR}X", "Jeddah")
        assert exc.value.code == "VALIDATION_ERROR"


class TestDecode:
    def test_symmetry(self):
        """decode(encode(a, b)) returns the normalized names."""
        assert RouteKey.encode(" riyadh", "jeddah ").decode() == ("Riyadh", "Jeddah")

    def test_properties(self):
        key = RouteKey.encode("Riyadh", "Jeddah")
        assert key.pickup == "Riyadh"
        assert key.dropoff == "Jeddah"
        assert str(key) == "Riyadh⇒Jeddah"


class TestParse:
    def test_parse_normalizes(self):
        assert RouteKey.parse("riyadh⇒jeddah") == RouteKey.encode("Riyadh", "Jeddah")

    @pytest.mark.parametrize("raw", ["Riyadh-Jeddah", "A⇒B⇒C", "", None])
    def test_malformed(self, raw):
        with pytest.raises(PlanningError) as exc:
            RouteKey.parse(raw)
        assert exc.value.code == "VALIDATION_ERROR"

    def test_ordering(self):
        keys = [RouteKey("Riyadh⇒Jeddah"), RouteKey("Dammam⇒Riyadh"), RouteKey("Jeddah⇒Riyadh")]
        assert [str(k) for k in sorted(keys)] == ["Dammam⇒Riyadh", "Jeddah⇒Riyadh", "Riyadh⇒Jeddah"]
