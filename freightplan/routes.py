"""
Route keys.

A route key identifies a directed (pickup → dropoff) city pair:

    RouteKey.encode("riyadh", "  JEDDAH ")   # RouteKey('Riyadh⇒Jeddah')

Forecasts and commitments are "the same route" iff their route keys are
equal. Supply commitments join demand by route key, not by foreign key.
"""

from __future__ import annotations

from dataclasses import dataclass

from freightplan.exceptions import PlanningError

SEPARATOR = "⇒"


def normalize_city_name(name: str) -> str:
    """Trim, collapse inner whitespace and title-case a city name."""
    return " ".join((name or "").split()).title()


@dataclass(frozen=True, order=True)
class RouteKey:
    """Canonical, direction-sensitive route identifier."""

    value: str

    @classmethod
    def encode(cls, pickup_name: str, dropoff_name: str) -> RouteKey:
        pickup = normalize_city_name(pickup_name)
        dropoff = normalize_city_name(dropoff_name)

        if not pickup or not dropoff:
            raise PlanningError(
                "VALIDATION_ERROR",
                "Pickup and dropoff city names are required",
                pickup=pickup_name,
                dropoff=dropoff_name,
            )
        if SEPARATOR in pickup or SEPARATOR in dropoff:
            raise PlanningError(
                "VALIDATION_ERROR",
                f"City names cannot contain '{SEPARATOR}'",
                pickup=pickup_name,
                dropoff=dropoff_name,
            )

        return cls(f"{pickup}{SEPARATOR}{dropoff}")

    @classmethod
    def parse(cls, raw: str) -> RouteKey:
        """Validate an incoming route key string and return its canonical form."""
        parts = (raw or "").split(SEPARATOR)
        if len(parts) != 2:
            raise PlanningError(
                "VALIDATION_ERROR",
                f"Route key must look like 'Pickup{SEPARATOR}Dropoff'",
                route_key=raw,
            )
        return cls.encode(*parts)

    def decode(self) -> tuple[str, str]:
        """Return (pickup, dropoff) display names. Never use for equality."""
        pickup, _, dropoff = self.value.partition(SEPARATOR)
        return pickup, dropoff

    @property
    def pickup(self) -> str:
        return self.decode()[0]

    @property
    def dropoff(self) -> str:
        return self.decode()[1]

    def __str__(self) -> str:
        return self.value
