"""
Shared fixtures for Freightplan tests.

One organization ("acme", weekly cycle, weeks starting Sunday) with a
planner per role, three cities, two clients, two suppliers, two truck
types and one open planning week (Mar 1 - Mar 7, 2026). A second
organization ("globex") exists for tenant isolation checks.
"""

from datetime import date

import pytest
from django.contrib.auth import get_user_model

from freightplan.conf import reset_backends
from freightplan.inputs import DemandForecastInput, SupplyCommitmentInput
from freightplan.models import (
    Location,
    Membership,
    Organization,
    Party,
    PartyRole,
    PlanningWeek,
    ResourceType,
    Role,
)
from freightplan.service import Planner

User = get_user_model()


@pytest.fixture(autouse=True)
def _fresh_backends():
    reset_backends()
    yield
    reset_backends()


# ═══════════════════════════════════════════════════════════════════
# Tenants and users
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def org(db):
    return Organization.objects.create(name="Acme Freight", slug="acme")


@pytest.fixture
def other_org(db):
    return Organization.objects.create(name="Globex Logistics", slug="globex")


def _member(username, organization, role):
    user = User.objects.create_user(username=username, password="test123")
    Membership.objects.create(user=user, organization=organization, role=role)
    return user


@pytest.fixture
def demand_user(org):
    return _member("demand", org, Role.DEMAND_PLANNER)


@pytest.fixture
def supply_user(org):
    return _member("supply", org, Role.SUPPLY_PLANNER)


@pytest.fixture
def admin_planner(org):
    return _member("admin", org, Role.ADMIN)


@pytest.fixture
def other_admin(other_org):
    return _member("globex_admin", other_org, Role.ADMIN)


# ═══════════════════════════════════════════════════════════════════
# Repositories
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def riyadh(org):
    return Location.objects.create(organization=org, name="Riyadh", region="Central")


@pytest.fixture
def jeddah(org):
    return Location.objects.create(organization=org, name="Jeddah", region="Western")


@pytest.fixture
def dammam(org):
    return Location.objects.create(organization=org, name="Dammam", region="Eastern")


@pytest.fixture
def aramco(org):
    return Party.objects.create(organization=org, name="Aramco", party_role=PartyRole.CUSTOMER)


@pytest.fixture
def sabic(org):
    return Party.objects.create(organization=org, name="SABIC", party_role=PartyRole.CUSTOMER)


@pytest.fixture
def supplier(org):
    return Party.objects.create(organization=org, name="Fast Trucks", party_role=PartyRole.SUPPLIER)


@pytest.fixture
def supplier_b(org):
    return Party.objects.create(organization=org, name="Desert Haulers", party_role=PartyRole.SUPPLIER)


@pytest.fixture
def flatbed(org):
    return ResourceType.objects.create(organization=org, name="Flatbed")


@pytest.fixture
def reefer(org):
    return ResourceType.objects.create(organization=org, name="Reefer")


# ═══════════════════════════════════════════════════════════════════
# Planning data
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def week(org):
    return PlanningWeek.objects.create(
        organization=org,
        week_start=date(2026, 3, 1),
        week_end=date(2026, 3, 7),
        week_number=10,
        year=2026,
    )


@pytest.fixture
def make_forecast(org, week, aramco, riyadh, jeddah, flatbed):
    """Create a forecast through the store; defaults to Aramco on Riyadh⇒Jeddah."""

    def make(quantities=None, user=None, **overrides):
        data = {
            "planning_week_id": week.pk,
            "client_id": aramco.pk,
            "pickup_city_id": riyadh.pk,
            "dropoff_city_id": jeddah.pk,
            "truck_type_ids": (flatbed.pk,),
            "quantities": quantities or {},
        }
        data.update(overrides)
        return Planner.create_forecast(org, DemandForecastInput(**data), user=user)

    return make


@pytest.fixture
def make_commitment(org, week, supplier):
    """Create a commitment through the store; defaults to Fast Trucks on Riyadh⇒Jeddah."""

    def make(quantities=None, user=None, **overrides):
        data = {
            "planning_week_id": week.pk,
            "supplier_id": supplier.pk,
            "route_key": "Riyadh⇒Jeddah",
            "quantities": quantities or {},
        }
        data.update(overrides)
        return Planner.create_commitment(org, SupplyCommitmentInput(**data), user=user)

    return make
