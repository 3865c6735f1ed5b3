"""
Freightplan Models.

Core models for demand/supply planning:
- Organization: tenant (isolation boundary)
- Membership: user role inside an organization
- PlanningWeek: planning period, lockable
- Location, Party, ResourceType, DemandCategory: tenant repositories
- DemandForecast: forecasted loads per client/route/truck type
- SupplyCommitment: supplier capacity committed to a route
"""

from freightplan.models.commitment import SupplyCommitment
from freightplan.models.fields import RouteKeyField
from freightplan.models.forecast import DemandForecast, resource_type_signature
from freightplan.models.organization import (
    Membership,
    Organization,
    PlanningCycle,
    Role,
    WeekStartDay,
)
from freightplan.models.repository import (
    DemandCategory,
    Location,
    Party,
    PartyRole,
    ResourceType,
)
from freightplan.models.week import PlanningWeek

__all__ = [
    "Organization",
    "Membership",
    "PlanningCycle",
    "WeekStartDay",
    "Role",
    "PlanningWeek",
    "Location",
    "Party",
    "PartyRole",
    "ResourceType",
    "DemandCategory",
    "DemandForecast",
    "SupplyCommitment",
    "RouteKeyField",
    "resource_type_signature",
]
