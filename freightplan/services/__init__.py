"""
Freightplan Services.

Business logic that doesn't belong in models:
- weeks: resolve, create, lock and unlock planning periods
- demand: demand forecast store
- supply: supply commitment store
- gaps: demand vs supply aggregation
- cascade: commitment cleanup when demand disappears
- bulk: dependency checks and batched repository deletes
"""

from freightplan.services.bulk import BulkDeleteOperation, BulkOperations, BulkState, Decision
from freightplan.services.cascade import CascadeRules
from freightplan.services.demand import DemandStore
from freightplan.services.gaps import GapEngine
from freightplan.services.supply import SupplyStore
from freightplan.services.weeks import PlanningPeriods

__all__ = [
    "PlanningPeriods",
    "DemandStore",
    "SupplyStore",
    "GapEngine",
    "CascadeRules",
    "BulkOperations",
    "BulkDeleteOperation",
    "BulkState",
    "Decision",
]
