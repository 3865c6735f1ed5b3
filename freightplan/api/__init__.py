"""
Freightplan REST API.

Provides DRF ViewSets for:
- Demand forecasts (CRUD)
- Supply commitments (CRUD + gaps, orphan cleanup)
- Planning weeks (upcoming, lock, unlock)
- Repositories (list, dependency check, bulk delete)
"""
