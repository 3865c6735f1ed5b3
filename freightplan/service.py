"""
Freightplan Service - Thin facade over the service mixins.

Usage:
    from freightplan import planner, PlanningError
    from freightplan.inputs import DemandForecastInput

    week = planner.period_for_date(org)
    forecast = planner.create_forecast(
        org,
        DemandForecastInput(
            planning_week_id=week.pk,
            client_id=aramco.pk,
            pickup_city_id=riyadh.pk,
            dropoff_city_id=jeddah.pk,
            truck_type_ids=(flatbed.pk,),
            quantities={"day1": 10, "day2": 20},
        ),
        user=planner_user,
    )

    for target in planner.compute_gaps(org, week.pk):
        print(target.route_key, target.gap["total"], target.status)

    planner.lock_period(org, week.pk)

Every method takes the tenant first: an Organization, a Session, a
TenantScope or an organization id.
"""

from freightplan.services import (
    BulkOperations,
    CascadeRules,
    DemandStore,
    GapEngine,
    PlanningPeriods,
    SupplyStore,
)


class Planner(
    PlanningPeriods,
    DemandStore,
    SupplyStore,
    GapEngine,
    CascadeRules,
    BulkOperations,
):
    """
    Main API for Freightplan.

    All operations are classmethods; use the class directly.
    """
