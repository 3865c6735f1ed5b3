"""
Supply commitment store -- create, update, delete, get, list.

Commitments reference a route by route key only. Several commitments may
share the same supplier and route; there is no uniqueness rule.

All methods are @classmethod so the mixin can be composed into Planner
without instantiation.
"""

import logging

from django.db import transaction

from freightplan.inputs import SupplyCommitmentInput, SupplyCommitmentPatch
from freightplan.models import Party, PartyRole, PlanningWeek, ResourceType, SupplyCommitment
from freightplan.quantities import clean_quantities
from freightplan.results import Page
from freightplan.routes import RouteKey
from freightplan.services.base import apply_quantities, lock_week_for_write, page_window
from freightplan.signals import (
    commitment_created,
    commitment_deleted,
    commitment_updated,
    send_on_commit,
)
from freightplan.tenancy import TenantScope

logger = logging.getLogger(__name__)


class SupplyStore:
    """Supply commitment operations."""

    @classmethod
    def create_commitment(cls, tenant, data: SupplyCommitmentInput, user=None) -> SupplyCommitment:
        """
        Commit supplier capacity to a route.

        Raises:
            PlanningError(VALIDATION_ERROR): malformed route key or quantities
            PlanningError(NOT_FOUND): week, supplier or truck type absent or
                outside the organization
            PlanningError(LOCKED): the planning week is locked
        """
        scope = TenantScope.of(tenant)
        route_key = RouteKey.parse(data.route_key)
        quantities = clean_quantities(data.quantities)

        with transaction.atomic():
            week = lock_week_for_write(scope, data.planning_week_id)
            supplier = scope.require(
                Party, data.supplier_id, label="Supplier", party_role=PartyRole.SUPPLIER, is_active=True
            )
            resource_type = None
            if data.truck_type_id:
                resource_type = scope.require(
                    ResourceType, data.truck_type_id, label="Truck type", is_active=True
                )

            commitment = SupplyCommitment(
                **scope.data(
                    planning_week=week,
                    party=supplier,
                    route_key=route_key,
                    resource_type=resource_type,
                    created_by=user,
                ),
                **{f"{period}_committed": qty for period, qty in quantities.items()},
            )
            commitment.recompute_total()
            commitment.save()

            send_on_commit(commitment_created, sender=SupplyCommitment, commitment=commitment, user=user)

        logger.info(
            f"Created commitment {commitment.pk} on {route_key}",
            extra={
                "organization": scope.organization_id,
                "commitment": commitment.pk,
                "route_key": str(route_key),
                "supplier": supplier.pk,
                "total_committed": commitment.total_committed,
            },
        )

        return commitment

    @classmethod
    def update_commitment(
        cls, tenant, commitment_id: int, patch: SupplyCommitmentPatch, user=None
    ) -> SupplyCommitment:
        """Change the committed quantities of the periods present in patch."""
        scope = TenantScope.of(tenant)
        quantities = clean_quantities(patch.quantities)

        commitment = scope.get(SupplyCommitment, commitment_id, label="Commitment")

        with transaction.atomic():
            lock_week_for_write(scope, commitment.planning_week_id)
            commitment = scope.get(
                SupplyCommitment, commitment_id, label="Commitment", for_update=True
            )

            changed = apply_quantities(commitment, quantities, "committed")
            if changed:
                old_total = commitment.total_committed
                if commitment.recompute_total() != old_total:
                    changed.append("total_committed")
                commitment.save(update_fields=[*changed, "updated_at"])
                send_on_commit(
                    commitment_updated,
                    sender=SupplyCommitment,
                    commitment=commitment,
                    user=user,
                    changed_fields=changed,
                )

        if changed:
            logger.info(
                f"Updated commitment {commitment.pk}",
                extra={
                    "organization": scope.organization_id,
                    "commitment": commitment.pk,
                    "changed_fields": changed,
                    "total_committed": commitment.total_committed,
                },
            )

        return commitment

    @classmethod
    def delete_commitment(cls, tenant, commitment_id: int, user=None) -> None:
        scope = TenantScope.of(tenant)

        commitment = scope.get(SupplyCommitment, commitment_id, label="Commitment")

        with transaction.atomic():
            week = lock_week_for_write(scope, commitment.planning_week_id)
            commitment = scope.get(
                SupplyCommitment, commitment_id, label="Commitment", for_update=True
            )
            route_key = commitment.route_key
            commitment.delete()

            send_on_commit(
                commitment_deleted,
                sender=SupplyCommitment,
                commitment_id=commitment_id,
                route_key=route_key,
                planning_week_id=week.pk,
                user=user,
            )

        logger.info(
            f"Deleted commitment {commitment_id} on {route_key}",
            extra={"organization": scope.organization_id, "commitment": commitment_id},
        )

    @classmethod
    def get_commitment(cls, tenant, commitment_id: int) -> SupplyCommitment:
        scope = TenantScope.of(tenant)
        queryset = SupplyCommitment.objects.select_related("party", "resource_type", "planning_week")
        return scope.get(queryset, commitment_id, label="Commitment")

    @classmethod
    def list_commitments(
        cls,
        tenant,
        planning_week_id: int | None = None,
        supplier_id: int | None = None,
        route_key: str | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> Page:
        """List commitments, one page at a time, relations loaded in bulk."""
        scope = TenantScope.of(tenant)
        page, page_size = page_window(page, page_size)

        queryset = scope.filter(SupplyCommitment)
        if planning_week_id:
            queryset = queryset.filter(planning_week_id=planning_week_id)
        if supplier_id:
            queryset = queryset.filter(party_id=supplier_id)
        if route_key:
            queryset = queryset.filter(route_key=RouteKey.parse(route_key))

        total_count = queryset.count()
        offset = (page - 1) * page_size
        commitments = list(queryset.order_by("route_key", "pk")[offset : offset + page_size])

        parties = Party.objects.in_bulk({c.party_id for c in commitments})
        resource_types = ResourceType.objects.in_bulk(
            {c.resource_type_id for c in commitments if c.resource_type_id}
        )
        weeks = PlanningWeek.objects.in_bulk({c.planning_week_id for c in commitments})

        for commitment in commitments:
            commitment.party = parties[commitment.party_id]
            commitment.planning_week = weeks[commitment.planning_week_id]
            if commitment.resource_type_id:
                commitment.resource_type = resource_types[commitment.resource_type_id]

        return Page(items=commitments, page=page, page_size=page_size, total_count=total_count)
