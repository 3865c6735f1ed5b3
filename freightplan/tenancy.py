"""
Tenant scoping.

Every query and mutation goes through a TenantScope: reads are filtered by
organization, fetched rows are checked for ownership before use, and new
rows are stamped with the scope's organization.

    scope = TenantScope.of(organization)
    forecasts = scope.filter(DemandForecast, planning_week_id=week_id)
    forecast = scope.get(DemandForecast, forecast_id, label="Forecast")
"""

from __future__ import annotations

import logging

from django.db import models

from freightplan.exceptions import PlanningError

logger = logging.getLogger(__name__)


class TenantScope:
    """Organization-bound query guard."""

    def __init__(self, organization_id: int, organization=None):
        if not organization_id:
            raise PlanningError("UNAUTHORIZED", "No organization selected")
        self.organization_id = organization_id
        self._organization = organization

    @classmethod
    def of(cls, tenant) -> TenantScope:
        """Build a scope from a TenantScope, Organization, Session or raw id."""
        if isinstance(tenant, TenantScope):
            return tenant

        from freightplan.models import Organization

        if isinstance(tenant, Organization):
            return cls(tenant.pk, organization=tenant)
        organization_id = getattr(tenant, "organization_id", tenant)
        return cls(organization_id)

    @property
    def organization(self):
        if self._organization is None:
            from freightplan.models import Organization

            self._organization = Organization.objects.get(pk=self.organization_id)
        return self._organization

    def __repr__(self) -> str:
        return f"TenantScope(organization_id={self.organization_id})"

    # ── Reads ──

    def filter(self, source, **lookups) -> models.QuerySet:
        """Queryset restricted to this tenant."""
        queryset = source if isinstance(source, models.QuerySet) else source.objects.all()
        return queryset.filter(organization_id=self.organization_id, **lookups)

    def get(self, source, pk, *, label: str = "", for_update: bool = False):
        """
        Fetch a row the caller wants to act on.

        Raises NOT_FOUND when the row does not exist and FORBIDDEN when it
        belongs to another organization.
        """
        queryset = source if isinstance(source, models.QuerySet) else source.objects.all()
        if for_update:
            queryset = queryset.select_for_update()

        label = label or queryset.model._meta.verbose_name.title()
        obj = queryset.filter(pk=pk).first()
        if obj is None:
            raise PlanningError("NOT_FOUND", f"{label} not found", id=pk)

        self.verify(obj, label=label)
        return obj

    def require(self, source, pk, *, label: str = "", **lookups):
        """
        Fetch a row referenced by an input payload.

        Out-of-tenant references are indistinguishable from missing ones
        (NOT_FOUND).
        """
        queryset = self.filter(source, pk=pk, **lookups)
        label = label or queryset.model._meta.verbose_name.title()
        obj = queryset.first()
        if obj is None:
            raise PlanningError("NOT_FOUND", f"{label} not found", id=pk)
        return obj

    def verify(self, obj, *, label: str = "Entity") -> None:
        """Raise FORBIDDEN if obj belongs to another organization."""
        if obj.organization_id != self.organization_id:
            logger.warning(
                f"Cross-tenant access denied for {label} {obj.pk}",
                extra={
                    "organization": self.organization_id,
                    "owner": obj.organization_id,
                    "entity": label,
                    "entity_id": obj.pk,
                },
            )
            raise PlanningError(
                "FORBIDDEN", "Access denied: entity belongs to a different organization"
            )

    # ── Writes ──

    def data(self, **fields) -> dict:
        """Stamp new-row data with this tenant."""
        return {"organization_id": self.organization_id, **fields}
