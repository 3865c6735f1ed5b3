"""
Bulk operations on repository entities (locations, clients, suppliers,
truck types, demand categories).

Deleting a set of entities is a small state machine:

    op = BulkDeleteOperation(org, "clients", [1, 2, 3])
    deps = op.check()                     # CHECKING -> AWAITING_CONFIRMATION
    op.confirm(Decision.SKIP_DEPENDENCIES)  # -> DELETING (or CANCELLED)
    for progress in op.run():             # one item per committed batch
        print(progress.completed, progress.total)
    op.result                             # BulkResult, state DONE

Each batch commits in its own transaction, so a failure loses only that
batch. Retry by resubmitting the ids reported in result.errors.
Deletion is soft: rows are kept with is_active=False.
"""

import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass, field

from django.db import DatabaseError, models, transaction
from django.db.models import Count
from django.utils.translation import gettext_lazy as _

from freightplan.conf import get_setting
from freightplan.exceptions import PlanningError
from freightplan.models import (
    DemandCategory,
    DemandForecast,
    Location,
    Party,
    PartyRole,
    ResourceType,
    SupplyCommitment,
)
from freightplan.results import BulkError, BulkProgress, BulkResult, DependencyInfo
from freightplan.tenancy import TenantScope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntityKind:
    """How a repository entity is stored and what references it."""

    model: type
    lookups: dict = field(default_factory=dict)
    forecast_fields: tuple[str, ...] = ()
    commitment_field: str | None = None


ENTITIES = {
    "locations": EntityKind(
        Location, forecast_fields=("pickup_location", "dropoff_location")
    ),
    "clients": EntityKind(
        Party, {"party_role": PartyRole.CUSTOMER}, forecast_fields=("party",)
    ),
    "suppliers": EntityKind(
        Party, {"party_role": PartyRole.SUPPLIER}, commitment_field="party"
    ),
    "truck-types": EntityKind(
        ResourceType, forecast_fields=("resource_types",), commitment_field="resource_type"
    ),
    "demand-categories": EntityKind(DemandCategory, forecast_fields=("demand_category",)),
}


def entity_kind(entity: str) -> EntityKind:
    try:
        return ENTITIES[entity]
    except KeyError:
        raise PlanningError(
            "VALIDATION_ERROR", f"Unknown entity '{entity}'", allowed=sorted(ENTITIES)
        )


def _count_by(queryset, field_name, ids) -> dict[int, int]:
    rows = (
        queryset.filter(**{f"{field_name}__in": ids})
        .values(field_name)
        .annotate(n=Count("pk", distinct=True))
    )
    return {row[field_name]: row["n"] for row in rows}


class BulkState(models.TextChoices):
    CHECKING = "checking", _("Checking")
    AWAITING_CONFIRMATION = "awaiting_confirmation", _("Awaiting confirmation")
    DELETING = "deleting", _("Deleting")
    DONE = "done", _("Done")
    CANCELLED = "cancelled", _("Cancelled")


class Decision(models.TextChoices):
    DELETE_ALL = "delete_all", _("Delete all")
    SKIP_DEPENDENCIES = "skip_dependencies", _("Skip entities in use")
    CANCEL = "cancel", _("Cancel")


class BulkOperations:
    """Repository listing and bulk operations."""

    @classmethod
    def list_entities(cls, tenant, entity: str, include_inactive: bool = False) -> models.QuerySet:
        kind = entity_kind(entity)
        queryset = TenantScope.of(tenant).filter(kind.model, **kind.lookups)
        if not include_inactive:
            queryset = queryset.filter(is_active=True)
        return queryset

    @classmethod
    def check_dependencies_batch(cls, tenant, entity: str, ids) -> dict[int, DependencyInfo]:
        """
        Count the forecasts and commitments referencing each id.

        Ids that do not exist in the organization are left out of the
        result. Runs one aggregate query per referencing relation.
        """
        scope = TenantScope.of(tenant)
        kind = entity_kind(entity)
        ids = list(dict.fromkeys(int(pk) for pk in ids))

        names = dict(
            scope.filter(kind.model, pk__in=ids, **kind.lookups).values_list("pk", "name")
        )
        found = list(names)

        forecast_counts: dict[int, int] = {}
        for field_name in kind.forecast_fields:
            counts = _count_by(scope.filter(DemandForecast), field_name, found)
            for pk, n in counts.items():
                forecast_counts[pk] = forecast_counts.get(pk, 0) + n

        commitment_counts = {}
        if kind.commitment_field:
            commitment_counts = _count_by(scope.filter(SupplyCommitment), kind.commitment_field, found)

        return {
            pk: DependencyInfo(
                id=pk,
                name=names[pk],
                forecast_count=forecast_counts.get(pk, 0),
                commitment_count=commitment_counts.get(pk, 0),
            )
            for pk in found
        }

    @classmethod
    def bulk_delete(
        cls, tenant, entity: str, ids, skip_dependencies: bool = False, user=None
    ) -> BulkResult:
        """Check, confirm and run a bulk delete in one call."""
        operation = BulkDeleteOperation(tenant, entity, ids, user=user)
        operation.check()
        operation.confirm(Decision.SKIP_DEPENDENCIES if skip_dependencies else Decision.DELETE_ALL)
        return operation.execute()


class BulkDeleteOperation:
    """
    One bulk soft-delete, driven step by step.

    Args:
        tenant: Organization (or scope) owning the entities
        entity: "locations", "clients", "suppliers", "truck-types" or
            "demand-categories"
        ids: Entity ids to delete
        batch_size: Ids per transaction (default: BULK_BATCH_SIZE setting)
        clock: Monotonic clock used for the remaining-time estimate
        user: Acting user, for logging
    """

    def __init__(self, tenant, entity, ids, batch_size=None, clock=time.monotonic, user=None):
        self.scope = TenantScope.of(tenant)
        self.entity = entity
        self.kind = entity_kind(entity)
        self.ids = list(dict.fromkeys(int(pk) for pk in ids))
        self.batch_size = batch_size or get_setting("BULK_BATCH_SIZE")
        self.clock = clock
        self.user = user

        self.state = BulkState.CHECKING
        self.dependencies: dict[int, DependencyInfo] = {}
        self.active_ids: set[int] = set()
        self.to_delete: list[int] = []
        self.result = BulkResult()

    def __repr__(self) -> str:
        return f"<BulkDeleteOperation {self.entity} x{len(self.ids)} [{self.state}]>"

    def _require_state(self, expected: BulkState) -> None:
        if self.state != expected:
            raise PlanningError(
                "VALIDATION_ERROR",
                f"Bulk delete is {self.state}, expected {expected}",
                state=self.state,
                expected=expected,
            )

    @property
    def needs_confirmation(self) -> bool:
        """True if any entity is still referenced by forecasts or commitments."""
        return any(info.has_dependencies for info in self.dependencies.values())

    def check(self) -> dict[int, DependencyInfo]:
        self._require_state(BulkState.CHECKING)
        self.dependencies = BulkOperations.check_dependencies_batch(self.scope, self.entity, self.ids)
        self.active_ids = set(
            self.scope.filter(self.kind.model, pk__in=list(self.dependencies), is_active=True)
            .values_list("pk", flat=True)
        )
        self.state = BulkState.AWAITING_CONFIRMATION
        return self.dependencies

    def confirm(self, decision: str) -> None:
        """
        Choose what to delete.

        DELETE_ALL deletes every active id found in the organization,
        SKIP_DEPENDENCIES only those nothing references. CANCEL ends the
        operation without deleting anything.
        """
        self._require_state(BulkState.AWAITING_CONFIRMATION)

        if decision == Decision.CANCEL:
            self.state = BulkState.CANCELLED
            logger.info(f"Bulk delete of {self.entity} cancelled", extra={"ids": len(self.ids)})
            return

        if decision == Decision.SKIP_DEPENDENCIES:
            self.to_delete = [
                pk
                for pk, info in self.dependencies.items()
                if pk in self.active_ids and not info.has_dependencies
            ]
        elif decision == Decision.DELETE_ALL:
            self.to_delete = [pk for pk in self.dependencies if pk in self.active_ids]
        else:
            raise PlanningError("VALIDATION_ERROR", f"Unknown decision '{decision}'")

        # Unknown, out-of-tenant, inactive and (if asked) referenced ids are skipped
        self.result.skipped = len(self.ids) - len(self.to_delete)
        self.state = BulkState.DELETING

    def _delete_batch(self, batch: list[int]) -> int:
        with transaction.atomic():
            return self.scope.filter(
                self.kind.model, pk__in=batch, is_active=True, **self.kind.lookups
            ).update(is_active=False)

    def run(self) -> Iterator[BulkProgress]:
        """Delete in batches, yielding progress after each one."""
        self._require_state(BulkState.DELETING)

        total = len(self.to_delete)
        started = self.clock()
        completed = 0

        for start in range(0, total, self.batch_size):
            batch = self.to_delete[start : start + self.batch_size]
            try:
                deleted = self._delete_batch(batch)
                self.result.deleted += deleted
                # Rows deactivated elsewhere since check()
                self.result.skipped += len(batch) - deleted
            except (DatabaseError, PlanningError) as e:
                logger.exception(
                    f"Bulk delete batch of {len(batch)} {self.entity} failed",
                    extra={"organization": self.scope.organization_id, "ids": batch},
                )
                self.result.errors.append(BulkError(ids=tuple(batch), message=str(e)))

            completed += len(batch)
            elapsed = self.clock() - started
            remaining = elapsed / completed * (total - completed) if completed else None
            yield BulkProgress(
                completed=completed, total=total, estimated_seconds_remaining=remaining
            )

        self.state = BulkState.DONE
        logger.info(
            f"Bulk deleted {self.result.deleted} {self.entity}",
            extra={
                "organization": self.scope.organization_id,
                "deleted": self.result.deleted,
                "skipped": self.result.skipped,
                "failed_batches": len(self.result.errors),
                "user": getattr(self.user, "pk", None),
            },
        )

    def execute(self) -> BulkResult:
        """Run to completion (or return at once if cancelled)."""
        if self.state == BulkState.CANCELLED:
            return self.result
        for _progress in self.run():
            pass
        return self.result
