"""
Audit Protocol: append-only record of planning mutations.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class AuditBackend(Protocol):
    """Storage for audit entries. Called after the mutation commits."""

    def create_audit_log(
        self,
        user_id: int | None,
        action: str,
        entity_type: str,
        entity_id: int,
        metadata: dict[str, Any],
    ) -> None:
        """
        Record one mutation.

        Args:
            user_id: Acting user, if known
            action: "CREATE", "UPDATE" or "DELETE"
            entity_type: "DemandForecast" or "SupplyCommitment"
            entity_id: Primary key of the mutated row
            metadata: Free-form context (route key, totals, cascaded rows)
        """
        ...
