"""
Freightplan Exceptions.

All planning errors are wrapped in PlanningError for consistent handling.
"""

from typing import Any


class PlanningError(Exception):
    """
    Base exception for all Freightplan errors.

    Usage:
        raise PlanningError("LOCKED", "This planning week is locked", planning_week=12)

    Attributes:
        code: Stable machine-readable error code (LOCKED, DUPLICATE, etc.)
        message: Human-readable message
        details: Additional context as keyword arguments
    """

    def __init__(self, code: str, message: str = "", **details: Any):
        self.code = code
        self.message = message or DEFAULT_MESSAGES.get(code, code)
        self.details = details
        super().__init__(f"{code}: {self.message}")

    @property
    def status_code(self) -> int:
        return http_status(self.code)

    def as_dict(self) -> dict:
        """Return error as dictionary for API responses."""
        data = {"code": self.code, "message": self.message}
        if self.details:
            data["details"] = self.details
        return data

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"PlanningError({self.code}: {details_str})"
        return f"PlanningError({self.code})"


# Error codes
VALIDATION_ERROR = "VALIDATION_ERROR"  # Malformed or missing input
UNAUTHORIZED = "UNAUTHORIZED"  # No session
FORBIDDEN = "FORBIDDEN"  # Role or tenant check failed
NOT_FOUND = "NOT_FOUND"  # Referenced entity absent or out of tenant
LOCKED = "LOCKED"  # Write against a locked planning period
DUPLICATE = "DUPLICATE"  # Uniqueness invariant violated
INTERNAL_ERROR = "INTERNAL_ERROR"  # Unexpected failure

DEFAULT_MESSAGES = {
    VALIDATION_ERROR: "Invalid input",
    UNAUTHORIZED: "Not authenticated",
    FORBIDDEN: "Not authorized",
    NOT_FOUND: "Not found",
    LOCKED: "This planning week is locked and cannot be edited",
    DUPLICATE: "A forecast for this route and client already exists",
    INTERNAL_ERROR: "An unexpected error occurred",
}

HTTP_STATUS = {
    VALIDATION_ERROR: 400,
    UNAUTHORIZED: 401,
    FORBIDDEN: 403,
    NOT_FOUND: 404,
    LOCKED: 400,
    DUPLICATE: 409,
    INTERNAL_ERROR: 500,
}


def http_status(code: str) -> int:
    """Map an error code to its HTTP status (500 for unknown codes)."""
    return HTTP_STATUS.get(code, 500)
