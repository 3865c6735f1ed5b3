"""
Freightplan API exception handling.

Every error leaves the API in the same envelope:

    {"success": false, "error": {"code": "LOCKED", "message": "...", "details": {...}}}
"""

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions
from rest_framework.response import Response
from rest_framework.views import set_rollback

from freightplan.exceptions import PlanningError

logger = logging.getLogger(__name__)


def _as_planning_error(exc) -> PlanningError | None:
    if isinstance(exc, PlanningError):
        return exc
    if isinstance(exc, Http404):
        return PlanningError("NOT_FOUND")
    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        return PlanningError("UNAUTHORIZED", str(exc.detail))
    if isinstance(exc, (exceptions.PermissionDenied, DjangoPermissionDenied)):
        return PlanningError("FORBIDDEN")
    if isinstance(exc, exceptions.ValidationError):
        return PlanningError("VALIDATION_ERROR", "Invalid input", fields=exc.detail)
    if isinstance(exc, exceptions.ParseError):
        return PlanningError("VALIDATION_ERROR", str(exc.detail))
    return None


def exception_handler(exc, context):
    """DRF exception handler rendering the error envelope."""
    error = _as_planning_error(exc)

    if error is None and isinstance(exc, exceptions.APIException):
        set_rollback()
        return Response(
            {
                "success": False,
                "error": {"code": str(exc.default_code).upper(), "message": str(exc.detail)},
            },
            status=exc.status_code,
        )

    if error is None:
        view = context.get("view")
        logger.exception(
            f"Unexpected error in {view.__class__.__name__ if view else 'API'}",
            exc_info=exc,
        )
        error = PlanningError("INTERNAL_ERROR")

    set_rollback()
    return Response({"success": False, "error": error.as_dict()}, status=error.status_code)
