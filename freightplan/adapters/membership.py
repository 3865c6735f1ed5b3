"""
Membership Session Backend -- resolves the caller from Django auth.

The session organization is the user's current Membership (the one flagged
is_current, or the oldest one if none is flagged).

Configuration:
    FREIGHTPLAN = {
        "SESSION_BACKEND": "freightplan.adapters.membership.MembershipSessionBackend",
    }
"""

from __future__ import annotations

import logging

from freightplan.protocols.session import Session

logger = logging.getLogger(__name__)


class MembershipSessionBackend:
    """SessionBackend backed by request.user and Membership rows."""

    def get_session(self, request) -> Session | None:
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return None

        from freightplan.models import Membership

        membership = (
            Membership.objects.filter(user=user, organization__is_active=True)
            .order_by("-is_current", "created_at")
            .first()
        )
        if membership is None:
            logger.info(f"User {user.pk} has no active membership")
            return None

        return Session(
            user_id=user.pk,
            organization_id=membership.organization_id,
            role=membership.role,
            user=user,
        )
