"""
Freightplan Protocols.

Defines interfaces for external collaborators.
"""

from freightplan.protocols.audit import AuditBackend
from freightplan.protocols.notifications import NotificationBackend
from freightplan.protocols.session import Session, SessionBackend

__all__ = [
    # Session Protocol
    "Session",
    "SessionBackend",
    # Audit Protocol
    "AuditBackend",
    # Notification Protocol
    "NotificationBackend",
]
