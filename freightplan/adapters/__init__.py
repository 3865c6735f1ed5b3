"""
Freightplan Adapters.

Default implementations of the collaborator protocols. Select others
through the FREIGHTPLAN setting.
"""

from freightplan.adapters.membership import MembershipSessionBackend
from freightplan.adapters.noop import LoggingAuditBackend, LoggingNotificationBackend

__all__ = [
    "MembershipSessionBackend",
    "LoggingAuditBackend",
    "LoggingNotificationBackend",
]
