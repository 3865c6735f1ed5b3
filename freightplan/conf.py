"""
Freightplan Settings.

Supports two formats (dict takes priority):

    # Option 1: Dict
    FREIGHTPLAN = {
        "BULK_BATCH_SIZE": 100,
        "AUDIT_BACKEND": "myproject.audit.DatabaseAuditBackend",
    }

    # Option 2: Flat
    FREIGHTPLAN_BULK_BATCH_SIZE = 100
    FREIGHTPLAN_AUDIT_BACKEND = "myproject.audit.DatabaseAuditBackend"

All settings have sensible defaults.
"""

import threading

from django.conf import settings
from django.utils.module_loading import import_string


# ── Defaults ──

DEFAULTS = {
    "DEFAULT_PAGE_SIZE": 50,
    "MAX_PAGE_SIZE": 500,
    "BULK_BATCH_SIZE": 100,
    "UPCOMING_PERIODS": 8,
    "SESSION_BACKEND": "freightplan.adapters.membership.MembershipSessionBackend",
    "AUDIT_BACKEND": "freightplan.adapters.noop.LoggingAuditBackend",
    "NOTIFICATION_BACKEND": "freightplan.adapters.noop.LoggingNotificationBackend",
}


# ── Accessors ──

_sentinel = object()


def get_setting(name, default=_sentinel):
    """
    Get a freightplan setting.

    Looks up in order:
    1. FREIGHTPLAN dict (e.g. FREIGHTPLAN = {"BULK_BATCH_SIZE": 50})
    2. Flat setting (e.g. FREIGHTPLAN_BULK_BATCH_SIZE = 50)
    3. DEFAULTS
    """
    freightplan_dict = getattr(settings, "FREIGHTPLAN", {})
    if name in freightplan_dict:
        return freightplan_dict[name]

    flat_value = getattr(settings, f"FREIGHTPLAN_{name}", _sentinel)
    if flat_value is not _sentinel:
        return flat_value

    if default is not _sentinel:
        return default

    return DEFAULTS.get(name)


# ── Collaborator backends ──

_backend_lock = threading.Lock()
_backend_instances: dict = {}


def _get_backend(name: str):
    path = get_setting(name)
    if not path:
        return None

    instance = _backend_instances.get(name)
    if instance is None:
        with _backend_lock:
            instance = _backend_instances.get(name)
            if instance is None:  # double-checked
                instance = import_string(path)()
                _backend_instances[name] = instance

    return instance


def get_session_backend():
    """Return the configured session backend (resolves request → Session)."""
    return _get_backend("SESSION_BACKEND")


def get_audit_backend():
    """Return the configured audit backend, or None."""
    return _get_backend("AUDIT_BACKEND")


def get_notification_backend():
    """Return the configured notification backend, or None."""
    return _get_backend("NOTIFICATION_BACKEND")


def reset_backends() -> None:
    """Reset backend singletons (for tests)."""
    with _backend_lock:
        _backend_instances.clear()
