"""
Django Freightplan app configuration.
"""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class FreightplanConfig(AppConfig):
    """Freightplan application configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "freightplan"
    verbose_name = _("Freight planning")

    def ready(self):
        """Import signal handlers when app is ready."""
        # Import handlers to register them
        from freightplan.signals import handlers  # noqa: F401
