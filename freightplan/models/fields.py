"""
Custom model fields.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from freightplan.routes import RouteKey


class RouteKeyField(models.CharField):
    """
    Stores a RouteKey as its canonical string.

    Values read from the database come back as RouteKey instances, so
    route keys never mix with plain strings in Python code.
    """

    description = _("Route key")

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("max_length", 255)
        super().__init__(*args, **kwargs)

    def from_db_value(self, value, expression, connection):
        if value is None:
            return value
        return RouteKey(value)

    def to_python(self, value):
        if value is None or isinstance(value, RouteKey):
            return value
        return RouteKey(str(value))

    def get_prep_value(self, value):
        if value is None:
            return None
        return str(value)
