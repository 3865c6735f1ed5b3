"""
URL configuration for Freightplan API tests.
"""

from django.urls import include, path

urlpatterns = [
    path("api/freightplan/", include("freightplan.api.urls")),
]
