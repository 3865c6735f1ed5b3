"""
Repository models: Location, Party, ResourceType, DemandCategory.

Tenant-scoped reference data. Soft-deleted via is_active.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class PartyRole(models.TextChoices):
    CUSTOMER = "customer", _("Customer")
    SUPPLIER = "supplier", _("Supplier")


class Location(models.Model):
    """City."""

    organization = models.ForeignKey(
        "freightplan.Organization",
        on_delete=models.CASCADE,
        related_name="locations",
        verbose_name=_("Organization"),
    )
    name = models.CharField(max_length=200, verbose_name=_("Name"))
    code = models.CharField(max_length=50, blank=True, verbose_name=_("Code"))
    region = models.CharField(max_length=100, blank=True, verbose_name=_("Region"))
    is_active = models.BooleanField(default=True, db_index=True, verbose_name=_("Active"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        db_table = "freightplan_location"
        verbose_name = _("Location")
        verbose_name_plural = _("Locations")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Party(models.Model):
    """Client (CUSTOMER) or supplier (SUPPLIER)."""

    organization = models.ForeignKey(
        "freightplan.Organization",
        on_delete=models.CASCADE,
        related_name="parties",
        verbose_name=_("Organization"),
    )
    name = models.CharField(max_length=200, verbose_name=_("Name"))
    code = models.CharField(max_length=50, blank=True, verbose_name=_("Code"))
    party_role = models.CharField(
        max_length=20,
        choices=PartyRole.choices,
        db_index=True,
        verbose_name=_("Role"),
    )
    is_active = models.BooleanField(default=True, db_index=True, verbose_name=_("Active"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        db_table = "freightplan_party"
        verbose_name = _("Party")
        verbose_name_plural = _("Parties")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class ResourceType(models.Model):
    """Truck type."""

    organization = models.ForeignKey(
        "freightplan.Organization",
        on_delete=models.CASCADE,
        related_name="resource_types",
        verbose_name=_("Organization"),
    )
    name = models.CharField(max_length=100, verbose_name=_("Name"))
    is_active = models.BooleanField(default=True, db_index=True, verbose_name=_("Active"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))

    class Meta:
        db_table = "freightplan_resource_type"
        verbose_name = _("Truck type")
        verbose_name_plural = _("Truck types")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class DemandCategory(models.Model):
    """Optional grouping for demand forecasts (e.g. vertical)."""

    organization = models.ForeignKey(
        "freightplan.Organization",
        on_delete=models.CASCADE,
        related_name="demand_categories",
        verbose_name=_("Organization"),
    )
    name = models.CharField(max_length=100, verbose_name=_("Name"))
    code = models.CharField(max_length=50, blank=True, verbose_name=_("Code"))
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))

    class Meta:
        db_table = "freightplan_demand_category"
        verbose_name = _("Demand category")
        verbose_name_plural = _("Demand categories")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name
