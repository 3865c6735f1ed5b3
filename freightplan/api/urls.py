"""
Freightplan API URLs.

Include this in your project's urlpatterns:

    path('api/freightplan/', include('freightplan.api.urls')),
"""

from rest_framework.routers import DefaultRouter

from .views import (
    ClientViewSet,
    DemandCategoryViewSet,
    DemandViewSet,
    LocationViewSet,
    PlanningWeekViewSet,
    SupplierViewSet,
    SupplyViewSet,
    TruckTypeViewSet,
)

router = DefaultRouter()
router.register("demand", DemandViewSet, basename="demand")
router.register("supply", SupplyViewSet, basename="supply")
router.register("planning-weeks", PlanningWeekViewSet, basename="planning-week")
router.register("locations", LocationViewSet, basename="location")
router.register("clients", ClientViewSet, basename="client")
router.register("suppliers", SupplierViewSet, basename="supplier")
router.register("truck-types", TruckTypeViewSet, basename="truck-type")
router.register("demand-categories", DemandCategoryViewSet, basename="demand-category")

urlpatterns = router.urls
