# backend/urls.py — JSON API under /api/
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import DashboardView, OrderViewSet, PickupLocationViewSet, ProductViewSet, UserViewSet, health

router = DefaultRouter()
router.register(r"products", ProductViewSet, basename="product")
router.register(r"pickup-locations", PickupLocationViewSet, basename="pickup-location")
router.register(r"users", UserViewSet, basename="user")
router.register(r"orders", OrderViewSet, basename="order")

urlpatterns = [
    path("health", health, name="health"),
    path("health/", health),
    path("dashboard/", DashboardView.as_view(), name="dashboard-data"),
    path("", include(router.urls)),
]
