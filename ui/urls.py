# ui/urls.py
from django.urls import path

from . import views

urlpatterns = [
    path("", views.StorefrontView.as_view(), name="storefront"),
    path("orders/new/", views.OrderEditView.as_view(), name="order-new"),
    path("orders/<int:pk>/", views.OrderDetailView.as_view(), name="order-detail"),
    path("orders/<int:pk>/edit/", views.OrderEditView.as_view(), name="order-edit"),
    path("dashboard/", views.DashboardView.as_view(), name="dashboard"),
    path("users/", views.UsersView.as_view(), name="users"),
    path("users/new/", views.UserEditView.as_view(), name="user-new"),
    path("users/<int:pk>/", views.UserEditView.as_view(), name="user-edit"),
    path("users/<int:pk>/delete/", views.UserDeleteView.as_view(), name="user-delete"),
    path("products/", views.ProductsView.as_view(), name="products"),
    path("products/new/", views.ProductEditView.as_view(), name="product-new"),
    path("products/<int:pk>/", views.ProductEditView.as_view(), name="product-edit"),
    path("products/<int:pk>/delete/", views.ProductDeleteView.as_view(), name="product-delete"),
]
