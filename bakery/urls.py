# bakery/urls.py — admin, auth, JSON API and the server-rendered UI
from django.contrib import admin
from django.contrib.auth import views as auth_views
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),

    path("login/", auth_views.LoginView.as_view(), name="login"),
    path("logout/", auth_views.LogoutView.as_view(), name="logout"),

    path("api/", include("backend.urls")),

    # the UI owns the root
    path("", include("ui.urls")),
]
