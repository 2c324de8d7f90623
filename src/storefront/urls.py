"""URL configuration for the storefront project."""

from django.urls import include, path

from storefront.core.views import health_check

urlpatterns = [
    # Health check
    path("health", health_check, name="health_check"),

    # Accounts: register, login, logout, profile
    path("", include("storefront.accounts.urls", namespace="accounts")),

    # Cart, checkout and orders
    path("", include("storefront.store.urls", namespace="store")),

    # Catalog pages
    path("", include("storefront.catalog.urls", namespace="catalog")),
]
