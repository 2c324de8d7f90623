"""Catalog URL patterns."""

from django.urls import path

from . import views

app_name = "catalog"

urlpatterns = [
    path("", views.HomeView.as_view(), name="home"),
    path("home", views.HomeView.as_view(), name="home-alias"),
    path("category/<str:category>", views.CategoryView.as_view(), name="category"),
    path("product/<int:product_id>", views.ProductView.as_view(), name="product"),
]
