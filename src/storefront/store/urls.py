"""Store URL patterns."""

from django.urls import path

from . import views

app_name = "store"

urlpatterns = [
    path("cart", views.CartView.as_view(), name="cart"),
    path("add-to-cart/<int:product_id>", views.AddToCartView.as_view(), name="add-to-cart"),
    path("update-cart/<int:product_id>", views.UpdateCartView.as_view(), name="update-cart"),
    path("checkout", views.CheckoutView.as_view(), name="checkout"),
    path("orders", views.OrderListView.as_view(), name="orders"),
    path("orders/<str:order_id>", views.OrderDetailView.as_view(), name="order-detail"),
    path("reorder/<str:order_id>", views.ReorderView.as_view(), name="reorder"),
]
