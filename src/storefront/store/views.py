"""Cart, checkout and order history views."""

from django.contrib import messages
from django.http import HttpResponseBadRequest
from django.shortcuts import redirect
from django.views import View
from django.views.generic import TemplateView

from storefront.core.mixins import ShopperActionMixin, ShopperRequiredMixin

from . import services
from .forms import UpdateCartForm


class CartView(ShopperRequiredMixin, TemplateView):
    template_name = "store/cart.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        lines = services.get_cart_lines(self.get_auth_context())
        context.update({
            "cart": lines,
            "cart_count": len(lines),
            "sub_total": services.calculate_subtotal(lines),
        })
        return context


class AddToCartView(ShopperActionMixin, View):
    def post(self, request, product_id):
        services.add_item(self.get_auth_context(), product_id)
        return redirect("store:cart")


class UpdateCartView(ShopperActionMixin, View):
    def post(self, request, product_id):
        form = UpdateCartForm(request.POST)
        if not form.is_valid():
            return HttpResponseBadRequest("Invalid cart action.")
        services.update_item(self.get_auth_context(), product_id, form.cleaned_data["action"])
        return redirect("store:cart")


class CheckoutView(ShopperActionMixin, View):
    def post(self, request):
        order = services.checkout(self.get_auth_context())
        messages.success(request, f"Order placed. Total ${order.sub_total}.")
        return redirect("store:orders")


class OrderListView(ShopperRequiredMixin, TemplateView):
    template_name = "store/orders.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["orders"] = services.list_orders(self.get_auth_context())
        return context


class OrderDetailView(ShopperRequiredMixin, TemplateView):
    template_name = "store/order_detail.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["order"] = services.get_order(self.get_auth_context(), self.kwargs["order_id"])
        return context


class ReorderView(ShopperActionMixin, View):
    def post(self, request, order_id):
        services.reorder(self.get_auth_context(), order_id)
        messages.success(request, "Items from your order were added to your cart.")
        return redirect("store:cart")
