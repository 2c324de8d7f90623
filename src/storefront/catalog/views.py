"""Catalog browsing views."""

from django.views.generic import TemplateView

from storefront.core.exceptions import ItemNotFound

from .loader import get_catalog


class HomeView(TemplateView):
    """Home page built from the home page metadata."""

    template_name = "catalog/home.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update(get_catalog().page("home"))
        return context


class CategoryView(TemplateView):
    """Items in one category. Unknown categories list no items."""

    template_name = "catalog/category.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        category = self.kwargs["category"]
        context["category"] = category
        context["items"] = get_catalog().items_in_category(category)
        return context


class ProductView(TemplateView):
    template_name = "catalog/product.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        try:
            context["product"] = get_catalog().get_item(self.kwargs["product_id"])
        except ItemNotFound:
            raise ItemNotFound("Product not found") from None
        return context
