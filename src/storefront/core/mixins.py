"""Core mixins for view access control."""

from django.contrib.auth.mixins import LoginRequiredMixin

from .exceptions import Unauthorized


class ShopperRequiredMixin(LoginRequiredMixin):
    """Browsing pages that need a shopper: anonymous visitors go to the login page."""

    redirect_field_name = "next"

    def get_auth_context(self):
        return self.request.auth_context


class ShopperActionMixin:
    """Mutating routes that need a shopper: anonymous requests get a 401 page.

    Unauthorized is rendered by StorefrontErrorMiddleware.
    """

    def dispatch(self, request, *args, **kwargs):
        if not request.auth_context.is_authenticated:
            raise Unauthorized()
        return super().dispatch(request, *args, **kwargs)

    def get_auth_context(self):
        return self.request.auth_context
