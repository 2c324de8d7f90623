"""Context processors for the storefront core."""

from .auth import AuthContext


def auth_context(request):
    """Add the shopper's AuthContext to templates."""
    context = getattr(request, "auth_context", None)
    if context is None:
        context = AuthContext.from_request(request)
    return {"auth_context": context}
