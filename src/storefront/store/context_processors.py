"""Context processors for the store."""

import logging

from django.db import DatabaseError

from .models import CartItem

logger = logging.getLogger(__name__)


def cart_context(request):
    """Add the number of lines in the shopper's cart to every page.

    Error pages are rendered through this processor too, including the one
    for a database outage, so a failed count falls back to zero.
    """
    auth = getattr(request, "auth_context", None)
    if auth is None or not auth.is_authenticated:
        return {"cart_count": 0}
    try:
        count = CartItem.objects.filter(cart__user_id=auth.user_id).count()
    except DatabaseError:
        logger.warning("Could not count cart lines for user %s", auth.user_id, exc_info=True)
        count = 0
    return {"cart_count": count}
