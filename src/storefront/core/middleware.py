"""Core middleware for the storefront."""

import logging

from django.db import DatabaseError
from django.shortcuts import render

from .auth import AuthContext
from .exceptions import StoreFailure, StorefrontError

logger = logging.getLogger(__name__)

ERROR_TEMPLATE = "core/error.html"


class AuthContextMiddleware:
    """Attach the request's AuthContext as request.auth_context.

    Must run after AuthenticationMiddleware.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.auth_context = AuthContext.from_request(request)
        return self.get_response(request)


class StorefrontErrorMiddleware:
    """Turn storefront and database errors raised by views into HTML error pages."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, DatabaseError):
            logger.error(
                "Database error handling %s %s", request.method, request.path, exc_info=exception
            )
            return render_error(request, StoreFailure())

        if not isinstance(exception, StorefrontError):
            return None

        if exception.status_code >= 500:
            logger.error(
                "Store failure handling %s %s", request.method, request.path, exc_info=exception
            )
        else:
            logger.info(
                "%s handling %s %s: %s",
                type(exception).__name__,
                request.method,
                request.path,
                exception.message,
            )
        return render_error(request, exception)


def render_error(request, error: StorefrontError):
    """Render the shared error page for a storefront error."""
    return render(
        request,
        ERROR_TEMPLATE,
        {"message": error.message, "status_code": error.status_code},
        status=error.status_code,
    )
