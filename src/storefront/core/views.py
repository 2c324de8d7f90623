"""Core views for the storefront."""

from django.db import DatabaseError, connection
from django.http import JsonResponse


def health_check(request):
    """Health check endpoint for container orchestration."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")

        return JsonResponse({"status": "healthy", "database": "connected"})
    except DatabaseError as e:
        return JsonResponse(
            {"status": "unhealthy", "error": str(e)},
            status=503,
        )
