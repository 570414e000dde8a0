"""
Health check views and URLs for monitoring and deployment verification.

- ``/api/health``: process and database check, 200 or 503
- ``/api/health/live``: process liveness only
"""

import logging

from django.conf import settings
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.urls import path
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_GET

logger = logging.getLogger(__name__)


def check_database() -> dict:
    """Run a trivial query against the default database."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "message": f"Database connection failed: {e}"}
    return {"status": "healthy", "message": "Database connection successful"}


@never_cache
@require_GET
def health_check(request) -> JsonResponse:
    """
    Health check endpoint with a database check.

    Returns 200 when the database answers, 503 otherwise.
    """
    database = check_database()
    healthy = database["status"] == "healthy"

    return JsonResponse(
        {
            "status": "healthy" if healthy else "unhealthy",
            "version": getattr(settings, "VERSION", "1.0.0"),
            "environment": getattr(settings, "ENVIRONMENT", "unknown"),
            "checks": {"database": database},
        },
        status=200 if healthy else 503,
    )


@never_cache
@require_GET
def liveness_probe(request) -> JsonResponse:
    """Returns 200 while the application process is alive."""
    return JsonResponse({"status": "alive"})


urlpatterns = [
    path("api/health", health_check, name="health"),
    path("api/health/live", liveness_probe, name="liveness"),
]
