# SPDX-License-Identifier: Apache-2.0

"""
Health check endpoint.
"""

from datetime import datetime, timezone
from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag

health_tag = Tag(name="Health", description="System health and status")
health_bp = APIBlueprint('health', __name__, url_prefix='/api', abp_tags=[health_tag])


@health_bp.get('/healthz')
def health_check():
    """
    Report dependency health.

    MongoDB is required; Redis only backs rate limiting, so losing it
    degrades the service without making it unhealthy.
    """
    settings = current_app.settings
    mongodb = current_app.mongodb_service.health_check()
    redis = current_app.redis_service.health_check()

    if mongodb["status"] != "healthy":
        status, status_code = "unhealthy", 503
    elif redis["status"] == "unhealthy":
        status, status_code = "degraded", 200
    else:
        status, status_code = "healthy", 200

    return jsonify({
        "status": status,
        "service": settings.service_name,
        "version": settings.service_version,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "dependencies": {
            "mongodb": mongodb,
            "redis": redis
        }
    }), status_code
