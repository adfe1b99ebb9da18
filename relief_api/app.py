"""
Disaster Relief API - Flask Application Factory

This module builds the Flask application with OpenAPI 3.0 support, wires the
service layer and registers middleware and routes.
"""

from typing import Optional
from flask_openapi3 import OpenAPI, Info

from . import __version__
from .config import Settings
from .observability.config import setup_observability, instrument_app
from .middleware.auth import AuthMiddleware
from .middleware.error_handler import ErrorHandlerMiddleware
from .middleware.rate_limit import RateLimiter
from .middleware.security import SecurityMiddleware
from .services.mongodb import MongoDBService
from .services.redis import RedisService
from .services.auth import AuthService
from .routes import blueprints

info = Info(
    title="Disaster Relief API",
    version=__version__,
    description="Help requests, volunteer commitments and donated resources with "
                "per-viewer disclosure of contact details"
)


def create_app(settings: Optional[Settings] = None,
               mongodb_service: Optional[MongoDBService] = None,
               redis_service: Optional[RedisService] = None,
               auth_service: Optional[AuthService] = None) -> OpenAPI:
    """
    Build the Flask application.

    Args:
        settings: Service configuration; loaded from the environment when omitted
        mongodb_service: Persistence service override
        redis_service: Redis service override
        auth_service: Authentication service override

    Returns:
        Configured application
    """
    settings = settings or Settings()
    setup_observability(settings)

    app = OpenAPI(__name__, info=info)
    app.config['ENVIRONMENT'] = settings.environment
    app.config['DEBUG'] = settings.environment == 'development'

    instrument_app(app)

    if mongodb_service is None:
        mongodb_service = MongoDBService(
            settings.mongodb_uri,
            settings.mongodb_database,
            max_pool_size=settings.mongodb_max_pool_size,
            server_selection_timeout_ms=settings.mongodb_server_selection_timeout_ms
        )
    if redis_service is None:
        redis_service = RedisService(settings.redis_url)
    if auth_service is None:
        auth_service = AuthService(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expire_days=settings.jwt_expire_days
        )

    # Make services available to routes
    app.settings = settings
    app.mongodb_service = mongodb_service
    app.redis_service = redis_service
    app.auth_service = auth_service
    app.auth_middleware = AuthMiddleware(auth_service)

    ErrorHandlerMiddleware(app, expose_details=settings.is_development)
    SecurityMiddleware(app, allowed_origins=settings.cors_origins)
    app.rate_limiter = RateLimiter(
        redis_service,
        limit=settings.rate_limit_max,
        window_seconds=settings.rate_limit_window_seconds
    )
    app.rate_limiter.init_app(app)

    for blueprint in blueprints:
        app.register_api(blueprint)

    return app
