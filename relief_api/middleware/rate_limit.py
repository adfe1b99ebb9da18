# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Rate limiting middleware for API endpoints.
Applies one fixed-window limit per client address to every /api route.
"""

from flask import Flask, request, g
from typing import Dict, Any, Optional
import time
import logging

from .error_handler import RateLimitException

logger = logging.getLogger(__name__)


class RateLimiter:
    """Redis-based rate limiter with a fixed window per client."""

    def __init__(self, redis_service, limit: int = 100, window_seconds: int = 900):
        self.redis_service = redis_service
        self.limit = limit
        self.window_seconds = window_seconds

    def get_client_identifier(self) -> str:
        """Identify the client by its remote address."""
        return f"ip:{request.remote_addr or 'unknown'}"

    def get_rate_limit_key(self, identifier: str) -> str:
        """
        Generate Redis key for the current window.

        Args:
            identifier: Client identifier

        Returns:
            Redis key for rate limiting
        """
        window_start = int(time.time()) // self.window_seconds
        return f"rate_limit:{identifier}:{window_start}"

    def check_rate_limit(self, identifier: str) -> Optional[Dict[str, Any]]:
        """
        Count a request against the client's window.

        Args:
            identifier: Client identifier

        Returns:
            Rate limit status, or None when Redis is unavailable
        """
        count = self.redis_service.increment_window(
            self.get_rate_limit_key(identifier), self.window_seconds
        )
        if count is None:
            # Fail open
            return None

        window_start = int(time.time()) // self.window_seconds
        reset_time = (window_start + 1) * self.window_seconds

        return {
            'allowed': count <= self.limit,
            'limit': self.limit,
            'remaining': max(self.limit - count, 0),
            'reset_time': reset_time,
            'retry_after': max(reset_time - int(time.time()), 1)
        }

    def add_rate_limit_headers(self, response, rate_limit_info: Dict[str, Any]):
        """Add rate limit headers to response."""
        response.headers['X-RateLimit-Limit'] = str(rate_limit_info['limit'])
        response.headers['X-RateLimit-Remaining'] = str(rate_limit_info['remaining'])
        response.headers['X-RateLimit-Reset'] = str(rate_limit_info['reset_time'])
        return response

    def init_app(self, app: Flask, path_prefix: str = '/api/'):
        """Register rate limiting hooks for routes under path_prefix."""

        @app.before_request
        def enforce_rate_limit():
            if request.method == 'OPTIONS' or not request.path.startswith(path_prefix):
                return None

            identifier = self.get_client_identifier()
            rate_limit_info = self.check_rate_limit(identifier)
            g.rate_limit_info = rate_limit_info

            if rate_limit_info and not rate_limit_info['allowed']:
                logger.warning(
                    "Rate limit exceeded",
                    extra={
                        "identifier": identifier,
                        "path": request.path,
                        "limit": self.limit,
                        "window_seconds": self.window_seconds
                    }
                )
                raise RateLimitException(
                    "Too many requests, please try again later",
                    retry_after=rate_limit_info['retry_after']
                )
            return None

        @app.after_request
        def attach_rate_limit_headers(response):
            rate_limit_info = g.get('rate_limit_info')
            if rate_limit_info:
                self.add_rate_limit_headers(response, rate_limit_info)
            return response
