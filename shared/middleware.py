"""
HTTP Middleware for FastAPI Applications

This module provides request-level middleware:
- CORS configuration
- Request ID tracking
- Request logging with masking of sensitive data

Usage:
    from shared.middleware import setup_middleware

    app = FastAPI()
    setup_middleware(app, cors_origins=["*"])
"""

import logging
import time
import uuid
from typing import Callable, List

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


# ============================================================================
# Request ID Middleware
# ============================================================================

class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Adds a unique Request ID to every request for tracing.

    The Request ID is:
    - Taken from the X-Request-ID header when the client sends one
    - Generated otherwise
    - Stored on request.state for handlers and logs
    - Returned in the response headers
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        return response


# ============================================================================
# Request Logging Middleware
# ============================================================================

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs requests and responses, masking sensitive query parameters.

    Logged: method, path, query params, status code, duration.
    """

    SENSITIVE_PARAMS = {
        "password",
        "token",
        "secret",
        "api_key",
        "access_token",
        "refresh_token",
    }

    def _mask_sensitive_data(self, data: dict) -> dict:
        """Masks sensitive values in a dict."""
        masked = {}
        for key, value in data.items():
            if any(sensitive in key.lower() for sensitive in self.SENSITIVE_PARAMS):
                masked[key] = "***MASKED***"
            else:
                masked[key] = value
        return masked

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        request_id = getattr(request.state, "request_id", "unknown")
        masked_params = self._mask_sensitive_data(dict(request.query_params))

        logger.info(
            f"Request started: {request.method} {request.url.path} "
            f"params={masked_params} request_id={request_id}"
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"Request failed: {request.method} {request.url.path} "
                f"request_id={request_id}: {str(exc)}",
                exc_info=True
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Request completed: {request.method} {request.url.path} "
            f"status={response.status_code} duration_ms={round(duration_ms, 2)} "
            f"request_id={request_id}"
        )
        return response


# ============================================================================
# Setup Function
# ============================================================================

def setup_middleware(app: FastAPI, cors_origins: List[str]) -> None:
    """
    Configures CORS, request logging and request IDs on a FastAPI app.

    Request ID is added last so it wraps the logging middleware and the
    id is already on request.state when the request is logged.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    logger.info(f"Middleware configured (CORS origins: {cors_origins})")
