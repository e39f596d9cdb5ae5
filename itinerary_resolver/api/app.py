"""FastAPI application factory and error mapping."""

from __future__ import annotations

import logging
import math
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..container import Container, get_container
from ..domain.errors import (
    ConfigurationError,
    InvalidRequestError,
    ItineraryResolverError,
    PlaceNotFoundError,
    RateLimitExceededError,
)
from .routes import router

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_error_handlers(application: FastAPI) -> None:
    """Map domain errors to ``{"error": message}`` responses."""

    @application.exception_handler(InvalidRequestError)
    def handle_invalid_request(request: Request, exc: InvalidRequestError) -> JSONResponse:
        return _error(400, exc.message)

    @application.exception_handler(RequestValidationError)
    def handle_unreadable_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, "Invalid request body")

    @application.exception_handler(RateLimitExceededError)
    def handle_rate_limited(request: Request, exc: RateLimitExceededError) -> JSONResponse:
        response = _error(429, exc.message)
        response.headers["Retry-After"] = str(max(1, math.ceil(exc.retry_after_seconds)))
        return response

    @application.exception_handler(PlaceNotFoundError)
    def handle_not_found(request: Request, exc: PlaceNotFoundError) -> JSONResponse:
        return _error(404, exc.message)

    # A missing provider key leaves no fallback path
    @application.exception_handler(ConfigurationError)
    def handle_configuration(request: Request, exc: ConfigurationError) -> JSONResponse:
        logger.error("Configuration error", extra={"setting": exc.setting_name})
        return _error(502, exc.message)

    @application.exception_handler(ItineraryResolverError)
    def handle_domain_error(request: Request, exc: ItineraryResolverError) -> JSONResponse:
        logger.error("Unhandled domain error", extra={"path": request.url.path, "error": str(exc)})
        return _error(500, str(exc))

    @application.exception_handler(Exception)
    def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected error", extra={"path": request.url.path})
        return _error(500, str(exc) or "Unknown error")


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Build the API application.

    Args:
        container: Dependency container; defaults to the global one.

    Returns:
        The configured FastAPI application.
    """
    application = FastAPI(title="Itinerary Place Resolver")
    application.state.container = container or get_container()
    register_error_handlers(application)
    application.include_router(router)
    return application
