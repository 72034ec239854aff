"""Centralized error handling and logging for the Recipe Catalog API.

This module provides:
- Exception handlers translating domain errors into HTTP responses
- A global safety net for framework and unexpected errors
- Structured logging with correlation IDs
- Environment-aware error responses (generic in production, detailed in dev)
"""

import logging
import sys
import traceback
import uuid
from contextvars import ContextVar
from typing import Any
from urllib.parse import urlencode

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, ValidationError
from pythonjsonlogger.json import JsonFormatter
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from core.config import get_settings
from core.exceptions import (
    AuthenticationRequiredError,
    DomainError,
    DuplicateUserError,
    FormValidationError,
    NotFoundError,
)
from core.security_config import get_allowed_error_fields, is_sensitive_key
from schemas.api import ErrorResponse


# Context variable for correlation ID tracking across async calls
_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)

logger = logging.getLogger(__name__)

# Canonical error types for framework HTTP errors
HTTP_ERROR_TYPES = {
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
}


def get_correlation_id() -> str:
    """Get or create a correlation ID for request tracing."""
    correlation_id: str | None = _correlation_id_var.get()
    if not correlation_id:
        new_id = str(uuid.uuid4())
        _correlation_id_var.set(new_id)
        return new_id
    return correlation_id


def set_correlation_id(correlation_id: str | None) -> None:
    """Set the correlation ID for the current context."""
    _correlation_id_var.set(correlation_id)


class StructuredLogger:
    """Structured logger that includes correlation IDs and sanitized data."""

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)

    def _log_with_context(
        self,
        level: int,
        message: str,
        extra_data: dict[str, Any] | None = None,
        exc_info: bool = False,
    ) -> None:
        correlation_id = get_correlation_id()
        log_data = {
            "correlation_id": correlation_id,
            **self._sanitize_data(extra_data or {}),
        }
        # JsonFormatter merges `extra` keys into the JSON object; the
        # development formatter only prints the prefixed message.
        if get_settings().ENVIRONMENT == "production":
            self.logger.log(level, message, extra=log_data, exc_info=exc_info)
        else:
            self.logger.log(
                level,
                f"[{correlation_id}] {message}",
                extra={"structured_data": log_data},
                exc_info=exc_info,
            )

    def _sanitize_data(self, data: dict[str, Any]) -> dict[str, Any]:
        """Remove or mask sensitive data from log entries."""
        sanitized: dict[str, Any] = {}
        for key, value in data.items():
            if is_sensitive_key(key):
                sanitized[key] = "[REDACTED]"
            else:
                sanitized[key] = self._sanitize_value(value)
        return sanitized

    def _sanitize_value(self, value: Any) -> Any:
        if isinstance(value, dict):
            return self._sanitize_data(value)
        if isinstance(value, list):
            return [self._sanitize_value(item) for item in value]
        return value

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info level message."""
        self._log_with_context(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning level message."""
        self._log_with_context(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error level message."""
        self._log_with_context(logging.ERROR, message, kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self._log_with_context(logging.ERROR, message, kwargs, exc_info=True)


# Global structured logger instance
structured_logger = StructuredLogger(__name__)


class ExceptionNormalizationMiddleware(BaseHTTPMiddleware):
    """Catch any uncaught Exception and delegate to global_exception_handler."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:  # noqa: BLE001
            return await global_exception_handler(request, exc)


def _build_error_response(
    *,
    correlation_id: str,
    error_type: str,
    message: str,
    environment: str,
    details: dict[str, Any] | None = None,
    traceback_str: str | None = None,
    exception_type: str | None = None,
    validation_errors: Any | None = None,
    fields: dict[str, list[str]] | None = None,
    data: Any | None = None,
    status_code: int = 500,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Construct a sanitized JSON error response respecting environment rules."""
    allowed_fields = get_allowed_error_fields(environment)

    error_body: dict[str, Any] = {
        "correlation_id": correlation_id,
        "type": error_type,
    }

    optional = {
        "details": details,
        "traceback": traceback_str,
        "exception_type": exception_type,
        "validation_errors": validation_errors,
        "fields": fields,
    }
    for key, value in optional.items():
        if key in allowed_fields and value is not None:
            error_body[key] = value

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            message=message,
            data=data,
            error=error_body,
        ).model_dump(mode="json"),
        headers=headers,
    )


def _login_redirect(next_path: str | None) -> RedirectResponse:
    login_url = get_settings().LOGIN_URL
    if next_path:
        login_url = f"{login_url}?{urlencode({'next': next_path})}"
    return RedirectResponse(
        url=login_url,
        status_code=status.HTTP_303_SEE_OTHER,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _form_payload(form: Any) -> Any:
    if isinstance(form, BaseModel):
        return form.model_dump(mode="json")
    return form


async def domain_exception_handler(request: Request, exc: Exception) -> Response:
    """Translate domain errors raised by handlers into HTTP responses.

    NotFound -> 404, form rejection -> 422 with the form re-rendered,
    missing identity -> redirect to login, duplicate user -> 409.
    """
    environment = get_settings().ENVIRONMENT
    correlation_id = get_correlation_id()

    if isinstance(exc, AuthenticationRequiredError):
        structured_logger.info(
            "Redirecting unauthenticated request to login",
            path=request.url.path,
        )
        return _login_redirect(exc.next_path)

    if isinstance(exc, FormValidationError):
        structured_logger.info(
            "Form submission rejected",
            path=request.url.path,
            fields=sorted(exc.fields),
        )
        return _build_error_response(
            correlation_id=correlation_id,
            error_type="validation_error",
            message="Please correct the highlighted fields",
            environment=environment,
            fields=exc.fields,
            data=_form_payload(exc.form),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    if isinstance(exc, NotFoundError):
        return _build_error_response(
            correlation_id=correlation_id,
            error_type="not_found",
            message=str(exc),
            environment=environment,
            status_code=status.HTTP_404_NOT_FOUND,
        )

    if isinstance(exc, DuplicateUserError):
        structured_logger.warning("Duplicate user registration attempt")
        return _build_error_response(
            correlation_id=correlation_id,
            error_type="conflict",
            message="Username or email already exists",
            environment=environment,
            status_code=status.HTTP_409_CONFLICT,
        )

    return await global_exception_handler(request, exc)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler providing structured, sanitized responses."""
    settings = get_settings()
    environment = settings.ENVIRONMENT
    correlation_id = get_correlation_id()

    if isinstance(exc, StarletteHTTPException):
        status_code = exc.status_code
        return _build_error_response(
            correlation_id=correlation_id,
            error_type=HTTP_ERROR_TYPES.get(status_code, "http_error"),
            message=str(exc.detail) if status_code < 500 else "An HTTP error occurred",
            environment=environment,
            details={"detail": exc.detail},
            exception_type=exc.__class__.__name__,
            status_code=status_code,
            headers=getattr(exc, "headers", None),
        )

    if isinstance(exc, ValidationError | RequestValidationError):
        validation_details = jsonable_encoder(exc.errors())
        structured_logger.warning(
            "Validation error", validation_errors=validation_details
        )
        return _build_error_response(
            correlation_id=correlation_id,
            error_type="validation_error",
            message="Invalid request data provided",
            environment=environment,
            validation_errors=validation_details,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    if isinstance(exc, IntegrityError):
        structured_logger.error("Integrity constraint violation", error=str(exc))
        return _build_error_response(
            correlation_id=correlation_id,
            error_type="integrity_error",
            message="A data integrity constraint was violated",
            environment=environment,
        )

    if isinstance(exc, DomainError):
        structured_logger.warning(
            "Domain error", error_type=exc.__class__.__name__, domain_message=str(exc)
        )
        return _build_error_response(
            correlation_id=correlation_id,
            error_type="domain_error",
            message="The request could not be completed",
            environment=environment,
        )

    structured_logger.exception(
        "Unhandled exception", exception_type=exc.__class__.__name__, error=str(exc)
    )
    traceback_str = "".join(traceback.format_exception(exc)).strip()
    return _build_error_response(
        correlation_id=correlation_id,
        error_type="internal_server_error",
        message="An internal error occurred",
        environment=environment,
        traceback_str=traceback_str,
        exception_type=exc.__class__.__name__,
    )


def setup_logging() -> None:
    """Configure application logging with proper JSON structure and idempotent setup."""
    settings = get_settings()

    log_level = logging.DEBUG if settings.ENVIRONMENT == "development" else logging.INFO
    root_logger = logging.getLogger()

    # Make setup idempotent - avoid duplicate handlers
    if root_logger.handlers:
        return

    formatter: logging.Formatter
    if settings.ENVIRONMENT == "production":
        formatter = JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(log_level)

    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)

    if settings.ENVIRONMENT == "production":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
