"""Typed service errors and their mapping onto HTTP responses.

Services raise one of the :class:`ServiceError` subclasses below and never
touch ``HTTPException`` directly.  The handler registered by
:func:`register_error_handlers` turns each error into a JSON body::

    {"detail": "Booking not found", "code": "not_found"}

``code`` is stable and machine-readable; ``detail`` is the human message
callers match on.  Structured context (for example the current booking
status on an invalid transition) is returned under ``context``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for expected, classified failures raised by services."""

    code: str = "error"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.detail:
            body["context"] = self.detail
        return body


class NotFoundError(ServiceError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(ServiceError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class ValidationFailedError(ServiceError):
    code = "validation_failed"
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(ServiceError):
    code = "conflict"
    status_code = status.HTTP_409_CONFLICT


def register_error_handlers(app: FastAPI) -> None:
    """Install the handler that serializes :class:`ServiceError` subclasses."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.exception("Unhandled service error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error", "code": "internal_error"},
        )
