"""Custom exceptions and FastAPI exception handlers.

Every error response carries the same small body, ``{"code": <http status>,
"message": <text>}``, described by ``app.shared.schemas.ErrorResponse``.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import get_logger
from app.shared.schemas import ErrorResponse

logger = get_logger(__name__)


# =============================================================================
# Exception Classes
# =============================================================================


class FeirasError(Exception):
    """Base exception for application errors.

    All application-specific exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application error.

        Args:
            message: Human-readable error message, returned to the client.
            code: Machine-readable error code, used in logs.
            status_code: HTTP status code.
            details: Additional error context, logged but never returned.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}


class NotFoundError(FeirasError):
    """Resource not found error."""

    def __init__(
        self,
        message: str = "not found",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404,
            details=details,
        )


class BadRequestError(FeirasError):
    """Malformed request error (bad id, bad body)."""

    def __init__(
        self,
        message: str = "bad request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="BAD_REQUEST",
            status_code=400,
            details=details,
        )


class DatabaseError(FeirasError):
    """Database operation error."""

    def __init__(
        self,
        message: str = "database operation failed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="DATABASE_ERROR",
            status_code=500,
            details=details,
        )


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the generic ``{code, message}`` error response."""
    body = ErrorResponse(code=status_code, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


# =============================================================================
# Exception Handlers
# =============================================================================


async def feiras_exception_handler(
    request: Request,
    exc: FeirasError,
) -> JSONResponse:
    """Handle FeirasError exceptions.

    Args:
        request: FastAPI request object.
        exc: The raised exception.

    Returns:
        Generic error response with the exception's status and message.
    """
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "app.error_handled",
        error=exc.message,
        error_type=type(exc).__name__,
        error_code=exc.code,
        status_code=exc.status_code,
        details=exc.details,
        path=str(request.url.path),
        exc_info=exc.status_code >= 500,
    )

    return error_response(exc.status_code, exc.message)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Handle Pydantic validation errors (bad path params or bodies).

    Field errors are logged; the client only gets a 400 with a short message.
    """
    fields = [
        ".".join(str(part) for part in error.get("loc", []) if part != "body")
        for error in exc.errors()
    ]

    logger.warning(
        "app.validation_error",
        error_count=len(fields),
        path=str(request.url.path),
        fields=fields,
    )

    return error_response(status.HTTP_400_BAD_REQUEST, "invalid request")


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Answer routing errors (unknown path, wrong method) with the generic body."""
    logger.info(
        "app.http_error",
        status_code=exc.status_code,
        path=str(request.url.path),
        method=request.method,
    )

    response = error_response(exc.status_code, str(exc.detail).lower())
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "app.unhandled_error",
        error=str(exc),
        error_type=type(exc).__name__,
        path=str(request.url.path),
        exc_info=True,
    )

    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal server error")


# =============================================================================
# Handler Registration
# =============================================================================


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.add_exception_handler(FeirasError, feiras_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
