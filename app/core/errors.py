"""
Central error handling for the Payzen HR backend

Services raise the AppError subclasses below; the handlers registered in
app.main render every error as
{"error": true, "status_code": ..., "message": ..., "path": ..., **extra}.
"""
import logging
import traceback
from typing import Any, Dict, Iterable, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(HTTPException):
    """Base class for errors that map onto an HTTP status and a message body"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message or self.default_message
        self.extra = extra or {}
        super().__init__(status_code=self.status_code, detail=self.message, headers=headers)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request data"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "authentication required"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have the permissions required for this action"

    def __init__(self, message: Optional[str] = None, required_permissions: Optional[Iterable[str]] = None):
        extra = {}
        if required_permissions is not None:
            extra["requiredPermissions"] = list(required_permissions)
        super().__init__(message, extra=extra)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class DependencyError(AppError):
    """Delete refused because active rows still reference the target"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource is still in use"


class PersistenceError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to persist changes"


def _error_body(request: Request, status_code: int, message: Any, **extra: Any) -> Dict[str, Any]:
    body = {
        "error": True,
        "status_code": status_code,
        "message": message,
        "path": str(request.url.path),
    }
    body.update(extra)
    return body


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle HTTPException (and every AppError) with a consistent JSON body

    Args:
        request: FastAPI request object
        exc: HTTPException instance

    Returns:
        JSONResponse with error details
    """
    extra = getattr(exc, "extra", None) or {}
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.status_code, exc.detail, **extra),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle RequestValidationError as a 400 with the per-field error list

    Does not leak internal validation details in production.
    """
    from app.core.config import settings

    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(request, 400, "Validation error: Invalid request data"),
        )

    # ctx may hold exception instances (e.g. ValueError) that are not JSON serializable
    errors = []
    for e in exc.errors():
        err = dict(e)
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {
                k: (str(v) if not isinstance(v, (str, int, float, bool, type(None))) else v)
                for k, v in err["ctx"].items()
            }
        errors.append(err)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(request, 400, "Validation error", errors=errors),
    )


async def integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """A unique index rejected a write that raced past the service checks"""
    logger.warning("Integrity error on %s: %s", request.url.path, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=_error_body(request, 409, "The request conflicts with an existing record"),
    )


async def persistence_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Store failures that escaped the services surface as a generic 500"""
    logger.error("Database error on %s: %s", request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, 500, PersistenceError.default_message),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions with consistent JSON response format

    Does not leak internal error details in production.
    """
    from app.core.config import settings

    logger.error("Unhandled exception: %s", exc, exc_info=True)

    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(request, 500, "Internal server error"),
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            request,
            500,
            str(exc),
            traceback=traceback.format_exc() if settings.APP_ENV == "local" else None,
        ),
    )
