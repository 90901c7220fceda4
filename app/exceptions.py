"""Error taxonomy and the handlers that render it as JSON."""
import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class TodoAPIError(HTTPException):
    """Base class; subclasses fix the status code and a default message."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, detail=None, headers=None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.message,
            headers=headers,
        )


class ValidationError(TodoAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class Unauthenticated(TodoAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Access token required"

    def __init__(self, detail=None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class InvalidToken(Unauthenticated):
    """Token present but bad signature, malformed or expired."""
    status_code = status.HTTP_403_FORBIDDEN
    message = "Invalid or expired token"


class Forbidden(TodoAPIError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Insufficient permissions"


class NotFound(TodoAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class Conflict(TodoAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Resource already exists"


class InternalError(TodoAPIError):
    pass


def _format_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.message
    first = errors[0]
    # Drop the leading "body"/"path"/"query" location segment
    location = [str(part) for part in first.get("loc", ())[1:]]
    if first.get("type") == "missing" and location:
        return f"{location[-1]} is required"
    if location:
        return f"{'.'.join(location)}: {first.get('msg')}"
    return first.get("msg", ValidationError.message)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": _format_validation_error(exc)},
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=InternalError.status_code,
        content={"detail": InternalError.message},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=InternalError.status_code,
        content={"detail": InternalError.message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
