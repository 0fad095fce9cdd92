"""Error types raised by the claim services and the middleware that renders them."""

import logging
from typing import Any, Callable

from fastapi import HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from studio_directory.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

Details = list[dict[str, Any]] | None


class APIError(Exception):
    """Base exception for errors returned to the client.

    Subclasses fix the status code and error type; callers only choose the
    message shown to the user.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type: str = "api_error"
    default_message: str = "Something went wrong."

    def __init__(self, message: str | None = None, details: Details = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class NotFoundError(APIError):
    """Profile, claim link or claim request not found."""

    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found"
    default_message = "Resource not found"


class ValidationError(APIError):
    """Input rejected before touching the store."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_type = "validation_error"
    default_message = "Validation error"


class AuthenticationError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "authentication_error"
    default_message = "Authentication required"


class AuthorizationError(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    error_type = "authorization_error"
    default_message = "Access denied"


class ConflictError(APIError):
    """State conflict (already claimed, duplicate request, taken username)."""

    status_code = status.HTTP_409_CONFLICT
    error_type = "conflict"
    default_message = "Conflict"


class StoreError(APIError):
    """Underlying data store failure.

    Carries a generic message only; the store's own error is logged where it
    is caught.
    """

    error_type = "store_error"
    default_message = "Something went wrong. Please try again."


def error_json(
    status_code: int,
    error_type: str,
    message: str,
    details: Details = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Render an error as the standard JSON envelope."""
    body = ErrorResponse.build(error_type, message, details=details, request_id=request_id)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


async def error_handler_middleware(request: Request, call_next: Callable[[Request], Any]) -> Response:
    """Turn exceptions escaping a route into JSON error responses.

    APIError keeps its status and message. Anything unexpected is logged
    with its traceback and reported as a bare 500.
    """
    request_id = request.headers.get("X-Request-ID")

    try:
        return await call_next(request)
    except APIError as e:
        logger.warning(
            "%s %s -> %s: %s",
            request.method,
            request.url.path,
            e.error_type,
            e.message,
            extra={"request_id": request_id, "status_code": e.status_code},
        )
        return error_json(e.status_code, e.error_type, e.message, e.details, request_id)
    except HTTPException as e:
        logger.warning("%s %s -> HTTP %s", request.method, request.url.path, e.status_code)
        return error_json(e.status_code, "http_error", str(e.detail), request_id=request_id)
    except Exception:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return error_json(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "internal_error",
            "An unexpected error occurred",
            request_id=request_id,
        )
