"""
API error type and the handlers that render every failure as a JSON envelope.

Error envelope:
    {
        "status_code": 401,
        "data": null,
        "message": "Unauthorized request",
        "success": false,
        "errors": []
    }
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    Application error carrying an HTTP status code.

    Raised by services, dependencies and routes; converted to the error
    envelope by `api_error_handler`.

    Attributes:
        status_code: HTTP status code to respond with
        message: Human-readable error description
        errors: Optional list of detailed errors (e.g. validation issues)
    """

    def __init__(
        self,
        status_code: int,
        message: str = "Something went wrong",
        errors: Optional[list[Any]] = None,
    ):
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to the error envelope."""
        return {
            "status_code": self.status_code,
            "data": None,
            "message": self.message,
            "success": False,
            "errors": self.errors,
        }


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render an ApiError."""
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(exc.to_dict()),
        headers={"WWW-Authenticate": "Bearer"}
        if exc.status_code == status.HTTP_401_UNAUTHORIZED
        else None,
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as a 400 envelope."""
    error = ApiError(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request",
        errors=list(exc.errors()),
    )
    return await api_error_handler(request, error)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all so clients never see a bare traceback."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
    return await api_error_handler(request, error)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all error handlers to the application."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
