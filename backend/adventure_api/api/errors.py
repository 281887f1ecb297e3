"""
Error boundary: the single place where raised errors become HTTP responses.

- ApiError            -> its own status, message and field errors
- request validation  -> 400 with one entry per offending field
- anything else       -> 500 with a generic message, details logged only
"""

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from adventure_api.core.errors import ApiError, InternalError
from adventure_api.core.logging import get_logger
from adventure_api.schemas.envelope import ErrorResponse

logger = get_logger(__name__)


def error_response(status_code: int, message: str, errors: Optional[list[dict[str, Any]]] = None) -> JSONResponse:
    body = ErrorResponse(message=message, errors=errors or None)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("api_error", status_code=exc.status_code, message=exc.message)
    else:
        logger.info("api_error", status_code=exc.status_code, message=exc.message)
    return error_response(exc.status_code, exc.message, exc.errors)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        # Drop the leading "body"/"query"/"path" segment
        location = [str(part) for part in error.get("loc", ())[1:]]
        errors.append({"field": ".".join(location) or "body", "message": error.get("msg", "Invalid value")})

    logger.info("request_validation_failed", errors=errors)
    return error_response(400, "Validation failed", errors)


def unexpected_error_response(exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", error_type=type(exc).__name__, exc_info=exc)
    return error_response(500, InternalError.default_message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
