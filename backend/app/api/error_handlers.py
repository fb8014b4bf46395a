"""
Error Handlers
Single place where exceptions become HTTP responses.
Every error body has the shape {"status": "fail" | "error", "message": "..."}.
"""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.errors import AppError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"


def error_response(status_code: int, message: str, headers: dict | None = None, **extra) -> JSONResponse:
    body = {
        "status": "fail" if 400 <= status_code < 500 else "error",
        "message": message,
    }
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def _format_validation_errors(exc: RequestValidationError) -> str:
    messages = []
    for err in exc.errors():
        # loc looks like ("body", "email") or ("query", "page")
        field = ".".join(str(part) for part in err.get("loc", ())[1:])
        msg = err.get("msg", "Invalid value")
        messages.append(f"{field}: {msg}" if field else msg)
    return "Invalid input data. " + "; ".join(messages)


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    return error_response(exc.status_code, exc.message, headers=exc.headers)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, _format_validation_errors(exc))


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"Can't find {request.url.path} on this server!"
    else:
        message = str(exc.detail)
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def handle_rate_limit(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit exceeded on {request.url.path}: {exc.detail}")
    return error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        "Too many requests, please try again later.",
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")

    if request.app.state.settings.debug:
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            str(exc) or GENERIC_ERROR_MESSAGE,
            error=type(exc).__name__,
            stack=traceback.format_exception(type(exc), exc, exc.__traceback__),
        )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RateLimitExceeded, handle_rate_limit)
    app.add_exception_handler(Exception, handle_unexpected_error)
