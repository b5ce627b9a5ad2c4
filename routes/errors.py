"""Map domain errors to HTTP responses.

Clients only ever see the error code and a fixed message; the detailed
exception text goes to the log.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from errors import AppError
from schemas import ErrorDetail, ErrorResponse


logger = logging.getLogger(__name__)

INTERNAL_ERROR = "INTERNAL_ERROR"

ERROR_RESPONSES = {
    "INVALID_INPUT": (status.HTTP_400_BAD_REQUEST, "Invalid input data"),
    "NOT_FOUND": (status.HTTP_404_NOT_FOUND, "Resource not found"),
    "TEAM_EXISTS": (status.HTTP_400_BAD_REQUEST, "Team already exists"),
    "PR_EXISTS": (status.HTTP_409_CONFLICT, "PR already exists"),
    "PR_MERGED": (status.HTTP_409_CONFLICT, "Cannot modify merged PR"),
    "NOT_ASSIGNED": (status.HTTP_409_CONFLICT, "Reviewer not assigned"),
    "NO_CANDIDATE": (status.HTTP_409_CONFLICT, "No available candidates"),
    INTERNAL_ERROR: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
}


def error_response(code: str) -> JSONResponse:
    if code not in ERROR_RESPONSES:
        code = INTERNAL_ERROR
    status_code, message = ERROR_RESPONSES[code]
    body = ErrorResponse(error=ErrorDetail(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.code == INTERNAL_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    else:
        logger.warning("%s %s rejected with %s: %s", request.method, request.url.path, exc.code, exc)
    return error_response(exc.code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("invalid request %s %s: %s", request.method, request.url.path, exc.errors())
    return error_response("INVALID_INPUT")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unexpected error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(INTERNAL_ERROR)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
