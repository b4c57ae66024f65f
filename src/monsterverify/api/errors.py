"""Exception handlers that turn every failure into a success:false JSON body."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from monsterverify.api.router import AVAILABLE_ROUTES
from monsterverify.schemas import ApiResponse
from monsterverify.services.verification import InvalidInput, VerificationError

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND_MESSAGE = f"Route not found. Available routes: {', '.join(AVAILABLE_ROUTES)}"

# Body validation failures answer with the same message as missing fields
VALIDATION_MESSAGES = {
    "/api/send-verification": InvalidInput.message,
    "/api/verify-code": "Email and verification code are required",
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse(success=False, message=message).model_dump(by_alias=True),
    )


async def verification_error_handler(_request: Request, exc: VerificationError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(f"Rejected request body for {request.url.path}: {exc.errors()!r}")
    message = VALIDATION_MESSAGES.get(request.url.path, "Invalid request body")
    return error_response(400, message)


async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code in (404, 405):
        return error_response(exc.status_code, ROUTE_NOT_FOUND_MESSAGE)
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc!r}", exc_info=exc)
    return error_response(500, "Something went wrong. Please try again.")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on an application."""
    app.add_exception_handler(VerificationError, verification_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
