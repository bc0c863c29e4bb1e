# api_common.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from errors import InvalidInput, RelayError, classify

logger = logging.getLogger(__name__)


def error_response(exc: BaseException) -> JSONResponse:
    status, body = classify(exc)
    return JSONResponse(status_code=status, content=body)


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    if isinstance(exc, InvalidInput):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    else:
        logger.error(
            "Relay error on %s: %s (%s) details=%s",
            request.url.path,
            exc.message,
            type(exc).__name__,
            exc.details,
        )
    return error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Unparseable body on %s: %s", request.url.path, exc.errors())
    return error_response(InvalidInput("Invalid request body"))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unclassified error on %s", request.url.path)
    return error_response(exc)


def install_common(
    app: FastAPI,
    *,
    allow_origins: list[str],
    allow_methods: list[str],
    allow_credentials: bool,
) -> None:
    """CORS, request logging and the error mapping shared by both variants."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        allow_methods=allow_methods,
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("Received %s request to %s", request.method, request.url.path)
        return await call_next(request)

    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
