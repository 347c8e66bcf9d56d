import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from upload_broker.core.errors import (
    BrokerError,
    ConfigurationError,
    StoreUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)


async def broker_error_handler(request: Request, exc: BrokerError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.message})

    if isinstance(exc, ConfigurationError):
        logger.error("Storage misconfigured: %s", exc.message)
    elif isinstance(exc, StoreUnavailableError):
        logger.error("Object store failure: %s", exc.message, exc_info=exc.__cause__)
    else:
        logger.error("%s: %s", type(exc).__name__, exc.message)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": exc.message},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BrokerError, broker_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
