import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from upload_broker.api.exception_handlers import register_exception_handlers
from upload_broker.api.routers import health as health_router
from upload_broker.api.routers import uploads as uploads_router
from upload_broker.core.config import get_settings
from upload_broker.core.errors import ConfigurationError
from upload_broker.core.logging_config import configure_logging
from upload_broker.services.storage import get_storage_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    try:
        storage = get_storage_service()
    except ConfigurationError as exc:
        if settings.env == "prod":
            raise
        logger.warning("Storage not configured, requests will fail: %s", exc.message)
    else:
        logger.info(
            "Storage ready: bucket=%s internal=%s public=%s",
            storage.bucket,
            settings.s3_endpoint,
            storage.public_endpoint,
        )
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        debug=settings.debug,
        title="Upload Broker API",
        lifespan=lifespan,
    )

    register_exception_handlers(app)
    app.include_router(health_router.router)
    app.include_router(uploads_router.router)

    return app


app = create_app()
