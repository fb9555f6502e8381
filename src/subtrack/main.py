from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.subtrack.api.errors import (
    http_error_handler,
    recover_middleware,
    request_log_middleware,
    subscription_error_handler,
    validation_error_handler,
)
from src.subtrack.api.routers import subscriptions_router
from src.subtrack.api.schemas import HealthResponse
from src.subtrack.core.logging_config import setup_logging
from src.subtrack.core.settings import get_settings
from src.subtrack.domain.errors import SubscriptionError
from src.subtrack.infra.db import get_engine

logger = logging.getLogger(__name__)

SHUTDOWN_TIMEOUT = 5

# Определение жизненного цикла
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("subscription service started, env=%s", get_settings().ENV)
    yield
    if get_engine.cache_info().currsize:
        get_engine().dispose()
    logger.info("subscription service stopped")


def create_app() -> FastAPI:
    setup_logging(get_settings().effective_log_level)

    app = FastAPI(
        title="Subscription Aggregator API",
        description="REST API for subscription aggregation service",
        version="1.0.0",
        docs_url="/docs",
        redoc_url=None,
        lifespan=lifespan,
    )

    # Порядок важен: логгер запросов снаружи, чтобы видеть и 500 от recover
    app.middleware("http")(recover_middleware)
    app.middleware("http")(request_log_middleware)

    app.add_exception_handler(SubscriptionError, subscription_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(subscriptions_router)

    @app.get("/health", response_model=HealthResponse)
    def health():
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    s = get_settings()
    logger.info("http server listening on %s:%s", s.HTTP_HOST, s.HTTP_PORT)
    uvicorn.run(
        app,
        host=s.HTTP_HOST,
        port=s.HTTP_PORT,
        timeout_keep_alive=int(s.HTTP_IDLE_TIMEOUT),
        timeout_graceful_shutdown=SHUTDOWN_TIMEOUT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
