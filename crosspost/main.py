from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import settings
from .domain.credentials import CredentialStore
from .domain.errors import PublishValidationError
from .infrastructure.adapters import FanOutPublisher, TargetRegistry
from .infrastructure.logging import configure_logging
from .infrastructure.media_fetcher import HttpMediaFetcher
from .infrastructure.messaging import WhatsAppSession
from .presentation.api.v1 import health, messaging, posts
from .presentation.middleware import CorrelationIdMiddleware

configure_logging(settings.service_name, debug=settings.debug)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler (composition root)."""
    logger.info("Starting application", service=settings.service_name)

    registry = TargetRegistry.from_settings(settings)
    fetcher = HttpMediaFetcher(timeout=settings.media_fetch_timeout)
    app.state.registry = registry
    app.state.publisher = FanOutPublisher(
        registry=registry,
        fetcher=fetcher,
        request_timeout=settings.request_timeout,
    )

    credentials = CredentialStore.from_settings(settings)
    session = WhatsAppSession(
        credentials.whatsapp,
        max_attempts=settings.whatsapp_max_connect_attempts,
        retry_delay=settings.whatsapp_retry_delay,
        timeout=settings.request_timeout,
    )
    app.state.messaging_session = session
    await session.connect()

    logger.info(
        "Targets registered",
        targets=registry.known_targets,
        default_targets=registry.default_targets,
    )

    yield

    await session.close()
    logger.info("Application shutdown complete")


async def validation_error_handler(request: Request, exc: PublishValidationError) -> JSONResponse:
    logger.warning("Publish request rejected", error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": str(exc)},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "invalid request body")
    logger.warning("Publish request rejected", error=message, error_count=len(errors))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": message},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Crosspost Publisher API",
        description="Publish one post to several social networks at once",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(CorrelationIdMiddleware)
    app.add_exception_handler(PublishValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(health.router)
    app.include_router(posts.router, prefix="/api/v1")
    app.include_router(messaging.router, prefix="/api/v1")
    return app


app = create_app()


def run() -> None:
    uvicorn.run("crosspost.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
