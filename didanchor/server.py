from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from didanchor.config import Settings, settings as default_settings
from didanchor.container import Container, build_container
from didanchor.exceptions import AnchorError, DidAnchorError, VerificationFailedError
from didanchor.logging import configure_logging, get_logger, request_id_middleware
from didanchor.api.router import router as api_router

logger = get_logger(__name__)


def error_body(exc: DidAnchorError) -> dict:
    body = {"error": exc.kind, "message": str(exc)}
    if isinstance(exc, (AnchorError, VerificationFailedError)) and exc.upstream_status is not None:
        body["upstreamStatus"] = exc.upstream_status
    return body


def create_app(settings: Optional[Settings] = None, container: Optional[Container] = None) -> FastAPI:
    """
    Creates and configures the FastAPI application instance.

    This includes configuring logging, building the component container (unless one is
    supplied), adding request ID middleware, mapping error kinds to HTTP statuses and
    including the API router.

    Returns:
        FastAPI: The configured FastAPI application instance.
    """
    settings = settings or default_settings
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.container.close()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.container = container or build_container(settings)

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Middleware to add a unique request ID to each incoming request and log it."""
        request_id: str = request_id_middleware(request)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(DidAnchorError)
    async def handle_didanchor_error(request: Request, exc: DidAnchorError):
        # Context was logged where the error was raised
        return JSONResponse(status_code=exc.status_code, content=error_body(exc))

    @app.get("/health", tags=["Health Check"])
    async def health_check():
        logger.info("Health check endpoint was called.")
        return {"status": "ok", "app_name": settings.app_name, "debug_mode": settings.debug}

    app.include_router(api_router)

    return app


def app_factory() -> FastAPI:
    """Entry point for uvicorn's --factory mode."""
    return create_app()
