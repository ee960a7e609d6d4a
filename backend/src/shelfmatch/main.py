"""ShelfMatch API application.

Wires the matching and observability routers, request context middleware,
CORS and error handlers into one FastAPI app. `app` is the module-level
instance served by uvicorn; create_app() builds a fresh one.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import Settings, get_settings
from .errors import register_exception_handlers
from .matching.router import router as matching_router
from .observability.logging_config import configure_logging
from .observability.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from .observability.router import router as observability_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(
        f"ShelfMatch {__version__} starting "
        f"(environment={settings.ENVIRONMENT}, candidate_limit={settings.MATCH_CANDIDATE_LIMIT}, "
        f"profile={settings.DEFAULT_MATCH_PROFILE})"
    )
    yield
    logger.info("ShelfMatch shutting down")


def create_app(settings: Settings = None) -> FastAPI:
    """Build the FastAPI application.

    API docs are disabled in production.
    """
    settings = settings or get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    docs_enabled = settings.ENVIRONMENT != "production"
    application = FastAPI(
        title="ShelfMatch API",
        description="Receipt line and barcode matching against inventory catalogs",
        version=__version__,
        debug=settings.DEBUG,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )

    application.add_middleware(RequestContextMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    register_exception_handlers(application)

    application.include_router(observability_router)
    application.include_router(matching_router)

    @application.get("/", include_in_schema=False)
    def root() -> dict:
        return {"name": "ShelfMatch API", "version": __version__}

    return application


app = create_app()


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "shelfmatch.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
