"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from teamspace.api.middleware.error_handler import error_handler_middleware
from teamspace.api.middleware.latency_logging import latency_logging_middleware
from teamspace.api.routes import categories, company_users, health, settings, tasks
from teamspace.core.config import get_settings
from teamspace.schemas.common import API_VERSION

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup and shutdown of the application."""
    app_settings = get_settings()
    logger.info("Starting %s in %s mode", app_settings.app_name, app_settings.app_env)
    yield
    logger.info("Shutting down %s", app_settings.app_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance.
    """
    app_settings = get_settings()

    app = FastAPI(
        title="Teamspace API",
        description="Company workspace users, settings and task categories",
        version=API_VERSION,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        openapi_url="/openapi.json" if app_settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Turns every exception raised by the routes into an ErrorResponse
    app.add_middleware(BaseHTTPMiddleware, dispatch=error_handler_middleware)
    app.add_middleware(BaseHTTPMiddleware, dispatch=latency_logging_middleware)

    app.include_router(health.router)

    api_v1_router = APIRouter(prefix="/api/v1")
    api_v1_router.include_router(settings.router)
    api_v1_router.include_router(company_users.router)
    api_v1_router.include_router(tasks.router)
    api_v1_router.include_router(categories.router)
    app.include_router(api_v1_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    app_settings = get_settings()
    uvicorn.run(
        "teamspace.main:app",
        host=app_settings.host,
        port=app_settings.port,
        reload=app_settings.debug,
    )
