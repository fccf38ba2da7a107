"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api import auth, pages
from src.api.errors import register_exception_handlers
from src.config import Settings, get_settings
from src.database import Database
from src.middleware import CredentialDelayMiddleware, SessionGateMiddleware

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure console logging for the process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the connection pool on startup and release it on shutdown."""
    settings: Settings = app.state.settings
    database = Database(settings.sqlalchemy_url, pool_size=settings.db_pool_size)
    app.state.database = database
    logger.info(f"{settings.app_name} started ({settings.environment})")
    yield
    database.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around ``settings`` (environment by default)."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="EcoTracker API",
        description="Accounts and cookie sessions for the EcoTracker carbon footprint tracker",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(CredentialDelayMiddleware, settings=settings)
    app.add_middleware(
        SessionGateMiddleware,
        cookie_name=settings.session_cookie_name,
        page_prefixes=settings.protected_page_prefixes,
        api_prefixes=settings.protected_api_prefixes,
    )

    # CORS middleware for development
    if settings.is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    # Register routers
    app.include_router(auth.router)
    app.include_router(pages.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "environment": settings.environment}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host="0.0.0.0", port=8000, reload=True)
