"""Showdown FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from showdown import __version__
from showdown.api.routes import router as api_router
from showdown.commentary.provider import CommentaryProvider
from showdown.config import Settings, get_settings
from showdown.game.engine import RoundEngine, create_engine
from showdown.game.rules import MOVES
from showdown.lib.exceptions import ConfigurationError, ShowdownError
from showdown.lib.llm import close_llm_client, get_llm_client
from showdown.lib.models import ConfigResponse, HealthResponse, Outcome

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# =============================================================================
# Lifespan Management
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler."""
    settings: Settings = app.state.settings

    # Startup
    logger.info("Starting Showdown...")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Commentary model: {settings.commentary_model}")

    if getattr(app.state, "engine", None) is None:
        # Missing credentials are a startup error, not a per-round one
        settings.require_credentials()
        llm_client = await get_llm_client()
        provider = CommentaryProvider(llm_client, settings)
        app.state.engine = create_engine(provider, settings)
        logger.info("Round engine initialized")

    yield

    # Shutdown
    logger.info("Shutting down Showdown...")
    await app.state.engine.close()
    await close_llm_client()
    logger.info("Shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================


def create_app(
    engine: RoundEngine | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        engine: Pre-built engine (tests); built during startup if omitted
        settings: Optional settings override
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Showdown",
        description="Rock-paper-scissors with generated commentary",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok", version=__version__)

    @app.get("/api/config", response_model=ConfigResponse, tags=["Config"])
    async def get_config() -> ConfigResponse:
        """Move icons and labels for the configured language."""
        return ConfigResponse(
            language=settings.display_language,
            decision_delay=settings.decision_delay,
            moves=[
                {"value": m.value, "icon": m.icon, "label": m.label(settings.display_language)}
                for m in MOVES
            ],
            outcomes=[o.value for o in Outcome],
        )

    return app


# =============================================================================
# Exception Handlers
# =============================================================================


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers."""

    @app.exception_handler(ShowdownError)
    async def showdown_error_handler(
        request: Request, exc: ShowdownError
    ) -> JSONResponse:
        logger.error(f"Showdown error: {exc.message}")
        content = {"detail": exc.message, "details": exc.details}
        if isinstance(exc, ConfigurationError):
            content["setting"] = exc.setting
        return JSONResponse(status_code=500, content=content)


# =============================================================================
# Application Instance
# =============================================================================


app = create_app()
