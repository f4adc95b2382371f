"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from tourney.admin.router import router as admin_router
from tourney.auth.identity import close_identity, init_identity
from tourney.auth.router import router as auth_router
from tourney.config import get_settings
from tourney.gamification.router import router as gamification_router
from tourney.health.router import router as health_router
from tourney.kv import close_store, init_store
from tourney.middleware import setup_middleware
from tourney.notifications.router import router as notifications_router
from tourney.teams.router import router as teams_router
from tourney.tournaments.router import router as tournaments_router
from tourney.users.router import router as users_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_store(settings)
    await init_identity(settings)
    logger.info("app_started", store_backend=settings.store_backend, environment=settings.environment)

    yield

    await close_identity()
    await close_store()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Tourney API",
        description="Backend API for Tourney — esports tournaments with XP, levels and leaderboards",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(gamification_router)
    app.include_router(tournaments_router)
    app.include_router(teams_router)
    app.include_router(notifications_router)
    app.include_router(admin_router)

    return app


app = create_app()
