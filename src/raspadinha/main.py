"""FastAPI application factory."""

from __future__ import annotations

import logging
import random
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from raspadinha.api.middleware import setup_middleware
from raspadinha.core.config import Settings
from raspadinha.core.logging import setup_logging
from raspadinha.services.payments import PaymentSimulator
from raspadinha.services.sessions import RandomSource, TicketSession
from raspadinha.services.tiers import build_prize_engine

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, rng: RandomSource | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Tiers are loaded and validated here, so a bad payout table stops the
    app from starting rather than failing on the first draw.
    """
    if settings is None:
        settings = Settings()

    if not settings.is_testing:
        setup_logging(level=settings.log_level, log_format=settings.log_format)

    engine = build_prize_engine(
        normalize=settings.normalize_payout_tables,
        epsilon=settings.probability_epsilon,
    )
    if rng is None and settings.rng_seed is not None:
        logger.warning("Using seeded RNG (seed=%d); draws are predictable", settings.rng_seed)
        rng = random.Random(settings.rng_seed).random

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting Raspadinha API (env=%s)", settings.app_env)
        yield
        stats = app.state.ticket_session.get_stats()
        logger.info(
            "Shutting down Raspadinha API: %d tickets, %s paid out",
            stats.total_tickets,
            stats.total_winnings,
        )

    application = FastAPI(
        title="Raspadinha API",
        description="Scratch ticket game: purchase, reveal and statistics",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.state.settings = settings
    application.state.prize_engine = engine
    application.state.payments = PaymentSimulator()
    application.state.ticket_session = TicketSession(
        engine,
        rng=rng,
        reveal_threshold=settings.reveal_threshold,
    )

    setup_middleware(application)
    _register_routes(application)

    return application


def _register_routes(app: FastAPI) -> None:
    """Register all API route modules."""
    from raspadinha.api.routes.game import router as game_router
    from raspadinha.api.routes.health import router as health_router
    from raspadinha.api.routes.tiers import router as tiers_router

    app.include_router(health_router, tags=["health"])
    app.include_router(tiers_router)
    app.include_router(game_router)


def app_factory() -> FastAPI:
    """Entry point for ``uvicorn --factory raspadinha.main:app_factory``."""
    return create_app()
