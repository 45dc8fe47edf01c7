"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (ledger, market data, alerts)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration
- The background price alert scheduler

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.core.config import settings
from app.infrastructure.portfolio.alert_scheduler import AlertScheduler
from app.interfaces.health import router as health_router
from app.interfaces.portfolio.alerts_router import router as alerts_router
from app.interfaces.portfolio.dependencies import (
    build_scheduled_check,
    close_http_adapters,
)
from app.interfaces.portfolio.market_router import router as market_router
from app.interfaces.portfolio.router import router as portfolio_router
from app.shared.errors.handlers import register_error_handlers
from app.shared.logging import configure_logging
from app.shared.security.headers import SecurityHeadersMiddleware
from app.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: run the price alert scheduler, then close HTTP clients."""
    scheduler = None
    if settings.alerts_enabled:
        scheduler = AlertScheduler(
            check_factory=build_scheduled_check,
            interval_minutes=settings.alert_interval_minutes,
        )
        scheduler.start()
    else:
        logger.info("Price alerts disabled; scheduler not started.")
    app.state.alert_scheduler = scheduler

    yield

    if scheduler is not None:
        scheduler.stop()
    close_http_adapters()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(portfolio_router, prefix="/api/v1")
    app.include_router(market_router, prefix="/api/v1")
    app.include_router(alerts_router, prefix="/api/v1")

    return app


app = create_app()
