"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.portfolio.errors import (
    InsufficientFundsError,
    InsufficientQuantityError,
    InvalidAmountError,
    NoPositionError,
    NotificationNotFoundError,
    PortfolioDomainError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_404 = 404
HTTP_422 = 422
HTTP_500 = 500
HTTP_502 = 502


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(InvalidAmountError)
    async def handle_invalid_amount(
        _request: Request, exc: InvalidAmountError
    ) -> JSONResponse:
        """Handle non-positive amounts, quantities and prices."""
        logger.warning("Invalid %s: %s", exc.field, exc.value)
        return _error_response(HTTP_422, "Invalid amount", exc.message)

    @app.exception_handler(InsufficientFundsError)
    async def handle_insufficient_funds(
        _request: Request, exc: InsufficientFundsError
    ) -> JSONResponse:
        logger.warning(
            "Insufficient funds: need %s, have %s", exc.required, exc.available
        )
        return _error_response(HTTP_400, "Insufficient funds", exc.message)

    @app.exception_handler(NoPositionError)
    async def handle_no_position(
        _request: Request, exc: NoPositionError
    ) -> JSONResponse:
        logger.warning("Sell without position: %s", exc.symbol)
        return _error_response(HTTP_404, "Position not found", exc.message)

    @app.exception_handler(InsufficientQuantityError)
    async def handle_insufficient_quantity(
        _request: Request, exc: InsufficientQuantityError
    ) -> JSONResponse:
        logger.warning(
            "Insufficient %s: have %s, requested %s",
            exc.symbol,
            exc.held,
            exc.requested,
        )
        return _error_response(HTTP_400, "Insufficient quantity", exc.message)

    @app.exception_handler(NotificationNotFoundError)
    async def handle_notification_not_found(
        _request: Request, exc: NotificationNotFoundError
    ) -> JSONResponse:
        logger.warning("Notification not found: %s", exc.notification_id)
        return _error_response(HTTP_404, "Notification not found", exc.message)

    @app.exception_handler(UpstreamUnavailableError)
    async def handle_upstream_unavailable(
        _request: Request, exc: UpstreamUnavailableError
    ) -> JSONResponse:
        """Handle exchange or LLM provider outages."""
        logger.error("%s unavailable: %s", exc.service, exc.reason)
        return _error_response(
            HTTP_502, "Upstream unavailable", f"{exc.service} is unavailable"
        )

    @app.exception_handler(PortfolioDomainError)
    async def handle_portfolio_domain(
        _request: Request, exc: PortfolioDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled portfolio domain errors."""
        logger.error("Unhandled portfolio domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
