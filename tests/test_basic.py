"""
Basic application tests.

Validates that the FastAPI app starts correctly, the health endpoint
responds and every portfolio route is mounted under /api/v1.
"""

from fastapi.testclient import TestClient

from app.core.config import settings
from app.interfaces.portfolio.dependencies import (
    close_http_adapters,
    get_commentary_generator,
    get_price_gateway,
)
from app.main import app

client = TestClient(app)


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_returns_200(self) -> None:
        """Health endpoint must return HTTP 200 with status ok."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200

    def test_health_response_body(self) -> None:
        """Health endpoint reports the configured version."""
        body = client.get("/api/v1/health").json()
        assert body == {"status": "ok", "version": settings.version}


class TestRouting:
    """Tests for router registration."""

    def test_portfolio_routes_mounted(self) -> None:
        """Every route is published under /api/v1 in the OpenAPI schema."""
        paths = set(app.openapi()["paths"])
        for path in (
            "/api/v1/wallet/balance",
            "/api/v1/wallet/deposit",
            "/api/v1/wallet/withdraw",
            "/api/v1/trading/buy",
            "/api/v1/trading/sell",
            "/api/v1/assets",
            "/api/v1/transactions",
            "/api/v1/transactions/{symbol}",
            "/api/v1/ledger/audit",
            "/api/v1/portfolio/summary",
            "/api/v1/prices",
            "/api/v1/prices/{symbol}",
            "/api/v1/prices/{symbol}/24h",
            "/api/v1/notifications",
            "/api/v1/notifications/{notification_id}/read",
            "/api/v1/notifications/read-all",
            "/api/v1/alerts/check",
            "/api/v1/alerts/status",
        ):
            assert path in paths

    def test_docs_hidden_outside_debug(self) -> None:
        if not settings.debug:
            assert client.get("/docs").status_code == 404


class TestShutdown:
    """Tests for releasing adapters at shutdown."""

    def test_close_http_adapters_closes_cached_clients(self) -> None:
        """Cached gateway and commentary clients are closed and evicted."""
        gateway = get_price_gateway()
        commentary = get_commentary_generator()

        close_http_adapters()

        assert gateway._client.is_closed
        assert commentary._client.is_closed
        assert get_price_gateway.cache_info().currsize == 0
        assert get_commentary_generator.cache_info().currsize == 0

    def test_close_without_adapters_is_noop(self) -> None:
        get_price_gateway.cache_clear()
        get_commentary_generator.cache_clear()
        close_http_adapters()
        assert get_price_gateway.cache_info().currsize == 0
