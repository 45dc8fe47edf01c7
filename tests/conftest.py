"""
Shared fixtures for the portfolio tests.

Ledger and notification stores run against a private in-memory SQLite
database per test. Outbound ports (price gateway, commentary) are
replaced by in-process fakes so no test touches the network.
"""

from decimal import Decimal
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from app.domain.portfolio.entities import NotificationType, PriceChange24h, PriceQuote
from app.domain.portfolio.errors import UpstreamUnavailableError
from app.domain.portfolio.ports import CommentaryGenerator, PriceGateway
from app.infrastructure.portfolio.database import create_ledger_engine
from app.infrastructure.portfolio.ledger_repository import SqlLedgerStore
from app.infrastructure.portfolio.notification_repository import (
    SqlNotificationRepository,
)


def make_change(symbol: str, percent: str, price: str = "100") -> PriceChange24h:
    """Build 24h stats with the given percent move and last price."""
    return PriceChange24h(
        symbol=symbol,
        price=Decimal(price),
        price_change=Decimal(price) * Decimal(percent) / Decimal("100"),
        price_change_percent=Decimal(percent),
        high_24h=Decimal(price),
        low_24h=Decimal(price),
        volume=Decimal("1000"),
    )


class FakePriceGateway(PriceGateway):
    """In-memory price gateway.

    Symbols missing from ``prices`` / ``changes`` or listed in
    ``unavailable`` fail with UpstreamUnavailableError. ``batch_available``
    controls the multi-symbol calls.
    """

    def __init__(
        self,
        prices: Optional[dict[str, Decimal]] = None,
        changes: Optional[dict[str, PriceChange24h]] = None,
    ) -> None:
        self.prices = dict(prices or {})
        self.changes = dict(changes or {})
        self.unavailable: set[str] = set()
        self.batch_available = True
        self.calls: list[str] = []

    def _check(self, symbol: str, source: dict) -> None:
        if symbol in self.unavailable or symbol not in source:
            raise UpstreamUnavailableError("Fake", f"no data for {symbol}")

    def get_price(self, symbol: str) -> PriceQuote:
        self.calls.append(f"price:{symbol}")
        self._check(symbol, self.prices)
        return PriceQuote(symbol=symbol, price=self.prices[symbol])

    def get_prices(self, symbols: list[str]) -> list[PriceQuote]:
        self.calls.append("prices")
        if not self.batch_available:
            raise UpstreamUnavailableError("Fake", "batch down")
        return [
            PriceQuote(symbol=s, price=self.prices[s])
            for s in symbols
            if s in self.prices
        ]

    def get_24h_change(self, symbol: str) -> PriceChange24h:
        self.calls.append(f"24h:{symbol}")
        self._check(symbol, self.changes)
        return self.changes[symbol]

    def get_24h_changes(self, symbols: list[str]) -> list[PriceChange24h]:
        self.calls.append("24h-batch")
        if not self.batch_available:
            raise UpstreamUnavailableError("Fake", "batch down")
        return [self.changes[s] for s in symbols if s in self.changes]


class FakeCommentary(CommentaryGenerator):
    """Commentary generator that records its calls."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Decimal, Decimal, NotificationType]] = []

    def generate(self, symbol, percent_change, current_price, direction) -> str:
        self.calls.append((symbol, percent_change, current_price, direction))
        return f"Commentary on {symbol}"


@pytest.fixture
def engine():
    """Fresh in-memory ledger database."""
    engine = create_ledger_engine("sqlite://")
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine) -> SqlLedgerStore:
    return SqlLedgerStore(engine)


@pytest.fixture
def notification_repo(engine) -> SqlNotificationRepository:
    return SqlNotificationRepository(engine)


@pytest.fixture
def gateway() -> FakePriceGateway:
    return FakePriceGateway()


@pytest.fixture
def commentary() -> FakeCommentary:
    return FakeCommentary()


@pytest.fixture
def client(store, notification_repo, gateway, commentary):
    """TestClient with every adapter swapped for a test double.

    The client is not used as a context manager, so the lifespan (and
    with it the alert scheduler) never starts.
    """
    from app.interfaces.portfolio.dependencies import (
        get_commentary_generator,
        get_ledger_store,
        get_notification_repository,
        get_price_gateway,
    )
    from app.main import app
    from app.shared.security.rate_limiting import limiter

    app.dependency_overrides[get_ledger_store] = lambda: store
    app.dependency_overrides[get_notification_repository] = lambda: notification_repo
    app.dependency_overrides[get_price_gateway] = lambda: gateway
    app.dependency_overrides[get_commentary_generator] = lambda: commentary
    limiter.enabled = False

    yield TestClient(app)

    app.dependency_overrides.clear()
    limiter.enabled = True
