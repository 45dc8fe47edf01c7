"""
Use case: Portfolio dashboard summary.

Input: none
Output: PortfolioSummaryResult
Side effects: Outbound price lookup for held symbols.
Failure cases: None. When prices cannot be fetched the holdings are
    valued at their average buy price and flagged.
"""

import logging
from decimal import Decimal

from app.application.portfolio.dtos import HoldingResult, PortfolioSummaryResult
from app.domain.portfolio.errors import UpstreamUnavailableError
from app.domain.portfolio.ports import LedgerStore, PriceGateway
from app.domain.portfolio.valuation import value_positions

logger = logging.getLogger(__name__)


class GetPortfolioSummaryUseCase:
    """Values open positions at market and derives unrealized P&L."""

    def __init__(self, store: LedgerStore, price_gateway: PriceGateway) -> None:
        self._store = store
        self._gateway = price_gateway

    def _live_prices(self, symbols: list[str]) -> dict[str, Decimal]:
        if not symbols:
            return {}
        try:
            return {q.symbol: q.price for q in self._gateway.get_prices(symbols)}
        except UpstreamUnavailableError as exc:
            logger.warning("Live prices unavailable, using cost basis: %s", exc.message)
            return {}

    def execute(self) -> PortfolioSummaryResult:
        positions = self._store.list_assets()
        prices = self._live_prices([p.symbol for p in positions])
        valuation = value_positions(positions, prices)

        return PortfolioSummaryResult(
            balance=self._store.get_balance(),
            total_value=valuation.total_value,
            total_cost=valuation.total_cost,
            total_pnl=valuation.total_pnl,
            total_pnl_percent=valuation.total_pnl_percent,
            holdings=[
                HoldingResult(
                    symbol=h.symbol,
                    quantity=h.quantity,
                    avg_buy_price=h.avg_buy_price,
                    current_price=h.current_price,
                    price_available=h.price_available,
                    market_value=h.market_value,
                    cost_basis=h.cost_basis,
                    unrealized_pnl=h.unrealized_pnl,
                    unrealized_pnl_percent=h.unrealized_pnl_percent,
                )
                for h in valuation.holdings
            ],
        )
