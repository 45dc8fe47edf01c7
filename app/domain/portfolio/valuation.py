"""
Portfolio valuation.

Derives market value and unrealized profit/loss from open positions and
current prices. Positions without a live price are valued at their
average buy price.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from app.domain.portfolio.entities import AssetPosition

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def pnl_percent(pnl: Decimal, cost: Decimal) -> Decimal:
    if cost <= ZERO:
        return ZERO
    return pnl / cost * HUNDRED


@dataclass(frozen=True)
class HoldingValuation:
    """Market view of a single open position."""

    symbol: str
    quantity: Decimal
    avg_buy_price: Decimal
    current_price: Decimal
    price_available: bool

    @property
    def market_value(self) -> Decimal:
        return self.quantity * self.current_price

    @property
    def cost_basis(self) -> Decimal:
        return self.quantity * self.avg_buy_price

    @property
    def unrealized_pnl(self) -> Decimal:
        return (self.current_price - self.avg_buy_price) * self.quantity

    @property
    def unrealized_pnl_percent(self) -> Decimal:
        return pnl_percent(self.unrealized_pnl, self.cost_basis)


@dataclass(frozen=True)
class PortfolioValuation:
    """Aggregated market view of all open positions."""

    holdings: list[HoldingValuation] = field(default_factory=list)

    @property
    def total_value(self) -> Decimal:
        return sum((h.market_value for h in self.holdings), ZERO)

    @property
    def total_cost(self) -> Decimal:
        return sum((h.cost_basis for h in self.holdings), ZERO)

    @property
    def total_pnl(self) -> Decimal:
        return self.total_value - self.total_cost

    @property
    def total_pnl_percent(self) -> Decimal:
        return pnl_percent(self.total_pnl, self.total_cost)


def value_positions(
    positions: list[AssetPosition], prices: dict[str, Decimal]
) -> PortfolioValuation:
    """Value each position at ``prices[symbol]`` or its average buy price."""
    holdings = []
    for position in positions:
        live = prices.get(position.symbol)
        holdings.append(
            HoldingValuation(
                symbol=position.symbol,
                quantity=position.quantity,
                avg_buy_price=position.avg_buy_price,
                current_price=live if live is not None else position.avg_buy_price,
                price_available=live is not None,
            )
        )
    return PortfolioValuation(holdings=holdings)
