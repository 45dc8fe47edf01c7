"""
Use cases: Market data lookups through the price gateway.

Input: symbol / list of symbols
Output: PriceQuote / list[PriceQuote] / PriceChange24h
Side effects: Outbound HTTP call to the exchange.
Failure cases: UpstreamUnavailableError.
"""

from app.domain.portfolio.entities import PriceChange24h, PriceQuote
from app.domain.portfolio.ports import PriceGateway


class GetPriceUseCase:
    """Returns the current price of one symbol."""

    def __init__(self, price_gateway: PriceGateway) -> None:
        self._gateway = price_gateway

    def execute(self, symbol: str) -> PriceQuote:
        return self._gateway.get_price(symbol.upper())


class GetPricesUseCase:
    """Returns current prices for several symbols."""

    def __init__(self, price_gateway: PriceGateway) -> None:
        self._gateway = price_gateway

    def execute(self, symbols: list[str]) -> list[PriceQuote]:
        unique = list(dict.fromkeys(s.upper() for s in symbols if s))
        return self._gateway.get_prices(unique)


class GetPriceChangeUseCase:
    """Returns 24h ticker statistics for one symbol."""

    def __init__(self, price_gateway: PriceGateway) -> None:
        self._gateway = price_gateway

    def execute(self, symbol: str) -> PriceChange24h:
        return self._gateway.get_24h_change(symbol.upper())
