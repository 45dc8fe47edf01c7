"""
Adapter: Binance market-data price gateway.

Implements PriceGateway port against the public Binance REST API
(``/api/v3/ticker/price`` and ``/api/v3/ticker/24hr``).

Symbols cross the port as bare tickers ("BTC"). The adapter appends the
quote currency to build pairs ("BTCUSDT") and strips it from the pairs
Binance returns. Numeric fields arrive as strings and are parsed to
Decimal.
"""

import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from app.domain.portfolio.entities import PriceChange24h, PriceQuote
from app.domain.portfolio.errors import UpstreamUnavailableError
from app.domain.portfolio.ports import PriceGateway

logger = logging.getLogger(__name__)

SERVICE_NAME = "Binance"
PRICE_PATH = "/api/v3/ticker/price"
TICKER_24H_PATH = "/api/v3/ticker/24hr"


class BinancePriceGateway(PriceGateway):
    """Fetches USDT-quoted ticker data from Binance.

    Args:
        base_url: API root, e.g. ``https://data-api.binance.vision``.
        quote_currency: Quote asset used for every pair.
        timeout: Request timeout in seconds.
        client: Optional preconfigured httpx client (used in tests).
    """

    def __init__(
        self,
        base_url: str,
        quote_currency: str = "USDT",
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._quote = quote_currency.upper()
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Symbol helpers
    # ------------------------------------------------------------------

    def _pair(self, symbol: str) -> str:
        return f"{symbol.upper()}{self._quote}"

    def _pairs_param(self, symbols: list[str]) -> str:
        return json.dumps([self._pair(s) for s in symbols], separators=(",", ":"))

    def _base_symbol(self, pair: str) -> str:
        if pair.endswith(self._quote):
            return pair[: -len(self._quote)]
        return pair

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _get(self, path: str, params: dict[str, str]) -> Any:
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Binance %s returned HTTP %d.", path, exc.response.status_code
            )
            raise UpstreamUnavailableError(
                SERVICE_NAME, f"HTTP {exc.response.status_code} for {params}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Binance %s request failed: %s", path, exc)
            raise UpstreamUnavailableError(SERVICE_NAME, str(exc)) from exc
        except ValueError as exc:
            raise UpstreamUnavailableError(SERVICE_NAME, "invalid JSON payload") from exc

    @staticmethod
    def _decimal(payload: dict, key: str) -> Decimal:
        try:
            return Decimal(str(payload[key]))
        except (KeyError, TypeError, InvalidOperation) as exc:
            raise UpstreamUnavailableError(
                SERVICE_NAME, f"malformed field '{key}'"
            ) from exc

    def _to_quote(self, item: dict, symbol: Optional[str] = None) -> PriceQuote:
        return PriceQuote(
            symbol=symbol or self._base_symbol(item.get("symbol", "")),
            price=self._decimal(item, "price"),
        )

    def _to_change(self, item: dict, symbol: Optional[str] = None) -> PriceChange24h:
        return PriceChange24h(
            symbol=symbol or self._base_symbol(item.get("symbol", "")),
            price=self._decimal(item, "lastPrice"),
            price_change=self._decimal(item, "priceChange"),
            price_change_percent=self._decimal(item, "priceChangePercent"),
            high_24h=self._decimal(item, "highPrice"),
            low_24h=self._decimal(item, "lowPrice"),
            volume=self._decimal(item, "volume"),
        )

    @staticmethod
    def _expect_list(payload: Any) -> list:
        if not isinstance(payload, list):
            raise UpstreamUnavailableError(SERVICE_NAME, "expected a list payload")
        return payload

    # ------------------------------------------------------------------
    # PriceGateway
    # ------------------------------------------------------------------

    def get_price(self, symbol: str) -> PriceQuote:
        """Return the last traded price of ``symbol`` in the quote currency."""
        payload = self._get(PRICE_PATH, {"symbol": self._pair(symbol)})
        return self._to_quote(payload, symbol=symbol.upper())

    def get_prices(self, symbols: list[str]) -> list[PriceQuote]:
        if not symbols:
            return []
        payload = self._get(PRICE_PATH, {"symbols": self._pairs_param(symbols)})
        return [self._to_quote(item) for item in self._expect_list(payload)]

    def get_24h_change(self, symbol: str) -> PriceChange24h:
        """Return rolling 24h statistics for ``symbol``."""
        payload = self._get(TICKER_24H_PATH, {"symbol": self._pair(symbol)})
        return self._to_change(payload, symbol=symbol.upper())

    def get_24h_changes(self, symbols: list[str]) -> list[PriceChange24h]:
        if not symbols:
            return []
        payload = self._get(TICKER_24H_PATH, {"symbols": self._pairs_param(symbols)})
        return [self._to_change(item) for item in self._expect_list(payload)]
