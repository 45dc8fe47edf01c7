"""
Use cases: Position ledger (buy, sell).

Input: TradeCommand (symbol, quantity, optional price)
Output: LedgerMutationResult
Side effects: Moves USDT through the wallet, updates or removes the
    asset position and appends a transaction record, all in one
    atomic ledger session.
Failure cases: InvalidAmountError, InsufficientFundsError,
    NoPositionError, InsufficientQuantityError, and
    UpstreamUnavailableError when no price is given and the market
    price cannot be fetched.
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from app.application.portfolio.dtos import (
    AssetResult,
    LedgerMutationResult,
    TradeCommand,
    TransactionResult,
)
from app.domain.portfolio.ledger import LedgerOutcome, apply_buy, apply_sell
from app.domain.portfolio.ports import LedgerStore, PriceGateway

logger = logging.getLogger(__name__)


class _TradeUseCase(ABC):
    """Shared orchestration for buys and sells.

    Resolves the trade price, then reads, applies and writes the ledger
    state inside a single session so no partial trade is ever visible.
    """

    side = ""

    def __init__(
        self, store: LedgerStore, price_gateway: Optional[PriceGateway] = None
    ) -> None:
        self._store = store
        self._price_gateway = price_gateway

    @abstractmethod
    def _apply(self, balance, position, symbol, quantity, price) -> LedgerOutcome:
        """Apply the ledger arithmetic for this side of the trade."""

    def _resolve_price(self, command: TradeCommand, symbol: str) -> Decimal:
        if command.price is not None:
            return command.price
        if self._price_gateway is None:
            raise RuntimeError("market-price trade requires a price gateway")
        quote = self._price_gateway.get_price(symbol)
        logger.info("Market price for %s: %s", symbol, quote.price)
        return quote.price

    def execute(self, command: TradeCommand) -> LedgerMutationResult:
        """Run the trade.

        Args:
            command: Symbol, quantity and optional unit price.

        Returns:
            New balance, the appended record and the resulting position.
        """
        symbol = command.symbol.upper()
        price = self._resolve_price(command, symbol)

        with self._store.session() as session:
            balance = session.get_balance(for_update=True)
            position = session.get_position(symbol)
            outcome = self._apply(balance, position, symbol, command.quantity, price)

            session.set_balance(outcome.balance)
            if outcome.position is not None:
                session.save_position(outcome.position)
            elif outcome.position_closed:
                session.delete_position(symbol)
            session.append_transaction(outcome.transaction)

        logger.info(
            "%s %s %s @ %s (total=%s), balance=%s",
            self.side,
            command.quantity,
            symbol,
            price,
            outcome.transaction.total,
            outcome.balance,
        )
        position_result = None
        if outcome.position is not None:
            position_result = AssetResult(
                symbol=outcome.position.symbol,
                quantity=outcome.position.quantity,
                avg_buy_price=outcome.position.avg_buy_price,
            )
        return LedgerMutationResult(
            balance=outcome.balance,
            transaction=TransactionResult.from_entity(outcome.transaction),
            position=position_result,
        )


class BuyUseCase(_TradeUseCase):
    """Buys an asset with USDT at a weighted-average cost basis."""

    side = "Bought"

    def _apply(self, balance, position, symbol, quantity, price) -> LedgerOutcome:
        return apply_buy(balance, position, symbol, quantity, price)


class SellUseCase(_TradeUseCase):
    """Sells (part of) a held asset for USDT."""

    side = "Sold"

    def _apply(self, balance, position, symbol, quantity, price) -> LedgerOutcome:
        return apply_sell(balance, position, symbol, quantity, price)
