"""
Use cases: Read the ledger (open positions, transaction log).

Input: none / ListTransactionsQuery
Output: list[AssetResult] / list[TransactionResult]
Side effects: None (read-only queries).
Failure cases: None.
"""

import logging

from app.application.portfolio.dtos import (
    AssetResult,
    ListTransactionsQuery,
    TransactionResult,
)
from app.domain.portfolio.ports import LedgerStore

logger = logging.getLogger(__name__)


class ListAssetsUseCase:
    """Returns all open positions ordered by symbol."""

    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    def execute(self) -> list[AssetResult]:
        return [
            AssetResult(
                symbol=p.symbol,
                quantity=p.quantity,
                avg_buy_price=p.avg_buy_price,
            )
            for p in self._store.list_assets()
        ]


class ListTransactionsUseCase:
    """Returns the transaction log, most recent first."""

    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    def execute(self, query: ListTransactionsQuery) -> list[TransactionResult]:
        """Run the query.

        Args:
            query: Optional limit and symbol filter.

        Returns:
            Matching transactions, newest first.
        """
        symbol = query.symbol.upper() if query.symbol else None
        logger.debug("Listing transactions: symbol=%s, limit=%s", symbol, query.limit)
        transactions = self._store.list_transactions(limit=query.limit, symbol=symbol)
        return [TransactionResult.from_entity(tx) for tx in transactions]
