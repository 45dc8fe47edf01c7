"""
Use case: Reconcile stored ledger state with the transaction log.

Input: none
Output: LedgerAuditResult
Side effects: None (read-only query).
Failure cases: None. An inconsistency is reported, not raised.
"""

import logging

from app.application.portfolio.dtos import LedgerAuditResult
from app.domain.portfolio.ledger import replay_transactions
from app.domain.portfolio.ports import LedgerStore

logger = logging.getLogger(__name__)


class AuditLedgerUseCase:
    """Replays the append-only log and compares it with stored state.

    The wallet balance must equal the signed sum of all transaction
    totals, and every open position must hold exactly the net of its
    buy and sell quantities.
    """

    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    def execute(self) -> LedgerAuditResult:
        transactions = self._store.list_transactions()
        stored_balance = self._store.get_balance()
        stored_quantities = {p.symbol: p.quantity for p in self._store.list_assets()}

        replayed_balance, replayed_quantities = replay_transactions(reversed(transactions))

        mismatched = sorted(
            symbol
            for symbol in set(stored_quantities) | set(replayed_quantities)
            if stored_quantities.get(symbol) != replayed_quantities.get(symbol)
        )
        consistent = stored_balance == replayed_balance and not mismatched

        if not consistent:
            logger.warning(
                "Ledger audit mismatch: stored=%s replayed=%s symbols=%s",
                stored_balance,
                replayed_balance,
                mismatched,
            )

        return LedgerAuditResult(
            consistent=consistent,
            stored_balance=stored_balance,
            replayed_balance=replayed_balance,
            transaction_count=len(transactions),
            mismatched_symbols=mismatched,
        )
