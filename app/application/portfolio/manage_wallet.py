"""
Use cases: Wallet ledger (deposit, withdraw, balance).

Input: DepositCommand / WithdrawCommand
Output: LedgerMutationResult / BalanceResult
Side effects: Updates the wallet balance and appends a transaction
    record in one atomic ledger session.
Failure cases: InvalidAmountError, InsufficientFundsError.
"""

import logging

from app.application.portfolio.dtos import (
    BalanceResult,
    DepositCommand,
    LedgerMutationResult,
    TransactionResult,
    WithdrawCommand,
)
from app.domain.portfolio.ledger import apply_deposit, apply_withdraw
from app.domain.portfolio.ports import LedgerStore

logger = logging.getLogger(__name__)


class DepositUseCase:
    """Credits USDT to the wallet, creating it on first deposit."""

    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    def execute(self, command: DepositCommand) -> LedgerMutationResult:
        """Run the deposit.

        Args:
            command: Amount to credit.

        Returns:
            The new balance and the appended deposit record.
        """
        with self._store.session() as session:
            outcome = apply_deposit(session.get_balance(for_update=True), command.amount)
            session.set_balance(outcome.balance)
            session.append_transaction(outcome.transaction)

        logger.info("Deposited %s USDT, balance=%s", command.amount, outcome.balance)
        return LedgerMutationResult(
            balance=outcome.balance,
            transaction=TransactionResult.from_entity(outcome.transaction),
        )


class WithdrawUseCase:
    """Debits USDT from the wallet when the balance allows it."""

    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    def execute(self, command: WithdrawCommand) -> LedgerMutationResult:
        """Run the withdrawal.

        Args:
            command: Amount to debit.

        Returns:
            The new balance and the appended withdraw record.
        """
        with self._store.session() as session:
            outcome = apply_withdraw(session.get_balance(for_update=True), command.amount)
            session.set_balance(outcome.balance)
            session.append_transaction(outcome.transaction)

        logger.info("Withdrew %s USDT, balance=%s", command.amount, outcome.balance)
        return LedgerMutationResult(
            balance=outcome.balance,
            transaction=TransactionResult.from_entity(outcome.transaction),
        )


class GetBalanceUseCase:
    """Reads the wallet balance (0 if no wallet exists yet)."""

    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    def execute(self) -> BalanceResult:
        return BalanceResult(balance=self._store.get_balance())
