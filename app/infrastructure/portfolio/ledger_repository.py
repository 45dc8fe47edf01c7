"""
Adapter: Ledger persistence.

Implements the LedgerStore and LedgerSession ports on top of a
SQLAlchemy engine. A session wraps one ``engine.begin()`` block, so the
wallet, position and transaction writes of a mutation commit together
or not at all.
"""

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator, Optional
from uuid import UUID

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Connection, Engine, Row

from app.domain.portfolio.entities import AssetPosition, Transaction, TransactionType
from app.domain.portfolio.ports import LedgerSession, LedgerStore
from app.infrastructure.portfolio.tables import (
    WALLET_ID,
    assets_table,
    transactions_table,
    wallet_table,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _row_to_position(row: Row) -> AssetPosition:
    return AssetPosition(
        symbol=row.symbol,
        quantity=row.quantity,
        avg_buy_price=row.avg_buy_price,
    )


def _row_to_transaction(row: Row) -> Transaction:
    return Transaction(
        id=UUID(row.id),
        type=TransactionType(row.type),
        symbol=row.symbol,
        quantity=row.quantity,
        price=row.price,
        total=row.total,
        timestamp=row.timestamp,
    )


def _read_balance(conn: Connection, for_update: bool = False) -> Decimal:
    stmt = select(wallet_table.c.balance).where(wallet_table.c.id == WALLET_ID)
    if for_update:
        stmt = stmt.with_for_update()
    balance = conn.execute(stmt).scalar_one_or_none()
    return balance if balance is not None else ZERO


class SqlLedgerSession(LedgerSession):
    """Ledger unit of work bound to one open database transaction."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def get_balance(self, for_update: bool = False) -> Decimal:
        return _read_balance(self._conn, for_update=for_update)

    def set_balance(self, balance: Decimal) -> None:
        result = self._conn.execute(
            update(wallet_table)
            .where(wallet_table.c.id == WALLET_ID)
            .values(balance=balance)
        )
        if result.rowcount == 0:
            self._conn.execute(
                insert(wallet_table).values(id=WALLET_ID, balance=balance)
            )
            logger.info("Wallet created.")

    def get_position(self, symbol: str) -> Optional[AssetPosition]:
        row = self._conn.execute(
            select(assets_table).where(assets_table.c.symbol == symbol)
        ).first()
        return _row_to_position(row) if row is not None else None

    def save_position(self, position: AssetPosition) -> None:
        values = {
            "quantity": position.quantity,
            "avg_buy_price": position.avg_buy_price,
        }
        result = self._conn.execute(
            update(assets_table)
            .where(assets_table.c.symbol == position.symbol)
            .values(**values)
        )
        if result.rowcount == 0:
            self._conn.execute(
                insert(assets_table).values(symbol=position.symbol, **values)
            )

    def delete_position(self, symbol: str) -> None:
        self._conn.execute(delete(assets_table).where(assets_table.c.symbol == symbol))

    def append_transaction(self, transaction: Transaction) -> None:
        self._conn.execute(
            insert(transactions_table).values(
                id=str(transaction.id),
                type=transaction.type.value,
                symbol=transaction.symbol,
                quantity=transaction.quantity,
                price=transaction.price,
                total=transaction.total,
                timestamp=transaction.timestamp,
            )
        )


class SqlLedgerStore(LedgerStore):
    """SQL implementation of the ledger store.

    Implements the LedgerStore port defined in the domain layer.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @contextmanager
    def session(self) -> Iterator[LedgerSession]:
        """Open a ledger session that commits on success, rolls back on error."""
        with self._engine.begin() as conn:
            yield SqlLedgerSession(conn)

    def get_balance(self) -> Decimal:
        with self._engine.connect() as conn:
            return _read_balance(conn)

    def list_assets(self) -> list[AssetPosition]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(assets_table).order_by(assets_table.c.symbol)
            ).fetchall()
        return [_row_to_position(row) for row in rows]

    def list_transactions(
        self, limit: Optional[int] = None, symbol: Optional[str] = None
    ) -> list[Transaction]:
        """Return transactions newest first.

        Args:
            limit: Maximum number of records, or None for all.
            symbol: Optional filter by asset symbol.

        Returns:
            Transactions ordered by insertion, most recent first.
        """
        stmt = select(transactions_table).order_by(transactions_table.c.seq.desc())
        if symbol is not None:
            stmt = stmt.where(transactions_table.c.symbol == symbol)
        if limit is not None:
            stmt = stmt.limit(limit)

        with self._engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_transaction(row) for row in rows]
