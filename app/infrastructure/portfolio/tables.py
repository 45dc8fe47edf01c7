"""
SQL schema for the portfolio ledger.

Four record collections: the singleton wallet, open asset positions,
the append-only transaction log, and price alert notifications.
Monetary values are stored as decimal strings so that no backend
rounds them through floating point.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.types import TypeDecorator

WALLET_ID = 1


class DecimalString(TypeDecorator):
    """Decimal persisted as its exact string representation."""

    impl = String(64)
    cache_ok = True

    def process_bind_param(self, value: Optional[Decimal], dialect) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    def process_result_value(self, value: Optional[str], dialect) -> Optional[Decimal]:
        if value is None:
            return None
        return Decimal(value)


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime normalized to UTC on the way in and out.

    SQLite drops tzinfo, so naive values read back are treated as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError("naive datetime passed to a UTC column")
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


metadata = MetaData()

wallet_table = Table(
    "wallet",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("balance", DecimalString, nullable=False),
)

assets_table = Table(
    "assets",
    metadata,
    Column("symbol", String(20), primary_key=True),
    Column("quantity", DecimalString, nullable=False),
    Column("avg_buy_price", DecimalString, nullable=False),
)

transactions_table = Table(
    "transactions",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String(36), nullable=False, unique=True),
    Column("type", String(10), nullable=False),
    Column("symbol", String(20), nullable=True),
    Column("quantity", DecimalString, nullable=False),
    Column("price", DecimalString, nullable=True),
    Column("total", DecimalString, nullable=False),
    Column("timestamp", UTCDateTime, nullable=False),
    Index("ix_transactions_symbol", "symbol"),
)

notifications_table = Table(
    "notifications",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String(36), nullable=False, unique=True),
    Column("symbol", String(20), nullable=False),
    Column("type", String(12), nullable=False),
    Column("price_change", DecimalString, nullable=False),
    Column("current_price", DecimalString, nullable=False),
    Column("ai_analysis", Text, nullable=False),
    Column("timestamp", UTCDateTime, nullable=False),
    Column("read", Boolean, nullable=False, default=False),
    Index("ix_notifications_symbol_type", "symbol", "type"),
    Index("ix_notifications_read", "read"),
)
