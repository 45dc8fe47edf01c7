"""
Domain entities for the portfolio bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class TransactionType(Enum):
    """Kind of ledger movement recorded in the transaction log."""

    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    BUY = "buy"
    SELL = "sell"


class NotificationType(Enum):
    """Direction of a price alert."""

    PRICE_UP = "price_up"
    PRICE_DOWN = "price_down"


@dataclass(frozen=True)
class AssetPosition:
    """An open holding in a single crypto asset.

    Quantity is always strictly positive; a position that reaches zero
    is removed rather than stored.
    """

    symbol: str
    quantity: Decimal
    avg_buy_price: Decimal

    @property
    def cost_basis(self) -> Decimal:
        """Amount of USDT originally paid for the current quantity."""
        return self.quantity * self.avg_buy_price


@dataclass(frozen=True)
class Transaction:
    """An immutable entry in the append-only transaction log.

    ``symbol`` and ``price`` are only set for buy and sell movements.
    ``total`` is the USDT value moved by the transaction.
    """

    type: TransactionType
    quantity: Decimal
    total: Decimal
    symbol: Optional[str] = None
    price: Optional[Decimal] = None
    id: UUID = field(default_factory=uuid4)
    timestamp: datetime = field(default_factory=utc_now)

    @property
    def signed_total(self) -> Decimal:
        """USDT effect of this transaction on the wallet balance."""
        if self.type in (TransactionType.DEPOSIT, TransactionType.SELL):
            return self.total
        return -self.total


@dataclass(frozen=True)
class Notification:
    """A price-change alert with generated commentary."""

    symbol: str
    type: NotificationType
    price_change: Decimal
    current_price: Decimal
    ai_analysis: str
    id: UUID = field(default_factory=uuid4)
    timestamp: datetime = field(default_factory=utc_now)
    read: bool = False


@dataclass(frozen=True)
class PriceQuote:
    """Last traded price for an asset, quoted in USDT."""

    symbol: str
    price: Decimal


@dataclass(frozen=True)
class PriceChange24h:
    """Rolling 24-hour ticker statistics for an asset."""

    symbol: str
    price: Decimal
    price_change: Decimal
    price_change_percent: Decimal
    high_24h: Decimal
    low_24h: Decimal
    volume: Decimal
