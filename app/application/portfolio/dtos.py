"""
Data Transfer Objects for the portfolio application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from app.domain.portfolio.entities import Notification, Transaction


@dataclass(frozen=True)
class DepositCommand:
    """Input DTO for crediting the wallet.

    Attributes:
        amount: USDT amount to deposit.
    """

    amount: Decimal


@dataclass(frozen=True)
class WithdrawCommand:
    """Input DTO for debiting the wallet.

    Attributes:
        amount: USDT amount to withdraw.
    """

    amount: Decimal


@dataclass(frozen=True)
class TradeCommand:
    """Input DTO for a buy or sell.

    Attributes:
        symbol: Bare asset ticker, e.g. "BTC".
        quantity: Amount of the asset to trade.
        price: Unit price in USDT. None trades at the current market price.
    """

    symbol: str
    quantity: Decimal
    price: Optional[Decimal] = None


@dataclass(frozen=True)
class ListTransactionsQuery:
    """Input DTO for reading the transaction log.

    Attributes:
        limit: Maximum number of records, None for all.
        symbol: Optional filter by asset symbol.
    """

    limit: Optional[int] = None
    symbol: Optional[str] = None


@dataclass(frozen=True)
class CreateNotificationCommand:
    """Input DTO for recording a price alert."""

    symbol: str
    type: str
    price_change: Decimal
    current_price: Decimal
    ai_analysis: str


@dataclass(frozen=True)
class BalanceResult:
    """Output DTO for the wallet balance."""

    balance: Decimal


@dataclass(frozen=True)
class TransactionResult:
    """Output DTO for one transaction log entry."""

    id: UUID
    type: str
    symbol: Optional[str]
    quantity: Decimal
    price: Optional[Decimal]
    total: Decimal
    timestamp: datetime

    @classmethod
    def from_entity(cls, tx: Transaction) -> "TransactionResult":
        return cls(
            id=tx.id,
            type=tx.type.value,
            symbol=tx.symbol,
            quantity=tx.quantity,
            price=tx.price,
            total=tx.total,
            timestamp=tx.timestamp,
        )


@dataclass(frozen=True)
class AssetResult:
    """Output DTO for an open position."""

    symbol: str
    quantity: Decimal
    avg_buy_price: Decimal


@dataclass(frozen=True)
class LedgerMutationResult:
    """Output DTO for a successful wallet or trade mutation.

    Attributes:
        balance: Wallet balance after the mutation.
        transaction: The transaction record that was appended.
        position: Resulting position for trades; None for wallet
            movements or when a sell closed the position.
    """

    balance: Decimal
    transaction: TransactionResult
    position: Optional[AssetResult] = None


@dataclass(frozen=True)
class NotificationResult:
    """Output DTO for a price alert notification."""

    id: UUID
    symbol: str
    type: str
    price_change: Decimal
    current_price: Decimal
    ai_analysis: str
    timestamp: datetime
    read: bool

    @classmethod
    def from_entity(cls, n: Notification) -> "NotificationResult":
        return cls(
            id=n.id,
            symbol=n.symbol,
            type=n.type.value,
            price_change=n.price_change,
            current_price=n.current_price,
            ai_analysis=n.ai_analysis,
            timestamp=n.timestamp,
            read=n.read,
        )


@dataclass(frozen=True)
class AlertCheckResult:
    """Output DTO for one run of the price alert check.

    Attributes:
        checked: Number of held symbols examined.
        alerts: Number of notifications created.
        failed: Number of symbols skipped because price data was unavailable.
        suppressed: Number of qualifying moves skipped by the suppression window.
    """

    checked: int = 0
    alerts: int = 0
    failed: int = 0
    suppressed: int = 0


@dataclass(frozen=True)
class HoldingResult:
    """Output DTO for one valued holding."""

    symbol: str
    quantity: Decimal
    avg_buy_price: Decimal
    current_price: Decimal
    price_available: bool
    market_value: Decimal
    cost_basis: Decimal
    unrealized_pnl: Decimal
    unrealized_pnl_percent: Decimal


@dataclass(frozen=True)
class PortfolioSummaryResult:
    """Output DTO for the portfolio dashboard totals."""

    balance: Decimal
    total_value: Decimal
    total_cost: Decimal
    total_pnl: Decimal
    total_pnl_percent: Decimal
    holdings: list[HoldingResult] = field(default_factory=list)


@dataclass(frozen=True)
class LedgerAuditResult:
    """Output DTO for the transaction-log reconciliation check.

    Attributes:
        consistent: True when stored state matches the replayed log.
        stored_balance: Wallet balance as persisted.
        replayed_balance: Signed sum of all transaction totals.
        mismatched_symbols: Symbols whose stored and replayed quantities differ.
    """

    consistent: bool
    stored_balance: Decimal
    replayed_balance: Decimal
    transaction_count: int
    mismatched_symbols: list[str] = field(default_factory=list)
