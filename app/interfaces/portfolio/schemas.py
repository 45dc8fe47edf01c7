"""
Pydantic schemas for portfolio API request/response validation.

These schemas enforce input shape and define the API contract.
Positivity and precision of amounts are ledger rules checked by the domain,
so that every rejection carries the same human-readable message.
No business logic belongs here.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

SYMBOL_DESCRIPTION = "Bare asset ticker, e.g. BTC (quoted in USDT)"
SYMBOL_PATTERN = r"^[A-Za-z0-9]+$"
SYMBOL_MIN_LEN = 2
SYMBOL_MAX_LEN = 15


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Body returned for every handled error."""

    error: str
    detail: str | None = None


# ── Wallet ───────────────────────────────────────────────────────────


class AmountRequest(BaseModel):
    """Request schema for deposit and withdraw.

    Attributes:
        amount: USDT amount, must be positive.
    """

    amount: Decimal = Field(..., description="USDT amount")


class BalanceResponse(BaseModel):
    balance: Decimal


# ── Trading ──────────────────────────────────────────────────────────


class TradeRequest(BaseModel):
    """Request schema for buy and sell.

    Attributes:
        symbol: Asset ticker (2-15 alphanumeric chars, any case).
        quantity: Amount of the asset to trade.
        price: Unit price in USDT. Omit to trade at the market price.
    """

    symbol: str = Field(
        ...,
        min_length=SYMBOL_MIN_LEN,
        max_length=SYMBOL_MAX_LEN,
        pattern=SYMBOL_PATTERN,
        description=SYMBOL_DESCRIPTION,
    )
    quantity: Decimal = Field(..., description="Quantity of the asset")
    price: Decimal | None = Field(
        default=None, description="Unit price in USDT; market price when omitted"
    )


class AssetItem(_FromAttributes):
    """A single open position."""

    symbol: str
    quantity: Decimal
    avg_buy_price: Decimal


class TransactionItem(_FromAttributes):
    """A single transaction log entry."""

    id: UUID
    type: str
    symbol: str | None
    quantity: Decimal
    price: Decimal | None
    total: Decimal
    timestamp: datetime


class LedgerMutationResponse(_FromAttributes):
    """Response schema for deposit, withdraw, buy and sell."""

    balance: Decimal
    transaction: TransactionItem
    position: AssetItem | None = None


class AssetListResponse(BaseModel):
    assets: list[AssetItem]


class TransactionListResponse(BaseModel):
    transactions: list[TransactionItem]


class LedgerAuditResponse(_FromAttributes):
    """Response schema for the ledger reconciliation check."""

    consistent: bool
    stored_balance: Decimal
    replayed_balance: Decimal
    transaction_count: int
    mismatched_symbols: list[str]


# ── Portfolio summary ────────────────────────────────────────────────


class HoldingItem(_FromAttributes):
    """A held asset valued at the current market price."""

    symbol: str
    quantity: Decimal
    avg_buy_price: Decimal
    current_price: Decimal
    price_available: bool
    market_value: Decimal
    cost_basis: Decimal
    unrealized_pnl: Decimal
    unrealized_pnl_percent: Decimal


class PortfolioSummaryResponse(_FromAttributes):
    """Response schema for the dashboard summary."""

    balance: Decimal
    total_value: Decimal
    total_cost: Decimal
    total_pnl: Decimal
    total_pnl_percent: Decimal
    holdings: list[HoldingItem]


# ── Market data ──────────────────────────────────────────────────────


class PriceItem(_FromAttributes):
    symbol: str
    price: Decimal


class PriceListResponse(BaseModel):
    prices: list[PriceItem]


class PriceChangeResponse(_FromAttributes):
    """24h ticker statistics for one asset."""

    symbol: str
    price: Decimal
    price_change: Decimal
    price_change_percent: Decimal
    high_24h: Decimal
    low_24h: Decimal
    volume: Decimal


# ── Notifications & alerts ───────────────────────────────────────────


class NotificationItem(_FromAttributes):
    """A single price alert notification."""

    id: UUID
    symbol: str
    type: str
    price_change: Decimal
    current_price: Decimal
    ai_analysis: str
    timestamp: datetime
    read: bool


class NotificationListResponse(BaseModel):
    notifications: list[NotificationItem]


class MarkAllReadResponse(BaseModel):
    updated: int


class AlertCheckResponse(_FromAttributes):
    """Counts from one run of the price alert check."""

    checked: int
    alerts: int
    failed: int
    suppressed: int


class AlertTaskItem(BaseModel):
    task_name: str
    status: str
    started_at: str
    finished_at: str | None = None
    duration_seconds: float
    error: str | None = None


class AlertSchedulerStatusResponse(BaseModel):
    running: bool
    interval_minutes: int
    recent_runs: list[AlertTaskItem]
