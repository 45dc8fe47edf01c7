"""
Port interfaces (ABCs) for the portfolio bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from app.domain.portfolio.entities import (
    AssetPosition,
    Notification,
    NotificationType,
    PriceChange24h,
    PriceQuote,
    Transaction,
)


class LedgerSession(ABC):
    """Unit of work over the wallet, positions and transaction log.

    Every change made through one session is committed together when the
    session context exits cleanly, and discarded when it exits with an
    exception.
    """

    @abstractmethod
    def get_balance(self, for_update: bool = False) -> Decimal:
        """Return the wallet balance, 0 if the wallet was never created.

        Args:
            for_update: Lock the wallet row until the session ends.
        """
        raise NotImplementedError

    @abstractmethod
    def set_balance(self, balance: Decimal) -> None:
        """Store the wallet balance, creating the wallet if needed."""
        raise NotImplementedError

    @abstractmethod
    def get_position(self, symbol: str) -> Optional[AssetPosition]:
        """Return the open position for a symbol, or None."""
        raise NotImplementedError

    @abstractmethod
    def save_position(self, position: AssetPosition) -> None:
        """Insert or replace the position for ``position.symbol``."""
        raise NotImplementedError

    @abstractmethod
    def delete_position(self, symbol: str) -> None:
        """Remove the position for a symbol."""
        raise NotImplementedError

    @abstractmethod
    def append_transaction(self, transaction: Transaction) -> None:
        """Append a record to the transaction log."""
        raise NotImplementedError


class LedgerStore(ABC):
    """Port for reading ledger state and opening atomic sessions."""

    @abstractmethod
    def session(self) -> AbstractContextManager[LedgerSession]:
        """Open an all-or-nothing ledger session."""
        raise NotImplementedError

    @abstractmethod
    def get_balance(self) -> Decimal:
        """Return the wallet balance, 0 if the wallet was never created."""
        raise NotImplementedError

    @abstractmethod
    def list_assets(self) -> list[AssetPosition]:
        """Return all open positions ordered by symbol."""
        raise NotImplementedError

    @abstractmethod
    def list_transactions(
        self, limit: Optional[int] = None, symbol: Optional[str] = None
    ) -> list[Transaction]:
        """Return transactions newest first.

        Args:
            limit: Maximum number of records, or None for all.
            symbol: Optional filter by asset symbol.
        """
        raise NotImplementedError


class NotificationRepository(ABC):
    """Port for persisting and retrieving price alert notifications."""

    @abstractmethod
    def save(self, notification: Notification) -> None:
        """Persist a new notification."""
        raise NotImplementedError

    @abstractmethod
    def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        """Return a notification by id, or None if not found."""
        raise NotImplementedError

    @abstractmethod
    def find_all(self, unread_only: bool = False) -> list[Notification]:
        """Return notifications newest first."""
        raise NotImplementedError

    @abstractmethod
    def mark_as_read(self, notification_id: UUID) -> bool:
        """Flag one notification as read. Returns False if it does not exist."""
        raise NotImplementedError

    @abstractmethod
    def mark_all_as_read(self) -> int:
        """Flag every unread notification as read and return how many changed."""
        raise NotImplementedError

    @abstractmethod
    def latest_timestamp(
        self, symbol: str, notification_type: NotificationType
    ) -> Optional[datetime]:
        """Return when the most recent matching notification was created."""
        raise NotImplementedError


class PriceGateway(ABC):
    """Port for exchange ticker data quoted in USDT.

    Symbols are bare tickers such as ``"BTC"``; the quote currency is
    handled by the adapter.
    """

    @abstractmethod
    def get_price(self, symbol: str) -> PriceQuote:
        """Return the last traded price for one symbol."""
        raise NotImplementedError

    @abstractmethod
    def get_prices(self, symbols: list[str]) -> list[PriceQuote]:
        """Return last traded prices for several symbols."""
        raise NotImplementedError

    @abstractmethod
    def get_24h_change(self, symbol: str) -> PriceChange24h:
        """Return 24h ticker statistics for one symbol."""
        raise NotImplementedError

    @abstractmethod
    def get_24h_changes(self, symbols: list[str]) -> list[PriceChange24h]:
        """Return 24h ticker statistics for several symbols."""
        raise NotImplementedError


class CommentaryGenerator(ABC):
    """Port for short natural-language commentary on a price move."""

    @abstractmethod
    def generate(
        self,
        symbol: str,
        percent_change: Decimal,
        current_price: Decimal,
        direction: NotificationType,
    ) -> str:
        """Return a short analysis. Must not raise on provider failure."""
        raise NotImplementedError
