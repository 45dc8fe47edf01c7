"""
Domain-specific errors for the portfolio bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from decimal import Decimal


class PortfolioDomainError(Exception):
    """Base error for all portfolio domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class InvalidAmountError(PortfolioDomainError):
    """Raised when a numeric input that must be positive is not."""

    def __init__(self, field: str, value: Decimal) -> None:
        super().__init__(f"{field.capitalize()} must be positive, got {value}")
        self.field = field
        self.value = value


class AmountPrecisionError(InvalidAmountError):
    """Raised when a numeric input exceeds the ledger's fixed precision."""

    def __init__(
        self, field: str, value: Decimal, integer_digits: int, decimal_places: int
    ) -> None:
        PortfolioDomainError.__init__(
            self,
            f"{field.capitalize()} allows at most {integer_digits} integer digits "
            f"and {decimal_places} decimal places, got {value}",
        )
        self.field = field
        self.value = value


class InsufficientFundsError(PortfolioDomainError):
    """Raised when the wallet balance cannot cover a debit."""

    def __init__(self, required: Decimal, available: Decimal) -> None:
        super().__init__(
            f"Insufficient USDT balance. Need {required:.2f}, have {available:.2f}"
        )
        self.required = required
        self.available = available


class NoPositionError(PortfolioDomainError):
    """Raised when selling a symbol that is not held."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"You don't own any {symbol}")
        self.symbol = symbol


class InsufficientQuantityError(PortfolioDomainError):
    """Raised when selling more of a symbol than is held."""

    def __init__(self, symbol: str, held: Decimal, requested: Decimal) -> None:
        super().__init__(
            f"Insufficient {symbol}. Have {held}, trying to sell {requested}"
        )
        self.symbol = symbol
        self.held = held
        self.requested = requested


class NotificationNotFoundError(PortfolioDomainError):
    """Raised when a notification id does not exist."""

    def __init__(self, notification_id: str) -> None:
        super().__init__(f"Notification not found: {notification_id}")
        self.notification_id = notification_id


class UpstreamUnavailableError(PortfolioDomainError):
    """Raised when the price or commentary provider cannot be reached."""

    def __init__(self, service: str, reason: str) -> None:
        super().__init__(f"{service} unavailable: {reason}")
        self.service = service
        self.reason = reason
