"""
Ledger arithmetic for the wallet and position ledgers.

Each ``apply_*`` function validates one mutation against the current
state and returns the resulting state plus the transaction record to
append. Nothing here performs IO; callers persist the outcome inside a
single atomic ledger session.

Inputs are bounded to MAX_INTEGER_DIGITS integer digits and
MAX_DECIMAL_PLACES decimal places, and all arithmetic runs in
LEDGER_CONTEXT, whose precision holds any sum or product of bounded
values exactly. Trade totals and average prices are rounded half-even
to MAX_DECIMAL_PLACES, so the balance stays the exact signed sum of the
recorded totals.

Average cost policy: the average buy price is recomputed on buys only.
Sells reduce quantity and leave the average untouched. Because each
recomputed average is rounded, the result may depend on buy order in
the last decimal place.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Context, Decimal, localcontext
from typing import Iterable, Optional

from app.domain.portfolio.entities import AssetPosition, Transaction, TransactionType
from app.domain.portfolio.errors import (
    AmountPrecisionError,
    InsufficientFundsError,
    InsufficientQuantityError,
    InvalidAmountError,
    NoPositionError,
)

ZERO = Decimal("0")
MAX_INTEGER_DIGITS = 15
MAX_DECIMAL_PLACES = 18
QUANTUM = Decimal(1).scaleb(-MAX_DECIMAL_PLACES)
LEDGER_CONTEXT = Context(prec=80, rounding=ROUND_HALF_EVEN)


@dataclass(frozen=True)
class LedgerOutcome:
    """State produced by a single ledger mutation.

    Attributes:
        balance: Wallet balance after the mutation.
        transaction: Transaction record to append.
        symbol: Asset touched by a trade, None for wallet movements.
        position: Resulting open position, None when the trade closed it
            or for wallet movements.
    """

    balance: Decimal
    transaction: Transaction
    symbol: Optional[str] = None
    position: Optional[AssetPosition] = None

    @property
    def position_closed(self) -> bool:
        return self.symbol is not None and self.position is None


def require_positive(field: str, value: Decimal) -> None:
    """Raise InvalidAmountError unless ``value`` is a bounded number above 0."""
    if not value.is_finite() or value <= ZERO:
        raise InvalidAmountError(field, value)
    exponent = value.as_tuple().exponent
    if -exponent > MAX_DECIMAL_PLACES or value.adjusted() >= MAX_INTEGER_DIGITS:
        raise AmountPrecisionError(
            field, value, MAX_INTEGER_DIGITS, MAX_DECIMAL_PLACES
        )


def to_ledger_scale(value: Decimal) -> Decimal:
    """Round ``value`` half-even to MAX_DECIMAL_PLACES if it is finer."""
    if value.as_tuple().exponent < -MAX_DECIMAL_PLACES:
        return value.quantize(QUANTUM, context=LEDGER_CONTEXT)
    return value


def weighted_average(
    held_quantity: Decimal,
    held_avg_price: Decimal,
    quantity: Decimal,
    price: Decimal,
) -> Decimal:
    """Average cost after adding ``quantity`` bought at ``price``."""
    with localcontext(LEDGER_CONTEXT):
        total_cost = held_quantity * held_avg_price + quantity * price
        return to_ledger_scale(total_cost / (held_quantity + quantity))


def apply_deposit(balance: Decimal, amount: Decimal) -> LedgerOutcome:
    require_positive("amount", amount)
    transaction = Transaction(
        type=TransactionType.DEPOSIT, quantity=amount, total=amount
    )
    with localcontext(LEDGER_CONTEXT):
        return LedgerOutcome(balance=balance + amount, transaction=transaction)


def apply_withdraw(balance: Decimal, amount: Decimal) -> LedgerOutcome:
    require_positive("amount", amount)
    if amount > balance:
        raise InsufficientFundsError(required=amount, available=balance)
    transaction = Transaction(
        type=TransactionType.WITHDRAW, quantity=amount, total=amount
    )
    with localcontext(LEDGER_CONTEXT):
        return LedgerOutcome(balance=balance - amount, transaction=transaction)


def apply_buy(
    balance: Decimal,
    position: Optional[AssetPosition],
    symbol: str,
    quantity: Decimal,
    price: Decimal,
) -> LedgerOutcome:
    """Debit the wallet and grow (or open) the position in ``symbol``.

    Raises:
        InvalidAmountError: quantity or price is not positive or exceeds
            the ledger precision.
        InsufficientFundsError: the wallet cannot cover quantity * price.
    """
    require_positive("quantity", quantity)
    require_positive("price", price)

    with localcontext(LEDGER_CONTEXT):
        total = to_ledger_scale(quantity * price)
    if total > balance:
        raise InsufficientFundsError(required=total, available=balance)

    if position is not None:
        with localcontext(LEDGER_CONTEXT):
            held = position.quantity + quantity
        updated = AssetPosition(
            symbol=symbol,
            quantity=held,
            avg_buy_price=weighted_average(
                position.quantity, position.avg_buy_price, quantity, price
            ),
        )
    else:
        updated = AssetPosition(symbol=symbol, quantity=quantity, avg_buy_price=price)

    transaction = Transaction(
        type=TransactionType.BUY,
        symbol=symbol,
        quantity=quantity,
        price=price,
        total=total,
    )
    with localcontext(LEDGER_CONTEXT):
        balance = balance - total
    return LedgerOutcome(
        balance=balance,
        transaction=transaction,
        symbol=symbol,
        position=updated,
    )


def apply_sell(
    balance: Decimal,
    position: Optional[AssetPosition],
    symbol: str,
    quantity: Decimal,
    price: Decimal,
) -> LedgerOutcome:
    """Credit the wallet and shrink (or close) the position in ``symbol``.

    Raises:
        InvalidAmountError: quantity or price is not positive or exceeds
            the ledger precision.
        NoPositionError: nothing is held in ``symbol``.
        InsufficientQuantityError: quantity exceeds the held quantity.
    """
    require_positive("quantity", quantity)
    require_positive("price", price)

    if position is None:
        raise NoPositionError(symbol)
    if quantity > position.quantity:
        raise InsufficientQuantityError(symbol, position.quantity, quantity)

    with localcontext(LEDGER_CONTEXT):
        total = to_ledger_scale(quantity * price)
        remaining = position.quantity - quantity
    updated = None
    if remaining > ZERO:
        updated = AssetPosition(
            symbol=symbol, quantity=remaining, avg_buy_price=position.avg_buy_price
        )

    transaction = Transaction(
        type=TransactionType.SELL,
        symbol=symbol,
        quantity=quantity,
        price=price,
        total=total,
    )
    with localcontext(LEDGER_CONTEXT):
        balance = balance + total
    return LedgerOutcome(
        balance=balance,
        transaction=transaction,
        symbol=symbol,
        position=updated,
    )


def replay_transactions(
    transactions: Iterable[Transaction],
) -> tuple[Decimal, dict[str, Decimal]]:
    """Rebuild the wallet balance and held quantities from the log.

    Returns:
        The replayed balance and a mapping of symbol to net quantity.
        Symbols whose net quantity is zero are omitted.
    """
    balance = ZERO
    quantities: dict[str, Decimal] = {}
    with localcontext(LEDGER_CONTEXT):
        for tx in transactions:
            balance += tx.signed_total
            if tx.symbol is None:
                continue
            delta = tx.quantity if tx.type is TransactionType.BUY else -tx.quantity
            quantities[tx.symbol] = quantities.get(tx.symbol, ZERO) + delta
    return balance, {s: q for s, q in quantities.items() if q != ZERO}
