"""
Tests for the portfolio domain layer.

Tests ledger arithmetic, alert rules, valuation and error messages
in isolation. No external dependencies or IO required.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from itertools import permutations

import pytest

from app.domain.portfolio.alert_rules import (
    classify_change,
    is_suppressed,
    template_commentary,
)
from app.domain.portfolio.entities import (
    AssetPosition,
    NotificationType,
    Transaction,
    TransactionType,
)
from app.domain.portfolio.errors import (
    AmountPrecisionError,
    InsufficientFundsError,
    InsufficientQuantityError,
    InvalidAmountError,
    NoPositionError,
)
from app.domain.portfolio.ledger import (
    apply_buy,
    apply_deposit,
    apply_sell,
    apply_withdraw,
    replay_transactions,
    weighted_average,
)
from app.domain.portfolio.valuation import value_positions

D = Decimal


# ══════════════════════════════════════════════════════════════════════
# Wallet ledger
# ══════════════════════════════════════════════════════════════════════


class TestWalletArithmetic:
    """Tests for deposit and withdraw."""

    def test_deposit_increases_balance(self) -> None:
        """Deposit adds the amount and records it as the total."""
        outcome = apply_deposit(D("10"), D("90.5"))
        assert outcome.balance == D("100.5")
        assert outcome.transaction.type is TransactionType.DEPOSIT
        assert outcome.transaction.total == D("90.5")
        assert outcome.transaction.symbol is None
        assert outcome.transaction.price is None

    @pytest.mark.parametrize("amount", ["0", "-1", "NaN", "Infinity"])
    def test_deposit_rejects_non_positive(self, amount: str) -> None:
        """Zero, negative and non-finite deposits are invalid."""
        with pytest.raises(InvalidAmountError):
            apply_deposit(D("0"), D(amount))

    def test_withdraw_beyond_balance_rejected(self) -> None:
        """Withdrawing more than the balance raises InsufficientFundsError."""
        with pytest.raises(InsufficientFundsError) as exc_info:
            apply_withdraw(D("50"), D("50.01"))
        assert exc_info.value.required == D("50.01")
        assert exc_info.value.available == D("50")

    def test_withdraw_entire_balance(self) -> None:
        """The full balance can be withdrawn, leaving zero."""
        outcome = apply_withdraw(D("50"), D("50"))
        assert outcome.balance == D("0")
        assert outcome.transaction.type is TransactionType.WITHDRAW

    def test_signed_sum_matches_balance(self) -> None:
        """Balance equals the signed sum of a deposit/withdraw sequence."""
        balance = D("0")
        log = []
        for op, amount in [("d", "100"), ("w", "30"), ("d", "5.5"), ("w", "75.5")]:
            apply = apply_deposit if op == "d" else apply_withdraw
            outcome = apply(balance, D(amount))
            balance = outcome.balance
            log.append(outcome.transaction)
        assert balance == D("0")
        assert sum(tx.signed_total for tx in log) == balance

    @pytest.mark.parametrize(
        "amount",
        [
            "1.000000000000000000000000000001",
            "0.0000000000000000001",
            "1000000000000000",
            "1E+20",
        ],
    )
    def test_deposit_rejects_excess_precision(self, amount: str) -> None:
        """Amounts beyond 15 integer digits or 18 decimal places are invalid."""
        with pytest.raises(AmountPrecisionError) as exc_info:
            apply_deposit(D("0"), D(amount))
        assert "18 decimal places" in exc_info.value.message

    def test_wide_amounts_stay_exact(self) -> None:
        """Deposit then withdraw of a 33-digit amount returns to zero exactly."""
        amount = D("999999999999999.999999999999999999")
        deposited = apply_deposit(D("0.000000000000000001"), amount)
        assert deposited.balance == D("1000000000000000.000000000000000000")

        withdrawn = apply_withdraw(deposited.balance, amount)
        assert withdrawn.balance == D("0.000000000000000001")


# ══════════════════════════════════════════════════════════════════════
# Position ledger
# ══════════════════════════════════════════════════════════════════════


class TestBuyArithmetic:
    """Tests for apply_buy and the weighted average."""

    def test_first_buy_opens_position(self) -> None:
        """A first buy opens a position at the traded price."""
        outcome = apply_buy(D("100000"), None, "BTC", D("1"), D("50000"))
        assert outcome.balance == D("50000")
        assert outcome.position == AssetPosition("BTC", D("1"), D("50000"))
        assert outcome.transaction.total == D("50000")
        assert outcome.transaction.price == D("50000")

    def test_second_buy_averages_cost(self) -> None:
        """BTC 1@50000 then 1@70000 gives quantity 2 at 60000."""
        held = AssetPosition("BTC", D("1"), D("50000"))
        outcome = apply_buy(D("70000"), held, "BTC", D("1"), D("70000"))
        assert outcome.position.quantity == D("2")
        assert outcome.position.avg_buy_price == D("60000")
        assert outcome.balance == D("0")

    def test_buy_over_balance_rejected(self) -> None:
        """A buy costing more than the balance raises InsufficientFundsError."""
        with pytest.raises(InsufficientFundsError):
            apply_buy(D("0"), None, "BTC", D("1"), D("50000"))

    @pytest.mark.parametrize("quantity,price", [("0", "1"), ("1", "0"), ("-1", "5")])
    def test_buy_rejects_non_positive_inputs(self, quantity: str, price: str) -> None:
        """Quantity and price must both be positive."""
        with pytest.raises(InvalidAmountError):
            apply_buy(D("1000"), None, "BTC", D(quantity), D(price))

    def test_average_independent_of_order(self) -> None:
        """Average cost equals total cost over total quantity in any order."""
        buys = [(D("1"), D("100")), (D("3"), D("200")), (D("0.5"), D("400"))]
        expected = sum(q * p for q, p in buys) / sum(q for q, _ in buys)
        for order in permutations(buys):
            position = None
            for quantity, price in order:
                position = apply_buy(
                    D("1000000"), position, "ETH", quantity, price
                ).position
            assert position.avg_buy_price.quantize(D("1e-12")) == expected.quantize(
                D("1e-12")
            )

    def test_weighted_average_formula(self) -> None:
        assert weighted_average(D("2"), D("10"), D("2"), D("20")) == D("15")

    def test_average_rounded_to_ledger_scale(self) -> None:
        """Non-terminating averages keep 18 decimal places in any buy order."""
        buys = [(D("1"), D("1")), (D("1"), D("2")), (D("1"), D("2"))]
        averages = set()
        for order in permutations(buys):
            position = None
            for quantity, price in order:
                position = apply_buy(D("100"), position, "ETH", quantity, price).position
            assert position.avg_buy_price.as_tuple().exponent >= -18
            averages.add(position.avg_buy_price)
        assert averages == {D("1.666666666666666667")}


class TestSellArithmetic:
    """Tests for apply_sell."""

    def test_full_sell_closes_position(self) -> None:
        """Selling everything removes the position and credits the total."""
        held = AssetPosition("BTC", D("2"), D("60000"))
        outcome = apply_sell(D("0"), held, "BTC", D("2"), D("65000"))
        assert outcome.position is None
        assert outcome.position_closed
        assert outcome.balance == D("130000")
        assert outcome.transaction.type is TransactionType.SELL
        assert outcome.transaction.total == D("130000")

    def test_partial_sell_keeps_average(self) -> None:
        """A partial sell reduces quantity and leaves the average untouched."""
        held = AssetPosition("BTC", D("2"), D("60000"))
        outcome = apply_sell(D("0"), held, "BTC", D("0.5"), D("10"))
        assert outcome.position.quantity == D("1.5")
        assert outcome.position.avg_buy_price == D("60000")
        assert not outcome.position_closed

    def test_sell_without_position(self) -> None:
        """Selling a symbol never held raises NoPositionError."""
        with pytest.raises(NoPositionError) as exc_info:
            apply_sell(D("0"), None, "ETH", D("1"), D("1000"))
        assert exc_info.value.message == "You don't own any ETH"

    def test_sell_more_than_held(self) -> None:
        """Selling more than held raises InsufficientQuantityError."""
        held = AssetPosition("BTC", D("1"), D("50000"))
        with pytest.raises(InsufficientQuantityError):
            apply_sell(D("0"), held, "BTC", D("1.0001"), D("50000"))


class TestReplay:
    """Tests for rebuilding state from the transaction log."""

    def test_replay_reconciles_balance_and_quantities(self) -> None:
        """Replayed balance and quantities match the applied mutations."""
        log = [
            Transaction(TransactionType.DEPOSIT, D("1000"), D("1000")),
            Transaction(TransactionType.BUY, D("2"), D("200"), "SOL", D("100")),
            Transaction(TransactionType.BUY, D("1"), D("300"), "ETH", D("300")),
            Transaction(TransactionType.SELL, D("1"), D("300"), "ETH", D("300")),
            Transaction(TransactionType.WITHDRAW, D("50"), D("50")),
        ]
        balance, quantities = replay_transactions(log)
        assert balance == D("750")
        assert quantities == {"SOL": D("2")}

    def test_rounded_trade_totals_reconcile(self) -> None:
        """Totals rounded to 18 places still replay to the exact balance."""
        third = D("0.333333333333333333")
        deposit = apply_deposit(D("0"), D("1"))
        buy = apply_buy(deposit.balance, None, "XRP", third, third)
        sell = apply_sell(buy.balance, buy.position, "XRP", third, D("0.7"))

        assert buy.transaction.total == D("0.111111111111111111")
        balance, quantities = replay_transactions(
            [deposit.transaction, buy.transaction, sell.transaction]
        )
        assert balance == sell.balance
        assert quantities == {}


# ══════════════════════════════════════════════════════════════════════
# Alert rules and valuation
# ══════════════════════════════════════════════════════════════════════


class TestAlertRules:
    """Tests for threshold classification and fallback commentary."""

    @pytest.mark.parametrize(
        "percent,expected",
        [
            ("5", NotificationType.PRICE_UP),
            ("-5", NotificationType.PRICE_DOWN),
            ("12.3", NotificationType.PRICE_UP),
            ("4.99", None),
            ("-4.99", None),
            ("0", None),
        ],
    )
    def test_threshold_is_inclusive(self, percent: str, expected) -> None:
        """Moves of exactly 5% alert; smaller moves do not."""
        assert classify_change(D(percent), D("5")) is expected

    def test_template_when_unconfigured(self) -> None:
        text = template_commentary(
            "BTC", D("-7.456"), D("61000.5"), NotificationType.PRICE_DOWN
        )
        assert text == "BTC has decreased by 7.46%. Current price: $61000.50"

    def test_template_after_provider_failure(self) -> None:
        text = template_commentary(
            "ETH", D("6"), D("3000"), NotificationType.PRICE_UP, provider_failed=True
        )
        assert text == "ETH has surged by 6.00%. Current price: $3000.00"

    def test_suppression_window(self) -> None:
        """Only alerts inside a non-zero window suppress a new one."""
        now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        recent = now - timedelta(minutes=10)
        assert is_suppressed(recent, now, timedelta(minutes=30))
        assert not is_suppressed(recent, now, timedelta(minutes=5))
        assert not is_suppressed(recent, now, timedelta(0))
        assert not is_suppressed(None, now, timedelta(minutes=30))


class TestValuation:
    """Tests for market valuation of open positions."""

    def test_unrealized_pnl(self) -> None:
        """P&L is (current - average) * quantity."""
        valuation = value_positions(
            [AssetPosition("BTC", D("2"), D("60000"))], {"BTC": D("66000")}
        )
        holding = valuation.holdings[0]
        assert holding.price_available
        assert holding.market_value == D("132000")
        assert holding.unrealized_pnl == D("12000")
        assert holding.unrealized_pnl_percent == D("10")
        assert valuation.total_pnl == D("12000")

    def test_missing_price_falls_back_to_cost(self) -> None:
        """Without a live price a holding is valued at its average cost."""
        valuation = value_positions([AssetPosition("XRP", D("10"), D("0.5"))], {})
        holding = valuation.holdings[0]
        assert not holding.price_available
        assert holding.market_value == D("5.0")
        assert valuation.total_pnl_percent == D("0")

    def test_empty_portfolio(self) -> None:
        valuation = value_positions([], {})
        assert valuation.total_value == D("0")
        assert valuation.total_pnl_percent == D("0")
