"""
Tests for the price alert monitor and the notification lifecycle.

The check runs against an in-memory ledger, the SQL notification
repository and fake price/commentary ports.
"""

from datetime import timedelta
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from app.application.portfolio.check_price_alerts import CheckPriceAlertsUseCase
from app.application.portfolio.dtos import (
    CreateNotificationCommand,
    DepositCommand,
    TradeCommand,
)
from app.application.portfolio.execute_trade import BuyUseCase
from app.application.portfolio.manage_wallet import DepositUseCase
from app.application.portfolio.notifications import (
    CreateNotificationUseCase,
    ListNotificationsUseCase,
    MarkAllNotificationsReadUseCase,
    MarkNotificationReadUseCase,
)
from app.domain.portfolio.entities import NotificationType
from app.domain.portfolio.errors import NotificationNotFoundError
from tests.conftest import make_change

D = Decimal


def _hold(store, *symbols: str) -> None:
    """Fund the wallet and open a small position in each symbol."""
    DepositUseCase(store).execute(DepositCommand(amount=D("10000")))
    for symbol in symbols:
        BuyUseCase(store).execute(
            TradeCommand(symbol=symbol, quantity=D("1"), price=D("10"))
        )


@pytest.fixture
def check(store, gateway, commentary, notification_repo) -> CheckPriceAlertsUseCase:
    return CheckPriceAlertsUseCase(
        store=store,
        price_gateway=gateway,
        commentary=commentary,
        notifications=notification_repo,
        threshold_percent=D("5"),
    )


class TestCheckPriceAlerts:
    """Tests for CheckPriceAlertsUseCase."""

    def test_no_holdings_makes_no_calls(self, check, gateway) -> None:
        """With nothing held the check returns zeros and skips the gateway."""
        result = check.execute()
        assert (result.checked, result.alerts, result.failed) == (0, 0, 0)
        assert gateway.calls == []

    def test_alerts_only_past_threshold(
        self, store, gateway, commentary, notification_repo, check
    ) -> None:
        """Moves of at least 5% either way alert; smaller ones do not."""
        _hold(store, "BTC", "ETH", "SOL")
        gateway.changes.update(
            {
                "BTC": make_change("BTC", "6.2", "65000"),
                "ETH": make_change("ETH", "-5", "3000"),
                "SOL": make_change("SOL", "4.9", "150"),
            }
        )

        result = check.execute()

        assert (result.checked, result.alerts, result.failed) == (3, 2, 0)
        notifications = {n.symbol: n for n in notification_repo.find_all()}
        assert set(notifications) == {"BTC", "ETH"}
        assert notifications["BTC"].type is NotificationType.PRICE_UP
        assert notifications["ETH"].type is NotificationType.PRICE_DOWN
        assert notifications["ETH"].price_change == D("-5")
        assert notifications["ETH"].current_price == D("3000")
        assert notifications["BTC"].ai_analysis == "Commentary on BTC"
        assert not notifications["BTC"].read
        assert len(commentary.calls) == 2

    def test_failed_symbol_does_not_abort_batch(
        self, store, gateway, notification_repo, check
    ) -> None:
        """When the batch call fails, symbols are fetched one by one."""
        _hold(store, "BTC", "DOGE")
        gateway.batch_available = False
        gateway.changes["BTC"] = make_change("BTC", "-8")
        gateway.unavailable.add("DOGE")

        result = check.execute()

        assert (result.checked, result.alerts, result.failed) == (2, 1, 1)
        assert [n.symbol for n in notification_repo.find_all()] == ["BTC"]
        assert "24h:BTC" in gateway.calls
        assert "24h:DOGE" in gateway.calls

    def test_repeated_checks_realert_by_default(
        self, store, gateway, notification_repo, check
    ) -> None:
        """Without a suppression window every run alerts again."""
        _hold(store, "BTC")
        gateway.changes["BTC"] = make_change("BTC", "10")

        check.execute()
        check.execute()

        assert len(notification_repo.find_all()) == 2

    def test_suppression_window_skips_repeats(
        self, store, gateway, commentary, notification_repo
    ) -> None:
        """Inside the window a repeated alert is counted, not created."""
        _hold(store, "BTC")
        gateway.changes["BTC"] = make_change("BTC", "10")
        use_case = CheckPriceAlertsUseCase(
            store=store,
            price_gateway=gateway,
            commentary=commentary,
            notifications=notification_repo,
            suppression_window=timedelta(minutes=30),
        )

        first = use_case.execute()
        second = use_case.execute()

        assert first.alerts == 1
        assert second.alerts == 0
        assert second.suppressed == 1
        assert len(notification_repo.find_all()) == 1

    def test_opposite_direction_not_suppressed(
        self, store, gateway, commentary, notification_repo
    ) -> None:
        """Suppression is per symbol and direction."""
        _hold(store, "BTC")
        use_case = CheckPriceAlertsUseCase(
            store=store,
            price_gateway=gateway,
            commentary=commentary,
            notifications=notification_repo,
            suppression_window=timedelta(hours=1),
        )
        gateway.changes["BTC"] = make_change("BTC", "10")
        use_case.execute()
        gateway.changes["BTC"] = make_change("BTC", "-10")
        result = use_case.execute()

        assert result.alerts == 1
        assert result.suppressed == 0


class TestNotifications:
    """Tests for the notification use cases."""

    def _create(self, repo, symbol: str = "BTC") -> UUID:
        result = CreateNotificationUseCase(repo).execute(
            CreateNotificationCommand(
                symbol=symbol,
                type="price_up",
                price_change=D("7.5"),
                current_price=D("100"),
                ai_analysis="up",
            )
        )
        return result.id

    def test_list_newest_first(self, notification_repo) -> None:
        self._create(notification_repo, "BTC")
        self._create(notification_repo, "ETH")
        listed = ListNotificationsUseCase(notification_repo).execute()
        assert [n.symbol for n in listed] == ["ETH", "BTC"]

    def test_mark_one_read(self, notification_repo) -> None:
        """Marking one read removes it from the unread list only."""
        first = self._create(notification_repo, "BTC")
        self._create(notification_repo, "ETH")

        MarkNotificationReadUseCase(notification_repo).execute(first)

        unread = ListNotificationsUseCase(notification_repo).execute(unread_only=True)
        assert [n.symbol for n in unread] == ["ETH"]
        assert len(ListNotificationsUseCase(notification_repo).execute()) == 2

    def test_mark_read_is_idempotent(self, notification_repo) -> None:
        """Marking an already read notification again succeeds."""
        notification_id = self._create(notification_repo)
        use_case = MarkNotificationReadUseCase(notification_repo)
        use_case.execute(notification_id)
        use_case.execute(notification_id)
        assert notification_repo.get_by_id(notification_id).read

    def test_mark_unknown_raises(self, notification_repo) -> None:
        with pytest.raises(NotificationNotFoundError):
            MarkNotificationReadUseCase(notification_repo).execute(uuid4())

    def test_mark_all_read_counts_changes(self, notification_repo) -> None:
        """Bulk mark-read reports only the notifications it flipped."""
        first = self._create(notification_repo)
        self._create(notification_repo)
        self._create(notification_repo)
        MarkNotificationReadUseCase(notification_repo).execute(first)

        use_case = MarkAllNotificationsReadUseCase(notification_repo)
        assert use_case.execute() == 2
        assert use_case.execute() == 0
        assert ListNotificationsUseCase(notification_repo).execute(unread_only=True) == []
