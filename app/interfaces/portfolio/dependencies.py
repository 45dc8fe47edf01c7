"""
Dependency injection for the portfolio bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the portfolio context.
"""

from datetime import timedelta
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.engine import Engine

from app.application.portfolio.audit_ledger import AuditLedgerUseCase
from app.application.portfolio.check_price_alerts import CheckPriceAlertsUseCase
from app.application.portfolio.execute_trade import BuyUseCase, SellUseCase
from app.application.portfolio.get_portfolio_summary import GetPortfolioSummaryUseCase
from app.application.portfolio.list_ledger import (
    ListAssetsUseCase,
    ListTransactionsUseCase,
)
from app.application.portfolio.manage_wallet import (
    DepositUseCase,
    GetBalanceUseCase,
    WithdrawUseCase,
)
from app.application.portfolio.market_data import (
    GetPriceChangeUseCase,
    GetPricesUseCase,
    GetPriceUseCase,
)
from app.application.portfolio.notifications import (
    ListNotificationsUseCase,
    MarkAllNotificationsReadUseCase,
    MarkNotificationReadUseCase,
)
from app.core.config import settings
from app.domain.portfolio.ports import (
    CommentaryGenerator,
    LedgerStore,
    NotificationRepository,
    PriceGateway,
)
from app.infrastructure.portfolio.binance_price_gateway import BinancePriceGateway
from app.infrastructure.portfolio.database import create_ledger_engine
from app.infrastructure.portfolio.ledger_repository import SqlLedgerStore
from app.infrastructure.portfolio.notification_repository import (
    SqlNotificationRepository,
)
from app.infrastructure.portfolio.openrouter_commentary import (
    OpenRouterCommentaryGenerator,
)

# ── Adapters ─────────────────────────────────────────────────────────


@lru_cache
def get_engine() -> Engine:
    """Build the ledger engine once per process."""
    return create_ledger_engine(settings.database_url)


def get_ledger_store() -> LedgerStore:
    return SqlLedgerStore(get_engine())


def get_notification_repository() -> NotificationRepository:
    return SqlNotificationRepository(get_engine())


@lru_cache
def get_price_gateway() -> PriceGateway:
    return BinancePriceGateway(
        base_url=settings.binance_api_url,
        quote_currency=settings.quote_currency,
        timeout=settings.http_timeout_seconds,
    )


@lru_cache
def get_commentary_generator() -> CommentaryGenerator:
    return OpenRouterCommentaryGenerator(
        api_key=settings.openrouter_api_key,
        api_url=settings.openrouter_api_url,
        model=settings.openrouter_model,
        max_tokens=settings.commentary_max_tokens,
        timeout=settings.http_timeout_seconds,
    )


def close_http_adapters() -> None:
    """Close the cached HTTP adapters, if they were ever built."""
    for factory in (get_price_gateway, get_commentary_generator):
        if factory.cache_info().currsize:
            factory().close()
            factory.cache_clear()


def build_check_price_alerts_use_case(
    store: LedgerStore,
    price_gateway: PriceGateway,
    commentary: CommentaryGenerator,
    notifications: NotificationRepository,
) -> CheckPriceAlertsUseCase:
    """Build CheckPriceAlertsUseCase with thresholds from settings."""
    return CheckPriceAlertsUseCase(
        store=store,
        price_gateway=price_gateway,
        commentary=commentary,
        notifications=notifications,
        threshold_percent=settings.alert_threshold_percent,
        suppression_window=timedelta(minutes=settings.alert_suppression_minutes),
    )


def build_scheduled_check() -> CheckPriceAlertsUseCase:
    """Factory used by the alert scheduler outside of a request."""
    return build_check_price_alerts_use_case(
        store=get_ledger_store(),
        price_gateway=get_price_gateway(),
        commentary=get_commentary_generator(),
        notifications=get_notification_repository(),
    )


# ── Use cases ────────────────────────────────────────────────────────


def get_deposit_use_case(
    store: LedgerStore = Depends(get_ledger_store),
) -> DepositUseCase:
    return DepositUseCase(store=store)


def get_withdraw_use_case(
    store: LedgerStore = Depends(get_ledger_store),
) -> WithdrawUseCase:
    return WithdrawUseCase(store=store)


def get_balance_use_case(
    store: LedgerStore = Depends(get_ledger_store),
) -> GetBalanceUseCase:
    return GetBalanceUseCase(store=store)


def get_buy_use_case(
    store: LedgerStore = Depends(get_ledger_store),
    price_gateway: PriceGateway = Depends(get_price_gateway),
) -> BuyUseCase:
    """Build BuyUseCase; the gateway prices market orders."""
    return BuyUseCase(store=store, price_gateway=price_gateway)


def get_sell_use_case(
    store: LedgerStore = Depends(get_ledger_store),
    price_gateway: PriceGateway = Depends(get_price_gateway),
) -> SellUseCase:
    """Build SellUseCase; the gateway prices market orders."""
    return SellUseCase(store=store, price_gateway=price_gateway)


def get_list_assets_use_case(
    store: LedgerStore = Depends(get_ledger_store),
) -> ListAssetsUseCase:
    return ListAssetsUseCase(store=store)


def get_list_transactions_use_case(
    store: LedgerStore = Depends(get_ledger_store),
) -> ListTransactionsUseCase:
    return ListTransactionsUseCase(store=store)


def get_audit_ledger_use_case(
    store: LedgerStore = Depends(get_ledger_store),
) -> AuditLedgerUseCase:
    return AuditLedgerUseCase(store=store)


def get_portfolio_summary_use_case(
    store: LedgerStore = Depends(get_ledger_store),
    price_gateway: PriceGateway = Depends(get_price_gateway),
) -> GetPortfolioSummaryUseCase:
    return GetPortfolioSummaryUseCase(store=store, price_gateway=price_gateway)


def get_price_use_case(
    price_gateway: PriceGateway = Depends(get_price_gateway),
) -> GetPriceUseCase:
    return GetPriceUseCase(price_gateway=price_gateway)


def get_prices_use_case(
    price_gateway: PriceGateway = Depends(get_price_gateway),
) -> GetPricesUseCase:
    return GetPricesUseCase(price_gateway=price_gateway)


def get_price_change_use_case(
    price_gateway: PriceGateway = Depends(get_price_gateway),
) -> GetPriceChangeUseCase:
    return GetPriceChangeUseCase(price_gateway=price_gateway)


def get_list_notifications_use_case(
    repo: NotificationRepository = Depends(get_notification_repository),
) -> ListNotificationsUseCase:
    return ListNotificationsUseCase(repo=repo)


def get_mark_notification_read_use_case(
    repo: NotificationRepository = Depends(get_notification_repository),
) -> MarkNotificationReadUseCase:
    return MarkNotificationReadUseCase(repo=repo)


def get_mark_all_notifications_read_use_case(
    repo: NotificationRepository = Depends(get_notification_repository),
) -> MarkAllNotificationsReadUseCase:
    return MarkAllNotificationsReadUseCase(repo=repo)


def get_check_price_alerts_use_case(
    store: LedgerStore = Depends(get_ledger_store),
    price_gateway: PriceGateway = Depends(get_price_gateway),
    commentary: CommentaryGenerator = Depends(get_commentary_generator),
    notifications: NotificationRepository = Depends(get_notification_repository),
) -> CheckPriceAlertsUseCase:
    return build_check_price_alerts_use_case(
        store=store,
        price_gateway=price_gateway,
        commentary=commentary,
        notifications=notifications,
    )
