"""
Use case: Check held assets for significant 24h price moves.

Input: none
Output: AlertCheckResult
Side effects: Outbound calls to the price gateway and the commentary
    generator; creates one notification per qualifying symbol.
Failure cases: None raised. A symbol whose price data cannot be fetched
    is skipped and counted; commentary failures degrade to templates.

Re-alerting is at-least-once: while a move stays above the threshold,
every run notifies again unless a suppression window is configured.
"""

import logging
from datetime import timedelta
from decimal import Decimal

from app.application.portfolio.dtos import AlertCheckResult, CreateNotificationCommand
from app.application.portfolio.notifications import CreateNotificationUseCase
from app.domain.portfolio.alert_rules import (
    DEFAULT_THRESHOLD_PERCENT,
    classify_change,
    is_suppressed,
)
from app.domain.portfolio.entities import PriceChange24h, utc_now
from app.domain.portfolio.errors import UpstreamUnavailableError
from app.domain.portfolio.ports import (
    CommentaryGenerator,
    LedgerStore,
    NotificationRepository,
    PriceGateway,
)

logger = logging.getLogger(__name__)


class CheckPriceAlertsUseCase:
    """Orchestrates the scheduled price alert check.

    Args:
        store: Ledger store used to read held symbols.
        price_gateway: Source of 24h ticker statistics.
        commentary: Generator for the short analysis text.
        notifications: Repository the alerts are written to.
        threshold_percent: Absolute percent move that triggers an alert.
        suppression_window: Minimum time between two alerts for the same
            symbol and direction. Zero disables suppression.
    """

    def __init__(
        self,
        store: LedgerStore,
        price_gateway: PriceGateway,
        commentary: CommentaryGenerator,
        notifications: NotificationRepository,
        threshold_percent: Decimal = DEFAULT_THRESHOLD_PERCENT,
        suppression_window: timedelta = timedelta(0),
    ) -> None:
        self._store = store
        self._gateway = price_gateway
        self._commentary = commentary
        self._notifications = notifications
        self._create = CreateNotificationUseCase(notifications)
        self._threshold = threshold_percent
        self._suppression = suppression_window

    def _fetch_changes(self, symbols: list[str]) -> tuple[list[PriceChange24h], int]:
        """Fetch stats in one batch, falling back to per-symbol calls.

        Returns:
            The statistics that could be fetched and the number of
            symbols that failed.
        """
        try:
            return self._gateway.get_24h_changes(symbols), 0
        except UpstreamUnavailableError as exc:
            logger.warning("Batch 24h fetch failed (%s), retrying per symbol.", exc.message)

        changes: list[PriceChange24h] = []
        failed = 0
        for symbol in symbols:
            try:
                changes.append(self._gateway.get_24h_change(symbol))
            except UpstreamUnavailableError as exc:
                failed += 1
                logger.warning("Skipping %s: %s", symbol, exc.message)
        return changes, failed

    def execute(self) -> AlertCheckResult:
        """Run one alert check over all held symbols."""
        symbols = [p.symbol for p in self._store.list_assets()]
        if not symbols:
            logger.debug("No assets held, skipping price alert check.")
            return AlertCheckResult()

        changes, failed = self._fetch_changes(symbols)
        alerts = 0
        suppressed = 0
        now = utc_now()

        for change in changes:
            direction = classify_change(change.price_change_percent, self._threshold)
            if direction is None:
                continue

            last = self._notifications.latest_timestamp(change.symbol, direction)
            if is_suppressed(last, now, self._suppression):
                suppressed += 1
                logger.debug("Alert for %s suppressed (last at %s).", change.symbol, last)
                continue

            analysis = self._commentary.generate(
                change.symbol,
                change.price_change_percent,
                change.price,
                direction,
            )
            self._create.execute(
                CreateNotificationCommand(
                    symbol=change.symbol,
                    type=direction.value,
                    price_change=change.price_change_percent,
                    current_price=change.price,
                    ai_analysis=analysis,
                )
            )
            alerts += 1

        logger.info(
            "Price alert check: checked=%d alerts=%d failed=%d suppressed=%d",
            len(symbols),
            alerts,
            failed,
            suppressed,
        )
        return AlertCheckResult(
            checked=len(symbols),
            alerts=alerts,
            failed=failed,
            suppressed=suppressed,
        )
