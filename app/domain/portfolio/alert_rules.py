"""
Price alert rules.

Decides whether a 24h move is large enough to notify about, which
direction it points, and what to say when no commentary provider is
available.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from app.domain.portfolio.entities import NotificationType

DEFAULT_THRESHOLD_PERCENT = Decimal("5")


def classify_change(
    percent_change: Decimal,
    threshold: Decimal = DEFAULT_THRESHOLD_PERCENT,
) -> Optional[NotificationType]:
    """Return the alert direction, or None when the move is below threshold."""
    if abs(percent_change) < threshold:
        return None
    if percent_change > 0:
        return NotificationType.PRICE_UP
    return NotificationType.PRICE_DOWN


def template_commentary(
    symbol: str,
    percent_change: Decimal,
    current_price: Decimal,
    direction: NotificationType,
    provider_failed: bool = False,
) -> str:
    """Plain-text description of a move, used when no LLM answer is available.

    Args:
        provider_failed: Use the wording for a failed provider call rather
            than for a provider that is not configured.
    """
    if provider_failed:
        verb = "surged" if direction is NotificationType.PRICE_UP else "dropped"
    else:
        verb = "increased" if direction is NotificationType.PRICE_UP else "decreased"
    return (
        f"{symbol} has {verb} by {abs(percent_change):.2f}%. "
        f"Current price: ${current_price:.2f}"
    )


def is_suppressed(
    last_alert_at: Optional[datetime],
    now: datetime,
    window: timedelta,
) -> bool:
    """True when a previous alert falls inside the suppression window.

    A zero window disables suppression, so every qualifying check alerts.
    """
    if last_alert_at is None or window <= timedelta(0):
        return False
    return now - last_alert_at < window
