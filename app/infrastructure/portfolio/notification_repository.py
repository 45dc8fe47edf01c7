"""
Adapter: Notification repository.

Implements NotificationRepository port.
Persists and retrieves price alert notifications.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import func, insert, select, update
from sqlalchemy.engine import Engine, Row

from app.domain.portfolio.entities import Notification, NotificationType
from app.domain.portfolio.ports import NotificationRepository
from app.infrastructure.portfolio.tables import notifications_table

logger = logging.getLogger(__name__)


def _row_to_notification(row: Row) -> Notification:
    return Notification(
        id=UUID(row.id),
        symbol=row.symbol,
        type=NotificationType(row.type),
        price_change=row.price_change,
        current_price=row.current_price,
        ai_analysis=row.ai_analysis,
        timestamp=row.timestamp,
        read=row.read,
    )


class SqlNotificationRepository(NotificationRepository):
    """SQL implementation of the notification repository."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def save(self, notification: Notification) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                insert(notifications_table).values(
                    id=str(notification.id),
                    symbol=notification.symbol,
                    type=notification.type.value,
                    price_change=notification.price_change,
                    current_price=notification.current_price,
                    ai_analysis=notification.ai_analysis,
                    timestamp=notification.timestamp,
                    read=notification.read,
                )
            )
        logger.debug("Saved notification %s for %s.", notification.id, notification.symbol)

    def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(notifications_table).where(
                    notifications_table.c.id == str(notification_id)
                )
            ).first()
        return _row_to_notification(row) if row is not None else None

    def find_all(self, unread_only: bool = False) -> list[Notification]:
        stmt = select(notifications_table).order_by(notifications_table.c.seq.desc())
        if unread_only:
            stmt = stmt.where(notifications_table.c.read.is_(False))
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_notification(row) for row in rows]

    def mark_as_read(self, notification_id: UUID) -> bool:
        with self._engine.begin() as conn:
            row = conn.execute(
                select(notifications_table.c.read).where(
                    notifications_table.c.id == str(notification_id)
                )
            ).first()
            if row is None:
                return False
            if not row.read:
                conn.execute(
                    update(notifications_table)
                    .where(notifications_table.c.id == str(notification_id))
                    .values(read=True)
                )
        return True

    def mark_all_as_read(self) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(
                update(notifications_table)
                .where(notifications_table.c.read.is_(False))
                .values(read=True)
            )
        logger.info("Marked %d notifications as read.", result.rowcount)
        return result.rowcount

    def latest_timestamp(
        self, symbol: str, notification_type: NotificationType
    ) -> Optional[datetime]:
        with self._engine.connect() as conn:
            return conn.execute(
                select(func.max(notifications_table.c.timestamp)).where(
                    notifications_table.c.symbol == symbol,
                    notifications_table.c.type == notification_type.value,
                )
            ).scalar_one_or_none()
