"""
Use cases: Price alert notifications.

Notifications move one way, from unread to read, and are never deleted.
"""

import logging
from uuid import UUID

from app.application.portfolio.dtos import (
    CreateNotificationCommand,
    NotificationResult,
)
from app.domain.portfolio.entities import Notification, NotificationType
from app.domain.portfolio.errors import NotificationNotFoundError
from app.domain.portfolio.ports import NotificationRepository

logger = logging.getLogger(__name__)


class ListNotificationsUseCase:
    """Returns notifications newest first, optionally unread only."""

    def __init__(self, repo: NotificationRepository) -> None:
        self._repo = repo

    def execute(self, unread_only: bool = False) -> list[NotificationResult]:
        return [
            NotificationResult.from_entity(n)
            for n in self._repo.find_all(unread_only=unread_only)
        ]


class MarkNotificationReadUseCase:
    """Flags a single notification as read.

    Raises:
        NotificationNotFoundError: No notification has this id.
    """

    def __init__(self, repo: NotificationRepository) -> None:
        self._repo = repo

    def execute(self, notification_id: UUID) -> None:
        if not self._repo.mark_as_read(notification_id):
            raise NotificationNotFoundError(str(notification_id))


class MarkAllNotificationsReadUseCase:
    """Flags every unread notification as read."""

    def __init__(self, repo: NotificationRepository) -> None:
        self._repo = repo

    def execute(self) -> int:
        """Returns the number of notifications that changed state."""
        return self._repo.mark_all_as_read()


class CreateNotificationUseCase:
    """Records a new unread price alert. Used by the alert monitor only."""

    def __init__(self, repo: NotificationRepository) -> None:
        self._repo = repo

    def execute(self, command: CreateNotificationCommand) -> NotificationResult:
        notification = Notification(
            symbol=command.symbol,
            type=NotificationType(command.type),
            price_change=command.price_change,
            current_price=command.current_price,
            ai_analysis=command.ai_analysis,
        )
        self._repo.save(notification)
        logger.info(
            "Notification created: %s %s %s%%",
            notification.symbol,
            notification.type.value,
            notification.price_change,
        )
        return NotificationResult.from_entity(notification)
