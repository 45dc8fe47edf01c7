"""
FastAPI router for price alert notifications and the alert monitor.

Notifications are created by the monitor only; clients can list them
and mark them read.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from app.application.portfolio.check_price_alerts import CheckPriceAlertsUseCase
from app.application.portfolio.notifications import (
    ListNotificationsUseCase,
    MarkAllNotificationsReadUseCase,
    MarkNotificationReadUseCase,
)
from app.core.config import settings
from app.interfaces.portfolio.dependencies import (
    get_check_price_alerts_use_case,
    get_list_notifications_use_case,
    get_mark_all_notifications_read_use_case,
    get_mark_notification_read_use_case,
)
from app.interfaces.portfolio.schemas import (
    AlertCheckResponse,
    AlertSchedulerStatusResponse,
    AlertTaskItem,
    ErrorResponse,
    MarkAllReadResponse,
    NotificationItem,
    NotificationListResponse,
)
from app.shared.security.rate_limiting import ALERT_CHECK_RATE_LIMIT, limiter

router = APIRouter(tags=["alerts"])


@router.get(
    "/notifications",
    response_model=NotificationListResponse,
    summary="List notifications",
    description="Newest first. Pass unread=true to get only unread ones.",
)
def list_notifications(
    unread: bool = False,
    use_case: ListNotificationsUseCase = Depends(get_list_notifications_use_case),
) -> NotificationListResponse:
    return NotificationListResponse(
        notifications=[
            NotificationItem.model_validate(n)
            for n in use_case.execute(unread_only=unread)
        ]
    )


@router.post(
    "/notifications/read-all",
    response_model=MarkAllReadResponse,
    summary="Mark all notifications as read",
)
def mark_all_as_read(
    use_case: MarkAllNotificationsReadUseCase = Depends(
        get_mark_all_notifications_read_use_case
    ),
) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=use_case.execute())


@router.post(
    "/notifications/{notification_id}/read",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    summary="Mark one notification as read",
)
def mark_as_read(
    notification_id: UUID,
    use_case: MarkNotificationReadUseCase = Depends(
        get_mark_notification_read_use_case
    ),
) -> None:
    use_case.execute(notification_id)


@router.post(
    "/alerts/check",
    response_model=AlertCheckResponse,
    summary="Run the price alert check now",
    description="Runs the same check as the scheduled job and returns its counts.",
)
@limiter.limit(ALERT_CHECK_RATE_LIMIT)
def trigger_alert_check(
    request: Request,
    use_case: CheckPriceAlertsUseCase = Depends(get_check_price_alerts_use_case),
) -> AlertCheckResponse:
    return AlertCheckResponse.model_validate(use_case.execute())


@router.get(
    "/alerts/status",
    response_model=AlertSchedulerStatusResponse,
    summary="Alert scheduler status",
)
def alert_scheduler_status(request: Request) -> AlertSchedulerStatusResponse:
    """Report whether the scheduler runs and how its last checks went."""
    scheduler = getattr(request.app.state, "alert_scheduler", None)
    history = scheduler.task_history if scheduler is not None else []
    return AlertSchedulerStatusResponse(
        running=scheduler is not None and scheduler.is_running,
        interval_minutes=settings.alert_interval_minutes,
        recent_runs=[
            AlertTaskItem(
                task_name=r.task_name,
                status=r.status.value,
                started_at=r.started_at,
                finished_at=r.finished_at,
                duration_seconds=r.duration_seconds,
                error=r.error,
            )
            for r in history[-10:]
        ],
    )
