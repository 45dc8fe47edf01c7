"""
Scheduler for the periodic price alert check.

Uses APScheduler to run the alert check on a fixed interval
(every 5 minutes by default). Jobs coalesce and never run
concurrently inside one process, so a slow check delays the next tick
instead of overlapping it.

The same check can be triggered on demand with ``run_now``.
"""

import logging
import threading
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.application.portfolio.check_price_alerts import CheckPriceAlertsUseCase

logger = logging.getLogger(__name__)

JOB_ID = "check_price_alerts"


class TaskStatus(Enum):
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TaskResult:
    """Result of one alert check execution."""

    task_name: str
    status: TaskStatus
    started_at: str
    finished_at: str | None = None
    duration_seconds: float = 0.0
    details: dict = field(default_factory=dict)
    error: str | None = None


class AlertScheduler:
    """Runs the price alert check periodically in a background thread.

    Args:
        check_factory: Builds a fresh CheckPriceAlertsUseCase per run.
        interval_minutes: Minutes between two scheduled checks.

    Usage:
        scheduler = AlertScheduler(factory, interval_minutes=5)
        scheduler.start()    # begin the interval job
        scheduler.run_now()  # trigger a check immediately
        scheduler.stop()     # graceful shutdown
    """

    def __init__(
        self,
        check_factory: Callable[[], CheckPriceAlertsUseCase],
        interval_minutes: int = 5,
    ) -> None:
        self._check_factory = check_factory
        self._interval_minutes = interval_minutes
        self._scheduler: Any | None = None
        self._task_history: list[TaskResult] = []
        self._max_history = 100
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None

    @property
    def task_history(self) -> list[TaskResult]:
        with self._lock:
            return list(self._task_history)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the interval job."""
        if self._scheduler is not None:
            logger.warning("Alert scheduler already running.")
            return

        self._scheduler = BackgroundScheduler(
            timezone="UTC",
            job_defaults={"coalesce": True, "max_instances": 1},
        )
        self._scheduler.add_job(
            self.run_now,
            IntervalTrigger(minutes=self._interval_minutes),
            id=JOB_ID,
            name="Portfolio price alert check",
        )
        self._scheduler.start()
        logger.info(
            "Alert scheduler started (every %d minutes).", self._interval_minutes
        )

    def stop(self) -> None:
        """Stop the scheduler without waiting for a running check."""
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Alert scheduler stopped.")

    # ------------------------------------------------------------------
    # Task
    # ------------------------------------------------------------------

    def _record_result(self, result: TaskResult) -> None:
        with self._lock:
            self._task_history.append(result)
            if len(self._task_history) > self._max_history:
                self._task_history = self._task_history[-self._max_history:]

    def run_now(self) -> TaskResult:
        """Run one alert check and record its outcome.

        Errors are logged and recorded, never raised, so the interval job
        keeps firing after a failed tick.
        """
        start = time.monotonic()
        started_at = datetime.now(timezone.utc).isoformat()
        try:
            outcome = self._check_factory().execute()
            task_result = TaskResult(
                task_name=JOB_ID,
                status=TaskStatus.COMPLETED,
                started_at=started_at,
                finished_at=datetime.now(timezone.utc).isoformat(),
                duration_seconds=round(time.monotonic() - start, 2),
                details=asdict(outcome),
            )
        except Exception as exc:
            logger.exception("Scheduled price alert check failed.")
            task_result = TaskResult(
                task_name=JOB_ID,
                status=TaskStatus.FAILED,
                started_at=started_at,
                finished_at=datetime.now(timezone.utc).isoformat(),
                duration_seconds=round(time.monotonic() - start, 2),
                error=str(exc),
            )

        self._record_result(task_result)
        return task_result
