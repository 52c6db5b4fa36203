import logging
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

PERIODIC_JOB_ID = "decision:periodic"
INITIAL_JOB_ID = "decision:initial"


class DecisionScheduler:
    """Re-runs the decision agent on a fixed cadence.

    evaluate is an async callable that reads the logs fresh, so overlapping
    manual and periodic runs simply reflect the latest state.
    """

    def __init__(
        self,
        evaluate: Callable[[], Awaitable[object]],
        interval_minutes: int = 5,
        initial_delay_seconds: int = 3,
        timezone=None,
    ):
        self._evaluate = evaluate
        self.interval_minutes = interval_minutes
        self.initial_delay_seconds = initial_delay_seconds
        self._timezone = timezone
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def get_scheduler(self) -> AsyncIOScheduler:
        if self._scheduler is None:
            kwargs = {"timezone": self._timezone} if self._timezone else {}
            self._scheduler = AsyncIOScheduler(**kwargs)
        return self._scheduler

    async def _run(self) -> None:
        try:
            await self._evaluate()
        except Exception as exc:
            logger.exception("Decision evaluation failed: %s", exc)

    def start(self) -> None:
        """Start the periodic job plus one delayed initial run. Needs a running event loop."""
        scheduler = self.get_scheduler()
        if scheduler.running:
            return
        scheduler.add_job(
            self._run,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id=PERIODIC_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        scheduler.add_job(
            self._run,
            trigger=DateTrigger(run_date=datetime.now(dt_timezone.utc) + timedelta(seconds=self.initial_delay_seconds)),
            id=INITIAL_JOB_ID,
            replace_existing=True,
        )
        scheduler.start()
        logger.info(
            "Decision scheduler started (every %s min, first run in %s s)",
            self.interval_minutes, self.initial_delay_seconds,
        )

    def stop(self) -> None:
        """Cancel all pending runs. Safe to call more than once."""
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Decision scheduler stopped")
