from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Sequence

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from coachbot.db.models import UserRecord
from coachbot.db.store import UserStore
from coachbot.services import subscription
from coachbot.services.backup import SessionBackup
from coachbot.services.notifier import Notifier

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    checked: int = 0
    expired: int = 0
    notified: int = 0
    reset: int = 0
    failed: int = 0


class ExpiryScheduler:
    def __init__(
        self,
        store: UserStore,
        notifier: Notifier,
        backup: SessionBackup,
        clock: Callable[[], datetime],
        *,
        thresholds: Sequence[int] = subscription.EXPIRY_NOTIFICATION_DAYS,
        sweep_interval_hours: int = 6,
        backup_interval_minutes: int = 60,
    ):
        self.store = store
        self.notifier = notifier
        self.backup_job = backup
        self.clock = clock
        self.thresholds = tuple(thresholds)
        self.sweep_interval_hours = sweep_interval_hours
        self.backup_interval_minutes = backup_interval_minutes

    def start(self, scheduler: AsyncIOScheduler) -> None:
        scheduler.add_job(
            self.sweep,
            IntervalTrigger(hours=self.sweep_interval_hours),
            id="expiry_sweep",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        scheduler.add_job(
            self.backup,
            IntervalTrigger(minutes=self.backup_interval_minutes),
            id="session_backup",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )

    async def sweep(self) -> SweepReport:
        report = SweepReport()
        for u in self.store.users():
            report.checked += 1
            try:
                await self._sweep_user(u, report)
            except Exception:
                report.failed += 1
                logger.exception("Sweep failed for %s", u.identity)
        logger.info(
            "Expiry sweep: checked=%d expired=%d notified=%d reset=%d failed=%d",
            report.checked, report.expired, report.notified, report.reset, report.failed,
        )
        return report

    async def _sweep_user(self, u: UserRecord, report: SweepReport) -> None:
        now = self.clock()

        if subscription.resolve_expiry(u, now):
            report.expired += 1
            await self.store.save()
            await self.notifier.access_revoked(u)
            return

        if subscription.should_reset_notification(u, now, self.thresholds):
            subscription.reset_notification(u)
            report.reset += 1
            await self.store.save()

        days = subscription.due_for_notification(u, now, self.thresholds)
        if days is None:
            return
        if await self.notifier.expiry_reminder(u, days):
            subscription.mark_notified(u, days, now)
            report.notified += 1
            await self.store.save()
        else:
            # not marked: the next sweep tries again
            report.failed += 1

    async def backup(self) -> None:
        try:
            await asyncio.to_thread(self.backup_job.run)
        except Exception:
            logger.exception("Session backup failed")
