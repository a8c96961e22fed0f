"""
Ghar Nari - Backup Scheduler
============================

Daily backups: first run at the next local midnight, then every 24 hours
for the lifetime of the process.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from gharnari.backup.notify import send_backup_notification
from gharnari.backup.service import BackupManager
from gharnari.core.config import config
from gharnari.core.constants import SECONDS_PER_DAY
from gharnari.core.logger import logger
from gharnari.utils.async_utils import create_safe_task


# =============================================================================
# Helpers
# =============================================================================

def _get_timezone(timezone_name: Optional[str]) -> Optional[ZoneInfo]:
    """Zone for the schedule; None means the system local zone."""
    if not timezone_name:
        return None
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown Backup Timezone", [
            ("Timezone", timezone_name),
            ("Fallback", "System local time"),
        ])
        return None


def seconds_until_next_midnight(now: datetime) -> float:
    """
    Seconds from an aware `now` to the following midnight in its zone.

    The difference is taken in UTC so a DST change during the night is
    counted correctly.
    """
    midnight = (now + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
    return (midnight.astimezone(timezone.utc) - now.astimezone(timezone.utc)).total_seconds()


# =============================================================================
# Start Token
# =============================================================================

class StartToken:
    """
    Once-only permit to start the scheduler.

    Owned by the composition root and passed to start(); the first claim
    succeeds and every later claim is refused.
    """

    def __init__(self) -> None:
        self._claimed = False

    @property
    def claimed(self) -> bool:
        return self._claimed

    def claim(self) -> bool:
        if self._claimed:
            return False
        self._claimed = True
        return True


# =============================================================================
# Backup Scheduler
# =============================================================================

class BackupScheduler:
    """Midnight-aligned daily backup scheduler."""

    def __init__(
        self,
        manager: BackupManager,
        timezone_name: Optional[str] = None,
        webhook_url: Optional[str] = None,
        interval: float = SECONDS_PER_DAY,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ) -> None:
        self._manager = manager
        self._tz = _get_timezone(timezone_name if timezone_name is not None else config.TIMEZONE)
        self._webhook_url = webhook_url if webhook_url is not None else config.BACKUP_WEBHOOK_URL
        self._interval = interval
        self._sleep = sleep or asyncio.sleep
        self._task: Optional[asyncio.Task] = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def _now(self) -> datetime:
        if self._tz is None:
            return datetime.now().astimezone()
        return datetime.now(self._tz)

    async def start(self, token: StartToken) -> bool:
        """
        Start the daily schedule.

        Returns:
            True if the scheduler was started, False if the token was
            already used or the scheduler is already running.
        """
        if self._running or not token.claim():
            logger.tree("Backup Scheduler Already Running", [
                ("Action", "Start ignored"),
            ], emoji="⏰")
            return False

        self._running = True
        first_delay = seconds_until_next_midnight(self._now())
        self._task = create_safe_task(self._scheduler_loop(first_delay), "Backup Scheduler")

        logger.tree("Backup Scheduler Started", [
            ("Schedule", "Daily at midnight"),
            ("Next Run", f"{round(first_delay / 60)} minutes from now"),
            ("Retention", f"{self._manager.max_backups} backups"),
        ], emoji="⏰")
        return True

    async def stop(self) -> None:
        """Stop the scheduler (process shutdown)."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def run_scheduled_backup(self) -> Optional[Path]:
        """One scheduled run. Failures are logged and reported, never raised."""
        try:
            path = await self._manager.create_backup()
        except Exception as e:
            logger.error_tree("Scheduled Backup Failed", e)
            await send_backup_notification(self._webhook_url, {
                "success": False,
                "error": str(e),
            })
            return None

        try:
            size = (await asyncio.to_thread(path.stat)).st_size
        except FileNotFoundError:
            size = 0

        await send_backup_notification(self._webhook_url, {
            "success": True,
            "name": path.name,
            "size": size,
            "retention": self._manager.max_backups,
        })
        return path

    async def _scheduler_loop(self, first_delay: float) -> None:
        """Wait for midnight, back up, then back up every interval."""
        delay = first_delay
        while self._running:
            await self._sleep(delay)
            if not self._running:
                break
            await self.run_scheduled_backup()
            delay = self._interval


__all__ = [
    "BackupScheduler",
    "StartToken",
    "seconds_until_next_midnight",
]
