"""
Ghar Nari - Backup Package
==========================

Local JSON snapshots of the document store, retention, restore, and the
daily midnight scheduler.
"""

from .service import BackupInfo, BackupManager
from .scheduler import BackupScheduler, StartToken, seconds_until_next_midnight
from .notify import send_backup_notification

__all__ = [
    "BackupInfo",
    "BackupManager",
    "BackupScheduler",
    "StartToken",
    "seconds_until_next_midnight",
    "send_backup_notification",
]
