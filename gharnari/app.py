"""
Ghar Nari - Composition Root
============================

Builds the store, the backup manager and the scheduler, and exposes the
only surface the route layer is allowed to call.

Usage:
    services = BlogServices()
    await services.initialize_backup_system()

    posts = await services.store.get_published_posts()
    path = await services.create_backup()
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from gharnari.backup import BackupInfo, BackupManager, BackupScheduler, StartToken
from gharnari.core.logger import logger
from gharnari.storage import DocumentStore


class BlogServices:
    """Process-wide storage services."""

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        uploads_dir: Optional[Path] = None,
        max_backups: Optional[int] = None,
        timezone_name: Optional[str] = None,
        webhook_url: Optional[str] = None,
    ) -> None:
        self.store = DocumentStore(data_dir=data_dir, uploads_dir=uploads_dir)
        self.backups = BackupManager(self.store, max_backups=max_backups)
        self.scheduler = BackupScheduler(
            self.backups,
            timezone_name=timezone_name,
            webhook_url=webhook_url,
        )
        self._scheduler_token = StartToken()

    async def initialize_backup_system(self) -> bool:
        """Start the daily backup schedule. Safe to call more than once."""
        started = await self.scheduler.start(self._scheduler_token)
        if started:
            logger.success("Backup system initialized")
        return started

    # Backup conveniences for the route layer

    async def create_backup(self) -> Path:
        return await self.backups.create_backup()

    async def restore_from_backup(self, name: str) -> Dict[str, Any]:
        return await self.backups.restore_from_backup(name)

    async def list_backups(self) -> List[BackupInfo]:
        return await self.backups.list_backups()

    async def delete_backup(self, name: str) -> bool:
        return await self.backups.delete_backup(name)

    async def export_data(self) -> Path:
        return await self.backups.export_data()

    async def close(self) -> None:
        await self.scheduler.stop()


__all__ = ["BlogServices"]
