"""
Ghar Nari - Backup Manager
==========================

Point-in-time snapshots of every collection, retention, restore with a
safety snapshot, and standalone exports.

Snapshots are read through the store (so they only ever contain records
that pass validation) and restored through the store write path.
"""

import asyncio
import json
import os
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from gharnari.core.config import config
from gharnari.core.constants import (
    BACKUP_PREFIX,
    EXPORT_PREFIX,
    SNAPSHOT_VERSION,
)
from gharnari.core.logger import logger
from gharnari.errors import BackupError, BackupFormatError, BackupNotFoundError
from gharnari.schemas import (
    ANALYTICS_SCHEMA,
    COMMENT_SCHEMA,
    POST_SCHEMA,
    SETTINGS_SCHEMA,
    BackupSnapshot,
    ExportDocument,
)
from gharnari.schemas.validation import issues_from_error
from gharnari.storage import DocumentStore
from gharnari.utils.files import read_json, write_json_atomic
from gharnari.utils.timestamps import (
    epoch_ns,
    file_stamp,
    from_epoch_ns,
    to_iso,
    utc_now,
)


BACKUP_SUFFIX = ".json"


# =============================================================================
# Backup Listing
# =============================================================================

@dataclass(frozen=True)
class BackupInfo:
    """A backup file as seen from the directory listing."""

    name: str
    size: int
    created_at: datetime
    created_ns: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "created": to_iso(self.created_at),
        }


# =============================================================================
# Backup Manager
# =============================================================================

class BackupManager:
    """
    Creates, lists, prunes and restores snapshots of the document store.

    Backups live in backup_dir as backup-<stamp>.json; exports live in
    export_dir as export-<stamp>.json and are never pruned.
    """

    def __init__(
        self,
        store: DocumentStore,
        backup_dir: Optional[Path] = None,
        export_dir: Optional[Path] = None,
        max_backups: Optional[int] = None,
    ) -> None:
        self._store = store
        self.backup_dir = Path(backup_dir or store.data_dir / "backups")
        self.export_dir = Path(export_dir or store.data_dir)
        self.max_backups = max_backups if max_backups is not None else config.MAX_BACKUPS
        self._create_lock = asyncio.Lock()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _resolve_backup(self, name: str) -> Optional[Path]:
        """Path for a backup name, None when the name is not a plain backup file name."""
        if not isinstance(name, str) or Path(name).name != name:
            return None
        if not (name.startswith(BACKUP_PREFIX) and name.endswith(BACKUP_SUFFIX)):
            return None
        return self.backup_dir / name

    @staticmethod
    def _claim_path(directory: Path, prefix: str, moment: datetime) -> Tuple[Path, datetime]:
        """First free <prefix><stamp>.json at or after moment."""
        while True:
            path = directory / f"{prefix}{file_stamp(moment)}{BACKUP_SUFFIX}"
            if not path.exists():
                return path, moment
            moment += timedelta(microseconds=1)

    async def _gather_snapshot(self) -> Dict[str, Any]:
        posts = await self._store.get_posts()
        comments = await self._store.get_comments()
        settings = await self._store.get_settings()
        analytics = await self._store.get_analytics()
        return {
            "posts": [p.to_json() for p in posts],
            "comments": [c.to_json() for c in comments],
            "settings": settings.to_json(),
            "analytics": [a.to_json() for a in analytics],
        }

    # =========================================================================
    # Create
    # =========================================================================

    def _write_backup(self, snapshot: Dict[str, Any]) -> Path:
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        path, moment = self._claim_path(self.backup_dir, BACKUP_PREFIX, utc_now())

        document = BackupSnapshot(
            **snapshot,
            timestamp=to_iso(moment),
            version=SNAPSHOT_VERSION,
        )
        write_json_atomic(path, document.to_json())

        # File times carry the snapshot instant so listings order by it
        stamp = epoch_ns(moment)
        os.utime(path, ns=(stamp, stamp))
        return path

    async def _take_backup(self) -> Path:
        """Snapshot every collection into a new backup file, without retention."""
        async with self._create_lock:
            snapshot = await self._gather_snapshot()
            try:
                path = await asyncio.to_thread(self._write_backup, snapshot)
            except OSError as e:
                logger.error_tree("Backup Creation Failed", e)
                raise BackupError(
                    message=f"Backup creation failed: {e.strerror or type(e).__name__}",
                ) from e

        logger.tree("Backup Created", [
            ("Backup", path.name),
            ("Posts", len(snapshot["posts"])),
            ("Comments", len(snapshot["comments"])),
            ("Analytics", len(snapshot["analytics"])),
        ], emoji="💾")
        return path

    async def create_backup(self) -> Path:
        """
        Snapshot every collection into a new backup file, then apply retention.

        Returns:
            Path of the new backup.

        Raises:
            BackupError: If the backup file cannot be written.
        """
        path = await self._take_backup()
        await self.cleanup_old_backups()
        return path

    # =========================================================================
    # List / Delete / Retention
    # =========================================================================

    def _scan_backups(self) -> List[BackupInfo]:
        if not self.backup_dir.is_dir():
            return []

        backups = []
        for entry in self.backup_dir.iterdir():
            if not (entry.name.startswith(BACKUP_PREFIX) and entry.name.endswith(BACKUP_SUFFIX)):
                continue
            try:
                stats = entry.stat()
            except FileNotFoundError:
                continue
            if not entry.is_file():
                continue
            backups.append(BackupInfo(
                name=entry.name,
                size=stats.st_size,
                created_at=from_epoch_ns(stats.st_mtime_ns),
                created_ns=stats.st_mtime_ns,
            ))

        backups.sort(key=lambda b: (b.created_ns, b.name), reverse=True)
        return backups

    async def list_backups(self) -> List[BackupInfo]:
        """Backups newest first, from file metadata only."""
        return await asyncio.to_thread(self._scan_backups)

    async def get_latest_backup(self) -> Optional[BackupInfo]:
        backups = await self.list_backups()
        return backups[0] if backups else None

    async def delete_backup(self, name: str) -> bool:
        """Delete one backup. Returns False (and does nothing) when it does not exist."""
        path = self._resolve_backup(name)
        if path is None or not path.is_file():
            return False

        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError:
            return False

        logger.tree("Backup Deleted", [
            ("Backup", name),
        ], emoji="🗑️")
        return True

    async def cleanup_old_backups(self) -> int:
        """Delete the oldest backups beyond max_backups. Returns how many were removed."""
        backups = await self.list_backups()
        excess = backups[self.max_backups:]
        if not excess:
            return 0

        removed = 0
        for backup in excess:
            try:
                if await self.delete_backup(backup.name):
                    removed += 1
            except OSError as e:
                logger.error_tree("Backup Cleanup Failed", e, [
                    ("Backup", backup.name),
                ])

        logger.tree("Old Backups Cleaned", [
            ("Removed", removed),
            ("Kept", self.max_backups),
        ], emoji="🧹")
        return removed

    # =========================================================================
    # Restore
    # =========================================================================

    def _load_snapshot(self, name: str) -> BackupSnapshot:
        path = self._resolve_backup(name)
        if path is None or not path.is_file():
            raise BackupNotFoundError(name)

        try:
            raw = read_json(path)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise BackupFormatError(
                message=f"Backup file is not valid JSON: {name}",
                details={"name": name, "reason": type(e).__name__},
            ) from e

        try:
            return BackupSnapshot.model_validate(raw)
        except ValidationError as e:
            raise BackupFormatError(
                message=f"Invalid backup file structure: {name}",
                details={
                    "name": name,
                    "issues": [issue.to_dict() for issue in issues_from_error(e)],
                },
            ) from e

    @staticmethod
    def _check_snapshot(name: str, snapshot: BackupSnapshot) -> None:
        """Run every record through the pipeline before live data is touched."""
        issues = []
        issues.extend(POST_SCHEMA.check_all(snapshot.posts)[1])
        issues.extend(COMMENT_SCHEMA.check_all(snapshot.comments)[1])
        issues.extend(SETTINGS_SCHEMA.check_all([snapshot.settings])[1])
        if snapshot.analytics is not None:
            issues.extend(ANALYTICS_SCHEMA.check_all(snapshot.analytics)[1])

        if issues:
            raise BackupFormatError(
                message=f"Backup contains invalid records: {name}",
                details={
                    "name": name,
                    "issues": [issue.to_dict() for issue in issues],
                },
            )

    async def restore_from_backup(self, name: str) -> Dict[str, Any]:
        """
        Replace live collections with the contents of a backup.

        The backup is fully checked first, then a safety backup of the
        current state is taken, then posts, comments, settings and analytics
        (when the backup has them) are written in that order.

        Raises:
            BackupNotFoundError: If the backup does not exist.
            BackupFormatError: If it is unreadable, lacks posts, comments or
                settings, or holds an invalid record. Live data is untouched.
        """
        snapshot = await asyncio.to_thread(self._load_snapshot, name)
        self._check_snapshot(name, snapshot)

        # Retention waits until the restore is written so it cannot prune
        # the backup being restored
        safety_backup = await self._take_backup()
        try:
            posts = await self._store.save_posts(snapshot.posts)
            comments = await self._store.save_comments(snapshot.comments)
            await self._store.save_settings(snapshot.settings)
            analytics = None
            if snapshot.analytics is not None:
                analytics = await self._store.save_analytics(snapshot.analytics)
        finally:
            await self.cleanup_old_backups()

        logger.tree("Backup Restored", [
            ("Backup", name),
            ("Safety Backup", safety_backup.name),
            ("Posts", len(posts)),
            ("Comments", len(comments)),
        ], emoji="♻️")

        return {
            "restored": name,
            "safetyBackup": safety_backup.name,
            "posts": len(posts),
            "comments": len(comments),
            "analytics": len(analytics) if analytics is not None else None,
        }

    # =========================================================================
    # Export
    # =========================================================================

    def _write_export(self, snapshot: Dict[str, Any]) -> Path:
        self.export_dir.mkdir(parents=True, exist_ok=True)
        path, moment = self._claim_path(self.export_dir, EXPORT_PREFIX, utc_now())
        document = ExportDocument(
            **snapshot,
            timestamp=to_iso(moment),
            version=SNAPSHOT_VERSION,
            exported_at=to_iso(moment),
        )
        write_json_atomic(path, document.to_json())
        return path

    async def export_data(self) -> Path:
        """
        Write a standalone export for manual download.

        Raises:
            BackupError: If the export cannot be written.
        """
        snapshot = await self._gather_snapshot()
        try:
            path = await asyncio.to_thread(self._write_export, snapshot)
        except OSError as e:
            logger.error_tree("Data Export Failed", e)
            raise BackupError(
                message=f"Data export failed: {e.strerror or type(e).__name__}",
            ) from e

        logger.tree("Data Exported", [
            ("Export", path.name),
        ], emoji="📤")
        return path


__all__ = ["BackupManager", "BackupInfo"]
