"""
Ghar Nari - Storage Core
========================

Base store class: collection files, self-healing reads, validated
all-or-nothing writes.

Each collection lives in exactly one JSON file holding the whole
collection. Blocking file I/O runs in worker threads so the event loop
keeps serving other requests.
"""

import asyncio
import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from gharnari.core.config import config
from gharnari.core.constants import (
    ANALYTICS_FILE,
    COMMENTS_FILE,
    DEFAULT_SETTINGS,
    POSTS_FILE,
    SETTINGS_FILE,
)
from gharnari.core.logger import logger
from gharnari.errors import ErrorCode, RecordValidationError, StorageError
from gharnari.schemas import RecordSchema
from gharnari.schemas.models import Record
from gharnari.utils.files import write_json_atomic


COLLECTION_DEFAULTS: Dict[str, Any] = {
    POSTS_FILE: [],
    COMMENTS_FILE: [],
    SETTINGS_FILE: DEFAULT_SETTINGS,
    ANALYTICS_FILE: [],
}


class StorageCore:
    """Base store class with file management."""

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        uploads_dir: Optional[Path] = None,
    ) -> None:
        """Ensure the data directory and every collection file exist."""
        self.data_dir = Path(data_dir or config.DATA_DIR)
        self.uploads_dir = Path(uploads_dir or config.UPLOADS_DIR)
        self._locks: Dict[str, asyncio.Lock] = {}
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._init_files()

    def _init_files(self) -> None:
        for filename in COLLECTION_DEFAULTS:
            self._ensure_valid_file(filename)

    def collection_path(self, filename: str) -> Path:
        return self.data_dir / filename

    def _lock(self, filename: str) -> asyncio.Lock:
        """Per-collection write lock."""
        lock = self._locks.get(filename)
        if lock is None:
            lock = self._locks[filename] = asyncio.Lock()
        return lock

    # =========================================================================
    # Read Path
    # =========================================================================

    def _ensure_valid_file(self, filename: str) -> Any:
        """
        Return the parsed collection, reinitializing it when it is missing,
        empty, unparsable or of the wrong JSON type.

        Never raises: a collection that cannot be repaired on disk is still
        served as its default value.
        """
        path = self.collection_path(filename)
        default = COLLECTION_DEFAULTS[filename]

        try:
            text = path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            reason = None
        except (OSError, UnicodeDecodeError) as e:
            reason = f"Unreadable ({type(e).__name__})"
        else:
            if not text:
                reason = "Empty file"
            else:
                try:
                    data = json.loads(text)
                except json.JSONDecodeError as e:
                    reason = f"Invalid JSON ({e.msg})"
                else:
                    if isinstance(data, type(default)):
                        return data
                    reason = f"Expected JSON {'array' if isinstance(default, list) else 'object'}"

        if reason is None:
            logger.tree("Collection Initialized", [
                ("File", filename),
            ], emoji="📁")
        else:
            logger.warning("Collection Reinitialized", [
                ("File", filename),
                ("Reason", reason),
            ])

        try:
            write_json_atomic(path, default)
        except OSError as e:
            logger.error_tree("Collection Repair Failed", e, [
                ("File", filename),
            ])
        return copy.deepcopy(default)

    async def _read_records(self, filename: str, schema: RecordSchema) -> List[Record]:
        """Load a collection, dropping (and logging) records that fail either stage."""
        raw = await asyncio.to_thread(self._ensure_valid_file, filename)

        records = []
        for index, item in enumerate(raw):
            normalized = schema.normalize(item)
            result = schema.check(normalized)
            if result.ok:
                records.append(result.record)
                continue

            record_id = item.get("id") if isinstance(item, dict) else None
            logger.warning("Invalid Record Dropped", [
                ("Collection", schema.collection),
                ("Index", index),
                ("ID", record_id or "None"),
                ("Issues", "; ".join(f"{i.path}: {i.message}" for i in result.issues)[:200]),
            ])
        return records

    async def _read_document(self, filename: str, schema: RecordSchema) -> Optional[Record]:
        """Load a single-object collection, None when it fails validation."""
        raw = await asyncio.to_thread(self._ensure_valid_file, filename)
        normalized = schema.normalize(raw)
        result = schema.check(normalized)
        if result.ok:
            return result.record

        logger.warning("Invalid Document Ignored", [
            ("Collection", schema.collection),
            ("Issues", "; ".join(f"{i.path}: {i.message}" for i in result.issues)[:200]),
        ])
        return None

    # =========================================================================
    # Write Path
    # =========================================================================

    async def _write_records(
        self,
        filename: str,
        schema: RecordSchema,
        records: Sequence[Any],
    ) -> List[Record]:
        """
        Validate every record, then replace the collection file.

        Raises:
            RecordValidationError: If any record fails; the file is untouched.
            StorageError: If the file cannot be written.
        """
        accepted, issues = schema.check_all(records)
        if issues:
            logger.warning("Write Rejected", [
                ("Collection", schema.collection),
                ("Records", len(records)),
                ("Issues", len(issues)),
            ])
            raise RecordValidationError(schema.collection, issues)

        await self._write_payload(filename, schema.collection, [r.to_json() for r in accepted])
        return accepted

    async def _write_document(self, filename: str, schema: RecordSchema, document: Any) -> Record:
        """Validate and replace a single-object collection."""
        normalized = schema.normalize(document)
        result = schema.check(normalized)
        if not result.ok:
            issues = [issue.with_prefix(schema.collection) for issue in result.issues]
            logger.warning("Write Rejected", [
                ("Collection", schema.collection),
                ("Issues", len(issues)),
            ])
            raise RecordValidationError(schema.collection, issues)

        await self._write_payload(filename, schema.collection, result.record.to_json())
        return result.record

    async def _write_payload(self, filename: str, collection: str, payload: Any) -> None:
        path = self.collection_path(filename)
        try:
            async with self._lock(filename):
                await asyncio.to_thread(write_json_atomic, path, payload)
        except OSError as e:
            logger.error_tree("Collection Write Failed", e, [
                ("Collection", collection),
            ])
            raise StorageError(
                ErrorCode.STORAGE_WRITE_FAILED,
                message=f"Failed to save {collection}",
                details={"collection": collection},
            ) from e


__all__ = ["StorageCore", "COLLECTION_DEFAULTS"]
