"""
Ghar Nari - Configuration
=========================

Central configuration from environment variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from gharnari.core.constants import DEFAULT_MAX_BACKUPS


ROOT_DIR = Path(__file__).parent.parent.parent


def _get_env_path(key: str, default: Path) -> Path:
    """Get environment variable as a path with default."""
    value = os.getenv(key)
    if not value:
        return default
    return Path(value).expanduser()


def _get_env_int(key: str, default: int) -> int:
    """Get environment variable as int with default."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_env_str(key: str) -> Optional[str]:
    """Get environment variable as a stripped string, None when blank."""
    value = os.getenv(key, "").strip()
    return value or None


DATA_DIR = _get_env_path("GHARNARI_DATA_DIR", ROOT_DIR / "data")
PUBLIC_DIR = _get_env_path("GHARNARI_PUBLIC_DIR", ROOT_DIR / "public")
LOGS_DIR = _get_env_path("GHARNARI_LOGS_DIR", ROOT_DIR / "logs")

LOGS_DIR.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class Config:
    """Storage engine configuration from environment variables."""

    # Storage
    DATA_DIR: Path = DATA_DIR
    UPLOADS_DIR: Path = PUBLIC_DIR / "uploads"

    # Backups
    MAX_BACKUPS: int = _get_env_int("GHARNARI_MAX_BACKUPS", DEFAULT_MAX_BACKUPS)
    BACKUP_WEBHOOK_URL: Optional[str] = _get_env_str("BACKUP_WEBHOOK_URL")

    # IANA zone name for the midnight schedule, system local time when unset
    TIMEZONE: Optional[str] = _get_env_str("GHARNARI_TIMEZONE")


config = Config()
