"""
Ghar Nari - Storage Settings Mixin
==================================

The site settings singleton. It is never deleted, only overwritten.
"""

from typing import Any, Mapping, Union

from gharnari.core.constants import DEFAULT_SETTINGS, SETTINGS_FILE
from gharnari.schemas import SETTINGS_SCHEMA, SiteSettings


def default_settings() -> SiteSettings:
    return SiteSettings.model_validate(DEFAULT_SETTINGS)


class SettingsMixin:
    """Mixin for site settings operations."""

    async def get_settings(self) -> SiteSettings:
        """Stored settings, or the defaults when the stored copy is invalid."""
        settings = await self._read_document(SETTINGS_FILE, SETTINGS_SCHEMA)
        return settings if settings is not None else default_settings()

    async def save_settings(self, settings: Union[SiteSettings, Mapping[str, Any]]) -> SiteSettings:
        """Overwrite the settings singleton. All-or-nothing."""
        return await self._write_document(SETTINGS_FILE, SETTINGS_SCHEMA, settings)


__all__ = ["SettingsMixin", "default_settings"]
