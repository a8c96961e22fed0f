"""
Ghar Nari - Backup Notifications
================================

Optional webhook notification after scheduled backups.
"""

import asyncio
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from gharnari.core.logger import logger


# Size divisors
KB_DIVISOR = 1024
MB_DIVISOR = 1024 * 1024
GB_DIVISOR = 1024 * 1024 * 1024


def format_size(size_bytes: int) -> str:
    """Format file size to appropriate unit (KB, MB, GB)."""
    if size_bytes >= GB_DIVISOR:
        return f"{size_bytes / GB_DIVISOR:.2f} GB"
    elif size_bytes >= MB_DIVISOR:
        return f"{size_bytes / MB_DIVISOR:.1f} MB"
    else:
        return f"{size_bytes / KB_DIVISOR:.1f} KB"


def format_tree_message(
    title: str,
    items: List[Tuple[str, Any]],
    emoji: str = "💾",
    now: Optional[datetime] = None,
) -> str:
    """Format a tree log message for the webhook."""
    now = now or datetime.now().astimezone()
    lines = [f"{now.strftime('[%I:%M:%S %p %Z]')} {emoji} {title}"]

    for i, (key, value) in enumerate(items):
        prefix = "└─" if i == len(items) - 1 else "├─"
        lines.append(f"  {prefix} {key}: {value}")

    return "\n".join(lines)


def build_notification(result: Dict[str, Any]) -> Tuple[str, List[Tuple[str, Any]], str]:
    """Title, tree items and emoji for a scheduled backup result."""
    if result.get("success"):
        return "Daily Backup Created", [
            ("Backup", result["name"]),
            ("Size", format_size(result["size"])),
            ("Retention", f"{result['retention']} backups"),
        ], "💾"
    return "Daily Backup FAILED", [
        ("Error", str(result.get("error", "Unknown"))[:80]),
        ("Action", "Next run still scheduled"),
    ], "❌"


async def send_backup_notification(webhook_url: Optional[str], result: Dict[str, Any]) -> None:
    """Post a backup result to the webhook. Failures are logged, never raised."""
    if not webhook_url:
        return

    title, items, emoji = build_notification(result)
    payload = {
        "content": f"```\n{format_tree_message(title, items, emoji)}\n```",
        "username": "Backups",
    }

    try:
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=10)) as session:
            async with session.post(webhook_url, json=payload) as response:
                if response.status >= 400:
                    logger.warning("Backup Webhook Failed", [
                        ("Status", str(response.status)),
                    ])
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.warning("Backup Webhook Error", [
            ("Error", f"{type(e).__name__}: {str(e)[:50]}"),
        ])


__all__ = [
    "format_size",
    "format_tree_message",
    "build_notification",
    "send_backup_notification",
]
