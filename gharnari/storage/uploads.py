"""
Ghar Nari - Upload Cleanup
==========================

Deletes locally stored featured images. The upload handler hands the
store an opaque /uploads/<name> string; external URLs are never touched.
"""

from pathlib import Path
from typing import Optional

from gharnari.core.constants import UPLOADS_PREFIX
from gharnari.core.logger import logger
from gharnari.schemas.sanitization import is_local_upload


def resolve_upload(uploads_dir: Path, image_ref: str) -> Optional[Path]:
    """Map /uploads/<name> to a file inside uploads_dir, None for anything else."""
    if not is_local_upload(image_ref):
        return None
    root = uploads_dir.resolve()
    path = (root / image_ref[len(UPLOADS_PREFIX):]).resolve()
    if path.parent != root:
        return None
    return path


def delete_local_image(uploads_dir: Path, image_ref: str) -> bool:
    """
    Delete a local featured image.

    Returns:
        True if a file was removed, False for external or missing images.

    Raises:
        OSError: If the file exists but cannot be removed.
    """
    path = resolve_upload(uploads_dir, image_ref)
    if path is None:
        logger.tree("Image Deletion Skipped", [
            ("Image", image_ref[:80]),
            ("Reason", "External image"),
        ], emoji="🖼️")
        return False

    if not path.exists():
        logger.warning("Image File Not Found", [
            ("Image", image_ref[:80]),
        ])
        return False

    path.unlink()
    logger.tree("Image Deleted", [
        ("Image", image_ref[:80]),
    ], emoji="🗑️")
    return True


__all__ = ["resolve_upload", "delete_local_image"]
