"""
Small Pillow helpers for screenshot artifacts.
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image, UnidentifiedImageError

from site_forge.errors import FilesystemError, ToolExecutionError

MIME_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
    "GIF": "image/gif",
}


def bitmap_size(path: Path) -> tuple[int, int]:
    """Confirm ``path`` is a readable bitmap and return its (width, height)."""
    try:
        with Image.open(path) as img:
            size = img.size
            img.verify()
    except FileNotFoundError as exc:
        raise ToolExecutionError(f"screenshot was not written: {path}") from exc
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ToolExecutionError(f"screenshot is not a valid image: {path}: {exc}") from exc
    return int(size[0]), int(size[1])


def image_mime_type(path: Path) -> str:
    try:
        with Image.open(path) as img:
            fmt = img.format or ""
    except FileNotFoundError as exc:
        raise FilesystemError(f"image not found: {path}") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise FilesystemError(f"unreadable image {path}: {exc}") from exc
    return MIME_TYPES.get(fmt.upper(), "image/png")
