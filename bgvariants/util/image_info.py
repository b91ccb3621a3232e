from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError


@dataclass(frozen=True)
class ImageInfo:
    width: int
    height: int
    format: str        # e.g. "PNG", "JPEG", "GIF"


def read_image_info(path: Path) -> tuple[Optional[ImageInfo], Optional[str]]:
    """
    Reads the image header with Pillow (no pixel decode).
    Returns (ImageInfo|None, error_message|None).
    """
    try:
        with Image.open(path) as img:
            w, h = img.size
            fmt = (img.format or "").upper()
            return ImageInfo(width=w, height=h, format=fmt), None

    except FileNotFoundError:
        return None, "File not found."
    except UnidentifiedImageError:
        return None, "Unsupported image format (Pillow could not identify file)."
    except OSError as e:
        return None, f"Failed to read image metadata: {e}"
