from __future__ import annotations

from pathlib import Path
from typing import Callable

from bgvariants.config import HIDPI_HEIGHT_DIVISOR
from bgvariants.util.image_info import read_image_info


class ImageReadError(Exception):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot read image height for '{path}': {reason}")
        self.path = path
        self.reason = reason


def read_image_height(path: Path) -> int:
    info, err = read_image_info(path)
    if err:
        raise ImageReadError(path, err)
    return info.height


def resolve_height(
    path: Path,
    hidpi_only: bool,
    explicit_hidpi: bool = False,
    read_height: Callable[[Path], int] = read_image_height,
) -> int:
    """
    Pixel height to report for `path`.

    In hidpi-only mode every file without an explicit hidpi counterpart is
    the high-density asset, so its logical height is half the pixel height.
    """
    raw = read_height(path)
    if hidpi_only and not explicit_hidpi:
        return raw // HIDPI_HEIGHT_DIVISOR
    return raw
