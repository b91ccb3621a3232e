from __future__ import annotations

# Hidpi defaults
DEFAULT_HIDPI_EXTENSION = "2x"
DEFAULT_HIDPI_QUERIES = (
    "(-webkit-min-device-pixel-ratio: 1.75)",
    "(min-resolution: 168dpi)",
)

# Divisor applied to raw heights in hidpi-only mode
HIDPI_HEIGHT_DIVISOR = 2

# Image files considered when scanning a folder for base images
SUPPORTED_EXTS = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg"}

HIDPI_ONLY_MISMATCH = "DPI variant images detected in hidpi-only mode!"

# Variant ordering modes
ORDER_FILENAME = "filename"
ORDER_BREAKPOINT = "breakpoint"
ORDERS = (ORDER_FILENAME, ORDER_BREAKPOINT)
