from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

# Diagnostic kinds
UNKNOWN_TAG = "unknown_tag"
CONFLICT = "conflict"
HIDPI_ONLY_MISMATCH = "hidpi_only_mismatch"
UNREADABLE_IMAGE = "unreadable_image"
ORPHAN_VARIANT = "orphan_variant"


@dataclass(frozen=True)
class OutputRecord:
    condition: Optional[str]        # media query; None = unconditional
    classes: Tuple[str, ...]        # class scope; () = none
    image: str                      # path relative to the images dir
    height: Optional[int] = None

    def describe(self) -> str:
        parts = []
        if self.classes:
            parts.append(" ".join(f".{c}" for c in self.classes))
        if self.condition:
            parts.append(f"@media {self.condition}")
        scope = " ".join(parts) or "(always)"
        h = f" height={self.height}px" if self.height is not None else ""
        return f"{scope}: {self.image}{h}"


@dataclass(frozen=True)
class Diagnostic:
    level: str  # "INFO" | "WARNING" | "ERROR"
    kind: str
    message: str
    subject: Optional[str] = None


def count_levels(diagnostics: Iterable[Diagnostic]) -> tuple[int, int, int]:
    """Returns (errors, warnings, infos)."""
    e = w = i = 0
    for d in diagnostics:
        if d.level == "ERROR":
            e += 1
        elif d.level == "WARNING":
            w += 1
        else:
            i += 1
    return e, w, i
