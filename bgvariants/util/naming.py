from __future__ import annotations

from pathlib import PurePosixPath
from typing import List, Optional, Tuple


def split_base(filename: str) -> Tuple[str, str]:
    """
    Split a base image filename into (stem, ext).

      hero.jpg        -> ("hero", ".jpg")
      icons/hero.png  -> ("hero", ".png")

    Only the last suffix counts as the extension.
    """
    name = PurePosixPath(filename).name
    if "." not in name.lstrip("."):
        return name, ""
    stem, _, ext = name.rpartition(".")
    return stem, f".{ext}"


def parse_variant_tags(stem: str, ext: str, filename: str) -> Optional[List[str]]:
    """
    Parse candidate filenames relative to a base image:
      stem.ext           -> []                (the base itself)
      stem.tag1.tag2.ext -> ["tag1", "tag2"]

    Returns None when the candidate is not a variant of this base.
    """
    if filename == f"{stem}{ext}":
        return []

    prefix = f"{stem}."
    if not filename.startswith(prefix) or not filename.endswith(ext):
        return None
    if len(filename) <= len(prefix) + len(ext):
        return None

    middle = filename[len(prefix):len(filename) - len(ext)]
    tags = middle.split(".")
    if any(not t for t in tags):
        return None
    return tags
