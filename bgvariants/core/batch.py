from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Set

from bgvariants.config import ORDER_FILENAME, SUPPORTED_EXTS
from bgvariants.core.classify import classify_tags
from bgvariants.core.heights import ImageReadError
from bgvariants.core.records import ORPHAN_VARIANT, UNREADABLE_IMAGE, Diagnostic, count_levels
from bgvariants.core.registry import VariantConfig
from bgvariants.core.resolver import Resolution, resolve_variants

logger = logging.getLogger(__name__)

# File roles within a folder
BASE = "base"
VARIANT = "variant"
ORPHAN = "orphan"


def iter_image_files(root: Path):
    for p in root.rglob("*"):
        if not p.is_file():
            continue
        if p.suffix.lower() not in SUPPORTED_EXTS:
            continue
        yield p


def file_role(path: Path, siblings: Set[str], config: VariantConfig) -> str:
    """
    hero.jpg                          -> base
    hero.medium.jpg  (hero.jpg exists) -> variant
    hero.medium.jpg  (no hero.jpg)     -> orphan, when every tag is known
    logo.v2.jpg      (no logo.jpg)     -> base
    """
    parts = path.stem.split(".")
    if len(parts) == 1 or not all(parts):
        return BASE

    # longest existing prefix owns the file
    for i in range(len(parts) - 1, 0, -1):
        owner = Path(".".join(parts[:i]) + path.suffix)
        if owner.name in siblings:
            return ORPHAN if file_role(owner, siblings, config) == ORPHAN else VARIANT

    if classify_tags(parts[1:], config).valid:
        return ORPHAN
    return BASE


@dataclass
class FolderScanResult:
    folder: str
    bases_found: int
    images_scanned: int
    records: int
    unreadable: int
    orphans: int
    errors: int
    warnings: int
    infos: int
    diagnostics: List[Diagnostic] = field(default_factory=list)


def scan_folder(
    folder: Path,
    config: VariantConfig,
    compute_heights: bool = False,
    order: str = ORDER_FILENAME,
) -> tuple[Dict[str, Resolution], FolderScanResult]:
    """
    Resolve every base image under `folder`.

    An unreadable image only fails its own base: the resolution for it holds
    no records and a single ERROR diagnostic. Variants whose base image is
    missing are reported as INFO diagnostics on the summary.
    """
    files = list(iter_image_files(folder))
    siblings: Dict[Path, Set[str]] = {}
    for p in files:
        siblings.setdefault(p.parent, set()).add(p.name)

    bases: List[str] = []
    folder_diags: List[Diagnostic] = []
    for p in files:
        rel = p.relative_to(folder).as_posix()
        role = file_role(p, siblings[p.parent], config)
        if role == BASE:
            bases.append(rel)
        elif role == ORPHAN:
            expected = p.stem.split(".")[0] + p.suffix
            folder_diags.append(
                Diagnostic("INFO", ORPHAN_VARIANT, f"{rel}: no base image '{expected}' found", rel)
            )
    bases.sort(key=lambda s: s.lower())
    folder_diags.sort(key=lambda d: d.subject.lower())
    for d in folder_diags:
        logger.info("%s", d.message)

    resolutions: Dict[str, Resolution] = {}
    total_e, total_w, total_i = count_levels(folder_diags)
    total_records = 0
    unreadable = 0

    for base in bases:
        try:
            res = resolve_variants(base, config, folder, compute_heights, order=order)
        except ImageReadError as e:
            logger.error("%s", e)
            unreadable += 1
            res = Resolution(
                base=base,
                records=(),
                diagnostics=(Diagnostic("ERROR", UNREADABLE_IMAGE, str(e), str(e.path)),),
            )
        resolutions[base] = res

        e, w, i = count_levels(res.diagnostics)
        total_e += e
        total_w += w
        total_i += i
        total_records += len(res.records)

    summary = FolderScanResult(
        folder=str(folder),
        bases_found=len(bases),
        images_scanned=len(files),
        records=total_records,
        unreadable=unreadable,
        orphans=len(folder_diags),
        errors=total_e,
        warnings=total_w,
        infos=total_i,
        diagnostics=folder_diags,
    )
    logger.info(
        "Scanned %s: %d base image(s), %d record(s), %d warning(s)",
        folder, summary.bases_found, summary.records, summary.warnings,
    )
    return resolutions, summary
