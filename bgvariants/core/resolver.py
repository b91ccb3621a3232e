from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple

from bgvariants.config import HIDPI_ONLY_MISMATCH, ORDER_FILENAME, ORDERS
from bgvariants.core.classify import Classification, classify_tags
from bgvariants.core.heights import read_image_height, resolve_height
from bgvariants.core.records import (
    CONFLICT,
    HIDPI_ONLY_MISMATCH as HIDPI_ONLY_KIND,
    UNKNOWN_TAG,
    Diagnostic,
    OutputRecord,
)
from bgvariants.core.registry import VariantConfig, and_clause
from bgvariants.core.sink import RecordSink, emit_all
from bgvariants.util.naming import parse_variant_tags, split_base

logger = logging.getLogger(__name__)

_LOG_LEVELS = {"ERROR": logging.ERROR, "WARNING": logging.WARNING, "INFO": logging.INFO}


@dataclass(frozen=True)
class Candidate:
    filename: str
    classification: Classification

    def density_key(self) -> Tuple[Optional[str], FrozenSet[str]]:
        """Identifies the same image at another pixel density."""
        c = self.classification
        bp = c.breakpoint.name if c.breakpoint else None
        return bp, frozenset(cv.name for cv in c.classes)


@dataclass(frozen=True)
class Resolution:
    base: str
    records: Tuple[OutputRecord, ...]
    diagnostics: Tuple[Diagnostic, ...]

    @property
    def images(self) -> List[str]:
        return [r.image for r in self.records]


def list_image_dir(path: Path) -> List[str]:
    if not path.is_dir():
        return []
    return [p.name for p in path.iterdir() if p.is_file()]


def build_condition(c: Classification, config: VariantConfig) -> Optional[str]:
    """
    breakpoint          -> (min-width: W)
    hidpi               -> q1, q2
    breakpoint + hidpi  -> (min-width: W) and q1, (min-width: W) and q2
    """
    bp = c.breakpoint
    hidpi = c.hidpi and not config.hidpi_only

    if bp and hidpi:
        return ", ".join(and_clause(bp.query, q) for q in config.hidpi_clauses)
    if bp:
        return bp.query
    if hidpi:
        return ", ".join(config.hidpi_clauses)
    return None


def _sort_candidates(candidates: List[Candidate], config: VariantConfig, order: str) -> List[Candidate]:
    if order == ORDER_FILENAME:
        return sorted(candidates, key=lambda cand: cand.filename)

    def key(cand: Candidate):
        c = cand.classification
        bp_rank = config.breakpoint_index(c.breakpoint.name) + 1 if c.breakpoint else 0
        return bp_rank, int(c.hidpi), len(c.classes), cand.filename

    return sorted(candidates, key=key)


def _unknown_diagnostics(base: str, unknown: Dict[str, List[str]]) -> List[Diagnostic]:
    out = []
    for tag, files in unknown.items():
        out.append(
            Diagnostic(
                "WARNING",
                UNKNOWN_TAG,
                f"{base}: skipping {', '.join(files)} (unknown extensions '{tag}')",
                tag,
            )
        )
    return out


def resolve_variants(
    base: str,
    config: VariantConfig,
    images_dir: Path,
    compute_heights: bool = False,
    *,
    order: str = ORDER_FILENAME,
    list_dir: Callable[[Path], Iterable[str]] = list_image_dir,
    read_height: Callable[[Path], int] = read_image_height,
    sink: Optional[RecordSink] = None,
) -> Resolution:
    """
    Find every variant of `base` in `images_dir` and return the ordered records.

    The base record is always first and unconditional. Files with unknown or
    conflicting tags are skipped with a diagnostic. ImageReadError (heights
    only) aborts the call before anything reaches `sink`.
    """
    if order not in ORDERS:
        raise ValueError(f"Unknown order '{order}' (expected one of {list(ORDERS)})")

    base_path = PurePosixPath(base)
    rel_dir = base_path.parent
    directory = Path(images_dir) / rel_dir
    stem, ext = split_base(base)

    accepted: List[Candidate] = []
    hidpi_only_files: List[Candidate] = []
    unknown: Dict[str, List[str]] = {}
    conflicts: List[Diagnostic] = []

    for name in sorted(set(list_dir(directory))):
        tags = parse_variant_tags(stem, ext, name)
        if not tags:
            continue

        c = classify_tags(tags, config)
        if c.unknown:
            for tag in c.unknown:
                unknown.setdefault(tag, []).append(name)
            continue
        if c.conflicts:
            conflicts.append(
                Diagnostic("WARNING", CONFLICT, f"{base}: skipping {name} ({'; '.join(c.conflicts)})", name)
            )
            continue

        cand = Candidate(name, c)
        if c.hidpi and config.hidpi_only:
            hidpi_only_files.append(cand)
            continue
        accepted.append(cand)

    diagnostics = _unknown_diagnostics(base, unknown) + conflicts
    if hidpi_only_files:
        files = ", ".join(cand.filename for cand in hidpi_only_files)
        diagnostics.append(
            Diagnostic("WARNING", HIDPI_ONLY_KIND, f"{HIDPI_ONLY_MISMATCH} ({base}: {files})", base)
        )

    for d in diagnostics:
        logger.log(_LOG_LEVELS.get(d.level, logging.INFO), "%s", d.message)

    explicit_hidpi = {cand.density_key() for cand in hidpi_only_files}

    def height_for(filename: str, key) -> Optional[int]:
        if not compute_heights:
            return None
        return resolve_height(
            directory / filename,
            config.hidpi_only,
            explicit_hidpi=key in explicit_hidpi,
            read_height=read_height,
        )

    base_name = f"{stem}{ext}"
    records = [
        OutputRecord(
            condition=None,
            classes=(),
            image=str(rel_dir / base_name),
            height=height_for(base_name, (None, frozenset())),
        )
    ]

    for cand in _sort_candidates(accepted, config, order):
        c = cand.classification
        records.append(
            OutputRecord(
                condition=build_condition(c, config),
                classes=tuple(cv.name for cv in c.classes),
                image=str(rel_dir / cand.filename),
                height=height_for(cand.filename, cand.density_key()),
            )
        )

    resolution = Resolution(base=base, records=tuple(records), diagnostics=tuple(diagnostics))
    logger.debug("Resolved %s: %d record(s), %d diagnostic(s)", base, len(records), len(diagnostics))

    if sink is not None:
        emit_all(resolution.records, sink)
    return resolution
