from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from bgvariants.core.registry import Breakpoint, ClassVariant, VariantConfig


@dataclass(frozen=True)
class BreakpointTag:
    breakpoint: Breakpoint


@dataclass(frozen=True)
class HidpiTag:
    extension: str


@dataclass(frozen=True)
class ClassTag:
    variant: ClassVariant


@dataclass(frozen=True)
class UnknownTag:
    raw: str


VariantKind = Union[BreakpointTag, HidpiTag, ClassTag, UnknownTag]


@dataclass(frozen=True)
class Classification:
    tags: Tuple[str, ...]
    kinds: Tuple[VariantKind, ...]
    breakpoint: Optional[Breakpoint]
    hidpi: bool
    classes: Tuple[ClassVariant, ...]
    unknown: Tuple[str, ...]
    conflicts: Tuple[str, ...]

    @property
    def valid(self) -> bool:
        return not self.unknown and not self.conflicts

    @property
    def is_base(self) -> bool:
        return not self.tags


def classify_tag(tag: str, config: VariantConfig) -> Optional[VariantKind]:
    """
    Single-tag precedence: breakpoint > hidpi.
    Class variants need the whole tag set, see classify_tags().
    """
    bp = config.breakpoint(tag)
    if bp:
        return BreakpointTag(bp)
    if tag == config.hidpi_extension:
        return HidpiTag(tag)
    return None


def classify_tags(tags: Sequence[str], config: VariantConfig) -> Classification:
    kinds: List[VariantKind] = []
    breakpoints: List[Breakpoint] = []
    hidpi_count = 0
    pending: List[str] = []

    for tag in tags:
        kind = classify_tag(tag, config)
        if kind is None:
            pending.append(tag)
            continue
        kinds.append(kind)
        if isinstance(kind, BreakpointTag):
            breakpoints.append(kind.breakpoint)
        else:
            hidpi_count += 1

    # A class matches only when all of its tags are present together
    pending_set = set(pending)
    consumed = set()
    classes: List[ClassVariant] = []
    for cv in config.class_variants:
        if set(cv.tags) <= pending_set:
            classes.append(cv)
            consumed.update(cv.tags)
            kinds.append(ClassTag(cv))

    unknown: List[str] = []
    for tag in pending:
        if tag in consumed or tag in unknown:
            continue
        unknown.append(tag)
        kinds.append(UnknownTag(tag))

    conflicts: List[str] = []
    if len(breakpoints) > 1:
        names = ", ".join(bp.name for bp in breakpoints)
        conflicts.append(f"multiple breakpoints ({names})")
    if hidpi_count > 1:
        conflicts.append(f"repeated hidpi extension '{config.hidpi_extension}'")
    repeated = sorted({t for t in pending if pending.count(t) > 1})
    if repeated:
        conflicts.append("repeated extensions " + ", ".join(f"'{t}'" for t in repeated))

    return Classification(
        tags=tuple(tags),
        kinds=tuple(kinds),
        breakpoint=breakpoints[0] if breakpoints else None,
        hidpi=hidpi_count > 0,
        classes=tuple(classes),
        unknown=tuple(unknown),
        conflicts=tuple(conflicts),
    )
