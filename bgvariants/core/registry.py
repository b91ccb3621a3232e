from __future__ import annotations

import json
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Mapping, Optional, Tuple, Union

from bgvariants.config import DEFAULT_HIDPI_EXTENSION, DEFAULT_HIDPI_QUERIES

Width = Union[int, float, str]


@dataclass(frozen=True)
class Breakpoint:
    name: str
    min_width: str   # CSS length, e.g. "768px"

    @property
    def query(self) -> str:
        return f"(min-width: {self.min_width})"


@dataclass(frozen=True)
class ClassVariant:
    name: str
    tags: Tuple[str, ...]


@dataclass(frozen=True)
class VariantConfig:
    """
    Everything the resolver reads. Immutable; build a new one (or use a
    VariantRegistry) to change settings between resolution calls.
    """
    breakpoints: Tuple[Breakpoint, ...] = ()
    hidpi_extension: str = DEFAULT_HIDPI_EXTENSION
    hidpi_query: Optional[str] = None
    hidpi_only: bool = False
    class_variants: Tuple[ClassVariant, ...] = ()

    def breakpoint(self, name: str) -> Optional[Breakpoint]:
        for bp in self.breakpoints:
            if bp.name == name:
                return bp
        return None

    def breakpoint_index(self, name: str) -> int:
        for i, bp in enumerate(self.breakpoints):
            if bp.name == name:
                return i
        return -1

    @property
    def hidpi_clauses(self) -> Tuple[str, ...]:
        if self.hidpi_query is None:
            return DEFAULT_HIDPI_QUERIES
        return split_query(self.hidpi_query)


def split_query(query: str) -> Tuple[str, ...]:
    """Split a media query list on top-level commas."""
    clauses = []
    depth = 0
    current = ""
    for ch in query:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        if ch == "," and depth == 0:
            clauses.append(current.strip())
            current = ""
            continue
        current += ch
    clauses.append(current.strip())
    return tuple(c for c in clauses if c)


# "screen and (...)", "only print", ...
_MEDIA_TYPE_RE = re.compile(r"^(?:only\s+)?[a-zA-Z][\w-]*(?=\s+and\s|\s*$)")


def and_clause(feature: str, clause: str) -> str:
    """
    Conjoin a media feature with one query clause, keeping any leading
    media type first:
      (min-width: 768px) + (min-resolution: 2dppx)  -> (min-width: 768px) and (min-resolution: 2dppx)
      (min-width: 768px) + screen and (...)         -> screen and (min-width: 768px) and (...)
    """
    m = _MEDIA_TYPE_RE.match(clause)
    if not m:
        return f"{feature} and {clause}"
    rest = clause[m.end():].strip()
    return f"{m.group(0)} and {feature} {rest}".rstrip()


def _check_query(query: str) -> Tuple[str, ...]:
    clauses = split_query(query)
    if not clauses:
        raise ValueError("Hidpi query was empty.")
    for clause in clauses:
        # a negated query cannot be narrowed by a breakpoint
        if re.match(r"^not\s", clause, re.IGNORECASE):
            raise ValueError(f"Hidpi query clause '{clause}' cannot use 'not'.")
    return clauses


def normalize_width(width: Width) -> str:
    if isinstance(width, bool):
        raise ValueError(f"Invalid breakpoint width: {width!r}")
    if isinstance(width, int):
        return f"{width}px"
    if isinstance(width, float):
        return f"{width:g}px"
    w = str(width).strip()
    if not w:
        raise ValueError("Breakpoint width was empty.")
    try:
        float(w)
    except ValueError:
        return w
    return f"{w}px"


def _as_breakpoints(
    breakpoints: Union[Mapping[str, Width], Iterable[Union[Breakpoint, Tuple[str, Width]]], None],
) -> Tuple[Breakpoint, ...]:
    if not breakpoints:
        return ()

    items = breakpoints.items() if isinstance(breakpoints, Mapping) else breakpoints
    out = []
    seen = set()
    for item in items:
        if isinstance(item, Breakpoint):
            name, width = item.name, item.min_width
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            name, width = item
        else:
            raise ValueError(f"Invalid breakpoint {item!r} (expected [name, width]).")
        name = str(name).strip()
        if not name:
            raise ValueError("Breakpoint name was empty.")
        if name in seen:
            raise ValueError(f"Duplicate breakpoint name '{name}'.")
        seen.add(name)
        out.append(Breakpoint(name=name, min_width=normalize_width(width)))
    return tuple(out)


def _as_class_variant(name: str, tags: Iterable[str]) -> ClassVariant:
    name = str(name).strip()
    if not name:
        raise ValueError("Class variant name was empty.")
    if isinstance(tags, str):
        tags = [tags]
    # ordered, de-duplicated
    clean = tuple(dict.fromkeys(str(t).strip() for t in tags))
    if not clean or any(not t for t in clean):
        raise ValueError(f"Class variant '{name}' needs at least one non-empty tag.")
    return ClassVariant(name=name, tags=clean)


def _as_class_variants(
    class_variants: Union[Mapping[str, Iterable[str]], Iterable[ClassVariant], None],
) -> Tuple[ClassVariant, ...]:
    if not class_variants:
        return ()
    if isinstance(class_variants, Mapping):
        pairs = class_variants.items()
    else:
        pairs = []
        for cv in class_variants:
            if not isinstance(cv, ClassVariant):
                raise ValueError(f"Invalid class variant {cv!r} (expected a name -> tags mapping).")
            pairs.append((cv.name, cv.tags))

    by_name: dict[str, ClassVariant] = {}
    for name, tags in pairs:
        cv = _as_class_variant(name, tags)
        by_name[cv.name] = cv
    return tuple(by_name.values())


def build_config(
    breakpoints=None,
    hidpi_extension: Optional[str] = None,
    hidpi_query: Optional[str] = None,
    hidpi_only: bool = False,
    class_variants=None,
) -> VariantConfig:
    """
    Build a VariantConfig from plain options.

    breakpoints:    {"medium": "768px"} or [("medium", 768), ...]
    class_variants: {"variant": ["variant"]} or [ClassVariant(...), ...]
    """
    ext = DEFAULT_HIDPI_EXTENSION if hidpi_extension is None else str(hidpi_extension).strip()
    if not ext or "." in ext:
        raise ValueError(f"Invalid hidpi extension '{hidpi_extension}'.")

    query = None
    if hidpi_query is not None:
        query = str(hidpi_query).strip()
        _check_query(query)

    return VariantConfig(
        breakpoints=_as_breakpoints(breakpoints),
        hidpi_extension=ext,
        hidpi_query=query,
        hidpi_only=bool(hidpi_only),
        class_variants=_as_class_variants(class_variants),
    )


def config_from_dict(data: Mapping) -> VariantConfig:
    known = {"breakpoints", "hidpi_extension", "hidpi_query", "hidpi_only", "class_variants"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError("Unknown config key(s): " + ", ".join(unknown))

    breakpoints = data.get("breakpoints")
    if breakpoints is not None:
        if isinstance(breakpoints, Mapping):
            values = list(breakpoints.values())
        elif isinstance(breakpoints, list) and all(
            isinstance(item, list) and len(item) == 2 for item in breakpoints
        ):
            values = [item[1] for item in breakpoints]
            if not all(isinstance(item[0], str) for item in breakpoints):
                raise ValueError("breakpoints: names must be strings.")
        else:
            raise ValueError("breakpoints: expected an object or a list of [name, width] pairs.")
        if not all(isinstance(v, (str, int, float)) and not isinstance(v, bool) for v in values):
            raise ValueError("breakpoints: widths must be strings or numbers.")

    class_variants = data.get("class_variants")
    if class_variants is not None:
        if not isinstance(class_variants, Mapping) or not all(
            isinstance(tags, list) and all(isinstance(t, str) for t in tags)
            for tags in class_variants.values()
        ):
            raise ValueError("class_variants: expected an object of name -> list of tags.")

    for key in ("hidpi_extension", "hidpi_query"):
        if data.get(key) is not None and not isinstance(data[key], str):
            raise ValueError(f"{key}: expected a string.")

    if "hidpi_only" in data and not isinstance(data["hidpi_only"], bool):
        raise ValueError("hidpi_only: expected true or false.")

    return build_config(**dict(data))


def load_config_file(path: Path) -> VariantConfig:
    """
    JSON config, e.g.:
      {"breakpoints": [["medium", "768px"], ["large", "1024px"]],
       "hidpi_only": false,
       "class_variants": {"variant": ["variant"]}}
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object.")
    return config_from_dict(data)


class VariantRegistry:
    """
    Mutable holder for process-wide settings. Each mutation swaps in a new
    VariantConfig; resolution calls take a snapshot via `config`.
    """

    def __init__(self, config: Optional[VariantConfig] = None) -> None:
        self._config = config or VariantConfig()

    @property
    def config(self) -> VariantConfig:
        return self._config

    def set_breakpoints(self, breakpoints) -> None:
        self._config = replace(self._config, breakpoints=_as_breakpoints(breakpoints))

    def set_hidpi(self, extension: str = DEFAULT_HIDPI_EXTENSION, query: Optional[str] = None) -> None:
        cfg = build_config(hidpi_extension=extension, hidpi_query=query)
        self._config = replace(self._config, hidpi_extension=cfg.hidpi_extension, hidpi_query=cfg.hidpi_query)

    def set_hidpi_only(self, value: bool) -> None:
        self._config = replace(self._config, hidpi_only=bool(value))

    def add_class_image_variant(self, name: str, tags: Iterable[str]) -> ClassVariant:
        cv = _as_class_variant(name, tags)
        kept = tuple(c for c in self._config.class_variants if c.name != cv.name)
        self._config = replace(self._config, class_variants=kept + (cv,))
        return cv

    def clear_image_variants(self) -> None:
        self._config = replace(self._config, class_variants=())

    def reset(self) -> None:
        self._config = VariantConfig()


_DEFAULT_REGISTRY = VariantRegistry()


def default_registry() -> VariantRegistry:
    return _DEFAULT_REGISTRY


def current_config() -> VariantConfig:
    return _DEFAULT_REGISTRY.config


def set_breakpoints(breakpoints) -> None:
    _DEFAULT_REGISTRY.set_breakpoints(breakpoints)


def set_hidpi(extension: str = DEFAULT_HIDPI_EXTENSION, query: Optional[str] = None) -> None:
    _DEFAULT_REGISTRY.set_hidpi(extension, query)


def set_hidpi_only(value: bool) -> None:
    _DEFAULT_REGISTRY.set_hidpi_only(value)


def add_class_image_variant(name: str, tags: Iterable[str]) -> ClassVariant:
    return _DEFAULT_REGISTRY.add_class_image_variant(name, tags)


def clear_image_variants() -> None:
    _DEFAULT_REGISTRY.clear_image_variants()


def reset() -> None:
    _DEFAULT_REGISTRY.reset()
