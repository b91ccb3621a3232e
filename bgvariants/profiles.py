from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from bgvariants.core.registry import VariantConfig, build_config


@dataclass(frozen=True)
class Profile:
    name: str
    breakpoints: Tuple[Tuple[str, str], ...]
    hidpi_only: bool


PROFILES = [
    Profile(name="Default", breakpoints=(), hidpi_only=False),
    Profile(
        name="Responsive",
        breakpoints=(
            ("extra-small", "374px"),
            ("small", "480px"),
            ("medium", "768px"),
            ("large", "1024px"),
            ("extra-large", "1292px"),
        ),
        hidpi_only=False,
    ),
    Profile(
        name="HidpiOnly",
        breakpoints=(("medium", "768px"), ("large", "1024px")),
        hidpi_only=True,
    ),
]


def get_profile(name: str) -> Profile:
    for p in PROFILES:
        if p.name.lower() == name.lower():
            return p
    return PROFILES[0]


def profile_config(profile: Profile, class_variants=None) -> VariantConfig:
    return build_config(
        breakpoints=profile.breakpoints,
        hidpi_only=profile.hidpi_only,
        class_variants=class_variants,
    )
