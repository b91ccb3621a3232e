from __future__ import annotations

import json
from pathlib import Path

import pytest

from bgvariants.config import DEFAULT_HIDPI_QUERIES
from bgvariants.core import registry
from bgvariants.core.registry import (
    Breakpoint,
    VariantConfig,
    VariantRegistry,
    build_config,
    load_config_file,
    normalize_width,
    split_query,
)


@pytest.fixture(autouse=True)
def clean_default_registry():
    registry.reset()
    yield
    registry.reset()


def test_normalize_width():
    assert normalize_width(768) == "768px"
    assert normalize_width("768") == "768px"
    assert normalize_width(48.5) == "48.5px"
    assert normalize_width("48em") == "48em"
    with pytest.raises(ValueError):
        normalize_width("")


def test_build_config_keeps_breakpoint_order():
    cfg = build_config(breakpoints=[("large", 1024), ("medium", "768px")])
    assert cfg.breakpoints == (Breakpoint("large", "1024px"), Breakpoint("medium", "768px"))
    assert cfg.breakpoint("medium").query == "(min-width: 768px)"
    assert cfg.breakpoint_index("medium") == 1
    assert cfg.breakpoint("small") is None


def test_build_config_accepts_mapping():
    cfg = build_config(breakpoints={"medium": "768px", "large": "1024px"})
    assert [bp.name for bp in cfg.breakpoints] == ["medium", "large"]


def test_duplicate_breakpoint_names_rejected():
    with pytest.raises(ValueError):
        build_config(breakpoints=[("medium", 768), ("medium", 800)])


def test_invalid_hidpi_extension_rejected():
    with pytest.raises(ValueError):
        build_config(hidpi_extension="")
    with pytest.raises(ValueError):
        build_config(hidpi_extension="2.x")


def test_hidpi_clauses():
    assert VariantConfig().hidpi_clauses == DEFAULT_HIDPI_QUERIES
    cfg = build_config(hidpi_extension="hidpi", hidpi_query="(min-resolution: 300dpi)")
    assert cfg.hidpi_clauses == ("(min-resolution: 300dpi)",)


def test_split_query():
    assert split_query("(a: 1), (b: 2)") == ("(a: 1)", "(b: 2)")
    assert split_query("screen and (a: 1)") == ("screen and (a: 1)",)


def test_class_variant_registration_is_additive():
    reg = VariantRegistry()
    reg.add_class_image_variant("variant", ["variant"])
    reg.add_class_image_variant("dark-wide", ["dark", "wide"])
    assert [cv.name for cv in reg.config.class_variants] == ["variant", "dark-wide"]

    # same name replaces
    reg.add_class_image_variant("variant", ["alt"])
    assert [cv.name for cv in reg.config.class_variants] == ["dark-wide", "variant"]
    assert reg.config.class_variants[-1].tags == ("alt",)


def test_class_variant_needs_tags():
    reg = VariantRegistry()
    with pytest.raises(ValueError):
        reg.add_class_image_variant("empty", [])
    with pytest.raises(ValueError):
        reg.add_class_image_variant("", ["x"])


def test_clear_image_variants_keeps_other_settings():
    reg = VariantRegistry()
    reg.set_breakpoints([("medium", 768)])
    reg.set_hidpi_only(True)
    reg.add_class_image_variant("variant", ["variant"])

    reg.clear_image_variants()

    assert reg.config.class_variants == ()
    assert reg.config.hidpi_only is True
    assert reg.config.breakpoints == (Breakpoint("medium", "768px"),)


def test_snapshots_are_not_affected_by_later_changes():
    reg = VariantRegistry()
    before = reg.config
    reg.add_class_image_variant("variant", ["variant"])
    assert before.class_variants == ()


def test_module_level_registry():
    registry.set_breakpoints({"medium": 768})
    registry.set_hidpi("hidpi", "(min-resolution: 300dpi)")
    registry.add_class_image_variant("variant", ["variant"])

    cfg = registry.current_config()
    assert cfg.hidpi_extension == "hidpi"
    assert cfg.class_variants[0].name == "variant"

    registry.clear_image_variants()
    assert registry.current_config().class_variants == ()

    registry.reset()
    assert registry.current_config() == VariantConfig()


def test_load_config_file(tmp_path: Path):
    path = tmp_path / "variants.json"
    path.write_text(
        json.dumps(
            {
                "breakpoints": [["medium", "768px"], ["large", 1024]],
                "hidpi_only": True,
                "class_variants": {"variant": ["variant"]},
            }
        ),
        encoding="utf-8",
    )
    cfg = load_config_file(path)
    assert [bp.min_width for bp in cfg.breakpoints] == ["768px", "1024px"]
    assert cfg.hidpi_only is True
    assert cfg.class_variants[0].tags == ("variant",)


def test_load_config_file_rejects_unknown_keys(tmp_path: Path):
    path = tmp_path / "variants.json"
    path.write_text(json.dumps({"breakpoint": []}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_config_file(path)


def write_config(tmp_path: Path, data) -> Path:
    path = tmp_path / "variants.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "data, key",
    [
        ({"breakpoints": [{"name": "medium", "min_width": "768px"}]}, "breakpoints"),
        ({"breakpoints": [["medium"]]}, "breakpoints"),
        ({"breakpoints": "medium"}, "breakpoints"),
        ({"breakpoints": {"medium": True}}, "breakpoints"),
        ({"class_variants": [["variant", ["variant"]]]}, "class_variants"),
        ({"class_variants": {"variant": "variant"}}, "class_variants"),
        ({"hidpi_only": "false"}, "hidpi_only"),
        ({"hidpi_query": ["(min-resolution: 300dpi)"]}, "hidpi_query"),
    ],
)
def test_load_config_file_rejects_bad_shapes(tmp_path: Path, data, key):
    with pytest.raises(ValueError, match=key):
        load_config_file(write_config(tmp_path, data))


def test_load_config_file_accepts_breakpoint_object(tmp_path: Path):
    cfg = load_config_file(write_config(tmp_path, {"breakpoints": {"medium": 768}, "hidpi_only": False}))
    assert cfg.breakpoint("medium").min_width == "768px"
    assert cfg.hidpi_only is False


def test_build_config_rejects_malformed_entries():
    with pytest.raises(ValueError):
        build_config(breakpoints=[("medium", 768, "extra")])
    with pytest.raises(ValueError):
        build_config(class_variants=[["variant", ["variant"]]])


def test_hidpi_query_with_media_type():
    from bgvariants.core.registry import and_clause

    assert and_clause("(min-width: 768px)", "(min-resolution: 2dppx)") == (
        "(min-width: 768px) and (min-resolution: 2dppx)"
    )
    assert and_clause("(min-width: 768px)", "screen and (min-resolution: 2dppx)") == (
        "screen and (min-width: 768px) and (min-resolution: 2dppx)"
    )
    assert and_clause("(min-width: 768px)", "only screen") == "only screen and (min-width: 768px)"


def test_negated_hidpi_query_rejected():
    with pytest.raises(ValueError):
        build_config(hidpi_query="not screen and (min-resolution: 2dppx)")
