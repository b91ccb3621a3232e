from __future__ import annotations

import json
from pathlib import Path

from PIL import Image

from bgvariants.core.batch import BASE, ORPHAN, VARIANT, file_role, scan_folder
from bgvariants.core.records import ORPHAN_VARIANT, UNREADABLE_IMAGE
from bgvariants.core.registry import build_config
from bgvariants.core.reporting import build_report_dict, write_html_report, write_json_report


def write_png(path: Path, size=(4, 4), mode="RGB") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new(mode, size).save(path)


def make_folder(root: Path) -> Path:
    images = root / "images"
    write_png(images / "hero.png", size=(4, 300))
    write_png(images / "hero.medium.png", size=(4, 450))
    write_png(images / "hero.foo.png")
    write_png(images / "kitten.png", size=(4, 286))
    write_png(images / "kitten.variant.png", size=(4, 386))
    (images / "broken.png").write_text("not an image", encoding="utf-8")
    (images / "notes.txt").write_text("ignored", encoding="utf-8")
    return images


def test_file_role() -> None:
    cfg = build_config(breakpoints={"medium": 768})
    siblings = {"hero.png", "hero.2x.png", "logo.v2.png", "logo.v2.2x.png", "cat.medium.png", "cat.medium.2x.png"}

    assert file_role(Path("hero.png"), siblings, cfg) == BASE
    assert file_role(Path("hero.2x.png"), siblings, cfg) == VARIANT
    assert file_role(Path("logo.v2.png"), siblings, cfg) == BASE
    assert file_role(Path("logo.v2.2x.png"), siblings, cfg) == VARIANT
    assert file_role(Path("cat.medium.png"), siblings, cfg) == ORPHAN
    assert file_role(Path("cat.medium.2x.png"), siblings, cfg) == ORPHAN


def test_dotted_base_and_orphans(tmp_path: Path) -> None:
    images = tmp_path / "images"
    write_png(images / "logo.v2.png")
    write_png(images / "logo.v2.2x.png")
    write_png(images / "hero.medium.png")
    cfg = build_config(breakpoints={"medium": 768})

    resolutions, summary = scan_folder(images, cfg)

    assert sorted(resolutions) == ["logo.v2.png"]
    assert resolutions["logo.v2.png"].images == ["logo.v2.png", "logo.v2.2x.png"]
    assert summary.orphans == 1
    assert summary.infos == 1
    assert summary.diagnostics[0].kind == ORPHAN_VARIANT
    assert summary.diagnostics[0].level == "INFO"
    assert "hero.png" in summary.diagnostics[0].message


def test_batch_scan_summary_counts(tmp_path: Path) -> None:
    images = make_folder(tmp_path)
    cfg = build_config(breakpoints={"medium": 768})

    resolutions, summary = scan_folder(images, cfg, compute_heights=True)

    assert sorted(resolutions) == ["broken.png", "hero.png", "kitten.png"]
    assert summary.bases_found == 3
    assert summary.images_scanned == 6
    assert summary.unreadable == 1
    assert summary.errors == 1
    assert summary.warnings == 2    # hero.foo + unregistered kitten.variant
    assert summary.records == 3

    assert resolutions["broken.png"].records == ()
    assert resolutions["broken.png"].diagnostics[0].kind == UNREADABLE_IMAGE
    assert [(r.image, r.height) for r in resolutions["hero.png"].records] == [
        ("hero.png", 300),
        ("hero.medium.png", 450),
    ]


def test_batch_scan_with_class_variant(tmp_path: Path) -> None:
    images = make_folder(tmp_path)
    cfg = build_config(class_variants={"variant": ["variant"]})

    resolutions, summary = scan_folder(images, cfg)

    kitten = resolutions["kitten.png"]
    assert kitten.images == ["kitten.png", "kitten.variant.png"]
    assert kitten.records[1].classes == ("variant",)
    assert summary.unreadable == 0


def test_reports(tmp_path: Path) -> None:
    images = make_folder(tmp_path)
    cfg = build_config(breakpoints={"medium": 768})
    resolutions, summary = scan_folder(images, cfg)

    report = build_report_dict("1.0.0", "Default", cfg, resolutions, summary)
    assert [b["base"] for b in report["bases"]] == ["broken.png", "hero.png", "kitten.png"]
    assert report["config"]["breakpoints"] == [["medium", "768px"]]
    assert report["summary"]["bases_found"] == 3

    json_path = tmp_path / "report.json"
    write_json_report(report, json_path)
    loaded = json.loads(json_path.read_text(encoding="utf-8"))
    hero = next(b for b in loaded["bases"] if b["base"] == "hero.png")
    assert hero["records"][1]["condition"] == "(min-width: 768px)"

    html_path = tmp_path / "report.html"
    write_html_report(report, html_path)
    html = html_path.read_text(encoding="utf-8")
    assert "hero.medium.png" in html
    assert "unknown extensions &#x27;foo&#x27;" in html
