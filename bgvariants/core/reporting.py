from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, timezone
from html import escape
from pathlib import Path
from typing import Dict, List, Optional

from bgvariants.core.batch import FolderScanResult
from bgvariants.core.records import Diagnostic, OutputRecord
from bgvariants.core.registry import VariantConfig
from bgvariants.core.resolver import Resolution

TOOL_NAME = "Background Variant Resolver"


def iso_now() -> str:
    return datetime.now(timezone.utc).astimezone().isoformat(timespec="seconds")


def ensure_reports_dir(root: Path) -> Path:
    out = root / "reports"
    out.mkdir(parents=True, exist_ok=True)
    return out


def serialize_records(records: List[OutputRecord]) -> List[dict]:
    return [
        {
            "condition": r.condition,
            "classes": list(r.classes),
            "image": r.image,
            "height": r.height,
        }
        for r in records
    ]


def serialize_diagnostics(diagnostics: List[Diagnostic]) -> List[dict]:
    return [{"level": d.level, "kind": d.kind, "message": d.message} for d in diagnostics]


def serialize_config(config: VariantConfig) -> dict:
    return {
        "breakpoints": [[bp.name, bp.min_width] for bp in config.breakpoints],
        "hidpi_extension": config.hidpi_extension,
        "hidpi_query": config.hidpi_query,
        "hidpi_only": config.hidpi_only,
        "class_variants": {cv.name: list(cv.tags) for cv in config.class_variants},
    }


def build_report_dict(
    tool_version: str,
    profile: str,
    config: VariantConfig,
    resolutions: Dict[str, Resolution],
    summary: Optional[FolderScanResult] = None,
) -> dict:
    bases = []
    for name in sorted(resolutions.keys(), key=lambda s: s.lower()):
        res = resolutions[name]
        bases.append(
            {
                "base": name,
                "records": serialize_records(list(res.records)),
                "diagnostics": serialize_diagnostics(list(res.diagnostics)),
            }
        )

    return {
        "tool": TOOL_NAME,
        "version": tool_version,
        "timestamp": iso_now(),
        "profile": profile,
        "config": serialize_config(config),
        "summary": asdict(summary) if summary else None,
        "bases": bases,
    }


def write_json_report(report: dict, output_path: Path) -> None:
    output_path.write_text(json.dumps(report, indent=2), encoding="utf-8")


def write_html_report(report: dict, output_path: Path) -> None:
    def esc(value) -> str:
        return escape("" if value is None else str(value))

    title = f"{report.get('tool')} - Report"

    sections = []
    for base in report.get("bases", []):
        rows = []
        for r in base.get("records", []):
            classes = " ".join(f".{c}" for c in r.get("classes", []))
            rows.append(
                "<tr>"
                f"<td>{esc(r.get('image'))}</td>"
                f"<td>{esc(r.get('condition') or 'always')}</td>"
                f"<td>{esc(classes)}</td>"
                f"<td>{esc(r.get('height'))}</td>"
                "</tr>"
            )
        diag = "".join(
            f"<div><b>{esc(d.get('level'))}</b>: {esc(d.get('message'))}</div>"
            for d in base.get("diagnostics", [])
        ) or "<div><i>No diagnostics</i></div>"

        sections.append(
            f"""
  <h2>{esc(base.get('base'))}</h2>
  <table>
    <thead><tr><th>Image</th><th>Media condition</th><th>Classes</th><th>Height</th></tr></thead>
    <tbody>{''.join(rows)}</tbody>
  </table>
  {diag}"""
        )

    html = f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>{esc(title)}</title>
  <style>
    body {{ font-family: Arial, sans-serif; margin: 24px; }}
    table {{ border-collapse: collapse; width: 100%; margin-bottom: 8px; }}
    th, td {{ text-align: left; padding: 6px; border-bottom: 1px solid #ddd; }}
  </style>
</head>
<body>
  <h1>{esc(title)}</h1>
  <div style="color:#444;">Timestamp: {esc(report.get('timestamp'))}</div>
  <div style="color:#444; margin-bottom:16px;">Profile: {esc(report.get('profile'))}</div>
{''.join(sections)}
</body>
</html>
"""
    output_path.write_text(html, encoding="utf-8")
