"""Command line entry point: resolve one base image or scan a whole folder."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer

from bgvariants.config import ORDER_FILENAME, ORDERS
from bgvariants.core.batch import scan_folder
from bgvariants.core.heights import ImageReadError
from bgvariants.core.registry import VariantConfig, VariantRegistry, load_config_file
from bgvariants.core.reporting import build_report_dict, write_html_report, write_json_report
from bgvariants.core.resolver import resolve_variants
from bgvariants.core.sink import ListSink
from bgvariants.profiles import get_profile, profile_config
from bgvariants.util import log as log_mod

TOOL_VERSION = "1.0.0"

app = typer.Typer(help="Resolve background-image variants (breakpoints, hidpi, class variants).")
logger = logging.getLogger(__name__)


def _parse_class_variants(values: Optional[List[str]]) -> Dict[str, List[str]]:
    out: Dict[str, List[str]] = {}
    for raw in values or []:
        name, sep, tags = raw.partition("=")
        name = name.strip()
        if not name:
            raise typer.BadParameter(f"Invalid class variant '{raw}' (expected name=tag1,tag2)")
        tag_list = [t.strip() for t in tags.split(",") if t.strip()] if sep else [name]
        out[name] = tag_list
    return out


def _load_config(
    profile: str,
    config_file: Optional[Path],
    class_variant: Optional[List[str]],
    hidpi_only: Optional[bool],
) -> VariantConfig:
    if config_file:
        try:
            cfg = load_config_file(config_file)
        except (OSError, ValueError) as exc:
            raise typer.BadParameter(f"Cannot load config {config_file}: {exc}") from exc
    else:
        cfg = profile_config(get_profile(profile))

    registry = VariantRegistry(cfg)
    try:
        for name, tags in _parse_class_variants(class_variant).items():
            registry.add_class_image_variant(name, tags)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if hidpi_only is not None:
        registry.set_hidpi_only(hidpi_only)
    return registry.config


def _validate_order(order: str) -> str:
    if order not in ORDERS:
        raise typer.BadParameter(f"Unknown order '{order}' (expected one of {', '.join(ORDERS)})")
    return order


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write the log to this file."),
) -> None:
    try:
        log_mod.setup_logging(log_level, log_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def resolve(
    base: str = typer.Argument(..., help="Base image filename, relative to the images dir."),
    images_dir: Path = typer.Option(Path("."), "--images-dir", "-d", help="Image directory."),
    heights: bool = typer.Option(False, "--heights", help="Read image heights."),
    profile: str = typer.Option("Default", "--profile", help="Preset name."),
    config_file: Optional[Path] = typer.Option(None, "--config", help="JSON config file."),
    class_variant: Optional[List[str]] = typer.Option(None, "--class-variant", help="name=tag1,tag2"),
    hidpi_only: Optional[bool] = typer.Option(None, "--hidpi-only/--no-hidpi-only"),
    order: str = typer.Option(ORDER_FILENAME, "--order", help="filename | breakpoint"),
) -> None:
    """Print the ordered records for one base image."""
    cfg = _load_config(profile, config_file, class_variant, hidpi_only)
    sink = ListSink()
    try:
        res = resolve_variants(base, cfg, images_dir, heights, order=_validate_order(order), sink=sink)
    except ImageReadError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=1)

    for record in sink.records:
        typer.echo(record.describe())
    for d in res.diagnostics:
        typer.echo(f"{d.level}: {d.message}", err=True)


@app.command()
def scan(
    folder: Path = typer.Argument(..., help="Folder holding the images."),
    heights: bool = typer.Option(False, "--heights", help="Read image heights."),
    profile: str = typer.Option("Default", "--profile", help="Preset name."),
    config_file: Optional[Path] = typer.Option(None, "--config", help="JSON config file."),
    class_variant: Optional[List[str]] = typer.Option(None, "--class-variant", help="name=tag1,tag2"),
    hidpi_only: Optional[bool] = typer.Option(None, "--hidpi-only/--no-hidpi-only"),
    order: str = typer.Option(ORDER_FILENAME, "--order", help="filename | breakpoint"),
    json_out: Optional[Path] = typer.Option(None, "--json", help="Write a JSON report."),
    html_out: Optional[Path] = typer.Option(None, "--html", help="Write an HTML report."),
) -> None:
    """Resolve every base image in a folder."""
    if not folder.is_dir():
        raise typer.BadParameter(f"{folder} is not a directory")
    cfg = _load_config(profile, config_file, class_variant, hidpi_only)
    resolutions, summary = scan_folder(folder, cfg, heights, order=_validate_order(order))

    for d in summary.diagnostics:
        typer.echo(f"{d.level}: {d.message}")
    for base, res in resolutions.items():
        typer.echo(f"{base}: {len(res.records)} record(s)")
        for d in res.diagnostics:
            typer.echo(f"  {d.level}: {d.message}")

    typer.echo(
        f"Bases found: {summary.bases_found} | Images scanned: {summary.images_scanned} | "
        f"Orphans: {summary.orphans} | Errors: {summary.errors} | Warnings: {summary.warnings}"
    )

    if json_out or html_out:
        report = build_report_dict(
            tool_version=TOOL_VERSION,
            profile=config_file.name if config_file else get_profile(profile).name,
            config=cfg,
            resolutions=resolutions,
            summary=summary,
        )
        if json_out:
            write_json_report(report, json_out)
            logger.info("Wrote %s", json_out)
        if html_out:
            write_html_report(report, html_out)
            logger.info("Wrote %s", html_out)


if __name__ == "__main__":
    app()
