"""Render scan reports as JSON, plain text or HTML."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List

from jinja2 import Environment, FileSystemLoader

from .logging import get_logger
from .models import SEVERITIES, CheckResult, ScanReport, severity_rank

_LOGGER = get_logger("reporting")

FORMAT_EXTENSIONS: Dict[str, str] = {"json": ".json", "text": ".txt", "html": ".html"}
_TEMPLATES = {"text": "report.txt.j2", "html": "report.html.j2"}


def render_json(report: ScanReport, *, indent: int | None = 2) -> str:
    return report.to_json(indent=indent)


def render_text(report: ScanReport, templates_dir: Path | None = None) -> str:
    return _render("text", report, templates_dir)


def render_html(report: ScanReport, templates_dir: Path | None = None) -> str:
    return _render("html", report, templates_dir)


def render(report: ScanReport, fmt: str = "json", templates_dir: Path | None = None) -> str:
    if fmt == "json":
        return render_json(report)
    if fmt in _TEMPLATES:
        return _render(fmt, report, templates_dir)
    raise ValueError(f"Unsupported report format '{fmt}'; expected one of {', '.join(FORMAT_EXTENSIONS)}")


def save_report(report: ScanReport, output_path: str | os.PathLike[str], fmt: str = "json") -> Path:
    """Write the rendered report, appending the format's extension when absent."""
    content = render(report, fmt)
    target = Path(output_path)
    extension = FORMAT_EXTENSIONS[fmt]
    if target.suffix.lower() != extension:
        target = target.with_name(target.name + extension)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    _LOGGER.debug("Wrote %s report to %s", fmt, target)
    return target


def _render(fmt: str, report: ScanReport, templates_dir: Path | None) -> str:
    template = _create_env(templates_dir).get_template(_TEMPLATES[fmt])
    return template.render(**_template_context(report))


def _create_env(templates_dir: Path | None) -> Environment:
    directories: List[str] = []
    if templates_dir:
        directories.append(str(templates_dir))
    directories.append(str(Path(__file__).with_name("templates")))
    return Environment(
        loader=FileSystemLoader(directories),
        autoescape=lambda name: bool(name) and ".html" in name,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def _template_context(report: ScanReport) -> Dict[str, object]:
    failed = sorted(
        report.failed(),
        key=lambda result: (-severity_rank(result.severity), result.category, result.check_id),
    )
    by_category: Dict[str, List[CheckResult]] = {}
    for result in report.results:
        by_category.setdefault(result.category, []).append(result)
    return {
        "report": report,
        "failed": failed,
        "passed_count": len(report.results) - len(failed),
        "by_category": by_category,
        "severities": SEVERITIES,
    }


__all__ = [
    "FORMAT_EXTENSIONS",
    "render",
    "render_html",
    "render_json",
    "render_text",
    "save_report",
]
