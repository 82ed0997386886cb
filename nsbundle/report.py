"""Human-readable build summaries."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from jinja2 import Environment, FileSystemLoader

from .models import BatchOutcome, BuildArtifacts

_TEMPLATES_DIR = Path(__file__).with_name("templates")


def _create_env(templates_dir: Path | None = None) -> Environment:
    loader = FileSystemLoader(str(templates_dir or _TEMPLATES_DIR))
    return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


def format_kb(size: int) -> str:
    return f"{size / 1024:.2f}"


def _describe(path: Optional[Path], relative_to: Optional[Path]) -> Optional[Dict[str, str]]:
    if path is None or not path.exists():
        return None
    shown = path
    if relative_to is not None:
        try:
            shown = path.relative_to(relative_to)
        except ValueError:
            shown = path
    return {"path": str(shown), "name": path.name, "kb": format_kb(path.stat().st_size)}


def render_report(
    artifacts: BuildArtifacts,
    *,
    usage: bool = True,
    relative_to: Path | None = None,
    templates_dir: Path | None = None,
) -> str:
    """Render sizes and embedding instructions for one page build."""
    files = {
        "bundle": _describe(artifacts.bundle_js, relative_to),
        "linked": _describe(artifacts.linked_html, relative_to),
        "standalone": _describe(artifacts.standalone_html, relative_to),
        "source_map": _describe(artifacts.source_map, relative_to),
    }
    template = _create_env(templates_dir).get_template("report.j2")
    return template.render(page=artifacts.page, files=files, usage=usage).rstrip() + "\n"


def render_batch_summary(outcome: BatchOutcome) -> str:
    """One-line-per-page summary for ``--all`` runs."""
    lines = [f"Built {len(outcome.built)} page(s), {len(outcome.failures)} failed."]
    for name, reason in sorted(outcome.failures.items()):
        lines.append(f"  FAILED {name}: {reason}")
    return "\n".join(lines) + "\n"


__all__ = ["format_kb", "render_batch_summary", "render_report"]
