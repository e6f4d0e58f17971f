"""Reporting API wrappers around renderer classes."""

from pathlib import Path

from core.models import Project
from core.reporting.renderers.gantt import GanttPngRenderer
from core.services.reporting import build_gantt_data


def _ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def generate_gantt_png(project: Project, output_path: str | Path) -> Path:
    timeline = build_gantt_data(project)
    renderer = GanttPngRenderer()
    return renderer.render(timeline.bars, _ensure_parent(Path(output_path)), title=project.name or "Project Gantt Chart")
