# main.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from core.exceptions import DomainError, ScheduleAdjustmentError
from core.reporting.api import generate_gantt_png
from core.services.transfer import import_project_safe, write_export
from infra.db.base import database_url, open_session
from infra.logging_config import setup_logging
from infra.services import build_service_graph

logger = logging.getLogger(__name__)


def build_services(db_url: str | None = None) -> dict:
    from infra.migrate import run_migrations

    db_url = db_url or database_url()
    run_migrations(db_url=db_url)
    session = open_session(db_url)
    return build_service_graph(session).as_dict()


def _cmd_list(services: dict, args: argparse.Namespace) -> int:
    for project in services["project_service"].list_projects():
        end = project.end_date.isoformat() if project.end_date else "-"
        print(f"{project.id}\t{project.name}\t{project.start_date.isoformat()}\t{end}\t{project.status.value}")
    return 0


def _cmd_export(services: dict, args: argparse.Namespace) -> int:
    project = services["project_service"].get_project(args.project_id)
    if project is None:
        print(f"Project not found: {args.project_id}", file=sys.stderr)
        return 1
    print(write_export(project, Path(args.out_dir), args.filename))
    return 0


def _cmd_import(services: dict, args: argparse.Namespace) -> int:
    text = Path(args.file).read_text(encoding="utf-8")
    result = import_project_safe(text, new_start_date=args.start, validate_only=args.check)
    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    for error in result.errors:
        print(f"error: {error}", file=sys.stderr)
    if not result.success:
        return 1
    if result.project is not None:
        services["project_service"].save_project(result.project)
        print(result.project.id)
    return 0


def _cmd_adjust(services: dict, args: argparse.Namespace) -> int:
    project_service = services["project_service"]
    check = project_service.validate_date_adjustment(args.project_id, args.start)
    for warning in check.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    if args.dry_run or not check.is_valid:
        for error in check.errors:
            print(f"error: {error}", file=sys.stderr)
        return 0 if check.is_valid else 1
    try:
        report = project_service.adjust_project_dates(args.project_id, args.start)
    except ScheduleAdjustmentError as exc:
        for failed in exc.report.failed_tasks:
            print(f"error: {failed.task_title}: {failed.error}", file=sys.stderr)
        print(str(exc), file=sys.stderr)
        return 1
    direction = "forward" if report.is_moving_forward else "backward"
    print(f"Moved {report.adjusted_tasks} tasks {report.days_difference} working days {direction}")
    return 0


def _cmd_gantt(services: dict, args: argparse.Namespace) -> int:
    project = services["project_service"].get_project(args.project_id)
    if project is None:
        print(f"Project not found: {args.project_id}", file=sys.stderr)
        return 1
    print(generate_gantt_png(project, args.out))
    return 0


def _parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="planner-lite", description="Working-day project planner.")
    ap.add_argument("--db-url", default=None, help="Database URL (default: env PM_DB_URL or the user data dir)")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List stored projects").set_defaults(func=_cmd_list)

    p = sub.add_parser("export", help="Write a project to a JSON file")
    p.add_argument("project_id")
    p.add_argument("--out-dir", default=".", help="Target directory (default: current directory)")
    p.add_argument("--filename", default=None, help="File name (default: derived from the project name)")
    p.set_defaults(func=_cmd_export)

    p = sub.add_parser("import", help="Import a project from a JSON file")
    p.add_argument("file")
    p.add_argument("--start", default=None, help="Move the imported schedule to this start date (YYYY-MM-DD)")
    p.add_argument("--check", action="store_true", help="Only validate the file")
    p.set_defaults(func=_cmd_import)

    p = sub.add_parser("adjust", help="Move a project and all its tasks to a new start date")
    p.add_argument("project_id")
    p.add_argument("start", help="New start date YYYY-MM-DD")
    p.add_argument("--dry-run", action="store_true", help="Report problems without changing anything")
    p.set_defaults(func=_cmd_adjust)

    p = sub.add_parser("gantt", help="Render a Gantt chart PNG")
    p.add_argument("project_id")
    p.add_argument("--out", default="gantt.png", help="Output PNG path (default: ./gantt.png)")
    p.set_defaults(func=_cmd_gantt)
    return ap


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    setup_logging()
    services = build_services(args.db_url)
    try:
        return args.func(services, args)
    except DomainError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        services["session"].close()


if __name__ == "__main__":
    sys.exit(main())
