# src/webforge/core/handlers/analyze_handler.py
import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from pydantic import ValidationError
from tqdm.auto import tqdm

from site_analyzer.controllers.report_controller import ReportController
from site_analyzer.controllers.validation_controller import ValidationController
from site_analyzer.model import AnalyzerOutcome, ValidationRunResult
from site_analyzer.registry import AnalyzerRegistry
from site_analyzer.services.page_source_service import PageSourceError, PageSourceService
from site_analyzer.services.route_table_service import RouteTableService, is_dynamic_route
from site_analyzer.settings import AnalyzerSettings
from webforge.core.handlers.config_handler import handle_config
from webforge.core.managers.config_manager import config_manager
from webforge.core.utils.configure_logging import configure_logger
from webforge.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

# Exit code for setup problems (unreadable page tree, invalid configuration)
EXIT_SETUP_ERROR = 2

EXPORT_COLUMNS = ["analyzer", "severity", "code", "file", "route", "message", "details"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webforge",
        description="Static analysis of Astro page sources: headings, links, schema, images and content.",
    )
    parser.add_argument("--root", type=str, default=None, help="Project root (default: current directory).")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level, e.g. INFO or DEBUG.")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    def add_run_options(sub: argparse.ArgumentParser):
        sub.add_argument("--no-report", action="store_true", help="Do not write JSON report files.")
        sub.add_argument("--export", type=str, default=None, help="Export all issues to a CSV file.")

    # 1. Pipeline runner
    add_run_options(subparsers.add_parser("validate", help="Run every analyzer in order."))

    # 2. One subcommand per analyzer
    for defn in AnalyzerRegistry.get_all():
        add_run_options(subparsers.add_parser(defn.key, help=f"Run the {defn.label} analyzer."))

    # 3. Introspection
    subparsers.add_parser("routes", help="Print the route table derived from the pages directory.")
    subparsers.add_parser("list", help="List analyzers and the issue codes they emit.")
    config_parser = subparsers.add_parser("config", help="Show the effective configuration.")
    config_parser.add_argument("config_args", nargs=argparse.REMAINDER, help="list | get <key>")

    return parser


def handle_command(args: Optional[List[str]] = None) -> int:
    """
    Entry point for all webforge commands. Returns the process exit code.
    """
    parser = build_parser()
    try:
        parsed_args = parser.parse_args(args)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1

    if not parsed_args.command:
        parser.print_help()
        return 0

    project_root = PathUtils.resolve_project_root(parsed_args.root)
    config_manager.reset()
    config_manager.load_overrides(PathUtils.get_project_overrides_file(project_root))

    configure_logger(
        parsed_args.log_level or config_manager.get_nested("debug.level", "WARNING"),
        module_specific_levels=config_manager.get_nested("debug.modules"),
    )

    if parsed_args.command == "config":
        return handle_config(parsed_args.config_args)
    if parsed_args.command == "list":
        return _handle_list()

    try:
        settings = AnalyzerSettings.from_config(project_root, config_manager.get_nested("analyzer"))
    except ValidationError as e:
        print(f"❌ Invalid analyzer configuration: {e}")
        return EXIT_SETUP_ERROR

    try:
        if parsed_args.command == "routes":
            return _handle_routes(settings)
        if parsed_args.command == "validate":
            return _handle_validate(parsed_args, settings)
        return _handle_single(parsed_args, settings)
    except PageSourceError as e:
        print(f"❌ Could not read the page sources: {e}")
        return EXIT_SETUP_ERROR


def _load_with_progress(controller: ValidationController) -> None:
    pbar = tqdm(total=0, desc="Parsing", unit="file", leave=False)

    def progress_update(current, total):
        pbar.total = total
        pbar.n = current
        pbar.refresh()

    try:
        controller.load(progress_callback=progress_update)
    finally:
        pbar.close()

    print(f"📄 {len(controller.pages)} pages, {len(controller.components)} components, "
          f"{len(controller.route_table)} routes.")


def _make_printer(printer: ReportController, write_reports: bool, outcome_lines: bool):
    def on_outcome(outcome: AnalyzerOutcome) -> None:
        if outcome.report:
            printer.print_report(outcome.report)
            if write_reports:
                if outcome.report_path:
                    print(f"\n💾 Report saved: {outcome.report_path}")
                else:
                    print(f"\n⚠️  Could not write the {outcome.label} report file (see log).")
        if outcome_lines:
            printer.print_outcome_line(outcome)
    return on_outcome


def _handle_validate(parsed_args: argparse.Namespace, settings: AnalyzerSettings) -> int:
    print(f"🚀 Validating {settings.project_root}...")
    write_reports = not parsed_args.no_report
    controller = ValidationController(settings, write_reports=write_reports)
    printer = ReportController(limit=settings.console_limit)

    _load_with_progress(controller)
    result = controller.run(on_outcome=_make_printer(printer, write_reports, outcome_lines=True))
    printer.print_run_summary(result)

    if parsed_args.export:
        _handle_export(parsed_args.export, result, settings.project_root)

    return result.exit_code


def _handle_single(parsed_args: argparse.Namespace, settings: AnalyzerSettings) -> int:
    write_reports = not parsed_args.no_report
    controller = ValidationController(settings, write_reports=write_reports)
    printer = ReportController(limit=settings.console_limit)

    _load_with_progress(controller)
    result = controller.run([parsed_args.command], on_outcome=_make_printer(printer, write_reports, False))
    outcome = result.outcomes[0]
    if outcome.error:
        printer.print_outcome_line(outcome)

    if parsed_args.export:
        _handle_export(parsed_args.export, result, settings.project_root)

    return outcome.exit_code


def _handle_routes(settings: AnalyzerSettings) -> int:
    sources = PageSourceService(
        settings.pages_path, settings.page_extension, settings.exclude_prefix, settings.index_name
    )
    relative_paths = [sources.relative_path(p) for p in sources.find_files()]
    table = RouteTableService(settings.page_extension, settings.index_name).build(relative_paths)

    print(f"\n🗺️  Routes in {settings.pages_dir} ({len(table)})")
    print("-" * 50)
    if not len(table):
        print("  (No routes found)")
    for route in table:
        marker = "  [dynamic]" if is_dynamic_route(route) else ""
        print(f"  {route}{marker}")
    print("-" * 50)
    return 0


def _handle_list() -> int:
    print(f"{'#':<4} {'KEY':<12} {'LABEL':<22} {'CRITICAL':<9} CODES")
    print("-" * 80)
    for defn in AnalyzerRegistry.get_all():
        critical = "yes" if defn.critical else "no"
        print(f"{defn.order:<4} {defn.key:<12} {defn.label:<22} {critical:<9} {', '.join(defn.codes)}")
    return 0


def flatten_issues(result: ValidationRunResult) -> List[Dict[str, Any]]:
    """One row per issue, details serialized to JSON for spreadsheet tools."""
    rows = []
    for outcome in result.outcomes:
        if not outcome.report:
            continue
        for issue in outcome.report.issues:
            row = issue.model_dump(mode="json")
            row["details"] = json.dumps(row["details"], ensure_ascii=False)
            rows.append(row)
    return rows


def _handle_export(filename: str, result: ValidationRunResult, project_root: Path) -> None:
    rows = flatten_issues(result)
    if not rows:
        print("ℹ️  No issues to export.")
        return
    try:
        if not filename.endswith(".csv"):
            filename += ".csv"
        out_path = PathUtils.get_export_path(filename, project_root)
        pd.DataFrame(rows, columns=EXPORT_COLUMNS).to_csv(out_path, index=False)
        print(f"✅ Issues exported to: {out_path}")
    except (OSError, ValueError) as e:
        logger.error("Export failed: %s", e)
        print(f"❌ Error exporting: {e}")
