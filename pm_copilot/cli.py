#!/usr/bin/env python
"""
PM Copilot CLI - Analyze exported feedback and build product plans.

Usage:
    pm-copilot themes                                  # List configured themes
    pm-copilot analyze -t tickets.json -r requests.json
    pm-copilot plan -t tickets.json -r requests.json -n 3
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from .analyzer import analyze_feedback
from .config import ConfigurationError, get_log_level, load_themes_config
from .logging_utils import configure_safe_logging
from .reporting import DETAIL_LEVELS, build_data_preview, build_product_plan, trim_analysis

logger = logging.getLogger(__name__)


class InputFileError(Exception):
    """Raised when a records file cannot be read."""


def load_records(path: Optional[str]) -> List[Any]:
    """
    Read a JSON array of records.

    Accepts either a bare list or an object with a "records" list.
    """
    if not path:
        return []
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise InputFileError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InputFileError(f"{path} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("records", [])
    if not isinstance(data, list):
        raise InputFileError(f"{path} must contain a JSON array of records")
    return [record for record in data if isinstance(record, dict)]


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def cmd_themes(args):
    """List configured themes."""
    config = load_themes_config(args.config)

    print(f"\n{'Theme ID':<30} {'Category':<20} {'Keywords'}")
    print("-" * 85)
    for theme in config.themes:
        print(f"{theme.id:<30} {theme.category:<20} {', '.join(theme.keywords)}")
    print(f"\n{len(config.themes)} themes (config v{config.version}), "
          f"emerging-theme min frequency {config.emerging_theme_min_frequency}\n")


def cmd_analyze(args):
    """Synthesize feedback into scored themes."""
    config = load_themes_config(args.config)
    tickets = load_records(args.tickets)
    requests = load_records(args.requests)

    report = analyze_feedback(tickets, requests, config)
    _print_json({
        "detail_level": args.detail,
        "data_sources": report.data_sources,
        "pii_scrubbing_applied": True,
        "pii_categories_redacted": report.pii_categories_redacted,
        "analysis": trim_analysis(report, args.detail),
    })


def cmd_plan(args):
    """Build a ranked product plan."""
    tickets = load_records(args.tickets)
    requests = load_records(args.requests)

    if args.preview:
        _print_json(build_data_preview(len(tickets), len(requests), args.kpi))
        return

    config = load_themes_config(args.config)
    report = analyze_feedback(tickets, requests, config)
    _print_json(build_product_plan(
        report,
        max_priorities=args.max_priorities,
        detail_level=args.detail,
        kpi_context=args.kpi,
    ))


def _add_input_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-t", "--tickets", help="JSON file of support tickets")
    parser.add_argument("-r", "--requests", help="JSON file of feature requests")
    parser.add_argument(
        "-d", "--detail", choices=DETAIL_LEVELS, default="summary", help="Detail level"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pm-copilot",
        description="PM Copilot CLI - Triangulate support tickets and feature requests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pm-copilot themes                                 # List configured themes
  pm-copilot analyze -t tickets.json -r posts.json  # Scored themes (summary)
  pm-copilot analyze -t tickets.json -d standard    # With sub-scores and titles
  pm-copilot plan -t tickets.json -r posts.json -n 3 --kpi "churn up 1pt"
  pm-copilot plan -t tickets.json --preview         # What would be analyzed
        """
    )
    parser.add_argument("-c", "--config", help="Theme config path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # themes
    p_themes = subparsers.add_parser("themes", help="List configured themes")
    p_themes.set_defaults(func=cmd_themes)

    # analyze
    p_analyze = subparsers.add_parser("analyze", help="Synthesize feedback into scored themes")
    _add_input_args(p_analyze)
    p_analyze.set_defaults(func=cmd_analyze)

    # plan
    p_plan = subparsers.add_parser("plan", help="Build a ranked product plan")
    _add_input_args(p_plan)
    p_plan.add_argument(
        "-n", "--max-priorities", type=int, default=5, choices=range(1, 11),
        metavar="{1..10}", help="Number of priorities"
    )
    p_plan.add_argument("--kpi", help="Business metrics context (free text)")
    p_plan.add_argument("--preview", action="store_true", help="Preview only, no analysis")
    p_plan.set_defaults(func=cmd_plan)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_safe_logging("DEBUG" if args.verbose else get_log_level())

    if args.command is None:
        parser.print_help()
        return 0

    try:
        args.func(args)
    except (ConfigurationError, InputFileError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
