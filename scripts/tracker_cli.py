#!/usr/bin/env python3
"""
tracker_cli.py - Command-line access to the study tracker.

Uses the same catalog sources and local state as the Streamlit app.

Usage:
  python scripts/tracker_cli.py status
  python scripts/tracker_cli.py log electric-circuits 3
  python scripts/tracker_cli.py set-target electric-circuits 55
  python scripts/tracker_cli.py export --output backup.json
  python scripts/tracker_cli.py import backup.json
  python scripts/tracker_cli.py report --output report.csv --today 2026-03-01
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import pandas as pd

from esetracker.config import load_config, setup_logging
from esetracker.tracker import FormatError, Navigator, ValidationError
from esetracker.viewer import status_label

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

def build_report(nav: Navigator, today: date) -> pd.DataFrame:
    """One row of pacing figures per subject."""
    rows = []
    for subject in nav.subjects:
        item = nav.pace_for(subject, today)
        rows.append({
            "id": subject.id,
            "subject": subject.name,
            "status": item.status.value,
            "start": subject.start_date.isoformat(),
            "end": subject.end_date.isoformat(),
            "completed": item.progress.completed,
            "target": item.progress.total_lectures,
            "remaining": item.remaining,
            "percent": item.percentage,
            "days_left": item.days_remaining,
            "total_days": item.total_days,
            "per_day": round(item.daily_target, 2),
        })
    return pd.DataFrame(rows)


def cmd_status(nav: Navigator, args) -> int:
    today = args.today
    stats = nav.overview(today)

    logger.info(f"Day {nav.course_day_number(today)} · {nav.course_days_remaining(today)} days left in the course")
    logger.info(f"Overall progress: {nav.overall_percentage()}%")
    logger.info(
        f"Today's target: {stats.today_target} lectures "
        f"({stats.active_count} active, {stats.completed} done, {stats.remaining} remaining)"
    )
    for item in nav.today_schedule(today):
        logger.info(
            f"  - {item.subject.name}: {item.daily_target:.1f}/day "
            f"({item.remaining} left, {item.days_remaining} days, {status_label(item.status)})"
        )
    return 0


def cmd_log(nav: Navigator, args) -> int:
    try:
        result = nav.log(args.subject_id, args.count)
    except ValidationError as e:
        logger.error(f"Rejected: {e}")
        return 1
    note = " (capped at target)" if result.clamped else ""
    logger.info(
        f"{result.subject.name}: +{result.count} lectures, now "
        f"{result.completed}/{nav.store.get(result.subject.id).total_lectures}{note}"
    )
    return 0


def cmd_set_target(nav: Navigator, args) -> int:
    try:
        nav.save_settings({args.subject_id: args.total})
    except ValidationError as e:
        logger.error(f"Rejected: {e}")
        return 1
    logger.info(f"Target for {args.subject_id} set to {args.total}")
    return 0


def cmd_export(nav: Navigator, args) -> int:
    data = nav.export()
    if args.output:
        args.output.write_bytes(data)
        logger.info(f"Exported progress to {args.output}")
    else:
        sys.stdout.write(data.decode("utf-8") + "\n")
    return 0


def cmd_import(nav: Navigator, args) -> int:
    try:
        result = nav.import_snapshot(args.file.read_bytes())
    except FormatError as e:
        logger.error(f"Invalid backup file: {e}")
        return 1
    logger.info(f"Imported progress for {result.subject_count} subjects")
    return 0


def cmd_report(nav: Navigator, args) -> int:
    report = build_report(nav, args.today)
    if args.output:
        report.to_csv(args.output, index=False)
        logger.info(f"Saved report ({len(report)} subjects) to: {args.output}")
    else:
        print(report.to_string(index=False))
    return 0


# -----------------------------------------------------------------------------
# Main
# -----------------------------------------------------------------------------

def main():
    parser = argparse.ArgumentParser(
        description="Study tracker: log lectures, inspect pacing, back up progress",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to .env file (default: project .env)"
    )
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=date.today(),
        help="Evaluate pacing as of this date (YYYY-MM-DD)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Show today's targets")

    log_parser = subparsers.add_parser("log", help="Log completed lectures")
    log_parser.add_argument("subject_id")
    log_parser.add_argument("count", type=int)

    target_parser = subparsers.add_parser("set-target", help="Change a subject's lecture target")
    target_parser.add_argument("subject_id")
    target_parser.add_argument("total", type=int)

    export_parser = subparsers.add_parser("export", help="Export progress as JSON")
    export_parser.add_argument("--output", type=Path, default=None, help="Output file (default: stdout)")

    import_parser = subparsers.add_parser("import", help="Replace progress from a JSON backup")
    import_parser.add_argument("file", type=Path)

    report_parser = subparsers.add_parser("report", help="Per-subject pacing table")
    report_parser.add_argument("--output", type=Path, default=None, help="CSV output (default: print)")

    args = parser.parse_args()

    config = load_config(args.env_file)
    setup_logging(config)

    nav = Navigator.bootstrap(config)

    commands = {
        "status": cmd_status,
        "log": cmd_log,
        "set-target": cmd_set_target,
        "export": cmd_export,
        "import": cmd_import,
        "report": cmd_report,
    }
    sys.exit(commands[args.command](nav, args))


if __name__ == "__main__":
    main()
