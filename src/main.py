"""Command-line entry point for the survey dashboard pipeline.

Reads a spreadsheet export, writes the aggregated JSON report and, when a
store directory is configured, saves it as the current dashboard dataset and
records the outcome in the activity log.

    python -m src.main responses.xlsx --output report.json --summary
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from src.activity_log import ActivityLog, LogType
from src.exceptions import EmptyDatasetError, ParseError
from src.report_store import ReportStore
from src.reporting.assembler import process_workbook
from src.reporting.models import dumps_report
from src.reporting.render import render_report

logger = logging.getLogger("src.main")


def _configure_logging() -> None:
    logging_level = os.environ.get("SURVEY_LOG_LEVEL", "INFO")
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging_level,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="survey-dashboard",
        description="Aggregate a survey spreadsheet into a dashboard report.",
    )
    parser.add_argument("spreadsheet", type=Path, help="Path to the .xlsx export")
    parser.add_argument(
        "-o", "--output", type=Path, help="Write the JSON report to this file"
    )
    parser.add_argument(
        "--store-dir",
        type=Path,
        default=os.getenv("REPORT_STORE_DIR") or None,
        help="Save the report and activity log under this directory",
    )
    parser.add_argument(
        "--summary", action="store_true", help="Print a Markdown summary to stdout"
    )
    parser.add_argument(
        "--user", default=os.getenv("SURVEY_USER", "system"), help="Name recorded in the log"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the pipeline for one spreadsheet; return the process exit code."""

    load_dotenv()
    _configure_logging()
    args = _build_parser().parse_args(argv)

    activity = ActivityLog(args.store_dir) if args.store_dir else None
    filename = args.spreadsheet.name

    try:
        payload = args.spreadsheet.read_bytes()
        report = process_workbook(payload, filename)
    except (OSError, ParseError, EmptyDatasetError) as exc:
        logger.error("Failed to process %s: %s", args.spreadsheet, exc)
        if activity is not None:
            activity.add(
                LogType.ERROR, f"Failed to process file: {exc}", user=args.user
            )
        return 1

    if args.output:
        args.output.write_text(dumps_report(report), encoding="utf-8")
        logger.info("Report written to %s", args.output)

    if args.store_dir:
        ReportStore(args.store_dir).save_report(report)
        activity.add(  # type: ignore[union-attr]
            LogType.UPDATE,
            f"File processed successfully: {filename}",
            user=args.user,
            details={
                "totalRespondents": report.total_respondents,
                "totalQuestions": len(report.questions),
                "overallMean": report.overall_mean,
            },
        )

    if args.summary:
        sys.stdout.write(render_report(report))
    elif not args.output and not args.store_dir:
        sys.stdout.write(dumps_report(report) + "\n")

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
