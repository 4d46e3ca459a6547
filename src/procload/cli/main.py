"""
Command-line interface for procload.

Two subcommands are provided:

- ``procload report FILE``: analyse a monitoring document and print the
  diagnostic report (Markdown, text or JSON).
- ``procload collect``: sample the local machine with psutil and write a
  monitoring document that ``report`` can consume.
"""

import argparse
import json
import logging
import sys
import tomllib
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from ..analysis import analyze
from ..collectors import collect_document
from ..config import get_config, set_config_path
from ..models.config import OUTPUT_FORMATS, AppConfig
from ..reporting import render
from ..sources import load_document
from ..storage import samples_frame, save_samples
from ..validation import (
    ParseError,
    ValidationError,
    handle_cli_error,
    validate_positive_float,
    validate_positive_integer,
)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    # Reports go to stdout, so log records go to stderr.
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        stream=sys.stderr,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="procload",
        description="Analyse CPU/process monitoring snapshots and report overloading processes.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.toml (defaults to conf/config.toml).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    report = subparsers.add_parser("report", help="Render a diagnostic report for a monitoring log.")
    report.add_argument("file", type=Path, help="Monitoring document (JSON).")
    report.add_argument("--warning", help="CPU warning threshold in percent.")
    report.add_argument("--critical", help="CPU critical threshold in percent.")
    report.add_argument(
        "-f",
        "--format",
        choices=OUTPUT_FORMATS,
        help="Output format (default from config: markdown).",
    )
    report.add_argument(
        "--no-recommendations",
        action="store_true",
        help="Omit the recommendations section.",
    )
    report.add_argument("-o", "--output", type=Path, help="Write the report to this file instead of stdout.")
    report.add_argument(
        "--export-samples",
        type=Path,
        help="Also write the flattened process samples (.parquet or .csv).",
    )
    report.add_argument(
        "--show-source",
        action="store_true",
        help="Prefix the report with the resolved path of the analysed file.",
    )

    collect = subparsers.add_parser("collect", help="Collect a monitoring document from this machine.")
    collect.add_argument("--count", help="Number of measurements.")
    collect.add_argument("--interval", help="Seconds between measurements.")
    collect.add_argument("--top", help="Processes kept per measurement.")
    collect.add_argument("-o", "--output", type=Path, help="Write the document to this file instead of stdout.")

    return parser


def _write_output(text: str, output: Optional[Path]) -> None:
    if not text.endswith("\n"):
        text += "\n"
    if output is None:
        sys.stdout.write(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    logger.info(f"Output written to: {output}")


def _threshold_arg(value: Optional[str], flag: str) -> Optional[float]:
    if value is None:
        return None
    return validate_positive_float(value, min_value=0.0, field_name=flag)


def _run_report(args: argparse.Namespace, app_config: AppConfig) -> None:
    try:
        warning = _threshold_arg(args.warning, "--warning")
        critical = _threshold_arg(args.critical, "--critical")
    except ValidationError as e:
        handle_cli_error(error=e, context="report argument validation", exit_code=1, logger=logger)

    options = app_config.report.with_overrides(
        cpu_warning_threshold=warning,
        cpu_critical_threshold=critical,
        include_recommendations=False if args.no_recommendations else None,
        output_format=args.format,
    )

    try:
        document = load_document(args.file)
        analysis = analyze(document, options)
    except FileNotFoundError as e:
        handle_cli_error(error=e, context="loading monitoring document", exit_code=1, logger=logger)
    except ParseError as e:
        handle_cli_error(error=e, context="parsing monitoring document", exit_code=1, logger=logger)
    except ValidationError as e:
        handle_cli_error(error=e, context="validating monitoring document", exit_code=1, logger=logger)

    logger.info(
        f"Analyzed {analysis.measurement_count} measurements: "
        f"{len(analysis.high_load_processes)} high-load, "
        f"{len(analysis.critical_processes)} critical processes"
    )

    if args.export_samples:
        save_samples(
            samples_frame(document),
            args.export_samples,
            compression=app_config.export.compression,
        )

    report = render(document, analysis, options)
    if args.show_source:
        report = f"Source: {args.file.resolve()}\n\n{report}"
    _write_output(report, args.output)


def _run_collect(args: argparse.Namespace, app_config: AppConfig) -> None:
    collect_config = app_config.collect
    try:
        if args.count is not None:
            collect_config = replace(collect_config, measurement_count=validate_positive_integer(
                args.count, min_value=1, field_name="--count"))
        if args.interval is not None:
            collect_config = replace(collect_config, interval_seconds=validate_positive_float(
                args.interval, min_value=0.1, field_name="--interval"))
        if args.top is not None:
            collect_config = replace(collect_config, top_processes=validate_positive_integer(
                args.top, min_value=1, field_name="--top"))
    except ValidationError as e:
        handle_cli_error(error=e, context="collect argument validation", exit_code=1, logger=logger)

    document = collect_document(collect_config)
    _write_output(json.dumps(document, indent=2, ensure_ascii=False), args.output)


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for procload.

    Loads the configuration, applies command-line overrides and dispatches to
    the selected subcommand.

    Raises:
        SystemExit: On configuration errors, unreadable or invalid documents,
            invalid arguments, or interruption.
    """
    _configure_logging()
    args = _build_parser().parse_args(argv)

    if args.config is not None:
        set_config_path(args.config)

    try:
        app_config = get_config()
    except (ValidationError, tomllib.TOMLDecodeError, OSError) as e:
        handle_cli_error(error=e, context="configuration loading", exit_code=1, logger=logger)

    logging.getLogger().setLevel(logging.DEBUG if args.verbose else app_config.log_level)

    try:
        if args.command == "report":
            _run_report(args, app_config)
        else:
            _run_collect(args, app_config)
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        sys.exit(130)


if __name__ == "__main__":
    main_cli()
