"""Main module entrypoint for local runtime execution.

This module validates startup configuration and either prints a realized
gains report for statement CSV files or launches the FastAPI service.
"""

import argparse
import logging

import uvicorn

from gains_ledger.bootstrap import bootstrap_create_application, bootstrap_create_gains_orchestrator
from gains_ledger.config import SettingsLoadError, config_load_settings
from gains_ledger.jobs import JOB_STATUS_SUCCESS
from gains_ledger.ledger import GAINS_METHOD_CHOICES
from gains_ledger.loader import loader_discover_files
from gains_ledger.reporting import reporting_render_file_section, reporting_render_grand_totals


def main_build_argument_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser.

    Returns:
        argparse.ArgumentParser: Parser for `report` and `api` commands.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    argument_parser = argparse.ArgumentParser(
        description="Calculate realized crypto gains from statement CSV files using FIFO or moving average cost"
    )
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="report",
        choices=("report", "api"),
        help="Runtime command: `report` prints gains for matching CSV files, `api` starts the HTTP server",
        type=str,
    )
    argument_parser.add_argument(
        "--pattern",
        dest="pattern",
        type=str,
        help="Glob pattern to find CSV files (default from CSV_PATTERN or './tax/2024_name/*/*.csv')",
    )
    argument_parser.add_argument(
        "--skiprows",
        dest="skiprows",
        type=int,
        help="Number of rows to skip from top in each CSV file (default from CSV_SKIPROWS or 2)",
    )
    argument_parser.add_argument(
        "--method",
        dest="method",
        type=str.lower,
        choices=GAINS_METHOD_CHOICES,
        help="Calculation method: 'fifo' (FIFO only), 'ma' (Moving Average only), or 'both'",
    )
    argument_parser.add_argument(
        "--partition-by-asset",
        dest="partition_by_asset",
        action="store_true",
        default=None,
        help="Run engines once per asset symbol instead of once per file",
    )
    argument_parser.add_argument(
        "--no-progress",
        dest="show_progress",
        action="store_false",
        default=None,
        help="Disable the per-file progress bar",
    )
    argument_parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level for diagnostics written to stderr",
    )
    return argument_parser


def main(argv: list[str] | None = None) -> None:
    """Run selected runtime command with validated startup configuration.

    Args:
        argv: Optional argument list, defaults to process arguments.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SystemExit: Raised with status 2 for invalid configuration and 1 when any file failed to load.
    """

    argument_parser = main_build_argument_parser()
    parsed_arguments = argument_parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, parsed_arguments.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = config_load_settings(
            overrides={
                "csv_pattern": parsed_arguments.pattern,
                "csv_skiprows": parsed_arguments.skiprows,
                "gains_method": parsed_arguments.method,
                "partition_by_asset": parsed_arguments.partition_by_asset,
                "show_progress": parsed_arguments.show_progress,
            }
        )
    except SettingsLoadError as error:
        argument_parser.error(str(error))

    if parsed_arguments.command == "api":
        application = bootstrap_create_application(settings=settings)
        uvicorn.run(
            application,
            host=settings.application_host,
            port=settings.application_port,
        )
        return

    csv_files = loader_discover_files(settings.csv_pattern)
    if not csv_files:
        print(f"No CSV files found for pattern: {settings.csv_pattern}")
        return

    print(f"\nFound {len(csv_files)} file(s) matching: {settings.csv_pattern}\n")

    orchestrator = bootstrap_create_gains_orchestrator(settings)
    report_result = orchestrator.job_execute_files(csv_files)
    for file_result in report_result.file_results:
        print(f"Results for file: {file_result.source_label}")
        print(
            reporting_render_file_section(
                file_result,
                method=report_result.method,
                currency=settings.report_currency,
                digits=settings.report_display_digits,
            )
        )

    print()
    print(
        reporting_render_grand_totals(
            report_result,
            currency=settings.report_currency,
            digits=settings.report_display_digits,
        )
    )

    if report_result.status != JOB_STATUS_SUCCESS:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
