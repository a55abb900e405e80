"""Text rendering of gains report results for terminal output."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from gains_ledger.domain import RealizedGainRecord
from gains_ledger.jobs import JOB_STATUS_FAILED, FileGainsResult, GainsReportResult
from gains_ledger.ledger import BOTH_METHODS_NAME, FIFO_METHOD_NAME, MOVING_AVERAGE_METHOD_NAME

REPORT_SEPARATOR = "-" * 60

_REPORTING_METHOD_TITLES = {
    FIFO_METHOD_NAME: "FIFO",
    MOVING_AVERAGE_METHOD_NAME: "Moving Average",
}

_REPORTING_FIFO_COLUMNS = (
    "order_num",
    "datetime",
    "asset",
    "sell_quantity",
    "sell_price",
    "proceeds",
    "cost_basis",
    "realized_gain",
)

_REPORTING_MA_COLUMNS = (
    "order_num",
    "datetime",
    "asset",
    "sell_quantity",
    "sell_price",
    "proceeds",
    "avg_cost_per_coin",
    "realized_gain",
)


def reporting_records_frame(records: Iterable[RealizedGainRecord], method: str) -> pd.DataFrame:
    """Build a sale table for one engine run.

    FIFO tables show the matched cost basis; moving-average tables show the
    average unit cost applied to each sale.

    Args:
        records: Realized-gain records in sale order.
        method: Engine method label.

    Returns:
        pd.DataFrame: One row per sale, empty with headers when there were no sales.

    Raises:
        ValueError: Raised when method is not an engine label.
    """

    if method == FIFO_METHOD_NAME:
        columns = _REPORTING_FIFO_COLUMNS
    elif method == MOVING_AVERAGE_METHOD_NAME:
        columns = _REPORTING_MA_COLUMNS
    else:
        raise ValueError(f"unsupported engine method={method}")

    rows = [
        (
            record.order_id,
            record.timestamp,
            record.asset,
            record.sold_quantity,
            record.sale_unit_price,
            record.proceeds,
            record.cost_basis if method == FIFO_METHOD_NAME else record.average_unit_cost,
            record.realized_gain,
        )
        for record in records
    ]
    return pd.DataFrame(rows, columns=list(columns))


def reporting_format_amount(value: float, digits: int = 2) -> str:
    """Round one amount for display.

    Args:
        value: Amount to format.
        digits: Decimal digits kept.

    Returns:
        str: Fixed-point text.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    rounded_value = round(value, digits)
    # Avoid printing "-0.00" for tiny negative residues.
    if rounded_value == 0:
        rounded_value = 0.0
    return f"{rounded_value:.{digits}f}"


def reporting_compare_totals(total_fifo: float, total_ma: float) -> str:
    """Render the FIFO versus moving-average comparison line."""

    if total_fifo > total_ma:
        return f"[*] FIFO > MA ({total_fifo} vs. {total_ma})"
    if total_fifo < total_ma:
        return f"[*] MA > FIFO ({total_ma} vs. {total_fifo})"
    return "[*] FIFO == MA"


def reporting_render_file_section(
    file_result: FileGainsResult,
    method: str,
    currency: str = "THB",
    digits: int = 2,
) -> str:
    """Render the output block of one processed file.

    Args:
        file_result: Per-file gains result.
        method: Requested method (`fifo`, `ma`, or `both`).
        currency: Currency label printed next to totals.
        digits: Decimal digits used for totals.

    Returns:
        str: Multi-line block ending with the separator line.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    lines: list[str] = []
    if file_result.status == JOB_STATUS_FAILED:
        lines.append(f"[!] Skipped file: {file_result.error_message}")
        lines.append(REPORT_SEPARATOR)
        return "\n".join(lines)

    for method_name, run_result in file_result.runs.items():
        title = _REPORTING_METHOD_TITLES[method_name]
        lines.append("")
        lines.append(f"=== {title} Results ===")
        frame = reporting_records_frame(run_result.records, method=method_name)
        lines.append("(no sales)" if frame.empty else frame.to_string(index=False))
        lines.append("")
        lines.append(
            f"Total Realized Gain ({title}): "
            f"{reporting_format_amount(run_result.total_realized_gain, digits)} {currency}"
        )
        if run_result.partitioned_by_asset:
            lines.append(f"(engines ran per asset: {', '.join(run_result.final_states) or 'none'})")

    if method == BOTH_METHODS_NAME:
        lines.append("")
        lines.append(
            reporting_compare_totals(
                total_fifo=file_result.job_total_for(FIFO_METHOD_NAME),
                total_ma=file_result.job_total_for(MOVING_AVERAGE_METHOD_NAME),
            )
        )

    lines.append(REPORT_SEPARATOR)
    return "\n".join(lines)


def reporting_render_grand_totals(result: GainsReportResult, currency: str = "THB", digits: int = 2) -> str:
    """Render grand totals across all successfully processed files.

    Args:
        result: Multi-file gains report.
        currency: Currency label printed next to totals.
        digits: Decimal digits used for totals.

    Returns:
        str: Grand-total lines.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if result.method == BOTH_METHODS_NAME:
        lines = [
            f"Grand Total ({_REPORTING_METHOD_TITLES[method_name]}): "
            f"{reporting_format_amount(total, digits)} {currency}"
            for method_name, total in result.grand_totals.items()
        ]
    else:
        lines = [
            f"Grand Total ({_REPORTING_METHOD_TITLES[method_name]}) from all files: "
            f"{reporting_format_amount(total, digits)} {currency}"
            for method_name, total in result.grand_totals.items()
        ]

    failed_sources = result.job_failed_sources()
    if failed_sources:
        lines.append(f"Skipped {len(failed_sources)} file(s): {', '.join(failed_sources)}")
    return "\n".join(lines)


__all__ = [
    "REPORT_SEPARATOR",
    "reporting_compare_totals",
    "reporting_format_amount",
    "reporting_records_frame",
    "reporting_render_file_section",
    "reporting_render_grand_totals",
]
