"""Reporting layer package for terminal rendering of gains results."""

from .tables import (
	REPORT_SEPARATOR,
	reporting_compare_totals,
	reporting_format_amount,
	reporting_records_frame,
	reporting_render_file_section,
	reporting_render_grand_totals,
)

__all__ = [
	"REPORT_SEPARATOR",
	"reporting_compare_totals",
	"reporting_format_amount",
	"reporting_records_frame",
	"reporting_render_file_section",
	"reporting_render_grand_totals",
]
