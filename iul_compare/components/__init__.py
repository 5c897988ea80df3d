"""Expose component submodules for convenience."""

from .charts import chart_frame, comparison_chart, income_frame, income_chart
from .table import format_currency, summary_frame, winner_mask, styled_summary
from .report import build_report_pdf, report_key

__all__ = [
    "chart_frame",
    "comparison_chart",
    "income_frame",
    "income_chart",
    "format_currency",
    "summary_frame",
    "winner_mask",
    "styled_summary",
    "build_report_pdf",
    "report_key",
]
