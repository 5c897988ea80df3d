# components/table.py
# Summary table of the comparison: one row per metric, one column per vehicle.

from typing import List, Optional

import pandas as pd

from ..calculators.comparison import (
    DISPLAY_NAMES,
    VEHICLES,
    ComparisonResult,
    MetricRow,
    summary_rows,
)

HIGHLIGHT = {
    "iul": "background-color: #EFF6FF; color: #1e40af; font-weight: 600",
    "ira": "background-color: #FFF7ED; color: #ea580c; font-weight: 600",
    "k401": "background-color: #F0FDF4; color: #16a34a; font-weight: 600",
    "mutual_fund": "background-color: #FEF2F2; color: #dc2626; font-weight: 600",
}


def format_currency(value: float) -> str:
    """``12000.4 -> '$12,000'``; negatives keep a leading minus."""
    value = round(float(value))
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,}"


def _columns() -> List[str]:
    return [DISPLAY_NAMES[v] for v in VEHICLES]


def summary_frame(result: ComparisonResult, rows: Optional[List[MetricRow]] = None) -> pd.DataFrame:
    """Numeric table indexed by metric name."""
    rows = rows if rows is not None else summary_rows(result)
    data = [[row.values[v] for v in VEHICLES] for row in rows]
    return pd.DataFrame(data, index=[r.metric for r in rows], columns=_columns())


def winner_mask(result: ComparisonResult, rows: Optional[List[MetricRow]] = None) -> pd.DataFrame:
    """Boolean frame, same shape as :func:`summary_frame`, ``True`` for winners."""
    rows = rows if rows is not None else summary_rows(result)
    data = [[row.is_winner(v) for v in VEHICLES] for row in rows]
    return pd.DataFrame(data, index=[r.metric for r in rows], columns=_columns())


def styled_summary(result: ComparisonResult):
    """pandas Styler with currency formatting and best values highlighted."""
    rows = summary_rows(result)
    frame = summary_frame(result, rows)
    mask = winner_mask(result, rows)
    css = pd.DataFrame("", index=frame.index, columns=frame.columns)
    for vehicle in VEHICLES:
        col = DISPLAY_NAMES[vehicle]
        css.loc[mask[col], col] = HIGHLIGHT[vehicle]
    return frame.style.format(format_currency).apply(lambda _: css, axis=None)
