# components/charts.py
# Plotly chart helpers for the comparison page.
# Series builders return pandas frames; figure builders return a Plotly Figure
# that Streamlit can display with st.plotly_chart(...).

from typing import Dict, Mapping, Sequence

import numpy as np
import pandas as pd
import plotly.graph_objects as go

import plotly.io as pio

from ..calculators.assumptions import RETIREMENT_AGE
from ..calculators.comparison import ComparisonResult, VEHICLES

pio.templates.default = "plotly_white"

CHART_LABELS = {
    "iul": "IUL",
    "ira": "IRA",
    "k401": "401k",
    "mutual_fund": "Mutual Fund",
}

VEHICLE_COLORS = {
    "iul": "#1e40af",          # blue-800
    "ira": "#ea580c",          # orange-600
    "k401": "#16a34a",         # green-600
    "mutual_fund": "#dc2626",  # red-600
}


def _fit(series, n):
    """Zero-pad (or trim) ``series`` to length ``n``; blanks read as zero."""
    arr = np.zeros(n, dtype=float)
    vals = np.nan_to_num(np.asarray(list(series)[:n], dtype=float), nan=0.0)
    arr[:len(vals)] = vals
    return arr


def _combined(base_age: int, series: Mapping[str, Sequence[float]]) -> pd.DataFrame:
    n = max((len(s) for s in series.values()), default=0)
    ages = np.arange(n) + int(base_age)
    frame = pd.DataFrame({"age": ages, "year": np.arange(1, n + 1)})
    for vehicle in VEHICLES:
        frame[CHART_LABELS[vehicle]] = _fit(series.get(vehicle, ()), n)
    frame["is_retirement"] = frame["age"] >= RETIREMENT_AGE
    return frame


# ---------- Balances ----------
def chart_frame(result: ComparisonResult, base_age: int) -> pd.DataFrame:
    """One row per year, keyed by ``age = base_age + index``.

    The frame is as long as the longest ``balances`` series; a vehicle with
    fewer years is filled with zeros, not aligned by age.
    """
    return _combined(base_age, {v: result[v].balances for v in VEHICLES})


def comparison_chart(frame: pd.DataFrame, title: str = "Account Value by Age") -> go.Figure:
    """Line per vehicle with a dashed marker at retirement age."""
    fig = go.Figure()
    for vehicle in VEHICLES:
        label = CHART_LABELS[vehicle]
        fig.add_trace(go.Scatter(
            x=frame["age"], y=frame[label], mode="lines", name=label,
            line=dict(color=VEHICLE_COLORS[vehicle], width=3 if vehicle == "iul" else 2),
            hovertemplate="Age %{x}<br>$%{y:,.0f}<extra></extra>"
        ))
    fig.add_vline(
        x=RETIREMENT_AGE, line_dash="dash", line_color="#dc2626",
        annotation_text="Retirement", annotation_position="top"
    )
    fig.update_layout(
        title=title,
        template="plotly_white",
        height=380,
        margin=dict(l=10, r=10, t=40, b=10),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        xaxis_title="Age",
        yaxis_title="Account Value"
    )
    return fig


# ---------- Retirement income ----------
def income_frame(result: ComparisonResult, base_age: int, years_to_retirement: int) -> pd.DataFrame:
    """Per-year income keyed by age.

    The formula vehicles start paying at retirement, so their income is
    shifted by ``years_to_retirement`` leading zeros.  The IUL income stream
    is read by policy year from ``base_age`` as the illustration reports it.
    """
    lead = [0.0] * max(int(years_to_retirement), 0)
    series: Dict[str, Sequence[float]] = {
        v: (list(result[v].income) if v == "iul" else lead + list(result[v].income))
        for v in VEHICLES
    }
    return _combined(base_age, series)


def income_chart(frame: pd.DataFrame, title: str = "Annual Retirement Income") -> go.Figure:
    """Grouped bars of post-tax income, only for ages that pay something."""
    labels = [CHART_LABELS[v] for v in VEHICLES]
    paying = frame[frame[labels].abs().sum(axis=1) > 0]
    fig = go.Figure()
    for vehicle in VEHICLES:
        label = CHART_LABELS[vehicle]
        fig.add_bar(
            x=paying["age"], y=paying[label], name=label,
            marker_color=VEHICLE_COLORS[vehicle],
            hovertemplate="Age %{x}<br>$%{y:,.0f}<extra></extra>"
        )
    fig.update_layout(
        barmode="group",
        title=title,
        template="plotly_white",
        height=380,
        margin=dict(l=10, r=10, t=40, b=10),
        xaxis_title="Age",
        yaxis_title="Dollars (nominal)",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1)
    )
    return fig
