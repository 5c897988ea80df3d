from typing import Mapping

import streamlit as st

from ..calculators.assumptions import AssumptionSet, InvalidAssumption, assumption_domains

# Stable widget keys; apply_form_defaults clears them when a saved comparison loads
WIDGET_KEYS = {
    "age": "in_age",
    "contribution_amount": "in_contribution_amount",
    "return_rate": "in_return_rate_pct",
    "tax_rate_working": "in_tax_rate_working_pct",
    "tax_rate_retirement": "in_tax_rate_retirement_pct",
    "fees": "in_fees_pct",
}


def _d(key, fallback):
    return st.session_state.get("form_defaults", {}).get(key, fallback)


def form_defaults_from(document: Mapping) -> dict:
    """Pull the assumptions out of an exported comparison JSON."""
    if not isinstance(document, Mapping):
        raise InvalidAssumption("expected an exported comparison object")
    block = document.get("assumptions", document)
    if not isinstance(block, Mapping):
        raise InvalidAssumption("assumptions must be an object")
    return AssumptionSet.from_mapping(block).to_dict()


def apply_form_defaults(defaults: dict) -> None:
    """Seed the sidebar widgets with ``defaults`` before they are drawn."""
    st.session_state["form_defaults"] = defaults
    for field in defaults:
        # a widget with state ignores value=, so drop it and let _d win
        st.session_state.pop(WIDGET_KEYS[field], None)


def _pct_slider(label, field, domains, default, step, help):
    lo, hi = domains[field]
    value = st.sidebar.slider(
        label, min_value=round(lo * 100.0, 4), max_value=round(hi * 100.0, 4),
        value=round(float(_d(field, default)) * 100.0, 4), step=step,
        format="%.1f%%", key=WIDGET_KEYS[field], help=help,
    )
    return round(value / 100.0, 6)


def assumptions_form() -> AssumptionSet:
    """Render the sidebar assumption controls and return a fresh AssumptionSet."""
    defaults = AssumptionSet.default()
    domains = assumption_domains()

    st.sidebar.header("Assumptions")
    lo, hi = domains["age"]
    age = st.sidebar.slider(
        "Current age", min_value=int(lo), max_value=int(hi),
        value=int(_d("age", defaults.age)), key=WIDGET_KEYS["age"],
        help="Accumulation runs from this age to 65."
    )
    contribution = st.sidebar.number_input(
        "Annual contribution", min_value=1.0, step=500.0,
        value=float(_d("contribution_amount", defaults.contribution_amount)),
        key=WIDGET_KEYS["contribution_amount"],
        help="Deposited every working year. The 401(k) adds a 50% employer match."
    )
    return_rate = _pct_slider(
        "Expected return", "return_rate", domains, defaults.return_rate, 0.5,
        "Flat nominal growth applied every year."
    )
    tax_working = _pct_slider(
        "Working tax rate", "tax_rate_working", domains, defaults.tax_rate_working, 1.0,
        "Taxes the yearly growth of the taxable account."
    )
    tax_retirement = _pct_slider(
        "Retirement tax rate", "tax_rate_retirement", domains, defaults.tax_rate_retirement, 1.0,
        "Applied to IRA and 401(k) withdrawals."
    )
    fees = _pct_slider(
        "Annual fees", "fees", domains, defaults.fees, 0.1,
        "Yearly fee drag on the three investment accounts."
    )

    return AssumptionSet.from_mapping({
        "age": int(age),
        "contribution_amount": float(contribution),
        "return_rate": float(return_rate),
        "tax_rate_working": float(tax_working),
        "tax_rate_retirement": float(tax_retirement),
        "fees": float(fees),
    })
