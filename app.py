# app.py
import json

import streamlit as st

from iul_compare.calculators.assumptions import InvalidAssumption
from iul_compare.calculators.comparison import compare
from iul_compare.calculators.illustration import (
    IllustrationData,
    InvalidIllustration,
    read_csv,
    read_json,
    sample_illustrations,
)
from iul_compare.components.charts import (
    chart_frame,
    comparison_chart,
    income_chart,
    income_frame,
)
from iul_compare.components.forms import (
    apply_form_defaults,
    assumptions_form,
    form_defaults_from,
)
from iul_compare.components.report import build_report_pdf, report_key
from iul_compare.components.table import styled_summary


# ---------- Page config ----------
st.set_page_config(
    page_title="IUL Comparison",
    layout="wide",
    initial_sidebar_state="auto",
)

# Hide Streamlit's default menu and footer
HIDE_STREAMLIT_STYLE = """
    <style>
        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}
    </style>
"""
st.markdown(HIDE_STREAMLIT_STYLE, unsafe_allow_html=True)

# ---------- Session boot ----------
st.session_state.setdefault("form_defaults", {})
st.session_state.setdefault("uploaded_clients", {})   # client name -> IllustrationData
st.session_state.setdefault("loaded_comparison", None)  # file id of the last applied export
st.session_state.setdefault("export_pdf_bytes", None)
st.session_state.setdefault("export_pdf_inputs", None)  # report_key of the stored PDF
st.session_state.setdefault("chart_figs", {})


def _read_upload(uploaded) -> IllustrationData:
    """Parse extracted policy data from an uploaded JSON or CSV file."""
    if uploaded.name.lower().endswith(".csv"):
        return read_csv(uploaded)
    return read_json(uploaded)


# ====== SIDEBAR: CLIENT + ASSUMPTIONS ======
st.sidebar.header("Client")
clients = {name: item["data"] for name, item in sample_illustrations().items()}
clients.update(st.session_state["uploaded_clients"])

uploaded = st.sidebar.file_uploader("Upload extracted illustration", type=["json", "csv"])
if uploaded:
    name = uploaded.name.rsplit(".", 1)[0]
    try:
        st.session_state["uploaded_clients"][name] = _read_upload(uploaded)
        clients[name] = st.session_state["uploaded_clients"][name]
        st.sidebar.success(f"Loaded '{name}'.")
    except InvalidIllustration as exc:
        st.sidebar.error(f"Invalid illustration: {exc}")

client_name = st.sidebar.selectbox("Client", list(clients), key="client_select")
prepared_by = st.sidebar.text_input("Prepared by", help="Shown on the PDF report.")

saved = st.sidebar.file_uploader(
    "Load saved comparison", type="json",
    help="A JSON export from this page; its assumptions replace the sliders.",
)
# the uploader keeps its file across reruns, so apply each file only once
if saved and saved.file_id != st.session_state["loaded_comparison"]:
    try:
        apply_form_defaults(form_defaults_from(json.load(saved)))
        st.sidebar.success("Assumptions loaded from file.")
    except ValueError as exc:  # bad JSON or out-of-range assumptions
        st.sidebar.error(f"Invalid comparison file: {exc}")
    st.session_state["loaded_comparison"] = saved.file_id

try:
    assumptions = assumptions_form()
except InvalidAssumption as exc:
    st.sidebar.error(f"Invalid assumptions: {exc}")
    st.stop()

# ====== RUN COMPARISON ======
# recomputed in full on every rerun; inputs are immutable values
illustration = clients[client_name]
result = compare(assumptions, illustration)

st.title("IUL vs. Retirement Accounts")
st.caption(
    f"{client_name} · age {assumptions.age} · "
    f"{max(assumptions.years_to_retirement, 0)} working years to retirement at 65"
)

chart_figs: dict = {}

c1, c2 = st.columns(2)
with c1:
    st.subheader("Account Value")
    frame = chart_frame(result, assumptions.age)
    fig_values = comparison_chart(frame)
    chart_figs["Account Value by Age"] = fig_values
    st.plotly_chart(fig_values, use_container_width=True)
with c2:
    st.subheader("Retirement Income")
    inc = income_frame(result, assumptions.age, assumptions.years_to_retirement)
    fig_income = income_chart(inc)
    chart_figs["Annual Retirement Income"] = fig_income
    st.plotly_chart(fig_income, use_container_width=True)

st.session_state["chart_figs"] = chart_figs

st.divider()
st.subheader("Summary")
st.dataframe(styled_summary(result), use_container_width=True)
st.caption(
    "Highlighted cells are the best value in each row (lowest for taxes). "
    "Accounts report their final balance as the death benefit."
)

# --- Exports ---
st.divider()
e1, e2, e3 = st.columns(3)
with e1:
    st.download_button(
        "⬇️ CSV (yearly values)",
        data=frame.to_csv(index=False).encode("utf-8"),
        file_name=f"{client_name}_comparison.csv",
        mime="text/csv",
    )
with e2:
    st.download_button(
        "⬇️ JSON (projections)",
        data=json.dumps({"assumptions": assumptions.to_dict(), "result": result.to_dict()}, indent=2),
        file_name=f"{client_name}_comparison.json",
        mime="application/json",
    )
with e3:
    pdf_inputs = report_key(client_name, illustration, assumptions, prepared_by)
    if st.button("Build PDF report", type="primary"):
        with st.spinner("Generating report..."):
            st.session_state["export_pdf_bytes"] = build_report_pdf(
                client_name, assumptions, result,
                prepared_by=prepared_by or None,
                charts=st.session_state.get("chart_figs", {}),
            )
            st.session_state["export_pdf_inputs"] = pdf_inputs
    if st.session_state["export_pdf_inputs"] != pdf_inputs:
        st.session_state["export_pdf_bytes"] = None
    if st.session_state.get("export_pdf_bytes"):
        st.download_button(
            "⬇️ Download PDF",
            data=st.session_state["export_pdf_bytes"],
            file_name=f"{client_name}_IUL_Analysis_Report.pdf",
            mime="application/pdf",
        )
