"""Compare an IUL policy illustration against IRA, 401(k) and taxable investing.

``iul_compare.calculators`` holds the deterministic projection engine and
``iul_compare.components`` the Streamlit, Plotly and ReportLab helpers used by
``app.py``.
"""

__version__ = "0.1.0"
