# components/report.py
# PDF export of one client's comparison, built with ReportLab.

import datetime as dt
import io
from xml.sax.saxutils import escape
from typing import Dict, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import (
    Image,
    ListFlowable,
    ListItem,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from ..calculators.assumptions import RETIREMENT_AGE, AssumptionSet
from ..calculators import comparison as cmp
from ..calculators.comparison import DISPLAY_NAMES, VEHICLES, ComparisonResult, summary_rows
from ..calculators.illustration import IllustrationData
from .table import format_currency

IUL_BENEFITS = (
    "Tax-free growth and withdrawals",
    "Permanent life insurance protection",
    "Flexible premium payments",
    "Downside protection with upside potential",
    "No required minimum distributions",
    "Potential for tax-free retirement income",
)

# report order differs from the on-screen table
REPORT_METRICS = (
    cmp.FINAL_BALANCE,
    cmp.TOTAL_CONTRIBUTIONS,
    cmp.NET_RETURN,
    cmp.TOTAL_TAXES,
    cmp.RETIREMENT_INCOME,
    cmp.DEATH_BENEFIT,
)


def executive_summary(assumptions: AssumptionSet) -> str:
    years = max(assumptions.years_to_retirement, 0)
    return (
        "This analysis compares the Indexed Universal Life (IUL) insurance policy against "
        "traditional investment vehicles including IRA, 401(k), and taxable mutual fund "
        "investments. The comparison is based on current assumptions and projected returns "
        f"over a {years}-year period from age {assumptions.age} to retirement at {RETIREMENT_AGE}."
    )


def assumption_rows(assumptions: AssumptionSet):
    return [
        ["Current Age", str(assumptions.age)],
        ["Annual Contribution", format_currency(assumptions.contribution_amount)],
        ["Expected Return", f"{assumptions.return_rate * 100:.1f}%"],
        ["Working Tax Rate", f"{assumptions.tax_rate_working * 100:.0f}%"],
        ["Retirement Tax Rate", f"{assumptions.tax_rate_retirement * 100:.0f}%"],
        ["Annual Fees", f"{assumptions.fees * 100:.1f}%"],
    ]


def results_rows(result: ComparisonResult):
    """Header plus one formatted row per metric, from the shared totals."""
    by_metric = {row.metric: row for row in summary_rows(result)}
    rows = [["Metric"] + [DISPLAY_NAMES[v] for v in VEHICLES]]
    for metric in REPORT_METRICS:
        row = by_metric[metric]
        rows.append([metric] + [format_currency(row.values[v]) for v in VEHICLES])
    return rows


def _table(rows, header_bg="#E6ECE9"):
    table = Table(rows, hAlign="LEFT")
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(header_bg)),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ]
        )
    )
    return table


def report_key(client_name: str, illustration: IllustrationData,
               assumptions: AssumptionSet, prepared_by: Optional[str] = None) -> tuple:
    """Everything a built report depends on; a changed key means a stale PDF."""
    return (client_name, illustration, assumptions, prepared_by or None)


def build_report_pdf(
    client_name: str,
    assumptions: AssumptionSet,
    result: ComparisonResult,
    prepared_by: Optional[str] = None,
    charts: Optional[Dict] = None,
    report_date: Optional[dt.date] = None,
) -> bytes:
    """Create the client-facing PDF report and return its bytes.

    ``charts`` maps a heading to a Plotly figure; each is rendered on its own
    page (requires kaleido for ``fig.to_image``).
    """
    report_date = report_date or dt.date.today()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=letter, leftMargin=36, rightMargin=36)
    styles = getSampleStyleSheet()

    story = [Paragraph("IUL Analysis Report", styles["Title"]), Spacer(1, 6)]
    story.append(Paragraph(escape(client_name), styles["Heading3"]))
    if prepared_by:
        story.append(Paragraph(f"Prepared by {escape(prepared_by)}", styles["Normal"]))
    story.append(Paragraph(f"Report Date: {report_date:%m/%d/%Y}", styles["Normal"]))
    story.append(Spacer(1, 12))

    story.append(Paragraph("Executive Summary", styles["Heading2"]))
    story.extend([Paragraph(executive_summary(assumptions), styles["BodyText"]), Spacer(1, 12)])

    story.append(Paragraph("Analysis Assumptions", styles["Heading2"]))
    story.extend([_table([["Assumption", "Value"]] + assumption_rows(assumptions)), Spacer(1, 12)])

    story.append(Paragraph("Comparison Results", styles["Heading2"]))
    story.extend([_table(results_rows(result)), Spacer(1, 12)])

    story.append(Paragraph("Key Benefits of IUL", styles["Heading2"]))
    story.append(ListFlowable(
        [ListItem(Paragraph(b, styles["BodyText"])) for b in IUL_BENEFITS],
        bulletType="bullet",
    ))

    for title, fig in (charts or {}).items():
        story.extend([PageBreak(), Paragraph(title, styles["Heading2"])])
        img = fig.to_image(format="png", scale=2)
        story.append(Image(io.BytesIO(img), width=480, height=300))
        story.append(Spacer(1, 12))

    doc.build(story)
    pdf_bytes = buffer.getvalue()
    buffer.close()
    return pdf_bytes
