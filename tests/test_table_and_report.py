"""Tests for the summary table and the PDF report export."""

import datetime as dt

import pytest

from iul_compare.calculators.assumptions import AssumptionSet
from iul_compare.calculators.comparison import all_totals, compare
from iul_compare.calculators.illustration import sample_illustrations
from iul_compare.components import report, table


def _result():
    a = AssumptionSet.default()
    ill = sample_illustrations()["Robert Johnson"]["data"]
    return a, compare(a, ill)


@pytest.mark.parametrize("value,text", [
    (12000, "$12,000"),
    (1234567.6, "$1,234,568"),
    (0, "$0"),
    (-2500.2, "-$2,500"),
    (-0.3, "$0"),
])
def test_format_currency(value, text):
    assert table.format_currency(value) == text


def test_summary_frame_and_winner_mask_line_up():
    _, result = _result()
    frame = table.summary_frame(result)
    mask = table.winner_mask(result)
    assert frame.shape == (6, 4)
    assert list(frame.columns) == ["IUL", "IRA", "401(k)", "Mutual Fund"]
    assert mask.shape == frame.shape
    assert not mask.loc["Total Taxes Paid", "Mutual Fund"]
    assert mask.loc["Total Taxes Paid", "IUL"]
    for metric in frame.index:
        assert mask.loc[metric].any()


def test_styled_summary_highlights_winners():
    _, result = _result()
    html = table.styled_summary(result).to_html()
    assert "background-color" in html
    assert "$324,000" in html  # 401(k) contributions, 18 years x 18,000


def test_results_rows_use_shared_totals():
    _, result = _result()
    totals = all_totals(result)
    rows = report.results_rows(result)
    assert rows[0] == ["Metric", "IUL", "IRA", "401(k)", "Mutual Fund"]
    by_metric = {r[0]: r[1:] for r in rows[1:]}
    assert by_metric["Final Balance"][1] == table.format_currency(totals["ira"].final_balance)
    assert by_metric["Total Taxes Paid"][0] == "$0"
    assert [r[0] for r in rows[1:]] == list(report.REPORT_METRICS)


def test_executive_summary_mentions_horizon():
    a, _ = _result()
    text = report.executive_summary(a)
    assert "18-year period from age 47" in text


def test_build_report_pdf():
    a, result = _result()
    pdf = report.build_report_pdf(
        "Robert Johnson & Sons", a, result,
        prepared_by="Jane Advisor", report_date=dt.date(2024, 1, 15),
    )
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000


def test_report_key_changes_with_inputs():
    a, _ = _result()
    samples = sample_illustrations()
    robert = samples["Robert Johnson"]["data"]
    michael = samples["Michael Davis"]["data"]
    key = report.report_key("Robert Johnson", robert, a, "Jane Advisor")

    # rebuilt from equal values on a later rerun
    again = report.report_key(
        "Robert Johnson", sample_illustrations()["Robert Johnson"]["data"],
        AssumptionSet.default(), "Jane Advisor",
    )
    assert again == key
    assert report.report_key("Robert Johnson", robert, a, "") == \
        report.report_key("Robert Johnson", robert, a, None)

    assert report.report_key("Michael Davis", michael, a, "Jane Advisor") != key
    assert report.report_key("Robert Johnson", robert, a.with_changes(fees=0.02), "Jane Advisor") != key
    assert report.report_key("Robert Johnson", robert, a, "Someone Else") != key
