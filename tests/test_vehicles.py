"""Tests for the per-vehicle projections."""

import math

import pytest

from iul_compare.calculators import vehicles
from iul_compare.calculators.assumptions import AssumptionSet
from iul_compare.calculators.illustration import IllustrationData


def _base_assumptions(**changes) -> AssumptionSet:
    a = AssumptionSet(
        age=47,
        contribution_amount=12000.0,
        return_rate=0.07,
        tax_rate_working=0.24,
        tax_rate_retirement=0.22,
        fees=0.01,
    )
    return a.with_changes(**changes)


def _recurrence(deposit: float, years: int, growth: float = 1.06) -> float:
    b = 0.0
    for _ in range(years):
        b = b * growth + deposit
    return b


def test_ira_balance_matches_recurrence():
    """Age 47: 18 working years of b = b*1.06 + 12000."""
    proj = vehicles.project_ira(_base_assumptions())
    assert len(proj.balances) == 18
    assert math.isclose(proj.balances[-1], _recurrence(12000.0, 18), rel_tol=1e-6)


def test_401k_adds_half_match_to_each_deposit():
    proj = vehicles.project_401k(_base_assumptions())
    assert len(proj.balances) == 18
    assert math.isclose(proj.balances[-1], _recurrence(18000.0, 18), rel_tol=1e-6)
    assert proj.contributions[0] == 18000.0
    assert proj.contributions[-1] == 18000.0 * 18


@pytest.mark.parametrize("project,deposit", [
    (vehicles.project_ira, 12000.0),
    (vehicles.project_401k, 18000.0),
    (vehicles.project_mutual_fund, 12000.0),
])
def test_contributions_are_cumulative_nominal(project, deposit):
    proj = project(_base_assumptions())
    contribs = proj.contributions
    assert all(b >= a for a, b in zip(contribs, contribs[1:]))
    assert contribs == tuple(deposit * (i + 1) for i in range(18))
    assert contribs[-1] == pytest.approx(deposit * 18)


def test_tax_deferred_accounts_record_no_working_taxes():
    for project in (vehicles.project_ira, vehicles.project_401k):
        proj = project(_base_assumptions())
        assert proj.taxes == (0.0,) * 18


@pytest.mark.parametrize("project", [
    vehicles.project_ira,
    vehicles.project_401k,
    vehicles.project_mutual_fund,
])
def test_age_65_has_empty_accumulation(project):
    proj = project(_base_assumptions(age=65))
    assert proj.contributions == ()
    assert proj.balances == ()
    assert proj.taxes == ()
    # decumulation still runs, from a zero balance
    assert len(proj.income) == vehicles.RETIREMENT_YEARS
    assert all(x == 0.0 for x in proj.income)
    assert all(x == 0.0 for x in proj.drawdown_balances)


def test_age_past_65_is_computed_not_rejected():
    proj = vehicles.project_ira(_base_assumptions(age=70))
    assert proj.balances == ()
    assert len(proj.income) == vehicles.RETIREMENT_YEARS


@pytest.mark.parametrize("project,deposit", [
    (vehicles.project_ira, 12000.0),
    (vehicles.project_401k, 18000.0),
])
def test_return_equal_to_fees_means_no_growth(project, deposit):
    proj = project(_base_assumptions(return_rate=0.05, fees=0.05))
    for i, bal in enumerate(proj.balances):
        assert bal == pytest.approx(deposit * (i + 1))


def test_ira_withdrawal_is_four_percent_of_current_balance():
    a = _base_assumptions()
    proj = vehicles.project_ira(a)
    b = proj.balances[-1]
    w0 = b * 0.04
    assert proj.income[0] == pytest.approx(w0 * (1 - 0.22))
    b1 = b * 1.06 - w0
    assert proj.drawdown_balances[0] == pytest.approx(b1)
    # re-sized each year from the new balance, not held at the first amount
    assert proj.income[1] == pytest.approx(b1 * 0.04 * (1 - 0.22))
    assert len(proj.income) == 25


def test_mutual_fund_first_two_years():
    proj = vehicles.project_mutual_fund(_base_assumptions())
    assert proj.balances[0] == pytest.approx(12000.0 * 0.99)
    assert proj.taxes[0] == 0.0
    growth = proj.balances[0] * 0.07
    tax = growth * 0.24
    assert proj.taxes[1] == pytest.approx(tax)
    assert proj.balances[1] == pytest.approx((proj.balances[0] + 12000.0 + growth - tax) * 0.99)


def test_mutual_fund_retirement_uses_flat_capital_gains_and_additive_fee():
    a = _base_assumptions()
    proj = vehicles.project_mutual_fund(a)
    b = proj.balances[-1]
    w = b * 0.04
    assert proj.income[0] == pytest.approx(w - w * 0.15)
    assert proj.drawdown_balances[0] == pytest.approx(b * (1 + 0.07 - 0.01) - w)

    other = vehicles.project_mutual_fund(a.with_changes(tax_rate_retirement=0.37))
    assert other.income == proj.income


def test_degenerate_rates_produce_negative_balances():
    a = _base_assumptions(return_rate=0.03, fees=2.5)
    proj = vehicles.project_ira(a)
    assert proj.balances[0] == 12000.0
    assert proj.balances[1] < 0


def test_iul_republishes_illustration():
    ill = IllustrationData(
        premiums=[10000.0, 10000.0, 10000.0],
        death_benefits=[500000.0, 505000.0, 510000.0],
        cash_values=[6000.0, 14000.0, 23000.0, 33000.0],
        income_stream=[25000.0],
    )
    proj = vehicles.project_iul(ill)
    assert proj.contributions == ill.premiums
    assert proj.balances == ill.cash_values
    assert proj.income == ill.income_stream
    assert proj.death_benefit == ill.death_benefits
    assert proj.taxes == (0.0, 0.0, 0.0)
    assert proj.drawdown_balances == ()


def test_projection_is_repeatable():
    a = _base_assumptions()
    first = vehicles.project_mutual_fund(a)
    second = vehicles.project_mutual_fund(a)
    assert first == second
    assert first.balances == second.balances
