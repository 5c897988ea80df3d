"""Year-by-year projections for the four savings vehicles.

Each ``project_*`` function is pure: it reads an :class:`AssumptionSet` (or,
for the IUL, the extracted illustration) and returns a fresh
:class:`VehicleProjection`.  The three formula-driven vehicles share the same
shape, an accumulation loop over the working years followed by a fixed
25-year decumulation loop drawing 4 % of the current balance each year.

The fee model differs between vehicles:

* IRA and 401(k) subtract ``fees`` from the return rate (additive drag).
* The taxable mutual fund charges ``fees`` on the whole post-tax balance
  during accumulation (compounding drag) but falls back to the additive form
  in retirement.

Nothing here validates or clamps.  Rates that make balances shrink, or an
age past 65, simply produce short or negative series.

Example
-------

>>> from iul_compare.calculators.assumptions import AssumptionSet
>>> a = AssumptionSet(age=64, contribution_amount=1000, return_rate=0.05,
...                   tax_rate_working=0.2, tax_rate_retirement=0.2, fees=0.05)
>>> project_ira(a).balances
(1000.0,)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from .assumptions import AssumptionSet
from .illustration import IllustrationData

logger = logging.getLogger(__name__)

RETIREMENT_YEARS = 25
WITHDRAWAL_RATE = 0.04
EMPLOYER_MATCH_RATE = 0.5
CAPITAL_GAINS_RATE = 0.15


@dataclass(frozen=True)
class VehicleProjection:
    """Output of one projector.

    ``contributions``, ``balances`` and ``taxes`` run over the accumulation
    years; ``income`` and ``drawdown_balances`` over the retirement years.
    ``death_benefit`` is only filled for the IUL.
    """

    contributions: Tuple[float, ...] = ()
    balances: Tuple[float, ...] = ()
    taxes: Tuple[float, ...] = ()
    income: Tuple[float, ...] = ()
    death_benefit: Tuple[float, ...] = ()
    drawdown_balances: Tuple[float, ...] = ()


def _decumulate(balance: float, assumptions: AssumptionSet, after_tax):
    """Draw 4 % of the current balance for ``RETIREMENT_YEARS`` years.

    The withdrawal is sized before the year's growth is applied and
    ``after_tax`` maps it to the income the client keeps.  Returns the
    income series and the end-of-year balances.
    """
    r, f = assumptions.return_rate, assumptions.fees
    income, balances = [], []
    for _ in range(RETIREMENT_YEARS):
        withdrawal = balance * WITHDRAWAL_RATE
        income.append(after_tax(withdrawal))
        balance = balance * (1 + r - f) - withdrawal
        balances.append(balance)
    return tuple(income), tuple(balances)


def _project_tax_deferred(assumptions: AssumptionSet, deposit: float) -> VehicleProjection:
    r, f = assumptions.return_rate, assumptions.fees
    contributions, balances, taxes = [], [], []

    balance = 0.0
    for i in range(assumptions.years_to_retirement):
        balance = balance * (1 + r - f) + deposit
        contributions.append(deposit * (i + 1))
        balances.append(balance)
        taxes.append(0.0)  # deferred, taxed on withdrawal
    logger.debug("tax-deferred: %d working years, deposit %.2f, balance at retirement %.2f",
                 len(balances), deposit, balance)

    t = assumptions.tax_rate_retirement
    income, drawdown = _decumulate(balance, assumptions, lambda w: w * (1 - t))
    return VehicleProjection(
        contributions=tuple(contributions),
        balances=tuple(balances),
        taxes=tuple(taxes),
        income=income,
        drawdown_balances=drawdown,
    )


def project_ira(assumptions: AssumptionSet) -> VehicleProjection:
    """Traditional IRA: tax-deferred growth, withdrawals taxed as income."""
    return _project_tax_deferred(assumptions, assumptions.contribution_amount)


def project_401k(assumptions: AssumptionSet) -> VehicleProjection:
    """401(k): the IRA model with a 50 % employer match added to each deposit."""
    c = assumptions.contribution_amount
    return _project_tax_deferred(assumptions, c + c * EMPLOYER_MATCH_RATE)


def project_mutual_fund(assumptions: AssumptionSet) -> VehicleProjection:
    """Taxable brokerage account.

    Each working year the return is taxed at ``tax_rate_working`` and the fee
    is charged on the balance after contribution and tax.  Retirement
    withdrawals pay a flat 15 % capital-gains rate regardless of
    ``tax_rate_retirement``.
    """
    r, f = assumptions.return_rate, assumptions.fees
    c = assumptions.contribution_amount
    contributions, balances, taxes = [], [], []

    balance = 0.0
    for i in range(assumptions.years_to_retirement):
        growth = balance * r
        tax = growth * assumptions.tax_rate_working
        balance = (balance + c + growth - tax) * (1 - f)
        contributions.append(c * (i + 1))
        balances.append(balance)
        taxes.append(tax)
    logger.debug("taxable: %d working years, balance at retirement %.2f", len(balances), balance)

    income, drawdown = _decumulate(
        balance, assumptions, lambda w: w - w * CAPITAL_GAINS_RATE
    )
    return VehicleProjection(
        contributions=tuple(contributions),
        balances=tuple(balances),
        taxes=tuple(taxes),
        income=income,
        drawdown_balances=drawdown,
    )


def project_iul(illustration: IllustrationData) -> VehicleProjection:
    """Republish the illustration; growth and withdrawals are tax-free."""
    return VehicleProjection(
        contributions=illustration.premiums,
        balances=illustration.cash_values,
        taxes=(0.0,) * len(illustration.premiums),
        income=illustration.income_stream,
        death_benefit=illustration.death_benefits,
    )


__all__ = [
    "VehicleProjection",
    "project_ira",
    "project_401k",
    "project_mutual_fund",
    "project_iul",
    "RETIREMENT_YEARS",
    "WITHDRAWAL_RATE",
    "EMPLOYER_MATCH_RATE",
    "CAPITAL_GAINS_RATE",
]
