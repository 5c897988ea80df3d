"""Run all four projections and rank the vehicles.

:func:`compare` is the single entry point the app calls whenever an
assumption changes; it always builds a new :class:`ComparisonResult`.
:func:`compute_totals` is the one place the summary figures are derived, so
the on-screen table and the exported report cannot drift apart.

Ranking rules
-------------

Each metric row is won by the largest value, except ``Total Taxes Paid``
which is won by the smallest.  Every vehicle equal to the winning value is
flagged, so ties produce several winners.  The ``Death Benefit`` row uses the
IUL's last face amount and, for the three accounts, their final balance.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List

from .assumptions import AssumptionSet
from .illustration import IllustrationData
from .vehicles import (
    VehicleProjection,
    project_401k,
    project_ira,
    project_iul,
    project_mutual_fund,
)

logger = logging.getLogger(__name__)

VEHICLES = ("iul", "ira", "k401", "mutual_fund")

DISPLAY_NAMES = {
    "iul": "IUL",
    "ira": "IRA",
    "k401": "401(k)",
    "mutual_fund": "Mutual Fund",
}

# keys used by exported JSON and the chart/table consumers
EXPORT_KEYS = {
    "iul": "iul",
    "ira": "ira",
    "k401": "k401",
    "mutual_fund": "mutualFund",
}

TOTAL_CONTRIBUTIONS = "Total Contributions"
FINAL_BALANCE = "Final Balance"
NET_RETURN = "Net Return"
TOTAL_TAXES = "Total Taxes Paid"
RETIREMENT_INCOME = "Retirement Income"
DEATH_BENEFIT = "Death Benefit"

METRICS = (
    TOTAL_CONTRIBUTIONS,
    FINAL_BALANCE,
    NET_RETURN,
    TOTAL_TAXES,
    RETIREMENT_INCOME,
    DEATH_BENEFIT,
)
LOWER_IS_BETTER = frozenset({TOTAL_TAXES})


@dataclass(frozen=True)
class ComparisonResult(Mapping):
    """Immutable mapping ``vehicle id -> VehicleProjection``."""

    iul: VehicleProjection
    ira: VehicleProjection
    k401: VehicleProjection
    mutual_fund: VehicleProjection

    def __getitem__(self, vehicle: str) -> VehicleProjection:
        if vehicle not in VEHICLES:
            raise KeyError(vehicle)
        return getattr(self, vehicle)

    def __iter__(self) -> Iterator[str]:
        return iter(VEHICLES)

    def __len__(self) -> int:
        return len(VEHICLES)

    def to_dict(self) -> Dict[str, Dict[str, List[float]]]:
        """Plain lists keyed like the exported JSON (``mutualFund`` ...)."""
        out = {}
        for vehicle, proj in self.items():
            data = {
                "contributions": list(proj.contributions),
                "balances": list(proj.balances),
                "taxes": list(proj.taxes),
                "income": list(proj.income),
            }
            if vehicle == "iul":
                data["deathBenefit"] = list(proj.death_benefit)
            out[EXPORT_KEYS[vehicle]] = data
        return out


@dataclass(frozen=True)
class Totals:
    total_contributions: float
    final_balance: float
    total_taxes: float
    total_income: float
    net_return: float


@dataclass(frozen=True)
class MetricRow:
    metric: str
    values: Dict[str, float]
    winners: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def lower_is_better(self) -> bool:
        return self.metric in LOWER_IS_BETTER

    def is_winner(self, vehicle: str) -> bool:
        return vehicle in self.winners


def compare(assumptions: AssumptionSet, illustration: IllustrationData) -> ComparisonResult:
    """Project all four vehicles for one client."""
    result = ComparisonResult(
        iul=project_iul(illustration),
        ira=project_ira(assumptions),
        k401=project_401k(assumptions),
        mutual_fund=project_mutual_fund(assumptions),
    )
    logger.debug(
        "compared vehicles for age %d over %d working years (IUL horizon %d years)",
        assumptions.age, max(assumptions.years_to_retirement, 0), len(result.iul.balances),
    )
    return result


def compute_totals(projection: VehicleProjection) -> Totals:
    """Summary figures for one vehicle.

    Contributions are already cumulative, so the total is the last entry.
    Empty series count as zero.
    """
    total_contributions = projection.contributions[-1] if projection.contributions else 0.0
    final_balance = projection.balances[-1] if projection.balances else 0.0
    return Totals(
        total_contributions=total_contributions,
        final_balance=final_balance,
        total_taxes=sum(projection.taxes, 0.0),
        total_income=sum(projection.income, 0.0),
        net_return=final_balance - total_contributions,
    )


def all_totals(result: ComparisonResult) -> Dict[str, Totals]:
    return {vehicle: compute_totals(proj) for vehicle, proj in result.items()}


def death_benefit_value(vehicle: str, projection: VehicleProjection, totals: Totals) -> float:
    """Face amount for the IUL; the accounts pay out their final balance."""
    if vehicle == "iul":
        return projection.death_benefit[-1] if projection.death_benefit else 0.0
    return totals.final_balance


def best_value(metric: str, values: Dict[str, float]) -> float:
    if metric in LOWER_IS_BETTER:
        return min(values.values())
    return max(values.values())


def rank(metric: str, values: Dict[str, float]) -> FrozenSet[str]:
    """Vehicles whose value equals the best one for ``metric``."""
    best = best_value(metric, values)
    return frozenset(v for v, x in values.items() if x == best)


def summary_rows(result: ComparisonResult) -> List[MetricRow]:
    """One row per displayed metric, in table order, with winners flagged."""
    totals = all_totals(result)
    columns = {
        TOTAL_CONTRIBUTIONS: lambda v, t: t.total_contributions,
        FINAL_BALANCE: lambda v, t: t.final_balance,
        NET_RETURN: lambda v, t: t.net_return,
        TOTAL_TAXES: lambda v, t: t.total_taxes,
        RETIREMENT_INCOME: lambda v, t: t.total_income,
        DEATH_BENEFIT: lambda v, t: death_benefit_value(v, result[v], t),
    }
    rows = []
    for metric in METRICS:
        values = {v: columns[metric](v, totals[v]) for v in VEHICLES}
        rows.append(MetricRow(metric=metric, values=values, winners=rank(metric, values)))
    return rows


__all__ = [
    "VEHICLES",
    "DISPLAY_NAMES",
    "METRICS",
    "ComparisonResult",
    "Totals",
    "MetricRow",
    "compare",
    "compute_totals",
    "all_totals",
    "death_benefit_value",
    "best_value",
    "rank",
    "summary_rows",
]
