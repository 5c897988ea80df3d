"""Planning assumptions shared by every vehicle projection.

An :class:`AssumptionSet` is an immutable bundle of the six numbers an
advisor dials in on the settings panel.  It is the only place where inputs are
checked: construction rejects values that are not finite numbers, and the
strict constructor :meth:`AssumptionSet.from_mapping` additionally enforces the
documented slider domains.  The projection functions accept any
``AssumptionSet`` and compute whatever the arithmetic gives, so out-of-range
sets built directly (``age=70``, ``fees > return_rate`` ...) are still valid
inputs for what-if analysis.

Example
-------

>>> a = AssumptionSet.from_mapping({"age": 47, "contributionAmount": 12000})
>>> a.years_to_retirement
18
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, dataclass, replace
from functools import lru_cache
from numbers import Real
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

_DEFAULTS_PATH = Path(__file__).resolve().parent.parent / "data" / "defaults.json"

RETIREMENT_AGE = 65

# camelCase keys produced by the settings panel / exported plans
_ALIASES = {
    "contributionAmount": "contribution_amount",
    "returnRate": "return_rate",
    "taxRateWorking": "tax_rate_working",
    "taxRateRetirement": "tax_rate_retirement",
}


class InvalidAssumption(ValueError):
    """Raised when an assumption field cannot be used by the engine."""


@lru_cache(maxsize=8)
def _load_defaults(path: Optional[Path] = None) -> Dict[str, Dict]:
    """Load default assumptions, slider domains and sample clients from JSON.

    Read once per path; callers must treat the returned dict as read-only.
    """
    p = path or _DEFAULTS_PATH
    with open(p, "r", encoding="utf-8") as f:
        return json.load(f)


def assumption_domains(path: Optional[Path] = None) -> Dict[str, Tuple[float, float]]:
    """Return ``{field: (low, high)}`` for the range-checked fields."""
    raw = _load_defaults(path)["domains"]
    return {k: (float(lo), float(hi)) for k, (lo, hi) in raw.items()}


def _as_number(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidAssumption(f"{name} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidAssumption(f"{name} must be finite, got {value!r}")
    return value


@dataclass(frozen=True)
class AssumptionSet:
    age: int
    contribution_amount: float
    return_rate: float
    tax_rate_working: float
    tax_rate_retirement: float
    fees: float

    def __post_init__(self):
        age = _as_number("age", self.age)
        if age != int(age):
            raise InvalidAssumption(f"age must be a whole number, got {self.age!r}")
        object.__setattr__(self, "age", int(age))
        for name in ("contribution_amount", "return_rate", "tax_rate_working",
                     "tax_rate_retirement", "fees"):
            object.__setattr__(self, name, _as_number(name, getattr(self, name)))

    @property
    def years_to_retirement(self) -> int:
        """Length of the accumulation phase.  Zero (or negative) at 65+."""
        return RETIREMENT_AGE - self.age

    def out_of_range(self, domains: Optional[Mapping[str, Tuple[float, float]]] = None) -> List[str]:
        """Names of the fields that fall outside the documented domains."""
        domains = domains or assumption_domains()
        bad = [
            name for name, (lo, hi) in domains.items()
            if not lo <= getattr(self, name) <= hi
        ]
        if self.contribution_amount <= 0:
            bad.append("contribution_amount")
        return bad

    def with_changes(self, **changes) -> "AssumptionSet":
        """Return a new set with ``changes`` applied; the original is untouched."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def default(cls, path: Optional[Path] = None) -> "AssumptionSet":
        return cls(**_load_defaults(path)["assumptions"])

    @classmethod
    def from_mapping(cls, data: Mapping, strict: bool = True,
                     defaults: Optional["AssumptionSet"] = None) -> "AssumptionSet":
        """Build an ``AssumptionSet`` from a dict of (possibly camelCase) fields.

        Missing fields are taken from ``defaults`` (the bundled defaults if not
        given); unknown keys are ignored.  With ``strict`` the result must sit
        inside the slider domains, otherwise :class:`InvalidAssumption` is
        raised naming the offending fields.
        """
        base = (defaults or cls.default()).to_dict()
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name in base:
                base[name] = value
        assumptions = cls(**base)
        if strict:
            bad = assumptions.out_of_range()
            if bad:
                raise InvalidAssumption("out of range: " + ", ".join(sorted(bad)))
        logger.debug("assumptions accepted: %s", assumptions)
        return assumptions


__all__ = [
    "AssumptionSet",
    "InvalidAssumption",
    "RETIREMENT_AGE",
    "assumption_domains",
    "_load_defaults",
]
