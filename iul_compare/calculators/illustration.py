"""Per-client policy data extracted from an IUL illustration.

The extraction service hands over four numeric series indexed by policy year
(year 1 first).  The engine consumes them as-is: lengths are independent of
each other and of the planning horizon.  This module only turns the various
shapes the data arrives in (JSON mapping, CSV export, bundled samples) into an
immutable :class:`IllustrationData`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from .assumptions import _load_defaults

logger = logging.getLogger(__name__)

SERIES_FIELDS = ("premiums", "death_benefits", "cash_values", "income_stream")

_KEY_ALIASES = {
    "premiums": ("premiums",),
    "death_benefits": ("death_benefits", "deathBenefits"),
    "cash_values": ("cash_values", "cashValues"),
    "income_stream": ("income_stream", "incomeStream"),
}

# one column per series in the CSV layout
CSV_COLUMNS = {
    "premiums": "premium",
    "death_benefits": "death_benefit",
    "cash_values": "cash_value",
    "income_stream": "income",
}


class InvalidIllustration(ValueError):
    """Raised when extracted policy data is missing a series or is not numeric."""


def _series(name: str, values) -> Tuple[float, ...]:
    if isinstance(values, (str, bytes, Mapping)):
        raise InvalidIllustration(f"{name} must be a list of numbers")
    try:
        return tuple(float(v) for v in values)
    except (TypeError, ValueError) as exc:
        raise InvalidIllustration(f"{name} contains a non-numeric value") from exc


@dataclass(frozen=True)
class IllustrationData:
    premiums: Tuple[float, ...] = ()
    death_benefits: Tuple[float, ...] = ()
    cash_values: Tuple[float, ...] = ()
    income_stream: Tuple[float, ...] = ()

    def __post_init__(self):
        for name in SERIES_FIELDS:
            object.__setattr__(self, name, _series(name, getattr(self, name)))

    @classmethod
    def from_mapping(cls, data: Mapping) -> "IllustrationData":
        """Accept either camelCase (``deathBenefits``) or snake_case keys."""
        if not isinstance(data, Mapping):
            raise InvalidIllustration(
                f"expected an object with the four series, got {type(data).__name__}"
            )
        kwargs = {}
        for field, keys in _KEY_ALIASES.items():
            found = [k for k in keys if k in data]
            if not found:
                raise InvalidIllustration(f"missing series: {field}")
            kwargs[field] = data[found[0]]
        return cls(**kwargs)

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "IllustrationData":
        """Read one series per column; blank cells at the tail are dropped.

        A CSV holding a 30-year premium schedule next to a 20-year income
        stream comes back from pandas with NaN padding, which is stripped here
        so each series keeps its own length.
        """
        kwargs = {}
        for field, column in CSV_COLUMNS.items():
            if column not in df.columns:
                raise InvalidIllustration(f"missing column: {column}")
            col = pd.to_numeric(df[column], errors="coerce")
            last = col.last_valid_index()
            if last is None:
                kwargs[field] = ()
                continue
            col = col.loc[:last]
            if col.isna().any():
                raise InvalidIllustration(f"{column} has blank or non-numeric cells")
            kwargs[field] = col.tolist()
        return cls(**kwargs)

    def to_frame(self) -> pd.DataFrame:
        """Inverse of :meth:`from_frame`; shorter series are NaN-padded."""
        return pd.DataFrame({
            column: pd.Series(getattr(self, field), dtype="float64")
            for field, column in CSV_COLUMNS.items()
        })

    def to_dict(self) -> Dict[str, List[float]]:
        return {
            "premiums": list(self.premiums),
            "deathBenefits": list(self.death_benefits),
            "cashValues": list(self.cash_values),
            "incomeStream": list(self.income_stream),
        }


def read_json(fp: BinaryIO) -> IllustrationData:
    """Parse an extraction document, bare or wrapped in ``extractedData``."""
    try:
        data = json.load(fp)
    except ValueError as exc:  # bad JSON or bytes that are not UTF-8
        raise InvalidIllustration("file is not valid JSON") from exc
    if isinstance(data, Mapping) and "extractedData" in data:
        data = data["extractedData"]
    return IllustrationData.from_mapping(data)


def read_csv(fp) -> IllustrationData:
    """Parse the one-column-per-series CSV layout (see :data:`CSV_COLUMNS`)."""
    try:
        df = pd.read_csv(fp)
    except (UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise InvalidIllustration("file is not a readable CSV") from exc
    return IllustrationData.from_frame(df)


def load_illustration(path) -> IllustrationData:
    """Load extracted policy data from a ``.json`` or ``.csv`` file."""
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix not in (".json", ".csv"):
        raise InvalidIllustration(f"unsupported file type: {p.suffix or p.name}")
    with open(p, "rb") as f:
        return read_json(f) if suffix == ".json" else read_csv(f)


def _arithmetic(rule: Mapping) -> List[float]:
    return [float(rule["start"] + i * rule["step"]) for i in range(int(rule["length"]))]


def sample_illustrations(path: Optional[Path] = None) -> Dict[str, Dict]:
    """Return the bundled demo clients keyed by client name.

    Each entry holds ``id``, ``upload_date`` and the ``data``
    (:class:`IllustrationData`) built from the arithmetic series in
    ``data/defaults.json``.
    """
    samples = {}
    for item in _load_defaults(path)["sample_illustrations"]:
        series = {name: _arithmetic(rule) for name, rule in item["series"].items()}
        samples[item["client_name"]] = {
            "id": item["id"],
            "upload_date": item["upload_date"],
            "data": IllustrationData(**series),
        }
    logger.debug("loaded %d sample illustrations", len(samples))
    return samples


__all__ = [
    "IllustrationData",
    "InvalidIllustration",
    "SERIES_FIELDS",
    "load_illustration",
    "read_csv",
    "read_json",
    "sample_illustrations",
]
