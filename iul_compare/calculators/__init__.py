"""Pure numeric core of the vehicle comparison.

The ``calculators`` package holds small, focused modules with no Streamlit
imports:

* ``assumptions`` – the immutable :class:`AssumptionSet` and its boundary checks.
* ``illustration`` – the extracted IUL policy series and their loaders.
* ``vehicles`` – one projector per vehicle (IUL, IRA, 401(k), mutual fund).
* ``comparison`` – runs the projectors, derives totals and ranks the vehicles.

Each module exposes a few public functions with clear parameters and returns.  See
individual docstrings for details.
"""

from . import assumptions, illustration, vehicles, comparison  # noqa: F401
from .assumptions import AssumptionSet, InvalidAssumption
from .illustration import IllustrationData, InvalidIllustration
from .comparison import ComparisonResult, compare, compute_totals, summary_rows

__all__ = [
    "assumptions",
    "illustration",
    "vehicles",
    "comparison",
    "AssumptionSet",
    "InvalidAssumption",
    "IllustrationData",
    "InvalidIllustration",
    "ComparisonResult",
    "compare",
    "compute_totals",
    "summary_rows",
]
