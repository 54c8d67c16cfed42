"""Cash ladder planning: a monthly cash-flow balancing linear program.

The ladder decides how much to place in short- and long-term instruments and
how much cash to carry each month so that every month's net requirement is met
and the final month's cash balance is as large as possible. Models are built
with Pyomo and solved with HiGHS; shadow prices, reduced costs and allowable
RHS ranges are read back from the solver.
"""

from .exceptions import (
    CashLadderError,
    MalformedRequirementsError,
    SolutionNotAvailableError,
    SolverUnavailableError,
)
from .models import (
    CashCarry,
    CashFlowRequirement,
    CashLadder,
    Instrument,
    default_cash_ladder,
    default_requirements,
)
from .optimization import (
    CashLadderModel,
    CashLadderSolution,
    OptimizationResult,
    SensitivityReport,
    SolverConfig,
    SolveStatus,
)

__version__ = "0.1.0"

__all__ = [
    "CashLadderError",
    "MalformedRequirementsError",
    "SolutionNotAvailableError",
    "SolverUnavailableError",
    "CashCarry",
    "CashFlowRequirement",
    "CashLadder",
    "Instrument",
    "default_cash_ladder",
    "default_requirements",
    "CashLadderModel",
    "CashLadderSolution",
    "OptimizationResult",
    "SensitivityReport",
    "SolverConfig",
    "SolveStatus",
]
