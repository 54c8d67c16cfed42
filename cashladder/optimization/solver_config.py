"""Solver configuration for the APPSI HiGHS interface."""

import logging
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import SolverUnavailableError

logger = logging.getLogger(__name__)


class SolverConfig(BaseModel):
    """
    HiGHS settings for cash ladder solves.

    Sensitivity analysis needs an optimal basis, so the simplex solver is always
    used. Presolve is off by default: with presolve on, HiGHS may only report
    "infeasible or unbounded" where the simplex reports the exact status.

    Attributes:
        time_limit_seconds: Maximum solve time (None = HiGHS default)
        presolve: HiGHS presolve setting ("on", "off", "choose")
        simplex_strategy: HiGHS simplex_strategy (0 = choose, 1 = dual, 4 = primal)
        primal_feasibility_tolerance: HiGHS primal feasibility tolerance
        dual_feasibility_tolerance: HiGHS dual feasibility tolerance
        tee: Stream solver output to stdout
    """
    time_limit_seconds: Optional[float] = Field(None, gt=0, description="Solve time limit (s)")
    presolve: Literal["on", "off", "choose"] = Field("off", description="HiGHS presolve")
    simplex_strategy: int = Field(1, ge=0, le=4, description="HiGHS simplex strategy")
    primal_feasibility_tolerance: float = Field(1e-9, gt=0, description="Primal tolerance")
    dual_feasibility_tolerance: float = Field(1e-9, gt=0, description="Dual tolerance")
    tee: bool = Field(False, description="Show solver output")

    model_config = ConfigDict(frozen=True)

    def highs_options(self) -> Dict[str, Any]:
        """HiGHS option dictionary for this configuration."""
        return {
            'solver': 'simplex',
            'presolve': self.presolve,
            'simplex_strategy': self.simplex_strategy,
            'primal_feasibility_tolerance': self.primal_feasibility_tolerance,
            'dual_feasibility_tolerance': self.dual_feasibility_tolerance,
        }

    def create_solver(self):
        """
        Create a configured APPSI HiGHS solver.

        Solutions are loaded explicitly after checking the termination
        condition, so automatic loading is disabled.

        Returns:
            pyomo.contrib.appsi.solvers.Highs instance

        Raises:
            SolverUnavailableError: If highspy is not installed
        """
        from pyomo.contrib.appsi.solvers import Highs

        solver = Highs()
        if not solver.available():
            raise SolverUnavailableError(
                "APPSI HiGHS solver not available (install: pip install highspy)"
            )

        solver.config.load_solution = False
        if self.time_limit_seconds:
            solver.config.time_limit = self.time_limit_seconds
        if self.tee:
            solver.config.stream_solver = True

        for option, option_value in self.highs_options().items():
            solver.highs_options[option] = option_value

        logger.debug(f"Created APPSI HiGHS solver with options {solver.highs_options}")
        return solver

    @staticmethod
    def is_available() -> bool:
        """Check whether the APPSI HiGHS solver can be used."""
        try:
            from pyomo.contrib.appsi.solvers import Highs
        except ImportError:
            return False
        return bool(Highs().available())
