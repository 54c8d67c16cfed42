"""Base class for optimization models.

This module provides an abstract base class that optimization models inherit from,
providing common functionality for model building, solving, and result extraction.

IMPORTANT: Models must return a Pydantic-validated solution from extract_solution().
This ensures strict interface compliance and fail-fast validation at the
model-consumer boundary.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional
import logging
import time

from pydantic import BaseModel, ValidationError
from pyomo.environ import ConcreteModel

from ..exceptions import SolutionNotAvailableError
from .solver_config import SolverConfig

logger = logging.getLogger(__name__)


class SolveStatus(str, Enum):
    """Termination status of a solve."""
    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    INFEASIBLE_OR_UNBOUNDED = "infeasible_or_unbounded"
    MAX_TIME_LIMIT = "max_time_limit"
    MAX_ITERATIONS = "max_iterations"
    ERROR = "error"
    UNKNOWN = "unknown"

    @classmethod
    def from_appsi(cls, termination_condition) -> 'SolveStatus':
        """Map an APPSI termination condition to a SolveStatus."""
        from pyomo.contrib.appsi.base import TerminationCondition as AppsiTC

        mapping = {
            AppsiTC.optimal: cls.OPTIMAL,
            AppsiTC.infeasible: cls.INFEASIBLE,
            AppsiTC.unbounded: cls.UNBOUNDED,
            AppsiTC.infeasibleOrUnbounded: cls.INFEASIBLE_OR_UNBOUNDED,
            AppsiTC.maxTimeLimit: cls.MAX_TIME_LIMIT,
            AppsiTC.maxIterations: cls.MAX_ITERATIONS,
            AppsiTC.error: cls.ERROR,
        }
        return mapping.get(termination_condition, cls.UNKNOWN)

    def __str__(self) -> str:
        return self.value


_STATUS_MESSAGES = {
    SolveStatus.INFEASIBLE: "Model is infeasible. Constraints cannot all be satisfied simultaneously.",
    SolveStatus.UNBOUNDED: "Model is unbounded. The objective can be increased without limit.",
    SolveStatus.INFEASIBLE_OR_UNBOUNDED: "Model is infeasible or unbounded (solver could not distinguish).",
    SolveStatus.MAX_TIME_LIMIT: "Solver hit the time limit before proving optimality.",
    SolveStatus.MAX_ITERATIONS: "Solver hit the iteration limit before proving optimality.",
    SolveStatus.ERROR: "Solver reported an error.",
}


@dataclass
class OptimizationResult:
    """
    Results from optimization model solve.

    Attributes:
        status: Termination status
        objective_value: Optimal objective function value (None unless optimal)
        solve_time_seconds: Time taken to solve (seconds)
        solver_name: Name of solver used
        num_variables: Number of decision variables
        num_constraints: Number of constraints
        message: Explanation when the solve was not optimal
        metadata: Additional result metadata
    """
    status: SolveStatus
    objective_value: Optional[float] = None
    solve_time_seconds: Optional[float] = None
    solver_name: Optional[str] = None
    num_variables: int = 0
    num_constraints: int = 0
    message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        """True if an optimal solution is available."""
        return self.status == SolveStatus.OPTIMAL

    def is_optimal(self) -> bool:
        """Check if solution is optimal."""
        return self.status == SolveStatus.OPTIMAL

    def is_infeasible(self) -> bool:
        """Check if model is infeasible."""
        return self.status == SolveStatus.INFEASIBLE

    def is_unbounded(self) -> bool:
        """Check if model is unbounded."""
        return self.status == SolveStatus.UNBOUNDED

    def __str__(self) -> str:
        """String representation."""
        result = f"OptimizationResult: {self.status.value.upper()}"
        if self.objective_value is not None:
            result += f", objective = {self.objective_value:,.4f}"
        if self.solve_time_seconds is not None:
            result += f", time = {self.solve_time_seconds:.3f}s"
        return result


class BaseOptimizationModel(ABC):
    """
    Abstract base class for optimization models.

    Subclasses implement:
    - build_model(): Construct the Pyomo model
    - extract_solution(): Extract a validated solution from the solved model

    This base class provides:
    - Solver configuration and management
    - Build, solve and read workflow
    - Status mapping and error reporting

    Example:
        class MyModel(BaseOptimizationModel):
            def build_model(self):
                model = ConcreteModel()
                model.x = Var(within=NonNegativeReals, bounds=(0, 10))
                model.obj = Objective(expr=model.x, sense=maximize)
                return model

            def extract_solution(self, model):
                return MySolution(x=value(model.x))

        model = MyModel()
        result = model.solve()
        if result.is_optimal():
            solution = model.get_solution()
    """

    solver_name = 'appsi_highs'

    def __init__(self, solver_config: Optional[SolverConfig] = None):
        """
        Initialize optimization model.

        Args:
            solver_config: SolverConfig instance. If None, creates default config.
        """
        self.solver_config = solver_config or SolverConfig()
        self.model: Optional[ConcreteModel] = None
        self.result: Optional[OptimizationResult] = None
        self.solution: Optional[BaseModel] = None
        self.solver = None
        self._build_time: Optional[float] = None

    @abstractmethod
    def build_model(self) -> ConcreteModel:
        """
        Build and return the Pyomo optimization model.

        Returns:
            ConcreteModel: Pyomo model with variables, constraints, and objective
        """
        raise NotImplementedError("Subclass must implement build_model()")

    @abstractmethod
    def extract_solution(self, model: ConcreteModel) -> BaseModel:
        """
        Extract solution values from the solved model.

        Args:
            model: Solved Pyomo ConcreteModel

        Returns:
            Validated solution data (Pydantic model)

        Raises:
            ValidationError: If solution data doesn't conform to schema
        """
        raise NotImplementedError("Subclass must implement extract_solution()")

    def ensure_built(self) -> ConcreteModel:
        """Build the model if it has not been built yet."""
        if self.model is None:
            build_start = time.time()
            self.model = self.build_model()
            self._build_time = time.time() - build_start
            logger.info(
                f"Built model: {self.model.nvariables()} variables, "
                f"{self.model.nconstraints()} constraints in {self._build_time:.3f}s"
            )
        return self.model

    def solve(self) -> OptimizationResult:
        """
        Build (if needed) and solve the optimization model.

        The solve is a single synchronous call. Non-optimal statuses are
        reported in the returned result; no values are read from the solver
        unless the status is optimal.

        Returns:
            OptimizationResult with solve status and objective value

        Raises:
            SolverUnavailableError: If the HiGHS solver is not installed
            ValidationError: If the extracted solution violates its schema
        """
        self.ensure_built()
        self.solution = None

        solver = self.solver_config.create_solver()

        solve_start = time.time()
        results = solver.solve(self.model)
        solve_time = time.time() - solve_start
        self.solver = solver

        status = SolveStatus.from_appsi(results.termination_condition)
        result = OptimizationResult(
            status=status,
            solve_time_seconds=solve_time,
            solver_name=self.solver_name,
            num_variables=self.model.nvariables(),
            num_constraints=self.model.nconstraints(),
            message=_STATUS_MESSAGES.get(status),
        )
        if status == SolveStatus.UNKNOWN:
            result.message = f"Solver returned unrecognised termination condition: {results.termination_condition}"
        self.result = result

        if not result.is_optimal():
            logger.warning(f"Solve finished without optimal solution: {result.message}")
            return result

        solver.load_vars()
        result.objective_value = results.best_feasible_objective

        try:
            self.solution = self.extract_solution(self.model)
        except ValidationError as ve:
            # Schema violations are bugs in extract_solution(), never data problems
            logger.error(f"CRITICAL: Model violates solution schema: {ve}")
            raise

        result.metadata.update(self.solution.model_dump(mode='json'))
        logger.info(str(result))
        return result

    def require_optimal(self) -> OptimizationResult:
        """
        Return the last result, raising if no optimal solution is available.

        Raises:
            SolutionNotAvailableError: If not solved or not optimal
        """
        if self.result is None:
            raise SolutionNotAvailableError(SolveStatus.UNKNOWN, "model has not been solved")
        if not self.result.is_optimal():
            raise SolutionNotAvailableError(self.result.status, self.result.message or "")
        return self.result

    def get_solution(self) -> BaseModel:
        """
        Get extracted solution from last solve.

        Raises:
            SolutionNotAvailableError: If the last solve was not optimal
        """
        self.require_optimal()
        return self.solution

    def get_model_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about the model.

        Returns:
            Dictionary with model statistics
        """
        if self.model is None:
            return {
                'built': False,
                'num_variables': 0,
                'num_constraints': 0,
            }

        return {
            'built': True,
            'build_time_seconds': self._build_time,
            'num_variables': self.model.nvariables(),
            'num_constraints': self.model.nconstraints(),
        }

    def get_build_time(self) -> Optional[float]:
        """Get model build time in seconds, or None if model not built."""
        return self._build_time

    def reset(self):
        """
        Reset the model state.

        Clears the built model, solver, results, and solution.
        """
        self.model = None
        self.result = None
        self.solution = None
        self.solver = None
        self._build_time = None
