"""Optimization module for cash ladder planning.

This module provides the Pyomo-based linear program for the monthly cash
ladder, its solver configuration (APPSI HiGHS, simplex) and the validated
result schemas returned after a solve.
"""

from .solver_config import SolverConfig
from .base_model import (
    BaseOptimizationModel,
    OptimizationResult,
    SolveStatus,
)
from .result_schema import (
    CashLadderSolution,
    ConstraintSensitivity,
    SensitivityReport,
    VariableSensitivity,
    VariableValue,
)
from .cash_ladder_model import CashLadderModel, coerce_requirements

__all__ = [
    # Solver configuration
    "SolverConfig",
    # Base model
    "BaseOptimizationModel",
    "OptimizationResult",
    "SolveStatus",
    # Results
    "CashLadderSolution",
    "ConstraintSensitivity",
    "SensitivityReport",
    "VariableSensitivity",
    "VariableValue",
    # Cash ladder model
    "CashLadderModel",
    "coerce_requirements",
]
