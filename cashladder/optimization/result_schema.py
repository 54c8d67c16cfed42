"""Pydantic schemas for cash ladder results.

This module defines the interface contract between the optimization model and
its consumers (reports, exporters, persistence). Solutions and sensitivity
reports are validated when they are created, so malformed extraction fails at
the model boundary instead of downstream.

Design Principles:
1. Fail Fast: Invalid data raises ValidationError immediately
2. Ordered Values: Each variable family is an ordered list keyed by 1-based index
3. Read-only: Solved values are not mutated after extraction
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================================
# Solution
# ============================================================================

class VariableValue(BaseModel):
    """Optimal value of one decision variable."""
    symbol: str = Field(..., description="Family symbol (e.g., 'x')")
    index: int = Field(..., ge=1, description="1-based index within the family")
    value: float = Field(..., description="Optimal value")

    model_config = ConfigDict(frozen=True)

    @property
    def name(self) -> str:
        """Variable name, e.g. 'x[3]'."""
        return f"{self.symbol}[{self.index}]"


class CashLadderSolution(BaseModel):
    """Optimal solution of a cash ladder.

    Required Fields:
        - objective_value: Optimal terminal cash balance
        - requirements: Requirement vector that was solved
        - families: {symbol: ordered list of VariableValue}
        - terminal_symbol: Symbol of the family holding terminal wealth
    """

    objective_value: float = Field(..., description="Optimal objective (terminal cash)")
    requirements: List[float] = Field(..., description="Requirement vector solved")
    families: Dict[str, List[VariableValue]] = Field(..., description="Values per family, ordered by index")
    terminal_symbol: str = Field(default="z", description="Family of the terminal balance")

    model_config = ConfigDict(frozen=True)

    @field_validator('families')
    @classmethod
    def families_must_be_ordered(cls, v):
        """Each family is ordered by index with no gaps or duplicates."""
        for symbol, values in v.items():
            indices = [item.index for item in values]
            if indices != sorted(set(indices)):
                raise ValueError(f"Family {symbol!r} indices not strictly increasing: {indices}")
            for item in values:
                if item.symbol != symbol:
                    raise ValueError(f"Value {item.name} filed under family {symbol!r}")
        return v

    @model_validator(mode='after')
    def validate_terminal(self):
        """Objective equals the last value of the terminal family."""
        terminal = self.families.get(self.terminal_symbol)
        if not terminal:
            raise ValueError(f"Terminal family {self.terminal_symbol!r} missing from solution")
        last = terminal[-1].value
        if abs(last - self.objective_value) > 1e-6 * max(1.0, abs(last)):
            raise ValueError(
                f"objective_value ({self.objective_value:.6f}) != "
                f"{terminal[-1].name} ({last:.6f})"
            )
        return self

    @property
    def terminal_cash(self) -> float:
        """Terminal cash balance."""
        return self.families[self.terminal_symbol][-1].value

    @property
    def symbols(self) -> List[str]:
        """Family symbols in model order."""
        return list(self.families.keys())

    def family(self, symbol: str) -> List[float]:
        """Ordered values of one family (element i is index i + 1)."""
        if symbol not in self.families:
            raise KeyError(f"Unknown variable family {symbol!r}")
        return [item.value for item in self.families[symbol]]

    def value(self, symbol: str, index: int) -> float:
        """Optimal value of one variable."""
        for item in self.families.get(symbol, []):
            if item.index == index:
                return item.value
        raise KeyError(f"No variable {symbol}[{index}] in solution")

    def all_values(self) -> Dict[str, float]:
        """Flat {name: value} mapping, e.g. {'x[1]': 0.0, ...}."""
        return {
            item.name: item.value
            for values in self.families.values()
            for item in values
        }

    def balance_residuals(self, ladder) -> Dict[int, float]:
        """{month: lhs - requirement} after substituting the solved values into ladder's rows."""
        from ..validation.solution_validator import SolutionValidator
        return SolutionValidator(ladder, self).balance_residuals()

    def to_dataframe(self) -> pd.DataFrame:
        """Variable values as a DataFrame (columns: variable, symbol, index, value)."""
        rows = [
            {'variable': item.name, 'symbol': item.symbol, 'index': item.index, 'value': item.value}
            for values in self.families.values()
            for item in values
        ]
        return pd.DataFrame(rows, columns=['variable', 'symbol', 'index', 'value'])


# ============================================================================
# Sensitivity
# ============================================================================

class ConstraintSensitivity(BaseModel):
    """Sensitivity of one balance constraint's right-hand side."""
    month: int = Field(..., ge=1, description="Month of the balance constraint")
    name: str = Field(..., description="Constraint name, e.g. 'balance[1]'")
    rhs: float = Field(..., description="Right-hand side (requirement)")
    shadow_price: float = Field(..., description="d(objective)/d(rhs)")
    allowable_increase: float = Field(..., ge=0, description="RHS increase before the basis changes")
    allowable_decrease: float = Field(..., ge=0, description="RHS decrease before the basis changes")

    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")  # Unbounded ranges stay infinite

    @property
    def rhs_range(self) -> tuple:
        """(lowest, highest) RHS for which the shadow price is valid."""
        return (self.rhs - self.allowable_decrease, self.rhs + self.allowable_increase)

    def is_within_range(self, delta: float) -> bool:
        """Check whether an RHS change stays inside the allowable range."""
        return -self.allowable_decrease <= delta <= self.allowable_increase


class VariableSensitivity(BaseModel):
    """Reduced cost of one decision variable."""
    name: str = Field(..., description="Variable name, e.g. 'x[1]'")
    symbol: str = Field(..., description="Family symbol")
    index: int = Field(..., ge=1, description="1-based index within the family")
    value: float = Field(..., description="Optimal value")
    reduced_cost: float = Field(..., description="d(objective)/d(variable) when forced off its bound")
    lower_bound: float = Field(default=0.0, description="Lower bound")
    upper_bound: Optional[float] = Field(None, description="Upper bound (None = unbounded)")

    model_config = ConfigDict(frozen=True)

    @property
    def at_lower_bound(self) -> bool:
        return abs(self.value - self.lower_bound) <= 1e-9

    @property
    def at_upper_bound(self) -> bool:
        return self.upper_bound is not None and abs(self.value - self.upper_bound) <= 1e-9


class SensitivityReport(BaseModel):
    """Post-optimal sensitivity of a solved cash ladder."""
    objective_value: float = Field(..., description="Optimal objective")
    constraints: List[ConstraintSensitivity] = Field(..., description="One entry per balance month")
    variables: List[VariableSensitivity] = Field(..., description="One entry per variable")

    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")

    @field_validator('constraints')
    @classmethod
    def constraints_sorted_by_month(cls, v):
        """Keep constraints in month order."""
        return sorted(v, key=lambda c: c.month)

    def constraint(self, month: int) -> ConstraintSensitivity:
        """Sensitivity of the balance constraint for a month."""
        for entry in self.constraints:
            if entry.month == month:
                return entry
        raise KeyError(f"No balance constraint for month {month}")

    def variable(self, name: str) -> VariableSensitivity:
        """Sensitivity of a variable by name (e.g. 'y[2]')."""
        for entry in self.variables:
            if entry.name == name:
                return entry
        raise KeyError(f"No variable named {name!r}")

    def shadow_prices(self) -> List[float]:
        """Shadow prices ordered by month."""
        return [entry.shadow_price for entry in self.constraints]

    def reduced_costs(self) -> Dict[str, float]:
        """{variable name: reduced cost}."""
        return {entry.name: entry.reduced_cost for entry in self.variables}

    def predict_objective(self, month: int, delta: float) -> float:
        """
        Predict the optimal objective after changing one month's requirement.

        Args:
            month: Month whose requirement changes
            delta: Change in the requirement (RHS)

        Returns:
            objective_value + shadow_price * delta

        Raises:
            ValueError: If delta leaves the allowable range (basis would change)
        """
        entry = self.constraint(month)
        if not entry.is_within_range(delta):
            raise ValueError(
                f"Change {delta:g} to month {month} outside allowable range "
                f"[-{entry.allowable_decrease:g}, +{entry.allowable_increase:g}]"
            )
        return self.objective_value + entry.shadow_price * delta

    def to_dataframes(self) -> Dict[str, pd.DataFrame]:
        """Constraint and variable tables as DataFrames ('constraints', 'variables')."""
        constraints = pd.DataFrame(
            [
                {
                    'constraint': c.name,
                    'month': c.month,
                    'rhs': c.rhs,
                    'shadow_price': c.shadow_price,
                    'allowable_increase': c.allowable_increase,
                    'allowable_decrease': c.allowable_decrease,
                }
                for c in self.constraints
            ],
            columns=['constraint', 'month', 'rhs', 'shadow_price', 'allowable_increase', 'allowable_decrease'],
        )
        variables = pd.DataFrame(
            [
                {
                    'variable': v.name,
                    'value': v.value,
                    'reduced_cost': v.reduced_cost,
                    'lower_bound': v.lower_bound,
                    'upper_bound': v.upper_bound if v.upper_bound is not None else math.inf,
                }
                for v in self.variables
            ],
            columns=['variable', 'value', 'reduced_cost', 'lower_bound', 'upper_bound'],
        )
        return {'constraints': constraints, 'variables': variables}
