"""Solution validation - checks that fail loudly on incorrect solutions.

This validator runs AFTER solution extraction. It substitutes the returned
values back into every balance constraint and checks every variable against
its bounds. If validation fails, the solution should not be used.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .. import constants
from ..models import CashLadder


@dataclass
class SolutionValidationError:
    """Represents a solution validation error (CRITICAL - solution invalid)."""
    category: str
    message: str
    details: Dict = field(default_factory=dict)


class SolutionValidator:
    """Validates a cash ladder solution against its ladder structure."""

    def __init__(self, ladder: CashLadder, solution, tolerance: float = constants.FEASIBILITY_TOLERANCE):
        """Initialize validator.

        Args:
            ladder: Ladder structure the solution belongs to
            solution: CashLadderSolution to check
            tolerance: Absolute tolerance for residuals and bounds
        """
        self.ladder = ladder
        self.solution = solution
        self.tolerance = tolerance

    def validate(self) -> Tuple[bool, List[SolutionValidationError]]:
        """Run all validation checks.

        Returns:
            Tuple of (is_valid, list of errors)
        """
        errors = []
        errors.extend(self._validate_structure())
        if errors:
            return (False, errors)

        errors.extend(self._validate_balances())
        errors.extend(self._validate_bounds())
        errors.extend(self._validate_objective())
        return (len(errors) == 0, errors)

    def balance_residuals(self) -> Dict[int, float]:
        """
        Residual of each balance constraint.

        Returns:
            {month: lhs - requirement}
        """
        residuals = {}
        for t in self.ladder.months:
            lhs = sum(
                coefficient * self.solution.value(symbol, index)
                for symbol, index, coefficient in self.ladder.balance_terms(t)
            )
            residuals[t] = lhs - self.solution.requirements[t - 1]
        return residuals

    def _validate_structure(self) -> List[SolutionValidationError]:
        """Every ladder variable has a value and the requirement length matches."""
        errors = []
        if len(self.solution.requirements) != self.ladder.horizon:
            errors.append(SolutionValidationError(
                category="structure",
                message=(
                    f"Solution has {len(self.solution.requirements)} requirements, "
                    f"ladder has {self.ladder.horizon} months"
                ),
            ))
        for symbol in self.ladder.symbols:
            expected = self.ladder.index_set(symbol)
            actual = [item.index for item in self.solution.families.get(symbol, [])]
            if actual != expected:
                errors.append(SolutionValidationError(
                    category="structure",
                    message=f"Family {symbol!r} has indices {actual}, expected {expected}",
                    details={'symbol': symbol},
                ))
        return errors

    def _validate_balances(self) -> List[SolutionValidationError]:
        """Substituted values reproduce each month's requirement."""
        errors = []
        for month, residual in self.balance_residuals().items():
            if abs(residual) > self.tolerance:
                errors.append(SolutionValidationError(
                    category="balance",
                    message=f"balance[{month}] violated by {residual:.3e}",
                    details={'month': month, 'residual': residual},
                ))
        return errors

    def _validate_bounds(self) -> List[SolutionValidationError]:
        """Every value lies within its family's bounds."""
        errors = []
        for symbol in self.ladder.symbols:
            lower, upper = self.ladder.bounds(symbol)
            for item in self.solution.families[symbol]:
                if item.value < lower - self.tolerance:
                    errors.append(SolutionValidationError(
                        category="bounds",
                        message=f"{item.name} = {item.value:.6g} below lower bound {lower:g}",
                        details={'variable': item.name, 'value': item.value},
                    ))
                if upper is not None and item.value > upper + self.tolerance:
                    errors.append(SolutionValidationError(
                        category="bounds",
                        message=f"{item.name} = {item.value:.6g} above upper bound {upper:g}",
                        details={'variable': item.name, 'value': item.value},
                    ))
        return errors

    def _validate_objective(self) -> List[SolutionValidationError]:
        """Objective equals the terminal cash balance."""
        terminal = self.solution.value(self.ladder.cash.symbol, self.ladder.horizon)
        if abs(terminal - self.solution.objective_value) > self.tolerance:
            return [SolutionValidationError(
                category="objective",
                message=f"Objective {self.solution.objective_value:.6g} != terminal cash {terminal:.6g}",
            )]
        return []
