"""What-if re-optimization with one month's requirement changed.

Shadow prices predict how the optimal objective moves when a requirement
changes, but only while the change stays inside the allowable range. This
module re-solves the ladder with the changed requirement so the prediction can
be compared against the actual optimum.
"""

from dataclasses import dataclass
from typing import List, Optional
import logging

from .. import constants
from ..optimization.base_model import SolveStatus
from ..optimization.cash_ladder_model import CashLadderModel

logger = logging.getLogger(__name__)


@dataclass
class PerturbationOutcome:
    """
    Result of re-solving with one requirement changed.

    Attributes:
        month: Month whose requirement changed
        delta: Change applied to the requirement
        base_objective: Optimal objective before the change
        shadow_price: Shadow price of the month's balance constraint
        within_range: True if delta is inside the allowable RHS range
        predicted_objective: base_objective + shadow_price * delta
        status: Status of the re-solve
        actual_objective: Optimal objective after the change (None unless optimal)
    """
    month: int
    delta: float
    base_objective: float
    shadow_price: float
    within_range: bool
    predicted_objective: float
    status: SolveStatus
    actual_objective: Optional[float] = None

    @property
    def error(self) -> Optional[float]:
        """actual - predicted, or None if the re-solve was not optimal."""
        if self.actual_objective is None:
            return None
        return self.actual_objective - self.predicted_objective

    def prediction_holds(self, tolerance: float = constants.FEASIBILITY_TOLERANCE) -> bool:
        """Check the shadow-price prediction against the re-solved objective."""
        if self.error is None:
            return False
        return abs(self.error) <= tolerance * max(1.0, abs(self.actual_objective))

    def __str__(self) -> str:
        """String representation."""
        actual = f"{self.actual_objective:,.4f}" if self.actual_objective is not None else str(self.status)
        note = "" if self.within_range else " (outside allowable range)"
        return (
            f"month {self.month} {self.delta:+g}: predicted {self.predicted_objective:,.4f}, "
            f"actual {actual}{note}"
        )


class RhsPerturbation:
    """Re-solves a solved cash ladder with perturbed requirements.

    The base model is left untouched; each perturbation solves a fresh
    CashLadderModel built from the same ladder and solver settings.

    Example:
        model = CashLadderModel()
        model.solve()
        outcome = RhsPerturbation(model).apply(month=2, delta=1.0)
        print(outcome.predicted_objective, outcome.actual_objective)
    """

    def __init__(self, base_model: CashLadderModel):
        """
        Args:
            base_model: CashLadderModel whose last solve was optimal

        Raises:
            SolutionNotAvailableError: If the base model has no optimal solution
        """
        self.base_model = base_model
        self.base_result = base_model.require_optimal()
        self.report = base_model.get_sensitivity()

    def apply(self, month: int, delta: float) -> PerturbationOutcome:
        """
        Re-solve with requirement[month] changed by delta.

        Args:
            month: 1-based month
            delta: Change in that month's requirement

        Returns:
            PerturbationOutcome comparing predicted and actual objectives
        """
        entry = self.report.constraint(month)
        base_objective = self.base_result.objective_value
        requirements = self.base_model.requirements
        perturbed = requirements.with_value(month, requirements.value(month) + delta)

        model = CashLadderModel(
            requirements=perturbed,
            ladder=self.base_model.ladder,
            solver_config=self.base_model.solver_config,
        )
        result = model.solve()

        outcome = PerturbationOutcome(
            month=month,
            delta=delta,
            base_objective=base_objective,
            shadow_price=entry.shadow_price,
            within_range=entry.is_within_range(delta),
            predicted_objective=base_objective + entry.shadow_price * delta,
            status=result.status,
            actual_objective=result.objective_value if result.is_optimal() else None,
        )
        logger.info(f"Perturbation {outcome}")
        return outcome

    def sweep(self, delta: float) -> List[PerturbationOutcome]:
        """Apply the same delta to each month in turn."""
        return [self.apply(month, delta) for month in self.base_model.ladder.months]
