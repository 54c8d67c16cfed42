"""Post-optimal sensitivity analysis for a solved cash ladder.

All numbers come from the solver: shadow prices are HiGHS row duals, reduced
costs are HiGHS column duals, and allowable right-hand-side ranges come from
HiGHS basis ranging. Nothing here recomputes them.

Sign convention (maximization of terminal cash):
- shadow_price = d(objective) / d(requirement of that month)
- reduced_cost = d(objective) / d(variable) if forced off its current bound
"""

import logging
import math
from typing import Dict, Tuple

from ..utils import clean_value
from ..optimization.result_schema import (
    ConstraintSensitivity,
    SensitivityReport,
    VariableSensitivity,
)

logger = logging.getLogger(__name__)

#: HiGHS reports infinite ranges as values of this magnitude or larger
HIGHS_INFINITY = 1e30


class SensitivityAnalyzer:
    """Reads shadow prices, reduced costs and RHS ranges from a solved model.

    Example:
        model = CashLadderModel()
        model.solve()
        report = SensitivityAnalyzer(model).analyze()
        print(report.constraint(1).shadow_price)
    """

    def __init__(self, ladder_model):
        """
        Args:
            ladder_model: CashLadderModel whose last solve was optimal
        """
        self.ladder_model = ladder_model

    def analyze(self) -> SensitivityReport:
        """
        Build the sensitivity report.

        Raises:
            SolutionNotAvailableError: If the last solve was not optimal
            RuntimeError: If HiGHS cannot provide ranging for the basis
        """
        result = self.ladder_model.require_optimal()
        model = self.ladder_model.model
        solver = self.ladder_model.solver
        ladder = self.ladder_model.ladder

        duals = solver.get_duals()
        reduced_costs = solver.get_reduced_costs()
        row_ranges = self._row_ranges(solver)

        constraints = []
        for t in ladder.months:
            con = model.balance[t]
            rhs = self.ladder_model.requirements.value(t)
            upper, lower = row_ranges[t]
            constraints.append(ConstraintSensitivity(
                month=t,
                name=f"balance[{t}]",
                rhs=rhs,
                shadow_price=clean_value(duals[con]),
                allowable_increase=_allowance(upper - rhs),
                allowable_decrease=_allowance(rhs - lower),
            ))

        variables = []
        for symbol in ladder.symbols:
            var = model.component(symbol)
            lower_bound, upper_bound = ladder.bounds(symbol)
            for index in sorted(var.keys()):
                vardata = var[index]
                variables.append(VariableSensitivity(
                    name=f"{symbol}[{index}]",
                    symbol=symbol,
                    index=index,
                    value=clean_value(vardata.value),
                    reduced_cost=clean_value(reduced_costs[vardata]),
                    lower_bound=lower_bound,
                    upper_bound=upper_bound,
                ))

        report = SensitivityReport(
            objective_value=result.objective_value,
            constraints=constraints,
            variables=variables,
        )
        logger.info(
            f"Sensitivity report: {len(constraints)} constraints, {len(variables)} variables"
        )
        return report

    def _row_ranges(self, solver) -> Dict[int, Tuple[float, float]]:
        """
        RHS ranging for each balance row.

        Returns:
            {month: (highest RHS, lowest RHS)} for which the basis stays optimal
        """
        highs = solver._solver_model
        con_to_row = solver._pyomo_con_to_solver_con_map

        ranging = highs.getRanging()
        if isinstance(ranging, tuple):
            status, ranging = ranging
            logger.debug(f"HiGHS ranging status: {status}")
        if not ranging.valid:
            raise RuntimeError("HiGHS did not produce valid ranging information for this basis")

        ranges = {}
        model = self.ladder_model.model
        for t in self.ladder_model.ladder.months:
            row = con_to_row[model.balance[t]]
            upper = ranging.row_bound_up.value_[row]
            lower = ranging.row_bound_dn.value_[row]
            ranges[t] = (_as_infinite(upper), _as_infinite(lower))
        return ranges


def _as_infinite(amount: float) -> float:
    """Map HiGHS's large-value infinity to math.inf."""
    if amount >= HIGHS_INFINITY:
        return math.inf
    if amount <= -HIGHS_INFINITY:
        return -math.inf
    return float(amount)


def _allowance(amount: float) -> float:
    """Non-negative allowance; round-off below zero becomes zero."""
    if math.isnan(amount):
        return 0.0
    return max(0.0, amount)

