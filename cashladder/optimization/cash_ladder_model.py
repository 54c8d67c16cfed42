"""Cash Ladder Model for monthly cash-flow balancing.

Each month's balance ties together the instruments started that month, the
instruments maturing that month, last month's cash carried forward and this
month's closing cash. The objective maximizes the closing cash of the last
month (terminal wealth).

Reference problem (six months):
    -x[1] - y[1] + z[1]                             = r[1]
    -x[2] - y[2] + 1.01 x[1] - 1.003 z[1] + z[2]     = r[2]
    -x[3] - y[3] + 1.01 x[2] - 1.003 z[2] + z[3]     = r[3]
    -x[4] + 1.02 y[1] + 1.01 x[3] - 1.003 z[3] + z[4] = r[4]
    -x[5] + 1.02 y[2] + 1.01 x[4] - 1.003 z[4] + z[5] = r[5]
            1.02 y[3] + 1.01 x[5] - 1.003 z[5] + z[6] = r[6]
    0 <= x <= 100, y >= 0, z >= 0
    maximize z[6]

Requirements are mutable parameters, so a built model can be re-optimized
with a new requirement vector without rebuilding.
"""

from io import StringIO
from pathlib import Path
from typing import Optional, Sequence, Union
import logging

from pyomo.environ import (
    ConcreteModel, Var, Constraint, Objective, Param, RangeSet,
    NonNegativeReals, maximize, quicksum, value
)

from ..utils import clean_value
from ..exceptions import MalformedRequirementsError
from ..models import CashFlowRequirement, CashLadder, default_cash_ladder, default_requirements
from ..validation.solution_validator import SolutionValidator
from .base_model import BaseOptimizationModel
from .result_schema import CashLadderSolution, SensitivityReport, VariableValue
from .solver_config import SolverConfig

logger = logging.getLogger(__name__)

RequirementsLike = Union[CashFlowRequirement, Sequence[float]]

#: Component names used by the model itself; variable symbols must avoid them
RESERVED_NAMES = frozenset({'months', 'requirement', 'balance', 'obj'})


def coerce_requirements(requirements: Optional[RequirementsLike], ladder: CashLadder) -> CashFlowRequirement:
    """
    Turn a requirement vector into a CashFlowRequirement matching the ladder.

    Args:
        requirements: CashFlowRequirement, sequence of floats, or None for the
            reference requirements
        ladder: Ladder whose horizon the vector must match

    Returns:
        CashFlowRequirement with exactly ladder.horizon entries

    Raises:
        MalformedRequirementsError: If the length differs from the horizon
    """
    if requirements is None:
        requirements = default_requirements()
    elif not isinstance(requirements, CashFlowRequirement):
        requirements = CashFlowRequirement(values=[float(v) for v in requirements])

    if requirements.horizon != ladder.horizon:
        raise MalformedRequirementsError(expected=ladder.horizon, actual=requirements.horizon)
    return requirements


class CashLadderModel(BaseOptimizationModel):
    """Linear program for an N-month cash ladder.

    Variables:
        - one indexed family per instrument (e.g. x[1..5], y[1..3])
        - cash balance z[1..N]

    Constraints:
        - balance[t] for t in 1..N (equality, RHS = requirement for month t)

    Objective:
        Maximize z[N] (terminal cash balance)

    Example:
        model = CashLadderModel([-150, -100, 200, -200, 50, 300])
        result = model.solve()
        if result.is_optimal():
            solution = model.get_solution()
            report = model.get_sensitivity()
    """

    def __init__(
        self,
        requirements: Optional[RequirementsLike] = None,
        ladder: Optional[CashLadder] = None,
        solver_config: Optional[SolverConfig] = None,
    ):
        """
        Initialize cash ladder model.

        Args:
            requirements: Required net cash flow per month (None = reference data)
            ladder: Ladder structure (None = six-month reference ladder)
            solver_config: HiGHS settings

        Raises:
            MalformedRequirementsError: If the requirement vector does not
                have exactly one entry per ladder month
            ValueError: If a variable symbol collides with a model component name
        """
        super().__init__(solver_config)
        self.ladder = ladder or default_cash_ladder()
        self.requirements = coerce_requirements(requirements, self.ladder)

        clashes = RESERVED_NAMES.intersection(self.ladder.symbols)
        if clashes:
            raise ValueError(f"Variable symbols clash with model components: {sorted(clashes)}")

        self._sensitivity: Optional[SensitivityReport] = None

        logger.info(
            f"Cash ladder initialized: {self.ladder.horizon} months, "
            f"{len(self.ladder.instruments)} instrument families, {self.requirements}"
        )

    # ------------------------------------------------------------------
    # Model construction
    # ------------------------------------------------------------------

    def build_model(self) -> ConcreteModel:
        """Build the Pyomo model: variables, balance constraints, objective."""
        ladder = self.ladder

        model = ConcreteModel(name="cash_ladder")
        model.months = RangeSet(1, ladder.horizon)
        model.requirement = Param(
            model.months,
            initialize={t: self.requirements.value(t) for t in ladder.months},
            mutable=True,
            doc="Required net cash flow per month",
        )

        self._add_variables(model)
        self._add_balance_constraints(model)

        terminal = model.component(ladder.cash.symbol)[ladder.horizon]
        model.obj = Objective(expr=terminal, sense=maximize, doc="Terminal cash balance")

        return model

    def _add_variables(self, model: ConcreteModel):
        """Add one indexed variable per family."""
        ladder = self.ladder
        for inst in ladder.instruments:
            index = inst.start_months(ladder.horizon)
            model.add_component(
                inst.symbol,
                Var(index, within=NonNegativeReals, bounds=ladder.bounds(inst.symbol), doc=inst.name),
            )
            logger.debug(f"  {inst.symbol}: {len(index)} variables")

        model.add_component(
            ladder.cash.symbol,
            Var(ladder.months, within=NonNegativeReals, doc=ladder.cash.name),
        )

    def _add_balance_constraints(self, model: ConcreteModel):
        """Add the monthly balance equalities."""
        ladder = self.ladder

        def balance_rule(model, t):
            """Started instruments out, matured instruments in, cash carried = requirement."""
            return quicksum(
                coefficient * model.component(symbol)[index]
                for symbol, index, coefficient in ladder.balance_terms(t)
            ) == model.requirement[t]

        model.balance = Constraint(model.months, rule=balance_rule, doc="Monthly cash balance")

    # ------------------------------------------------------------------
    # Re-optimization
    # ------------------------------------------------------------------

    def update_requirements(self, requirements: RequirementsLike):
        """
        Replace the requirement vector, keeping the built model.

        The next solve() re-optimizes with the new right-hand sides.

        Raises:
            MalformedRequirementsError: If the length differs from the horizon
        """
        self.requirements = coerce_requirements(requirements, self.ladder)
        if self.model is not None:
            for t in self.ladder.months:
                self.model.requirement[t] = self.requirements.value(t)
        self.result = None
        self.solution = None
        self._sensitivity = None

    def solve(self):
        """Solve the model (see BaseOptimizationModel.solve)."""
        self._sensitivity = None
        return super().solve()

    # ------------------------------------------------------------------
    # Result extraction
    # ------------------------------------------------------------------

    def extract_solution(self, model: ConcreteModel) -> CashLadderSolution:
        """Read optimal values into a validated CashLadderSolution."""
        families = {}
        for symbol in self.ladder.symbols:
            var = model.component(symbol)
            families[symbol] = [
                VariableValue(symbol=symbol, index=index, value=clean_value(var[index].value))
                for index in sorted(var.keys())
            ]

        solution = CashLadderSolution(
            objective_value=clean_value(value(model.obj)),
            requirements=list(self.requirements.values),
            families=families,
            terminal_symbol=self.ladder.cash.symbol,
        )

        is_valid, errors = SolutionValidator(self.ladder, solution).validate()
        if not is_valid:
            for error in errors:
                logger.error(f"Solution check failed [{error.category}]: {error.message}")

        return solution

    def get_solution(self) -> CashLadderSolution:
        """Optimal solution of the last solve (raises SolutionNotAvailableError otherwise)."""
        return super().get_solution()

    def get_sensitivity(self) -> SensitivityReport:
        """
        Sensitivity report of the last solve.

        Raises:
            SolutionNotAvailableError: If the last solve was not optimal
        """
        self.require_optimal()
        if self._sensitivity is None:
            from ..analysis.sensitivity import SensitivityAnalyzer
            self._sensitivity = SensitivityAnalyzer(self).analyze()
        return self._sensitivity

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def describe(self, verbose: bool = False) -> str:
        """
        Human-readable listing of the model.

        Args:
            verbose: Append Pyomo's full component listing

        Returns:
            Multi-line string with bounds, balance rows and objective
        """
        ladder = self.ladder
        lines = [f"Cash ladder: {ladder.horizon} months", "", "Variables:"]
        for inst in ladder.instruments:
            indices = inst.start_months(ladder.horizon)
            span = f"{indices[0]}..{indices[-1]}" if indices else "none"
            lines.append(f"  {inst.symbol}[{span}]  {inst}")
        lines.append(
            f"  {ladder.cash.symbol}[1..{ladder.horizon}]  {ladder.cash.name}: "
            f"carried at {ladder.cash.carry_rate:g}, >= 0"
        )

        lines += ["", "Balance constraints:"]
        for t in ladder.months:
            lines.append(f"  balance[{t}]: {format_row(ladder.balance_terms(t))} = {self.requirements.value(t):g}")

        lines += ["", f"Objective: maximize {ladder.cash.symbol}[{ladder.horizon}]"]

        if verbose:
            buffer = StringIO()
            self.ensure_built().pprint(ostream=buffer)
            lines += ["", buffer.getvalue()]

        return "\n".join(lines)

    def write_lp(self, path: Union[str, Path]) -> Path:
        """
        Write the model in CPLEX LP format.

        Args:
            path: Output file path (".lp" suffix is enforced)

        Returns:
            Path written
        """
        path = Path(path).with_suffix(".lp")
        path.parent.mkdir(parents=True, exist_ok=True)
        self.ensure_built().write(str(path), io_options={'symbolic_solver_labels': True})
        logger.info(f"Wrote LP file to {path}")
        return path


def format_row(terms) -> str:
    """Format (symbol, index, coefficient) terms as an algebraic expression."""
    parts = []
    for position, (symbol, index, coefficient) in enumerate(terms):
        sign = "-" if coefficient < 0 else "+"
        magnitude = abs(coefficient)
        coef_str = "" if magnitude == 1 else f"{magnitude:g} "
        term = f"{coef_str}{symbol}[{index}]"
        if position == 0:
            parts.append(term if sign == "+" else f"-{term}")
        else:
            parts.append(f"{sign} {term}")
    return " ".join(parts)

