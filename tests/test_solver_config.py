"""Tests for SolverConfig and status mapping."""

import pytest
from pydantic import ValidationError

from cashladder.exceptions import SolutionNotAvailableError
from cashladder.optimization import OptimizationResult, SolverConfig, SolveStatus


class TestSolverConfig:

    def test_defaults(self):
        config = SolverConfig()

        assert config.presolve == "off"
        assert config.time_limit_seconds is None
        assert config.tee is False

    def test_highs_options_force_simplex(self):
        options = SolverConfig(presolve="on", simplex_strategy=4).highs_options()

        assert options['solver'] == 'simplex'
        assert options['presolve'] == 'on'
        assert options['simplex_strategy'] == 4

    @pytest.mark.parametrize("kwargs", [
        {"presolve": "maybe"},
        {"time_limit_seconds": 0},
        {"simplex_strategy": 9},
        {"primal_feasibility_tolerance": -1e-9},
    ])
    def test_invalid_settings(self, kwargs):
        with pytest.raises(ValidationError):
            SolverConfig(**kwargs)

    def test_create_solver_applies_options(self):
        pytest.importorskip("highspy")
        if not SolverConfig.is_available():
            pytest.skip("APPSI HiGHS solver not available")

        solver = SolverConfig(presolve="choose").create_solver()

        assert solver.highs_options['solver'] == 'simplex'
        assert solver.highs_options['presolve'] == 'choose'
        assert solver.config.load_solution is False


class TestSolveStatus:

    def test_from_appsi(self):
        from pyomo.contrib.appsi.base import TerminationCondition

        assert SolveStatus.from_appsi(TerminationCondition.optimal) == SolveStatus.OPTIMAL
        assert SolveStatus.from_appsi(TerminationCondition.infeasible) == SolveStatus.INFEASIBLE
        assert SolveStatus.from_appsi(TerminationCondition.unbounded) == SolveStatus.UNBOUNDED
        assert (
            SolveStatus.from_appsi(TerminationCondition.infeasibleOrUnbounded)
            == SolveStatus.INFEASIBLE_OR_UNBOUNDED
        )
        assert SolveStatus.from_appsi(TerminationCondition.maxTimeLimit) == SolveStatus.MAX_TIME_LIMIT
        assert SolveStatus.from_appsi(TerminationCondition.unknown) == SolveStatus.UNKNOWN

    def test_str(self):
        assert str(SolveStatus.INFEASIBLE) == "infeasible"


class TestOptimizationResult:

    def test_optimal(self):
        result = OptimizationResult(status=SolveStatus.OPTIMAL, objective_value=92.5, solve_time_seconds=0.01)

        assert result.success
        assert result.is_optimal()
        assert "OPTIMAL" in str(result)
        assert "92.5000" in str(result)

    def test_infeasible(self):
        result = OptimizationResult(status=SolveStatus.INFEASIBLE)

        assert not result.success
        assert result.is_infeasible()
        assert not result.is_unbounded()
        assert str(result) == "OptimizationResult: INFEASIBLE"


def test_solution_not_available_carries_status():
    error = SolutionNotAvailableError(SolveStatus.UNBOUNDED, "objective grows without limit")

    assert error.status == SolveStatus.UNBOUNDED
    assert "unbounded" in str(error)
    assert isinstance(error, RuntimeError)
