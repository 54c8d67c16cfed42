"""Tests for CashLadderModel construction (no solver required)."""

import pytest
from pyomo.environ import Constraint, Objective, maximize, value

from cashladder.exceptions import MalformedRequirementsError, SolutionNotAvailableError
from cashladder.models import CashCarry, CashFlowRequirement, CashLadder, Instrument
from cashladder.optimization import CashLadderModel, SolveStatus, coerce_requirements
from cashladder.optimization.cash_ladder_model import format_row


class TestCoerceRequirements:
    """Tests for requirement vector coercion."""

    def test_none_gives_reference_data(self, reference_ladder):
        req = coerce_requirements(None, reference_ladder)
        assert req.values == [-150.0, -100.0, 200.0, -200.0, 50.0, 300.0]

    def test_plain_sequence(self, reference_ladder):
        req = coerce_requirements((1, 2, 3, 4, 5, 6), reference_ladder)
        assert isinstance(req, CashFlowRequirement)
        assert req.values == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]

    @pytest.mark.parametrize("length", [0, 5, 7])
    def test_wrong_length_rejected(self, reference_ladder, length):
        with pytest.raises(MalformedRequirementsError) as exc_info:
            coerce_requirements([0.0] * length, reference_ladder)

        assert exc_info.value.expected == 6
        assert exc_info.value.actual == length

    def test_malformed_is_value_error(self, reference_ladder):
        with pytest.raises(ValueError):
            coerce_requirements([0.0] * 5, reference_ladder)


class TestModelConstruction:
    """Tests for the built Pyomo model."""

    def test_reference_model_size(self):
        """14 variables, 6 equality constraints, 1 objective."""
        model = CashLadderModel().ensure_built()

        assert model.nvariables() == 14
        assert model.nconstraints() == 6
        assert len(list(model.component_objects(Objective))) == 1
        assert len(list(model.component_objects(Constraint))) == 1

    def test_variable_families_and_bounds(self):
        model = CashLadderModel().ensure_built()

        assert list(model.x.keys()) == [1, 2, 3, 4, 5]
        assert list(model.y.keys()) == [1, 2, 3]
        assert list(model.z.keys()) == [1, 2, 3, 4, 5, 6]
        for i in model.x:
            assert model.x[i].bounds == (0, 100)
        for i in model.y:
            assert model.y[i].bounds == (0, None)
        for i in model.z:
            assert model.z[i].bounds == (0, None)

    def test_balance_constraints_are_equalities(self):
        model = CashLadderModel().ensure_built()

        for t in model.months:
            con = model.balance[t]
            assert con.equality
            assert value(con.upper) == pytest.approx([-150, -100, 200, -200, 50, 300][t - 1])

    def test_objective_is_terminal_cash(self):
        model = CashLadderModel().ensure_built()

        assert model.obj.sense == maximize
        assert str(model.obj.expr) == "z[6]"

    def test_wrong_length_rejected_before_build(self):
        with pytest.raises(MalformedRequirementsError):
            CashLadderModel([-150, -100, 200, -200, 50])

    def test_reserved_symbol_rejected(self):
        ladder = CashLadder(
            horizon=3,
            instruments=[Instrument(name="bad", symbol="balance", maturity_months=1, growth_rate=1.01)],
            cash=CashCarry(),
        )
        with pytest.raises(ValueError, match="clash"):
            CashLadderModel([0, 0, 0], ladder=ladder)

    def test_custom_horizon(self):
        """A twelve-month ladder with a quarterly instrument."""
        ladder = CashLadder(
            horizon=12,
            instruments=[Instrument(name="quarterly", symbol="q", maturity_months=3, growth_rate=1.015)],
            cash=CashCarry(carry_rate=1.001),
        )
        model = CashLadderModel([0.0] * 12, ladder=ladder).ensure_built()

        assert list(model.q.keys()) == list(range(1, 10))
        assert model.nvariables() == 9 + 12
        assert model.nconstraints() == 12

    def test_build_once(self):
        ladder_model = CashLadderModel()
        first = ladder_model.ensure_built()
        assert ladder_model.ensure_built() is first
        assert ladder_model.get_build_time() is not None

    def test_statistics(self):
        ladder_model = CashLadderModel()
        assert ladder_model.get_model_statistics()['built'] is False

        ladder_model.ensure_built()
        stats = ladder_model.get_model_statistics()
        assert stats['built'] is True
        assert stats['num_variables'] == 14
        assert stats['num_constraints'] == 6

    def test_update_requirements_changes_rhs(self):
        ladder_model = CashLadderModel()
        model = ladder_model.ensure_built()

        ladder_model.update_requirements([0, 0, 0, 0, 0, 10])

        assert ladder_model.ensure_built() is model
        assert value(model.balance[6].upper) == pytest.approx(10.0)
        assert value(model.balance[1].upper) == pytest.approx(0.0)

    def test_update_requirements_checks_length(self):
        ladder_model = CashLadderModel()
        with pytest.raises(MalformedRequirementsError):
            ladder_model.update_requirements([0.0] * 3)


class TestBeforeSolve:
    """Accessors before any solve."""

    def test_solution_not_available(self):
        ladder_model = CashLadderModel()

        with pytest.raises(SolutionNotAvailableError) as exc_info:
            ladder_model.get_solution()
        assert exc_info.value.status == SolveStatus.UNKNOWN

    def test_sensitivity_not_available(self):
        with pytest.raises(SolutionNotAvailableError):
            CashLadderModel().get_sensitivity()


class TestInspection:
    """Tests for describe() and write_lp()."""

    def test_describe_lists_rows(self):
        text = CashLadderModel().describe()

        assert "balance[1]: -x[1] - y[1] + z[1] = -150" in text
        assert "balance[6]: 1.01 x[5] + 1.02 y[3] - 1.003 z[5] + z[6] = 300" in text
        assert "Objective: maximize z[6]" in text

    def test_describe_verbose_includes_pyomo_listing(self):
        text = CashLadderModel().describe(verbose=True)
        assert "Declarations" in text

    def test_write_lp(self, tmp_path):
        path = CashLadderModel().write_lp(tmp_path / "ladder")

        assert path.suffix == ".lp"
        assert path.exists()
        content = path.read_text()
        assert "max" in content
        assert "balance" in content

    def test_format_row(self):
        assert format_row([("x", 1, -1.0), ("z", 1, 1.0)]) == "-x[1] + z[1]"
        assert format_row([("y", 1, 1.02), ("z", 3, -1.003)]) == "1.02 y[1] - 1.003 z[3]"
