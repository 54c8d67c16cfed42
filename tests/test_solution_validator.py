"""Tests for SolutionValidator."""

import pytest

from cashladder.optimization import CashLadderSolution, VariableValue
from cashladder.validation import SolutionValidator


def _replace(solution: CashLadderSolution, symbol: str, index: int, new_value: float, objective=None):
    """Copy of solution with one value changed."""
    families = {
        s: [
            VariableValue(symbol=s, index=v.index, value=new_value if (s, v.index) == (symbol, index) else v.value)
            for v in values
        ]
        for s, values in solution.families.items()
    }
    return CashLadderSolution(
        objective_value=solution.objective_value if objective is None else objective,
        requirements=solution.requirements,
        families=families,
    )


def test_carry_only_solution_is_valid(reference_ladder, carry_solution):
    is_valid, errors = SolutionValidator(reference_ladder, carry_solution).validate()

    assert is_valid, [e.message for e in errors]
    assert errors == []


def test_residuals_are_zero(reference_ladder, carry_solution):
    residuals = SolutionValidator(reference_ladder, carry_solution).balance_residuals()

    assert list(residuals) == [1, 2, 3, 4, 5, 6]
    for residual in residuals.values():
        assert residual == pytest.approx(0.0, abs=1e-9)


def test_balance_violation_detected(reference_ladder, carry_solution):
    broken = _replace(carry_solution, "z", 3, carry_solution.value("z", 3) + 1.0)

    is_valid, errors = SolutionValidator(reference_ladder, broken).validate()

    assert not is_valid
    months = sorted(e.details['month'] for e in errors if e.category == "balance")
    assert months == [3, 4]


def test_upper_bound_violation_detected(reference_ladder, carry_solution):
    # x[2] = 150 breaks the cap; balances break too
    broken = _replace(carry_solution, "x", 2, 150.0)

    is_valid, errors = SolutionValidator(reference_ladder, broken).validate()

    assert not is_valid
    bound_errors = [e for e in errors if e.category == "bounds"]
    assert len(bound_errors) == 1
    assert bound_errors[0].details['variable'] == "x[2]"


def test_negative_value_detected(reference_ladder, carry_solution):
    broken = _replace(carry_solution, "y", 1, -5.0)

    _, errors = SolutionValidator(reference_ladder, broken).validate()

    assert any(e.category == "bounds" and "below lower bound" in e.message for e in errors)


def test_missing_family_is_structural(reference_ladder, carry_solution):
    families = {s: v for s, v in carry_solution.families.items() if s != "y"}
    partial = CashLadderSolution(
        objective_value=carry_solution.objective_value,
        requirements=carry_solution.requirements,
        families=families,
    )

    is_valid, errors = SolutionValidator(reference_ladder, partial).validate()

    assert not is_valid
    assert [e.category for e in errors] == ["structure"]


def test_tolerance(reference_ladder, carry_solution):
    nudged = _replace(
        carry_solution, "z", 6,
        carry_solution.value("z", 6) + 1e-4,
        objective=carry_solution.objective_value + 1e-4,
    )

    assert not SolutionValidator(reference_ladder, nudged).validate()[0]
    assert SolutionValidator(reference_ladder, nudged, tolerance=1e-3).validate()[0]


def test_solution_schema_rejects_objective_mismatch(carry_solution):
    with pytest.raises(ValueError, match="objective_value"):
        CashLadderSolution(
            objective_value=carry_solution.objective_value + 5.0,
            requirements=carry_solution.requirements,
            families=carry_solution.families,
        )


def test_solution_schema_rejects_unordered_family(carry_solution):
    families = dict(carry_solution.families)
    families["x"] = list(reversed(families["x"]))
    with pytest.raises(ValueError, match="strictly increasing"):
        CashLadderSolution(
            objective_value=carry_solution.objective_value,
            requirements=carry_solution.requirements,
            families=families,
        )


def test_solution_accessors(carry_solution):
    assert carry_solution.symbols == ["x", "y", "z"]
    assert carry_solution.family("x") == [0.0] * 5
    assert carry_solution.value("z", 1) == 100.0
    assert carry_solution.terminal_cash == carry_solution.family("z")[-1]
    assert len(carry_solution.all_values()) == 14

    df = carry_solution.to_dataframe()
    assert list(df.columns) == ['variable', 'symbol', 'index', 'value']
    assert len(df) == 14

    with pytest.raises(KeyError):
        carry_solution.value("z", 7)
    with pytest.raises(KeyError):
        carry_solution.family("w")
