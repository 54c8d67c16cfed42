"""Tests for shadow prices, reduced costs and RHS ranging.

Shadow prices are checked against actual re-optimization: within the
allowable range, changing one month's requirement by delta must move the
optimal objective by shadow_price * delta.
"""

import math

import pytest

pytest.importorskip("highspy")

from cashladder.analysis import PerturbationOutcome, RhsPerturbation, SensitivityAnalyzer
from cashladder.optimization import CashLadderModel, SensitivityReport, SolverConfig, SolveStatus


@pytest.fixture(scope="module", autouse=True)
def require_highs():
    if not SolverConfig.is_available():
        pytest.skip("APPSI HiGHS solver not available (install: pip install highspy)")


@pytest.fixture(scope="module")
def solved_model():
    ladder_model = CashLadderModel()
    ladder_model.solve()
    return ladder_model


@pytest.fixture(scope="module")
def report(solved_model):
    return solved_model.get_sensitivity()


def test_report_shape(report):
    assert isinstance(report, SensitivityReport)
    assert [c.month for c in report.constraints] == [1, 2, 3, 4, 5, 6]
    assert [c.name for c in report.constraints] == [f"balance[{t}]" for t in range(1, 7)]
    assert len(report.variables) == 14
    assert report.objective_value == pytest.approx(92.497, abs=1e-3)


def test_report_is_cached(solved_model, report):
    assert solved_model.get_sensitivity() is report


def test_rhs_matches_requirements(report):
    assert [c.rhs for c in report.constraints] == [-150.0, -100.0, 200.0, -200.0, 50.0, 300.0]


def test_allowances_are_non_negative(report):
    for entry in report.constraints:
        assert entry.allowable_increase >= 0
        assert entry.allowable_decrease >= 0
        low, high = entry.rhs_range
        assert low <= entry.rhs <= high


def test_last_month_shadow_price_is_one(report):
    """One more unit available in the final month is one more unit of terminal cash."""
    assert report.constraint(6).shadow_price == pytest.approx(1.0, abs=1e-9)


def test_earlier_money_is_worth_more(report):
    """Cash available earlier can always be carried forward, so it is never worth less."""
    prices = report.shadow_prices()
    for earlier, later in zip(prices, prices[1:]):
        assert earlier >= later - 1e-9


@pytest.mark.parametrize("month", [1, 2, 3, 4, 5, 6])
def test_shadow_price_predicts_objective_change(solved_model, report, month):
    entry = report.constraint(month)
    delta = min(0.5, entry.allowable_increase / 2)
    if delta <= 0:
        pytest.skip(f"balance[{month}] has no room to increase")

    changed = solved_model.requirements.with_value(month, entry.rhs + delta)
    result = CashLadderModel(changed).solve()

    assert result.is_optimal()
    predicted = report.predict_objective(month, delta)
    assert result.objective_value == pytest.approx(predicted, abs=1e-6)


def test_predict_outside_range_raises(report):
    entry = next((c for c in report.constraints if not math.isinf(c.allowable_increase)), None)
    if entry is None:
        pytest.skip("every allowable increase is infinite")

    with pytest.raises(ValueError, match="outside allowable range"):
        report.predict_objective(entry.month, entry.allowable_increase + 1.0)


def test_reduced_costs_cover_every_variable(report):
    costs = report.reduced_costs()
    assert set(costs) == {f"x[{i}]" for i in range(1, 6)} | {f"y[{i}]" for i in range(1, 4)} | {
        f"z[{i}]" for i in range(1, 7)
    }


def test_basic_variables_have_zero_reduced_cost(report):
    """A variable strictly between its bounds is basic."""
    for entry in report.variables:
        if not entry.at_lower_bound and not entry.at_upper_bound:
            assert entry.reduced_cost == pytest.approx(0.0, abs=1e-7), entry.name


def test_variable_lookup(report):
    entry = report.variable("x[1]")
    assert entry.symbol == "x"
    assert entry.index == 1
    assert entry.upper_bound == 100.0

    with pytest.raises(KeyError):
        report.variable("w[1]")


def test_dataframes(report):
    tables = report.to_dataframes()

    assert list(tables['constraints']['constraint']) == [f"balance[{t}]" for t in range(1, 7)]
    assert len(tables['variables']) == 14
    assert tables['variables'].set_index('variable').loc['y[1]', 'upper_bound'] == math.inf


def test_analyzer_matches_model_report(solved_model, report):
    fresh = SensitivityAnalyzer(solved_model).analyze()
    assert fresh.shadow_prices() == pytest.approx(report.shadow_prices())


class TestRhsPerturbation:
    """What-if re-optimization."""

    def test_small_change_matches_prediction(self, solved_model, report):
        entry = report.constraint(6)
        outcome = RhsPerturbation(solved_model).apply(month=6, delta=1.0)

        assert isinstance(outcome, PerturbationOutcome)
        assert outcome.status == SolveStatus.OPTIMAL
        assert outcome.within_range == entry.is_within_range(1.0)
        assert outcome.prediction_holds()
        assert outcome.actual_objective == pytest.approx(outcome.base_objective + 1.0, abs=1e-6)

    def test_base_model_untouched(self, solved_model):
        before = solved_model.requirements.values
        RhsPerturbation(solved_model).apply(month=2, delta=0.25)

        assert solved_model.requirements.values == before
        assert solved_model.result.is_optimal()

    def test_infeasible_perturbation(self, solved_model):
        outcome = RhsPerturbation(solved_model).apply(month=6, delta=-10000.0)

        assert outcome.status == SolveStatus.INFEASIBLE
        assert outcome.actual_objective is None
        assert outcome.error is None
        assert not outcome.prediction_holds()
        assert not outcome.within_range

    def test_sweep_covers_every_month(self, solved_model):
        outcomes = RhsPerturbation(solved_model).sweep(delta=0.1)
        assert [o.month for o in outcomes] == [1, 2, 3, 4, 5, 6]
