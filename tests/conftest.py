"""Pytest configuration and shared fixtures."""

import pytest

from cashladder.models import (
    CashCarry,
    CashFlowRequirement,
    CashLadder,
    Instrument,
    default_cash_ladder,
    default_requirements,
)
from cashladder.optimization import CashLadderSolution, VariableValue


@pytest.fixture
def reference_requirements():
    """Fixture for the six-month reference requirements."""
    return default_requirements()


@pytest.fixture
def reference_ladder():
    """Fixture for the six-month reference ladder (x, y, z)."""
    return default_cash_ladder()


@pytest.fixture
def zero_requirements():
    """Fixture for a requirement vector with nothing due."""
    return CashFlowRequirement(values=[0.0] * 6, name="zeros")


@pytest.fixture
def unbounded_ladder():
    """Fixture for a ladder whose instrument repays less than it raises."""
    return CashLadder(
        horizon=6,
        instruments=[
            Instrument(name="cheap credit", symbol="x", maturity_months=1, growth_rate=0.5),
        ],
        cash=CashCarry(carry_rate=1.003),
    )


def carry_only_solution(ladder: CashLadder, requirements) -> CashLadderSolution:
    """Feasible solution that never uses an instrument: cash is carried forward only.

    Requires requirements that keep every month's cash non-negative.
    """
    families = {}
    for inst in ladder.instruments:
        families[inst.symbol] = [
            VariableValue(symbol=inst.symbol, index=i, value=0.0)
            for i in inst.start_months(ladder.horizon)
        ]

    cash = []
    balance = 0.0
    for month, amount in enumerate(requirements, start=1):
        balance = amount + (ladder.cash.carry_rate * balance if month > 1 else 0.0)
        cash.append(VariableValue(symbol=ladder.cash.symbol, index=month, value=balance))
    families[ladder.cash.symbol] = cash

    return CashLadderSolution(
        objective_value=cash[-1].value,
        requirements=list(requirements),
        families=families,
        terminal_symbol=ladder.cash.symbol,
    )


@pytest.fixture
def income_requirements():
    """Fixture for requirements that cash carried forward covers on its own."""
    return [100.0, -20.0, 0.0, -30.0, 10.0, 5.0]


@pytest.fixture
def carry_solution(reference_ladder, income_requirements):
    """Fixture for a hand-built feasible solution of the reference ladder."""
    return carry_only_solution(reference_ladder, income_requirements)
