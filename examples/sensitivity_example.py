#!/usr/bin/env python3
"""
Example: Shadow Prices and What-If Re-optimization

This script solves the six-month reference cash ladder, prints the
sensitivity report and then checks each month's shadow price by
re-solving with that month's requirement raised by one unit.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cashladder import CashLadderModel
from cashladder.analysis import RhsPerturbation


def main():
    """Solve the reference ladder and compare predicted vs. re-solved objectives."""

    print("=" * 80)
    print("CASH LADDER SENSITIVITY EXAMPLE")
    print("=" * 80)

    model = CashLadderModel()
    print(f"\n{model.describe()}")

    result = model.solve()
    print(f"\n{result}")
    if not result.is_optimal():
        print(f"\n✗ {result.message}")
        return 1

    solution = model.get_solution()
    print(f"\nOptimal values:")
    for symbol in solution.symbols:
        values = ", ".join(f"{v:8.3f}" for v in solution.family(symbol))
        print(f"  {symbol}: {values}")

    report = model.get_sensitivity()
    print(f"\nBalance constraints:")
    print(f"  {'row':<12}{'rhs':>10}{'shadow':>10}{'+allow':>12}{'-allow':>12}")
    for entry in report.constraints:
        print(
            f"  {entry.name:<12}{entry.rhs:>10g}{entry.shadow_price:>10.4f}"
            f"{entry.allowable_increase:>12.4g}{entry.allowable_decrease:>12.4g}"
        )

    print(f"\nRe-solving with each requirement raised by 1:")
    for outcome in RhsPerturbation(model).sweep(delta=1.0):
        mark = "✓" if outcome.prediction_holds() else "✗"
        print(f"  {mark} {outcome}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
