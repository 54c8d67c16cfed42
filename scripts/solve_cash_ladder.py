"""
Command-line utility to solve a cash ladder and print its sensitivity report.

Usage:
    python scripts/solve_cash_ladder.py [requirements_file] [options]

Examples:
    # Solve the six-month reference problem
    python scripts/solve_cash_ladder.py

    # Solve requirements read from a CSV file (columns: month, requirement)
    python scripts/solve_cash_ladder.py data/requirements.csv

    # Export to Excel and keep a JSON copy of the solve
    python scripts/solve_cash_ladder.py --excel ladder.xlsx --save solves/base.json
"""

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cashladder import CashLadderError, CashLadderModel, SolverConfig
from cashladder.exporters import export_solution_to_excel
from cashladder.parsers import RequirementsParser
from cashladder.persistence import SolveFile, SolveRecord


def main():
    """Main entry point for the cash ladder CLI."""
    parser = argparse.ArgumentParser(
        description="Solve a monthly cash ladder and report shadow prices and reduced costs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/solve_cash_ladder.py
    python scripts/solve_cash_ladder.py requirements.csv --excel ladder.xlsx
    python scripts/solve_cash_ladder.py requirements.xlsx --lp model.lp --verbose
        """,
    )

    parser.add_argument(
        "requirements_file",
        type=str,
        nargs="?",
        help="CSV or Excel file with columns month, requirement (default: reference data)",
    )

    parser.add_argument(
        "--excel",
        type=str,
        default=None,
        help="Write solution and sensitivity tables to this Excel file",
    )

    parser.add_argument(
        "--save",
        type=str,
        default=None,
        help="Save the solve as JSON to this path",
    )

    parser.add_argument(
        "--lp",
        type=str,
        default=None,
        help="Write the model in LP format to this path",
    )

    parser.add_argument(
        "--time-limit",
        type=float,
        default=None,
        help="Solver time limit in seconds",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output (debug logging, full Pyomo listing, solver log)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        requirements = None
        if args.requirements_file:
            requirements = RequirementsParser(args.requirements_file).parse()

        config = SolverConfig(time_limit_seconds=args.time_limit, tee=args.verbose)
        model = CashLadderModel(requirements=requirements, solver_config=config)

        print(model.describe(verbose=args.verbose))
        print()

        if args.lp:
            print(f"LP file: {model.write_lp(args.lp)}")

        result = model.solve()
        print(result)

        if args.save:
            SolveFile(args.save).save(SolveRecord.from_model(model))
            print(f"Saved solve: {args.save}")

        if not result.is_optimal():
            print(f"\nNo solution: {result.message}", file=sys.stderr)
            return 2

        solution = model.get_solution()
        report = model.get_sensitivity()
        tables = report.to_dataframes()

        with pd.option_context("display.float_format", "{:,.4f}".format, "display.width", 120):
            print(f"\nOptimal terminal cash: {solution.terminal_cash:,.4f}\n")
            print("Variables:")
            print(tables["variables"].to_string(index=False))
            print("\nConstraints:")
            print(tables["constraints"].to_string(index=False))

        if args.excel:
            path = export_solution_to_excel(solution, report, args.excel, status=str(result.status))
            print(f"\nExcel report: {path}")

        return 0

    except (CashLadderError, FileNotFoundError, ValueError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
