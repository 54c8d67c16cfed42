"""Centralized constants for the reference cash ladder.

This module contains the literals of the six-month cash-flow problem and the
numerical tolerances used when checking solutions. Centralizing these values
keeps the model, validator and tests consistent.
"""

# ============================================================================
# PLANNING HORIZON
# ============================================================================

#: Number of months in the reference problem
HORIZON_MONTHS = 6

#: Required net cash flow per month (negative = cash needed)
DEFAULT_REQUIREMENTS = (-150.0, -100.0, 200.0, -200.0, 50.0, 300.0)


# ============================================================================
# INSTRUMENT CONSTANTS
# ============================================================================

#: Short-term instrument matures the month after it starts
SHORT_TERM_MATURITY_MONTHS = 1

#: Amount returned per unit of short-term instrument at maturity
SHORT_TERM_GROWTH_RATE = 1.01

#: Maximum short-term amount per start month
SHORT_TERM_UPPER_BOUND = 100.0

#: Long-term instrument matures three months after it starts
LONG_TERM_MATURITY_MONTHS = 3

#: Amount returned per unit of long-term instrument at maturity
LONG_TERM_GROWTH_RATE = 1.02

#: Amount available next month per unit of cash carried
CASH_CARRY_RATE = 1.003


# ============================================================================
# NUMERICAL TOLERANCES
# ============================================================================

#: Absolute tolerance for balance residuals and bound checks
FEASIBILITY_TOLERANCE = 1e-6

#: Values with magnitude below this are reported as zero
ZERO_THRESHOLD = 1e-9
