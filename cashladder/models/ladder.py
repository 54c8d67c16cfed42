"""Cash ladder structure: instrument families and the cash carry.

A cash ladder is an N-month plan in which each month's balance depends on
instruments started in earlier months maturing now. The reference six-month
problem is one instance of this structure (see default_cash_ladder()).
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .. import constants


class Instrument(BaseModel):
    """
    A family of instruments that can be started in successive months.

    Starting an amount v in month t takes v out of month t's balance and
    returns growth_rate * v in month t + maturity_months.

    Attributes:
        name: Human-readable family name
        symbol: Variable symbol used in the model (e.g., "x")
        maturity_months: Months until the instrument matures (>= 1)
        growth_rate: Amount returned at maturity per unit started
        upper_bound: Maximum amount per start month (None = unbounded)
    """
    name: str = Field(..., description="Instrument family name")
    symbol: str = Field(..., min_length=1, description="Model variable symbol")
    maturity_months: int = Field(..., ge=1, description="Months to maturity")
    growth_rate: float = Field(..., gt=0, description="Return per unit at maturity")
    upper_bound: Optional[float] = Field(None, ge=0, description="Per-month cap (None = unbounded)")

    model_config = ConfigDict(frozen=True)

    def start_months(self, horizon: int) -> List[int]:
        """Months in which this instrument can start and still mature within the horizon."""
        return list(range(1, horizon - self.maturity_months + 1))

    def __str__(self) -> str:
        """String representation."""
        cap = f"<= {self.upper_bound:g}" if self.upper_bound is not None else "unbounded"
        return (
            f"{self.name} ({self.symbol}): matures in {self.maturity_months} month(s) "
            f"at {self.growth_rate:g}, {cap}"
        )


class CashCarry(BaseModel):
    """
    Cash balance carried from one month into the next.

    Attributes:
        name: Human-readable name
        symbol: Model variable symbol
        carry_rate: Amount available next month per unit carried
    """
    name: str = Field(default="cash balance", description="Cash family name")
    symbol: str = Field(default="z", min_length=1, description="Model variable symbol")
    carry_rate: float = Field(default=constants.CASH_CARRY_RATE, gt=0, description="Carry rate per month")

    model_config = ConfigDict(frozen=True)


class CashLadder(BaseModel):
    """
    Structure of an N-month cash ladder.

    Attributes:
        horizon: Number of months
        instruments: Instrument families that can be started
        cash: Cash carry definition (last month's balance is terminal wealth)
    """
    horizon: int = Field(..., ge=1, description="Planning horizon (months)")
    instruments: List[Instrument] = Field(default_factory=list, description="Instrument families")
    cash: CashCarry = Field(default_factory=CashCarry, description="Cash carry")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def validate_symbols(self):
        """Symbols must be unique across instruments and cash."""
        symbols = [inst.symbol for inst in self.instruments] + [self.cash.symbol]
        duplicates = sorted({s for s in symbols if symbols.count(s) > 1})
        if duplicates:
            raise ValueError(f"Duplicate variable symbols: {duplicates}")
        return self

    @property
    def months(self) -> List[int]:
        """1-based month indices."""
        return list(range(1, self.horizon + 1))

    @property
    def symbols(self) -> List[str]:
        """Variable symbols in model order (instruments first, cash last)."""
        return [inst.symbol for inst in self.instruments] + [self.cash.symbol]

    def instrument(self, symbol: str) -> Instrument:
        """Look up an instrument family by symbol."""
        for inst in self.instruments:
            if inst.symbol == symbol:
                return inst
        raise KeyError(f"No instrument with symbol {symbol!r}")

    def index_set(self, symbol: str) -> List[int]:
        """1-based indices of the variables in a family."""
        if symbol == self.cash.symbol:
            return self.months
        return self.instrument(symbol).start_months(self.horizon)

    def bounds(self, symbol: str) -> tuple:
        """(lower, upper) bounds for a family's variables."""
        if symbol == self.cash.symbol:
            return (0.0, None)
        return (0.0, self.instrument(symbol).upper_bound)

    def num_variables(self) -> int:
        """Total number of decision variables."""
        return sum(len(self.index_set(s)) for s in self.symbols)

    def balance_terms(self, month: int) -> List[tuple]:
        """
        Linear terms of the balance row for a month.

        Returns:
            List of (symbol, index, coefficient) tuples. Instruments started this
            month enter with -1, instruments maturing this month with their growth
            rate, last month's cash with -carry_rate and this month's cash with +1.
        """
        terms = []
        for inst in self.instruments:
            starts = set(inst.start_months(self.horizon))
            if month in starts:
                terms.append((inst.symbol, month, -1.0))
            if month - inst.maturity_months in starts:
                terms.append((inst.symbol, month - inst.maturity_months, inst.growth_rate))
        if month > 1:
            terms.append((self.cash.symbol, month - 1, -self.cash.carry_rate))
        terms.append((self.cash.symbol, month, 1.0))
        return terms


def default_cash_ladder() -> CashLadder:
    """The six-month reference ladder: short-term x, long-term y, cash z."""
    return CashLadder(
        horizon=constants.HORIZON_MONTHS,
        instruments=[
            Instrument(
                name="short-term instrument",
                symbol="x",
                maturity_months=constants.SHORT_TERM_MATURITY_MONTHS,
                growth_rate=constants.SHORT_TERM_GROWTH_RATE,
                upper_bound=constants.SHORT_TERM_UPPER_BOUND,
            ),
            Instrument(
                name="long-term instrument",
                symbol="y",
                maturity_months=constants.LONG_TERM_MATURITY_MONTHS,
                growth_rate=constants.LONG_TERM_GROWTH_RATE,
                upper_bound=None,
            ),
        ],
        cash=CashCarry(carry_rate=constants.CASH_CARRY_RATE),
    )
