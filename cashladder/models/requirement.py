"""Cash-flow requirement data model."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .. import constants


class CashFlowRequirement(BaseModel):
    """
    Required net external cash flow per month.

    Months are 1-indexed. A negative value means cash is needed in that month,
    a positive value means cash becomes available.

    Attributes:
        values: Required net cash flow for months 1..N, in order
        name: Optional label (e.g., "Base case", "Month 4 +10")
    """
    values: List[float] = Field(..., description="Net cash flow for months 1..N")
    name: str = Field(default="requirements", description="Requirement set label")

    model_config = ConfigDict(frozen=True)

    @field_validator('values')
    @classmethod
    def values_must_be_finite(cls, v):
        """Reject NaN and infinite entries."""
        for month, amount in enumerate(v, start=1):
            if amount != amount or amount in (float('inf'), float('-inf')):
                raise ValueError(f"Requirement for month {month} is not finite: {amount}")
        return v

    @property
    def horizon(self) -> int:
        """Number of months covered."""
        return len(self.values)

    @property
    def months(self) -> List[int]:
        """1-based month indices."""
        return list(range(1, self.horizon + 1))

    def value(self, month: int) -> float:
        """
        Get the requirement for a month.

        Args:
            month: 1-based month index

        Returns:
            Required net cash flow for that month

        Raises:
            IndexError: If month is outside 1..N
        """
        if not 1 <= month <= self.horizon:
            raise IndexError(f"Month {month} outside 1..{self.horizon}")
        return self.values[month - 1]

    def with_value(self, month: int, amount: float) -> 'CashFlowRequirement':
        """Return a copy with one month's requirement replaced."""
        self.value(month)
        values = list(self.values)
        values[month - 1] = amount
        return CashFlowRequirement(values=values, name=f"{self.name} (month {month} = {amount:g})")

    def __str__(self) -> str:
        """String representation."""
        body = ", ".join(f"{v:g}" for v in self.values)
        return f"{self.name}: [{body}]"


def default_requirements() -> CashFlowRequirement:
    """The six-month reference requirement vector."""
    return CashFlowRequirement(values=list(constants.DEFAULT_REQUIREMENTS), name="Base case")
