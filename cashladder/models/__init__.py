"""Data models for cash ladder planning."""

from .requirement import CashFlowRequirement, default_requirements
from .ladder import CashCarry, CashLadder, Instrument, default_cash_ladder

__all__ = [
    "CashFlowRequirement",
    "default_requirements",
    "CashCarry",
    "CashLadder",
    "Instrument",
    "default_cash_ladder",
]
