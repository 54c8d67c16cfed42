"""Requirements parser for monthly cash-flow files."""

from pathlib import Path
from typing import Optional

import pandas as pd

from ..models import CashFlowRequirement


class RequirementsParser:
    """Parser for requirement files (CSV or Excel).

    Expected file format:
    - CSV (.csv) or Excel (.xlsx, .xlsm); Excel reads the first sheet by default
    - Columns:
        - month: 1-based month number
        - requirement: Required net cash flow (negative = cash needed)

    Rows may appear in any order. Every month 1..N must appear exactly once.
    """

    REQUIRED_COLUMNS = {"month", "requirement"}
    EXCEL_SUFFIXES = {".xlsx", ".xlsm"}

    def __init__(self, file_path: Path | str):
        """Initialize requirements parser.

        Args:
            file_path: Path to CSV or Excel file

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

    def parse(self, sheet_name: str | int = 0, name: Optional[str] = None) -> CashFlowRequirement:
        """Parse the file into a CashFlowRequirement.

        Args:
            sheet_name: Sheet name or index for Excel files (default: first sheet)
            name: Label for the requirement set (default: file stem)

        Returns:
            CashFlowRequirement ordered by month

        Raises:
            ValueError: If columns are missing or months are not exactly 1..N
        """
        df = self._read(sheet_name)
        df.columns = [str(c).strip().lower() for c in df.columns]

        if not self.REQUIRED_COLUMNS.issubset(df.columns):
            missing = self.REQUIRED_COLUMNS - set(df.columns)
            raise ValueError(f"Missing required columns: {sorted(missing)}")

        df = df.dropna(how="all", subset=["month", "requirement"])
        if df.empty:
            raise ValueError(f"No requirement rows in {self.file_path}")
        if df["month"].isna().any() or df["requirement"].isna().any():
            raise ValueError("Every row needs both a month and a requirement")

        try:
            months = [self._as_month(m) for m in df["month"]]
            amounts = [float(a) for a in df["requirement"]]
        except (TypeError, ValueError) as e:
            raise ValueError(f"Malformed requirement row in {self.file_path}: {e}") from e

        expected = list(range(1, len(months) + 1))
        if sorted(months) != expected:
            raise ValueError(
                f"Months must be exactly 1..{len(months)} with no gaps or duplicates, got {sorted(months)}"
            )

        values = [amount for _, amount in sorted(zip(months, amounts))]
        return CashFlowRequirement(values=values, name=name or self.file_path.stem)

    def _read(self, sheet_name: str | int) -> pd.DataFrame:
        """Read the raw table."""
        if self.file_path.suffix.lower() in self.EXCEL_SUFFIXES:
            return pd.read_excel(self.file_path, sheet_name=sheet_name, engine="openpyxl")
        return pd.read_csv(self.file_path)

    @staticmethod
    def _as_month(raw) -> int:
        """Month numbers must be whole numbers."""
        month = float(raw)
        if not month.is_integer():
            raise ValueError(f"Month {raw!r} is not a whole number")
        return int(month)
