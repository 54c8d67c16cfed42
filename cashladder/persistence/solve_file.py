"""Solve file serialization and deserialization.

This module handles converting a cash ladder solve (status, objective,
solution values and sensitivity report) to/from JSON for storage on the file
system.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional
import logging

from ..optimization.base_model import OptimizationResult, SolveStatus
from ..optimization.result_schema import CashLadderSolution, SensitivityReport

logger = logging.getLogger(__name__)

#: Bumped when the file layout changes
FORMAT_VERSION = 1


@dataclass
class SolveRecord:
    """A stored solve.

    Attributes:
        status: Termination status
        requirements: Requirement vector that was solved
        objective_value: Optimal objective (None unless optimal)
        solve_time_seconds: Solver wall time
        message: Explanation when the solve was not optimal
        solution: Optimal solution (None unless optimal)
        sensitivity: Sensitivity report, if one was computed
        solve_timestamp: When the record was created
    """
    status: SolveStatus
    requirements: list
    objective_value: Optional[float] = None
    solve_time_seconds: Optional[float] = None
    message: Optional[str] = None
    solution: Optional[CashLadderSolution] = None
    sensitivity: Optional[SensitivityReport] = None
    solve_timestamp: datetime = field(default_factory=datetime.now)

    @property
    def success(self) -> bool:
        return self.status == SolveStatus.OPTIMAL

    @classmethod
    def from_model(cls, ladder_model, include_sensitivity: bool = True) -> 'SolveRecord':
        """
        Capture the last solve of a CashLadderModel.

        Args:
            ladder_model: Solved CashLadderModel
            include_sensitivity: Store the sensitivity report when optimal

        Raises:
            ValueError: If the model has not been solved
        """
        result: Optional[OptimizationResult] = ladder_model.result
        if result is None:
            raise ValueError("Model has not been solved")

        solution = ladder_model.get_solution() if result.is_optimal() else None
        sensitivity = None
        if result.is_optimal() and include_sensitivity:
            sensitivity = ladder_model.get_sensitivity()

        return cls(
            status=result.status,
            requirements=list(ladder_model.requirements.values),
            objective_value=result.objective_value,
            solve_time_seconds=result.solve_time_seconds,
            message=result.message,
            solution=solution,
            sensitivity=sensitivity,
        )


class SolveFile:
    """Handles serialization/deserialization of solves to/from JSON files.

    File Format:
        {
            "format_version": 1,
            "solve_timestamp": "2025-10-26T06:45:00",
            "status": "optimal",
            "requirements": [-150.0, -100.0, 200.0, -200.0, 50.0, 300.0],
            "objective_value": 92.4969,
            "solve_time_seconds": 0.004,
            "message": null,
            "solution": {...},
            "sensitivity": {...}
        }

    Infinite allowable ranges are written as the JSON constant Infinity.

    Example Usage:
        ```python
        solve_file = SolveFile("solves/base_case.json")
        solve_file.save(SolveRecord.from_model(model))
        record = solve_file.load()
        ```
    """

    def __init__(self, file_path: Path | str):
        """Initialize SolveFile.

        Args:
            file_path: Path to JSON file for save/load operations
        """
        self.file_path = Path(file_path)

    def save(self, record: SolveRecord) -> None:
        """Save a SolveRecord to JSON file.

        Raises:
            IOError: If file cannot be written
        """
        logger.info(f"Saving solve result to {self.file_path}")

        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        data = self._record_to_dict(record)

        with open(self.file_path, 'w') as f:
            json.dump(data, f, indent=2)

        logger.info(f"Successfully saved solve result ({record.status})")

    def load(self) -> SolveRecord:
        """Load a SolveRecord from JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format is invalid
        """
        logger.info(f"Loading solve result from {self.file_path}")

        if not self.file_path.exists():
            raise FileNotFoundError(f"Solve file not found: {self.file_path}")

        with open(self.file_path, 'r') as f:
            data = json.load(f)

        record = self._dict_to_record(data)
        logger.info(f"Successfully loaded {record.status} solve result")
        return record

    def exists(self) -> bool:
        """Check if solve file exists."""
        return self.file_path.exists()

    def _record_to_dict(self, record: SolveRecord) -> Dict[str, Any]:
        return {
            "format_version": FORMAT_VERSION,
            "solve_timestamp": record.solve_timestamp.isoformat(),
            "status": record.status.value,
            "requirements": list(record.requirements),
            "objective_value": record.objective_value,
            "solve_time_seconds": record.solve_time_seconds,
            "message": record.message,
            "solution": _dump(record.solution),
            "sensitivity": _dump(record.sensitivity),
        }

    def _dict_to_record(self, data: Dict[str, Any]) -> SolveRecord:
        try:
            version = data["format_version"]
            if version != FORMAT_VERSION:
                raise ValueError(f"Unsupported solve file version {version}")

            solution = None
            if data.get("solution"):
                solution = CashLadderSolution.model_validate(data["solution"])
            sensitivity = None
            if data.get("sensitivity"):
                sensitivity = SensitivityReport.model_validate(data["sensitivity"])

            return SolveRecord(
                status=SolveStatus(data["status"]),
                requirements=data["requirements"],
                objective_value=data.get("objective_value"),
                solve_time_seconds=data.get("solve_time_seconds"),
                message=data.get("message"),
                solution=solution,
                sensitivity=sensitivity,
                solve_timestamp=datetime.fromisoformat(data["solve_timestamp"]),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid solve file {self.file_path}: {e}") from e


def _dump(schema) -> Optional[Dict[str, Any]]:
    """Dump a pydantic schema through its JSON serializer (keeps infinities)."""
    if schema is None:
        return None
    return json.loads(schema.model_dump_json())
