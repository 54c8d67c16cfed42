"""Exception types raised by the cash ladder package."""


class CashLadderError(Exception):
    """Base class for cash ladder errors."""


class MalformedRequirementsError(CashLadderError, ValueError):
    """Requirement vector does not match the ladder horizon."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Requirement vector has {actual} entries, ladder horizon is {expected} months. "
            f"Provide exactly one requirement per month."
        )


class SolverUnavailableError(CashLadderError, RuntimeError):
    """The HiGHS solver could not be loaded."""


class SolutionNotAvailableError(CashLadderError, RuntimeError):
    """Solution values were requested from a solve that did not reach optimality."""

    def __init__(self, status, message: str = ""):
        self.status = status
        detail = f": {message}" if message else ""
        super().__init__(f"No solution available (status: {status}){detail}")
