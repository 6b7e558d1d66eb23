"""Analysis-related exceptions: input validation, resolution, interruption."""

from typing import Optional

from .base import RelationInsightError


class AnalysisError(RelationInsightError):
    """Base class for analysis-related errors."""

    pass


class InvalidInputError(AnalysisError):
    """Raised when the fact set handed to an analysis is unusable."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid analysis input: {reason}", details={"reason": reason})
        self.reason = reason


class UnresolvedTypeError(AnalysisError):
    """Raised when a referenced type has no fact in the fact source."""

    def __init__(self, type_name: str, referenced_by: Optional[str] = None):
        details = {"type": type_name}
        if referenced_by:
            details["referenced_by"] = referenced_by

        super().__init__(f"Type not found in fact source: {type_name}", details=details)
        self.type_name = type_name
        self.referenced_by = referenced_by


class AnalysisInterruptedError(AnalysisError):
    """Raised inside a worker when its run must stop early."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class AnalysisCancelledError(AnalysisInterruptedError):
    """The caller cancelled the run."""

    pass


class AnalysisTimeoutError(AnalysisInterruptedError):
    """The run exceeded its wall-clock budget."""

    pass


class AnalyzerShutdownError(AnalysisInterruptedError):
    """The coordinator was shut down while the run was in flight."""

    pass
