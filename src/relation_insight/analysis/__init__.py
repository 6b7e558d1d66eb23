"""Analysis orchestration: coordinator, cancellation and results."""

from .cancellation import CancellationToken, CancelReason
from .coordinator import (
    NO_INPUT_REASON,
    SHUTDOWN_REASON,
    AnalysisCoordinator,
    CoordinatorState,
)
from .models import AnalysisResult, AnalysisStatus

__all__ = [
    "NO_INPUT_REASON",
    "SHUTDOWN_REASON",
    "AnalysisCoordinator",
    "AnalysisResult",
    "AnalysisStatus",
    "CancelReason",
    "CancellationToken",
    "CoordinatorState",
]
