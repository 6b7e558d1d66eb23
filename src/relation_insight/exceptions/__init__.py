"""Exception hierarchy for Relation Insight."""

from .analysis import (
    AnalysisCancelledError,
    AnalysisError,
    AnalysisInterruptedError,
    AnalysisTimeoutError,
    AnalyzerShutdownError,
    InvalidInputError,
    UnresolvedTypeError,
)
from .base import RelationInsightError
from .config import (
    ConfigurationError,
    FactFileError,
    InvalidConfigError,
)

__all__ = [
    "RelationInsightError",
    "AnalysisError",
    "InvalidInputError",
    "UnresolvedTypeError",
    "AnalysisInterruptedError",
    "AnalysisCancelledError",
    "AnalysisTimeoutError",
    "AnalyzerShutdownError",
    "ConfigurationError",
    "InvalidConfigError",
    "FactFileError",
]
