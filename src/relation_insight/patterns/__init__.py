"""Heuristic design pattern detection over the relationship graph."""

from .detector import (
    PatternDetector,
    detect_factories,
    detect_observers,
    detect_singletons,
)
from .models import PATTERN_CONFIDENCE, DesignPatternKind, DesignPatternMatch

__all__ = [
    "PATTERN_CONFIDENCE",
    "DesignPatternKind",
    "DesignPatternMatch",
    "PatternDetector",
    "detect_factories",
    "detect_observers",
    "detect_singletons",
]
