"""
Relation Insight - Type Relationship and Hierarchy Analysis

Reconstructs architectural structure from per-type structural facts:
a typed relationship graph, inheritance hierarchies, heuristic design
pattern candidates, and coupling/cohesion metrics.
"""

__version__ = "0.1.0"

from .analysis import AnalysisCoordinator, AnalysisResult, AnalysisStatus, CancellationToken
from .config import AnalysisConfig, load_config
from .facts import FactSource, FieldFact, MethodFact, TypeFact
from .graph import ClassHierarchyNode, RelationshipEdge, RelationshipKind, RelationshipMetrics
from .patterns import DesignPatternKind, DesignPatternMatch

__all__ = [
    "AnalysisConfig",
    "AnalysisCoordinator",  # Main entry point
    "AnalysisResult",
    "AnalysisStatus",
    "CancellationToken",
    "ClassHierarchyNode",
    "DesignPatternKind",
    "DesignPatternMatch",
    "FactSource",
    "FieldFact",
    "MethodFact",
    "RelationshipEdge",
    "RelationshipKind",
    "RelationshipMetrics",
    "TypeFact",
    "load_config",
]
