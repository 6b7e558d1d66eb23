"""Type relationship graph: edge extraction, hierarchies, metrics."""

from .extractor import RelationshipExtractor
from .filters import TypeFilter
from .hierarchy import HierarchyBuilder
from .metrics import MetricsCalculator
from .models import (
    ClassHierarchyNode,
    RelationshipEdge,
    RelationshipKind,
    RelationshipMetrics,
    RelationshipStrength,
)

__all__ = [
    "ClassHierarchyNode",
    "HierarchyBuilder",
    "MetricsCalculator",
    "RelationshipEdge",
    "RelationshipExtractor",
    "RelationshipKind",
    "RelationshipMetrics",
    "RelationshipStrength",
    "TypeFilter",
]
