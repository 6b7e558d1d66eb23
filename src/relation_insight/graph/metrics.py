"""Relationship metrics.

Computes over a finished edge set and hierarchy map:
- Per-kind edge counts and edges per analyzed type
- Coupling index: edges / (n * (n - 1)), observed over possible directed pairs
- Cohesion index: mean per-node score rewarding moderate depth and
  contract implementation
- Hierarchy statistics: count, deepest, mean depth, widest
- Abstract type and interface counts
"""

from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Collection

import numpy as np

from ..logging_config import get_logger
from .models import ClassHierarchyNode, RelationshipEdge, RelationshipKind, RelationshipMetrics

logger = get_logger(__name__)

BASE_COHESION = 0.5
MODERATE_DEPTH_BONUS = 0.2
MODERATE_DEPTH_LIMIT = 3
CONTRACT_BONUS = 0.3


def compute_coupling_index(edge_count: int, total_types: int) -> float:
    """Observed edges over the maximum possible directed pairs.

    Args:
        edge_count: Number of distinct edges
        total_types: Number of analyzed types

    Returns:
        Coupling in [0, 1]; 0.0 when there are fewer than two types
    """
    if total_types <= 1:
        return 0.0
    max_pairs = total_types * (total_types - 1)
    # Self-loops and edges to unanalyzed types can push the raw ratio past 1.
    return min(1.0, edge_count / max_pairs)


def node_cohesion(node: ClassHierarchyNode) -> float:
    """Per-node cohesion score, capped at 1.0."""
    score = BASE_COHESION
    if 0 < node.depth <= MODERATE_DEPTH_LIMIT:
        score += MODERATE_DEPTH_BONUS
    if node.implements_contracts:
        score += CONTRACT_BONUS
    return min(1.0, score)


def compute_cohesion_index(nodes: Collection[ClassHierarchyNode]) -> float:
    """Mean node cohesion; 0.0 when there are no nodes."""
    if not nodes:
        return 0.0
    return float(np.mean([node_cohesion(node) for node in nodes]))


class MetricsCalculator:
    """Aggregates RelationshipMetrics from a completed analysis."""

    def calculate(
        self,
        relationships: Iterable[RelationshipEdge],
        hierarchies: Mapping[str, ClassHierarchyNode],
        total_type_count: int,
    ) -> RelationshipMetrics:
        edges = set(relationships)
        nodes = list(hierarchies.values())

        counts = Counter(edge.kind for edge in edges)
        per_kind = {kind: counts.get(kind, 0) for kind in RelationshipKind}

        average = len(edges) / total_type_count if total_type_count > 0 else 0.0

        depths = np.array([node.depth for node in nodes], dtype=float)
        deepest = int(depths.max()) if depths.size else 0
        mean_depth = float(depths.mean()) if depths.size else 0.0
        widest = max((len(node.subtypes) for node in nodes), default=0)

        metrics = RelationshipMetrics(
            total_relationships=len(edges),
            per_kind_counts=per_kind,
            average_relationships_per_type=average,
            total_hierarchies=len(nodes),
            deepest_hierarchy=deepest,
            average_hierarchy_depth=mean_depth,
            widest_hierarchy=widest,
            coupling_index=compute_coupling_index(len(edges), total_type_count),
            cohesion_index=compute_cohesion_index(nodes),
            abstract_type_count=sum(1 for node in nodes if node.is_abstract),
            interface_count=sum(1 for node in nodes if node.is_interface),
        )

        logger.debug(
            f"Metrics: {metrics.total_relationships} relationships, "
            f"coupling={metrics.coupling_index:.3f}, cohesion={metrics.cohesion_index:.3f}"
        )
        return metrics
