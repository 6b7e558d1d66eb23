"""Analysis result model.

One AnalysisResult is built per coordinator invocation and never changes
afterwards: collections are frozen and the hierarchy map is a read-only
view.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional

from ..graph.models import ClassHierarchyNode, RelationshipEdge, RelationshipKind, RelationshipMetrics
from ..patterns.models import DesignPatternKind, DesignPatternMatch


class AnalysisStatus(Enum):
    """Outcome of one analysis run."""

    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class AnalysisResult:
    """Top-level result of relationship analysis.

    Only COMPLETED results carry data; every other status comes with an
    ``error`` reason and empty collections.
    """

    status: AnalysisStatus
    relationships: frozenset[RelationshipEdge] = frozenset()
    hierarchies: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    patterns: frozenset[DesignPatternMatch] = frozenset()
    metrics: Optional[RelationshipMetrics] = None
    error: Optional[str] = None
    analyzed_types: int = 0
    duration_seconds: float = 0.0

    def __post_init__(self) -> None:
        if not isinstance(self.relationships, frozenset):
            object.__setattr__(self, "relationships", frozenset(self.relationships))
        if not isinstance(self.patterns, frozenset):
            object.__setattr__(self, "patterns", frozenset(self.patterns))
        if not isinstance(self.hierarchies, MappingProxyType):
            object.__setattr__(self, "hierarchies", MappingProxyType(dict(self.hierarchies)))

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def completed(
        cls,
        relationships,
        hierarchies,
        patterns,
        metrics: RelationshipMetrics,
        analyzed_types: int,
        duration_seconds: float = 0.0,
    ) -> AnalysisResult:
        return cls(
            status=AnalysisStatus.COMPLETED,
            relationships=frozenset(relationships),
            hierarchies=MappingProxyType(dict(hierarchies)),
            patterns=frozenset(patterns),
            metrics=metrics,
            analyzed_types=analyzed_types,
            duration_seconds=duration_seconds,
        )

    @classmethod
    def failed(cls, reason: str, duration_seconds: float = 0.0) -> AnalysisResult:
        return cls(status=AnalysisStatus.FAILED, error=reason, duration_seconds=duration_seconds)

    @classmethod
    def timed_out(cls, reason: str, duration_seconds: float = 0.0) -> AnalysisResult:
        return cls(status=AnalysisStatus.TIMED_OUT, error=reason, duration_seconds=duration_seconds)

    @classmethod
    def cancelled(cls, reason: str, duration_seconds: float = 0.0) -> AnalysisResult:
        return cls(status=AnalysisStatus.CANCELLED, error=reason, duration_seconds=duration_seconds)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def successful(self) -> bool:
        return self.status is AnalysisStatus.COMPLETED

    @property
    def total_relationships(self) -> int:
        return len(self.relationships)

    def relationships_by_kind(self, kind: RelationshipKind) -> frozenset[RelationshipEdge]:
        return frozenset(e for e in self.relationships if e.kind is kind)

    def relationships_for_type(self, type_name: str) -> frozenset[RelationshipEdge]:
        """Edges where ``type_name`` is the source or the target."""
        return frozenset(
            e for e in self.relationships if e.source == type_name or e.target == type_name
        )

    def hierarchy_for(self, type_name: str) -> Optional[ClassHierarchyNode]:
        return self.hierarchies.get(type_name)

    def patterns_by_kind(self, kind: DesignPatternKind) -> frozenset[DesignPatternMatch]:
        return frozenset(p for p in self.patterns if p.kind is kind)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form with deterministic ordering."""
        edges = sorted(self.relationships, key=lambda e: (e.source, e.kind.name, e.target))
        patterns = sorted(self.patterns, key=lambda p: (p.kind.name, p.anchor))
        return {
            "status": self.status.value,
            "error": self.error,
            "analyzed_types": self.analyzed_types,
            "duration_seconds": round(self.duration_seconds, 4),
            "relationships": [e.to_dict() for e in edges],
            "hierarchies": {name: self.hierarchies[name].to_dict() for name in sorted(self.hierarchies)},
            "patterns": [p.to_dict() for p in patterns],
            "metrics": self.metrics.to_dict() if self.metrics is not None else None,
        }

    def __str__(self) -> str:
        if self.successful:
            return (
                f"AnalysisResult(completed, {self.total_relationships} relationships, "
                f"{len(self.hierarchies)} hierarchies, {len(self.patterns)} patterns)"
            )
        return f"AnalysisResult({self.status.value}, error={self.error!r})"
