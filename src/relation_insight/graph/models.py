"""Data models for the type relationship graph.

  RelationshipEdge     one typed, directed edge between two types
  ClassHierarchyNode   one type's place in its inheritance chain
  RelationshipMetrics  aggregate measurements over edges and hierarchies
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class RelationshipKind(Enum):
    """Kinds of directed type-to-type relationships."""

    INHERITANCE = "inheritance"  # extends
    IMPLEMENTATION = "implementation"  # implements a contract
    COMPOSITION = "composition"  # owning field
    AGGREGATION = "aggregation"  # non-owning field
    ASSOCIATION = "association"  # appears in a method signature
    DEPENDENCY = "dependency"  # method-body reference; never populated
    NESTED = "nested"  # declares a nested type

    @classmethod
    def parse(cls, value: str) -> RelationshipKind:
        """Look a kind up by name or value, case-insensitively."""
        key = value.strip().upper()
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown relationship kind: {value!r}") from None


class RelationshipStrength(Enum):
    WEAK = "weak"
    STRONG = "strong"


_STRONG_KINDS = frozenset(
    {RelationshipKind.INHERITANCE, RelationshipKind.IMPLEMENTATION, RelationshipKind.NESTED}
)

_VERBS = {
    RelationshipKind.INHERITANCE: "extends",
    RelationshipKind.IMPLEMENTATION: "implements",
    RelationshipKind.COMPOSITION: "composes",
    RelationshipKind.AGGREGATION: "aggregates",
    RelationshipKind.ASSOCIATION: "associates with",
    RelationshipKind.DEPENDENCY: "depends on",
    RelationshipKind.NESTED: "contains",
}


def default_strength(kind: RelationshipKind) -> RelationshipStrength:
    """Structural kinds are STRONG, member-derived kinds WEAK."""
    return RelationshipStrength.STRONG if kind in _STRONG_KINDS else RelationshipStrength.WEAK


@dataclass(frozen=True)
class RelationshipEdge:
    """A directed relationship ``source -> target``.

    Identity is (source, target, kind); strength does not take part in
    equality, so a set of edges never holds the same triple twice.
    """

    source: str
    target: str
    kind: RelationshipKind
    strength: RelationshipStrength = field(default=None, compare=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if not self.source or not self.target:
            raise ValueError("RelationshipEdge needs both a source and a target")
        if self.strength is None:
            object.__setattr__(self, "strength", default_strength(self.kind))
        if self.kind is RelationshipKind.NESTED and self.strength is not RelationshipStrength.STRONG:
            raise ValueError("NESTED relationships are always STRONG")

    @classmethod
    def inheritance(cls, source: str, target: str) -> RelationshipEdge:
        return cls(source, target, RelationshipKind.INHERITANCE)

    @classmethod
    def implementation(cls, source: str, target: str) -> RelationshipEdge:
        return cls(source, target, RelationshipKind.IMPLEMENTATION)

    @classmethod
    def composition(cls, source: str, target: str) -> RelationshipEdge:
        return cls(source, target, RelationshipKind.COMPOSITION)

    @classmethod
    def aggregation(cls, source: str, target: str) -> RelationshipEdge:
        return cls(source, target, RelationshipKind.AGGREGATION)

    @classmethod
    def association(cls, source: str, target: str) -> RelationshipEdge:
        return cls(source, target, RelationshipKind.ASSOCIATION)

    @classmethod
    def dependency(cls, source: str, target: str) -> RelationshipEdge:
        return cls(source, target, RelationshipKind.DEPENDENCY)

    @classmethod
    def nested(cls, source: str, target: str) -> RelationshipEdge:
        return cls(source, target, RelationshipKind.NESTED)

    @property
    def is_strong(self) -> bool:
        return self.strength is RelationshipStrength.STRONG

    @property
    def description(self) -> str:
        return f"{self.source} {_VERBS[self.kind]} {self.target}"

    def to_dict(self) -> dict[str, str]:
        return {
            "source": self.source,
            "target": self.target,
            "kind": self.kind.name,
            "strength": self.strength.name,
        }

    def __str__(self) -> str:
        return self.description


@dataclass(frozen=True)
class ClassHierarchyNode:
    """One type's position in its inheritance chain.

    ``ancestor_path`` runs from the type itself up to its topmost resolved
    ancestor, so ``depth == len(ancestor_path) - 1``.
    """

    type_name: str
    parent_type: Optional[str] = None
    implemented_contracts: frozenset[str] = frozenset()
    is_interface: bool = False
    is_abstract: bool = False
    depth: int = 0
    ancestor_path: tuple[str, ...] = ()
    subtypes: frozenset[str] = frozenset()  # direct subtypes, linked after the per-type pass

    def __post_init__(self) -> None:
        for attr in ("implemented_contracts", "subtypes"):
            value = getattr(self, attr)
            if not isinstance(value, frozenset):
                object.__setattr__(self, attr, frozenset(value))
        if not self.ancestor_path:
            object.__setattr__(self, "ancestor_path", (self.type_name,))
        elif not isinstance(self.ancestor_path, tuple):
            object.__setattr__(self, "ancestor_path", tuple(self.ancestor_path))
        if self.ancestor_path[0] != self.type_name:
            raise ValueError("ancestor_path must start with the type itself")
        if self.depth != len(self.ancestor_path) - 1:
            raise ValueError(
                f"depth {self.depth} does not match ancestor path of length {len(self.ancestor_path)}"
            )

    @classmethod
    def root(cls, type_name: str) -> ClassHierarchyNode:
        """A node with no known ancestors."""
        return cls(type_name=type_name)

    @property
    def is_root(self) -> bool:
        return self.depth == 0

    @property
    def is_leaf(self) -> bool:
        return not self.subtypes

    @property
    def implements_contracts(self) -> bool:
        return bool(self.implemented_contracts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type_name,
            "parent": self.parent_type,
            "contracts": sorted(self.implemented_contracts),
            "interface": self.is_interface,
            "abstract": self.is_abstract,
            "depth": self.depth,
            "path": list(self.ancestor_path),
            "subtypes": sorted(self.subtypes),
        }


@dataclass(frozen=True)
class RelationshipMetrics:
    """Aggregate structural measurements for one analysis run."""

    total_relationships: int = 0
    per_kind_counts: dict[RelationshipKind, int] = field(default_factory=dict)
    average_relationships_per_type: float = 0.0

    total_hierarchies: int = 0
    deepest_hierarchy: int = 0
    average_hierarchy_depth: float = 0.0
    widest_hierarchy: int = 0  # most direct subtypes of any one type

    coupling_index: float = 0.0  # edges / possible directed pairs
    cohesion_index: float = 0.0  # mean per-node hierarchy score

    abstract_type_count: int = 0
    interface_count: int = 0

    def count(self, kind: RelationshipKind) -> int:
        return self.per_kind_counts.get(kind, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_relationships": self.total_relationships,
            "per_kind_counts": {kind.name: n for kind, n in self.per_kind_counts.items()},
            "average_relationships_per_type": self.average_relationships_per_type,
            "total_hierarchies": self.total_hierarchies,
            "deepest_hierarchy": self.deepest_hierarchy,
            "average_hierarchy_depth": self.average_hierarchy_depth,
            "widest_hierarchy": self.widest_hierarchy,
            "coupling_index": self.coupling_index,
            "cohesion_index": self.cohesion_index,
            "abstract_type_count": self.abstract_type_count,
            "interface_count": self.interface_count,
        }
