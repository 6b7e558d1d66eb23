"""PatternDetector: naming- and shape-based design pattern heuristics.

Each heuristic is a pure function over the same (relationships,
hierarchies) snapshot. Names are matched on the fully-qualified type name,
case insensitively, so package segments count too:

  SINGLETON  leaf type (nothing inherits from it) named *singleton*,
             *manager or *instance
  FACTORY    type named *factory* with association/dependency targets
  OBSERVER   type named *subject* or *observable* associated with at
             least two distinct types
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Collection, Mapping

from ..graph.models import ClassHierarchyNode, RelationshipEdge, RelationshipKind
from ..logging_config import get_logger
from .models import DesignPatternMatch

logger = get_logger(__name__)

Heuristic = Callable[
    [Collection[RelationshipEdge], Mapping[str, ClassHierarchyNode]], set[DesignPatternMatch]
]

_FACTORY_EDGE_KINDS = frozenset({RelationshipKind.DEPENDENCY, RelationshipKind.ASSOCIATION})
MIN_OBSERVERS = 2


def detect_singletons(
    relationships: Collection[RelationshipEdge],
    hierarchies: Mapping[str, ClassHierarchyNode],
) -> set[DesignPatternMatch]:
    supertypes = {e.target for e in relationships if e.kind is RelationshipKind.INHERITANCE}

    matches = set()
    for type_name in hierarchies:
        if type_name in supertypes:
            continue
        name = type_name.lower()
        if "singleton" in name or name.endswith("manager") or name.endswith("instance"):
            matches.add(DesignPatternMatch.singleton(type_name))
            logger.debug(f"Detected potential Singleton pattern in {type_name}")
    return matches


def detect_factories(
    relationships: Collection[RelationshipEdge],
    hierarchies: Mapping[str, ClassHierarchyNode],
) -> set[DesignPatternMatch]:
    factories = {name for name in hierarchies if "factory" in name.lower()}

    products: dict[str, set[str]] = defaultdict(set)
    for edge in relationships:
        if edge.source in factories and edge.kind in _FACTORY_EDGE_KINDS:
            products[edge.source].add(edge.target)

    matches = set()
    for factory, created in products.items():
        matches.add(DesignPatternMatch.factory(factory, frozenset(created)))
        logger.debug(f"Detected Factory pattern: {factory} creates {len(created)}")
    return matches


def detect_observers(
    relationships: Collection[RelationshipEdge],
    hierarchies: Mapping[str, ClassHierarchyNode],
) -> set[DesignPatternMatch]:
    subjects: dict[str, set[str]] = defaultdict(set)
    for edge in relationships:
        if edge.kind is not RelationshipKind.ASSOCIATION:
            continue
        name = edge.source.lower()
        if "subject" in name or "observable" in name:
            subjects[edge.source].add(edge.target)

    matches = set()
    for subject, observers in subjects.items():
        if len(observers) >= MIN_OBSERVERS:
            matches.add(DesignPatternMatch.observer(subject, frozenset(observers)))
            logger.debug(f"Detected Observer pattern: {subject} with {len(observers)} observers")
    return matches


DEFAULT_HEURISTICS: tuple[Heuristic, ...] = (detect_singletons, detect_factories, detect_observers)


class PatternDetector:
    """Runs every heuristic over one snapshot and unions the matches."""

    def __init__(self, heuristics: tuple[Heuristic, ...] = DEFAULT_HEURISTICS):
        self.heuristics = heuristics

    def detect(
        self,
        relationships: Collection[RelationshipEdge],
        hierarchies: Mapping[str, ClassHierarchyNode],
    ) -> set[DesignPatternMatch]:
        relationships = frozenset(relationships)
        logger.debug(f"Detecting design patterns from {len(relationships)} relationships")

        matches: set[DesignPatternMatch] = set()
        for heuristic in self.heuristics:
            matches |= heuristic(relationships, hierarchies)

        logger.debug(f"Detected {len(matches)} design patterns")
        return matches
