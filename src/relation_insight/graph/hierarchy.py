"""HierarchyBuilder: parent, depth and ancestor path per type.

The supertype walk keeps a visited set, so a malformed cyclic chain
(A extends B extends A, or T extends T) stops at the first repeated type
instead of looping.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping
from dataclasses import replace
from typing import Optional

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..exceptions import UnresolvedTypeError
from ..facts import FactSource, TypeFact
from ..logging_config import get_logger
from .models import ClassHierarchyNode

logger = get_logger(__name__)


class HierarchyBuilder:
    """Builds ClassHierarchyNode records from type facts."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def build(self, fact: TypeFact, source: FactSource) -> ClassHierarchyNode:
        """Walk ``fact``'s supertype chain through ``source``.

        The walk stops when the next supertype is absent, the universal
        root, missing from the source, or already on the path. Depth is
        the number of links walked.
        """
        path = [fact.name]
        visited = {fact.name}
        current = fact

        while True:
            parent = current.supertype
            if not parent or parent == self.config.universal_root:
                break
            if parent in visited:
                logger.warning(f"Cyclic supertype chain at {current.name} -> {parent}; stopping walk")
                break
            try:
                parent_fact = source.require(parent, referenced_by=current.name)
            except UnresolvedTypeError as e:
                logger.debug(f"{e}; stopping walk")
                break
            visited.add(parent)
            path.append(parent)
            current = parent_fact

        return ClassHierarchyNode(
            type_name=fact.name,
            parent_type=path[1] if len(path) > 1 else None,
            implemented_contracts=frozenset(c for c in fact.contracts if c),
            is_interface=fact.is_interface,
            is_abstract=fact.is_abstract,
            depth=len(path) - 1,
            ancestor_path=tuple(path),
        )

    @staticmethod
    def link_subtypes(hierarchies: Mapping[str, ClassHierarchyNode]) -> dict[str, ClassHierarchyNode]:
        """Return a copy of ``hierarchies`` with each node's direct subtypes filled in."""
        children: dict[str, set[str]] = defaultdict(set)
        for node in hierarchies.values():
            if node.parent_type is not None and node.parent_type in hierarchies:
                children[node.parent_type].add(node.type_name)

        return {
            name: replace(node, subtypes=frozenset(children.get(name, ())))
            for name, node in hierarchies.items()
        }
