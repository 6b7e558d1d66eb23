"""RelationshipExtractor: turns one type's facts into typed edges.

Per type T the extractor emits:
  INHERITANCE     T -> supertype (unless it is the universal root)
  IMPLEMENTATION  T -> each directly implemented contract
  COMPOSITION     T -> field type, when the field is final or its name
                  suggests ownership ("own", "child", "part")
  AGGREGATION     T -> any other non-library field type
  ASSOCIATION     T -> each distinct non-library parameter/return type
  NESTED          T -> each directly nested type
  DEPENDENCY      reserved; needs method-body analysis, always empty

Supertypes and contracts must resolve in the fact source. A reference that
does not resolve is logged and skipped; it never fails the type.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Optional

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..exceptions import InvalidConfigError, UnresolvedTypeError
from ..facts import FactSource, FieldFact, TypeFact
from ..logging_config import get_logger
from .filters import TypeFilter, element_type
from .models import RelationshipEdge, RelationshipKind

logger = get_logger(__name__)

Step = Callable[[TypeFact, Optional[FactSource]], Iterable[RelationshipEdge]]


class RelationshipExtractor:
    """Extracts the relationship edges declared by a single type."""

    def __init__(self, config: Optional[AnalysisConfig] = None, source: Optional[FactSource] = None):
        self.config = config or DEFAULT_CONFIG
        self.source = source
        self.type_filter = TypeFilter.from_config(self.config)
        self.ownership_tokens = tuple(token.lower() for token in self.config.ownership_tokens)

        try:
            self._kinds = frozenset(RelationshipKind.parse(k) for k in self.config.relationship_kinds)
        except ValueError as e:
            raise InvalidConfigError("relationship_kinds", self.config.relationship_kinds, str(e))

        # (label, kinds the step can emit, step)
        self._steps: list[tuple[str, frozenset[RelationshipKind], Step]] = [
            ("inheritance", frozenset({RelationshipKind.INHERITANCE}), self._inheritance),
            ("implementation", frozenset({RelationshipKind.IMPLEMENTATION}), self._implementation),
            (
                "field",
                frozenset({RelationshipKind.COMPOSITION, RelationshipKind.AGGREGATION}),
                self._fields,
            ),
            ("association", frozenset({RelationshipKind.ASSOCIATION}), self._associations),
            ("dependency", frozenset({RelationshipKind.DEPENDENCY}), self._dependencies),
            ("nested type", frozenset({RelationshipKind.NESTED}), self._nested),
        ]

        logger.debug(f"Initialized RelationshipExtractor with {len(self._kinds)} relationship kinds")

    @property
    def supported_kinds(self) -> frozenset[RelationshipKind]:
        return self._kinds

    def extract(self, fact: TypeFact, source: Optional[FactSource] = None) -> set[RelationshipEdge]:
        """Extract all enabled relationships declared by ``fact``.

        Args:
            fact: The type to inspect
            source: Fact source used to resolve supertypes and contracts;
                falls back to the source given at construction. Without
                any source every reference is taken as resolvable.

        Returns:
            Set of edges whose source is ``fact.name``
        """
        source = source if source is not None else self.source
        edges: set[RelationshipEdge] = set()

        for label, kinds, step in self._steps:
            if not kinds & self._kinds:
                continue
            try:
                edges.update(edge for edge in step(fact, source) if edge.kind in self._kinds)
            except Exception as e:
                logger.warning(f"Failed to extract {label} relationships for {fact.name}: {e}")

        return edges

    def is_composition(self, field: FieldFact) -> bool:
        """Final fields and ownership-named fields are compositions."""
        if field.is_final:
            return True
        name = field.name.lower()
        return any(token in name for token in self.ownership_tokens)

    # ------------------------------------------------------------------
    # Extraction steps
    # ------------------------------------------------------------------

    def _inheritance(self, fact: TypeFact, source: Optional[FactSource]) -> list[RelationshipEdge]:
        supertype = fact.supertype
        if not supertype or supertype == self.config.universal_root:
            return []
        if supertype == fact.name:
            logger.warning(f"{fact.name} declares itself as its supertype; ignoring")
            return []
        if not self._resolves(supertype, fact, source):
            return []

        logger.debug(f"Found inheritance: {fact.name} extends {supertype}")
        return [RelationshipEdge.inheritance(fact.name, supertype)]

    def _implementation(self, fact: TypeFact, source: Optional[FactSource]) -> list[RelationshipEdge]:
        edges = []
        for contract in fact.contracts:
            if not contract or not self._resolves(contract, fact, source):
                continue
            edges.append(RelationshipEdge.implementation(fact.name, contract))
            logger.debug(f"Found implementation: {fact.name} implements {contract}")
        return edges

    def _fields(self, fact: TypeFact, source: Optional[FactSource]) -> list[RelationshipEdge]:
        edges = []
        for field in fact.fields:
            target = self._member_target(field.type_name, fact, source)
            if target is None:
                continue

            if self.is_composition(field):
                edge = RelationshipEdge.composition(fact.name, target)
            else:
                edge = RelationshipEdge.aggregation(fact.name, target)
            edges.append(edge)
            logger.debug(f"Found {edge.kind.value} relationship: {edge.description}")
        return edges

    def _associations(self, fact: TypeFact, source: Optional[FactSource]) -> list[RelationshipEdge]:
        associated: set[str] = set()
        for method in fact.methods:
            for type_name in method.signature_types:
                target = self._member_target(type_name, fact, source)
                if target is not None and target != fact.name:
                    associated.add(target)

        edges = []
        for target in sorted(associated):
            edges.append(RelationshipEdge.association(fact.name, target))
            logger.debug(f"Found association: {fact.name} associates with {target}")
        return edges

    def _dependencies(self, fact: TypeFact, source: Optional[FactSource]) -> list[RelationshipEdge]:
        # Needs instantiation and static-call references from method bodies,
        # which type facts do not carry.
        return []

    def _nested(self, fact: TypeFact, source: Optional[FactSource]) -> list[RelationshipEdge]:
        edges = []
        for nested in fact.nested_types:
            if not nested or nested == fact.name:
                continue
            edges.append(RelationshipEdge.nested(fact.name, nested))
            logger.debug(f"Found nested type: {fact.name} contains {nested}")
        return edges

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _member_target(
        self, type_name: str, fact: TypeFact, source: Optional[FactSource]
    ) -> Optional[str]:
        """Element type of a field/parameter/return type, or None if it earns no edge."""
        if self.type_filter.is_excluded(type_name):
            return None
        target = element_type(type_name)
        if self.config.resolve_member_types and not self._resolves(target, fact, source):
            return None
        return target

    @staticmethod
    def _resolves(type_name: str, fact: TypeFact, source: Optional[FactSource]) -> bool:
        if source is None:
            return True
        try:
            source.require(type_name, referenced_by=fact.name)
        except UnresolvedTypeError as e:
            logger.debug(f"Skipping unresolved reference: {e}")
            return False
        return True
