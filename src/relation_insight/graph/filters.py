"""Type-name classification for member-derived edges.

Primitive and common library types (core value, collection and I/O types)
never become composition, aggregation or association targets. The sets are
per-ecosystem data and come from configuration.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..config import AnalysisConfig

_ARRAY_SUFFIX = "[]"


def element_type(type_name: str) -> str:
    """Strip array dimensions: ``com.acme.Part[][]`` -> ``com.acme.Part``."""
    name = type_name.strip()
    while name.endswith(_ARRAY_SUFFIX):
        name = name[: -len(_ARRAY_SUFFIX)].rstrip()
    return name


class TypeFilter:
    """Decides which referenced type names are worth an edge."""

    def __init__(
        self,
        primitive_types: Iterable[str] = (),
        common_type_prefixes: Iterable[str] = (),
        common_types: Iterable[str] = (),
    ):
        self.primitive_types = frozenset(primitive_types)
        self.common_type_prefixes = tuple(common_type_prefixes)
        self.common_types = frozenset(common_types)

    @classmethod
    def from_config(cls, config: AnalysisConfig) -> TypeFilter:
        return cls(
            primitive_types=config.primitive_types,
            common_type_prefixes=config.common_type_prefixes,
            common_types=config.common_types,
        )

    def is_primitive(self, type_name: str) -> bool:
        return type_name in self.primitive_types

    def is_common(self, type_name: str) -> bool:
        return type_name in self.common_types or type_name.startswith(self.common_type_prefixes)

    def is_excluded(self, type_name: str) -> bool:
        """True for blank, primitive and common library types (arrays by element type)."""
        name = element_type(type_name)
        if not name:
            return True
        return self.is_primitive(name) or self.is_common(name)
