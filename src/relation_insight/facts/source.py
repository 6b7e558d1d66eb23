"""FactSource: the read-only, name-keyed collection of type facts.

A source is built once per input and may be shared by concurrent analyses;
nothing in this package mutates it after construction.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Any, Optional, Union

from ..exceptions import FactFileError, UnresolvedTypeError
from ..logging_config import get_logger
from .models import TypeFact

logger = get_logger(__name__)

FactInput = Union["FactSource", Mapping[str, TypeFact], Iterable[TypeFact]]


class FactSource:
    """Ordered lookup of TypeFacts by fully-qualified name."""

    def __init__(self, facts: Iterable[TypeFact] = ()):
        self._facts: dict[str, TypeFact] = {}
        for fact in facts:
            if fact.name in self._facts:
                logger.warning(f"Duplicate fact for {fact.name}; keeping the last one")
            self._facts[fact.name] = fact

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def of(cls, facts: Optional[FactInput]) -> FactSource:
        """Coerce any accepted input form into a FactSource.

        Accepts an existing source (returned as is), a mapping of name to
        fact, or any iterable of facts. ``None`` yields an empty source.
        """
        if facts is None:
            return cls()
        if isinstance(facts, FactSource):
            return facts
        if isinstance(facts, Mapping):
            return cls(facts.values())
        return cls(facts)

    @classmethod
    def from_dicts(cls, records: Iterable[dict[str, Any]]) -> FactSource:
        return cls(TypeFact.from_dict(record) for record in records)

    @classmethod
    def from_json(cls, path: Path) -> FactSource:
        """Load facts from a JSON file.

        The file holds either a list of fact objects or an object with a
        ``"types"`` list.

        Raises:
            FactFileError: If the file is missing, not JSON, or malformed
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise FactFileError(path, str(e))
        except json.JSONDecodeError as e:
            raise FactFileError(path, f"invalid JSON: {e}")

        if isinstance(data, dict):
            data = data.get("types")
        if not isinstance(data, list):
            raise FactFileError(path, "expected a list of types or an object with a 'types' list")

        try:
            source = cls.from_dicts(data)
        except (KeyError, TypeError, ValueError) as e:
            raise FactFileError(path, f"malformed type record: {e}")

        logger.info(f"Loaded {len(source)} type facts from {path}")
        return source

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def fact_by_name(self, name: str) -> Optional[TypeFact]:
        return self._facts.get(name)

    def require(self, name: str, referenced_by: Optional[str] = None) -> TypeFact:
        """Like ``fact_by_name`` but raises UnresolvedTypeError when absent."""
        fact = self._facts.get(name)
        if fact is None:
            raise UnresolvedTypeError(name, referenced_by)
        return fact

    @property
    def names(self) -> list[str]:
        return list(self._facts)

    def __contains__(self, name: object) -> bool:
        return name in self._facts

    def __iter__(self) -> Iterator[TypeFact]:
        return iter(self._facts.values())

    def __len__(self) -> int:
        return len(self._facts)

    def __repr__(self) -> str:
        return f"FactSource({len(self._facts)} types)"
