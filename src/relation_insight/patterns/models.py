"""Design pattern match model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DesignPatternKind(Enum):
    SINGLETON = "singleton"
    FACTORY = "factory"
    OBSERVER = "observer"


# Fixed confidence per heuristic; these are naming/shape signals, not proofs.
PATTERN_CONFIDENCE = {
    DesignPatternKind.SINGLETON: 0.6,
    DesignPatternKind.FACTORY: 0.7,
    DesignPatternKind.OBSERVER: 0.6,
}


@dataclass(frozen=True)
class DesignPatternMatch:
    """A confidence-scored claim that ``anchor`` takes part in a pattern.

    Identity is (kind, anchor): a set of matches holds at most one match
    per kind for any anchor type. ``participants`` are the related types
    (the anchor itself for a singleton).
    """

    kind: DesignPatternKind
    anchor: str
    participants: frozenset[str] = field(default=frozenset(), compare=False)
    confidence: float = field(default=None, compare=False)  # type: ignore[assignment]
    description: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.participants, frozenset):
            object.__setattr__(self, "participants", frozenset(self.participants))
        if self.confidence is None:
            object.__setattr__(self, "confidence", PATTERN_CONFIDENCE[self.kind])
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be in [0, 1], got {self.confidence}")

    @classmethod
    def singleton(cls, anchor: str) -> DesignPatternMatch:
        return cls(
            DesignPatternKind.SINGLETON,
            anchor,
            frozenset({anchor}),
            description=f"{anchor} looks like a singleton",
        )

    @classmethod
    def factory(cls, anchor: str, products: frozenset[str]) -> DesignPatternMatch:
        return cls(
            DesignPatternKind.FACTORY,
            anchor,
            frozenset(products),
            description=f"{anchor} creates {len(products)} type(s)",
        )

    @classmethod
    def observer(cls, anchor: str, observers: frozenset[str]) -> DesignPatternMatch:
        return cls(
            DesignPatternKind.OBSERVER,
            anchor,
            frozenset(observers),
            description=f"{anchor} notifies {len(observers)} observer(s)",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.name,
            "anchor": self.anchor,
            "participants": sorted(self.participants),
            "confidence": self.confidence,
            "description": self.description,
        }
