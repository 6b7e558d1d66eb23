"""Type fact models: the structural description of one compiled type.

Facts are produced by an external extraction step and consumed read-only.
``TypeFact.from_dict`` / ``to_dict`` define the JSON fact-file format::

    {
        "name": "com.acme.Car",
        "supertype": "com.acme.Vehicle",
        "contracts": ["com.acme.Drivable"],
        "fields": [{"name": "engine", "type": "com.acme.Engine", "final": true}],
        "methods": [{"name": "drive", "parameters": ["com.acme.Road"], "returns": "void"}],
        "nested": ["com.acme.Car$Door"],
        "interface": false,
        "abstract": false
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


def simple_name(type_name: str) -> str:
    """Strip package and enclosing-type prefixes: ``a.b.Outer$Inner`` -> ``Inner``."""
    return type_name.rsplit(".", 1)[-1].rsplit("$", 1)[-1]


@dataclass(frozen=True)
class FieldFact:
    """A declared field."""

    name: str
    type_name: str
    is_final: bool = False
    is_static: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FieldFact:
        return cls(
            name=data["name"],
            type_name=data["type"],
            is_final=bool(data.get("final", False)),
            is_static=bool(data.get("static", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type_name,
            "final": self.is_final,
            "static": self.is_static,
        }


@dataclass(frozen=True)
class MethodFact:
    """A declared method signature."""

    name: str
    parameter_types: tuple[str, ...] = ()
    return_type: str = "void"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MethodFact:
        return cls(
            name=data["name"],
            parameter_types=tuple(data.get("parameters", ())),
            return_type=data.get("returns") or "void",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "parameters": list(self.parameter_types),
            "returns": self.return_type,
        }

    @property
    def signature_types(self) -> tuple[str, ...]:
        """Parameter types followed by the return type."""
        return self.parameter_types + (self.return_type,)


@dataclass(frozen=True)
class TypeFact:
    """Immutable structural facts for one type.

    ``contracts`` keeps declaration order but is semantically a set; the
    hierarchy builder freezes it into one.
    """

    name: str
    supertype: Optional[str] = None
    contracts: tuple[str, ...] = ()
    fields: tuple[FieldFact, ...] = ()
    methods: tuple[MethodFact, ...] = ()
    nested_types: tuple[str, ...] = ()
    is_interface: bool = False
    is_abstract: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("TypeFact name must not be empty")
        # Accept lists from callers; store tuples so facts stay hashable.
        for attr in ("contracts", "fields", "methods", "nested_types"):
            value = getattr(self, attr)
            if not isinstance(value, tuple):
                object.__setattr__(self, attr, tuple(value))

    @property
    def simple_name(self) -> str:
        return simple_name(self.name)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TypeFact:
        """Build a fact from its JSON form. Missing keys take their defaults."""
        return cls(
            name=data["name"],
            supertype=data.get("supertype"),
            contracts=tuple(data.get("contracts", ())),
            fields=tuple(FieldFact.from_dict(f) for f in data.get("fields", ())),
            methods=tuple(MethodFact.from_dict(m) for m in data.get("methods", ())),
            nested_types=tuple(data.get("nested", ())),
            is_interface=bool(data.get("interface", False)),
            is_abstract=bool(data.get("abstract", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "supertype": self.supertype,
            "contracts": list(self.contracts),
            "fields": [f.to_dict() for f in self.fields],
            "methods": [m.to_dict() for m in self.methods],
            "nested": list(self.nested_types),
            "interface": self.is_interface,
            "abstract": self.is_abstract,
        }
