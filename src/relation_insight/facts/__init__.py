"""Type facts: the read-only input model and its name-keyed source."""

from .models import FieldFact, MethodFact, TypeFact, simple_name
from .source import FactSource

__all__ = [
    "FactSource",
    "FieldFact",
    "MethodFact",
    "TypeFact",
    "simple_name",
]
