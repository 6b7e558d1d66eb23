"""Configuration and input-file exceptions."""

from pathlib import Path
from typing import Any

from .base import RelationInsightError


class ConfigurationError(RelationInsightError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class FactFileError(ConfigurationError):
    """Raised when a type-fact file cannot be read or decoded."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot load fact file: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason
