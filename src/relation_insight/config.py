"""Configuration loading and management for Relation Insight.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.relation-insight.toml)
    3. Project config (./relation-insight.toml)
    4. Explicit config file
    5. Environment variables (RELATION_INSIGHT_* prefix)
    6. Overrides (passed as kwargs, typically from the CLI)

Example:
    >>> config = load_config(timeout_seconds=60)
    >>> config.timeout_seconds
    60
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

# Pool size ceiling; the pool isolates a run from its caller, it does not fan out.
MAX_WORKERS = 4

DEFAULT_PRIMITIVE_TYPES = [
    "boolean",
    "byte",
    "char",
    "short",
    "int",
    "long",
    "float",
    "double",
    "void",
]

DEFAULT_COMMON_TYPE_PREFIXES = [
    "java.lang.",
    "java.util.",
    "java.io.",
]

DEFAULT_OWNERSHIP_TOKENS = ["own", "child", "part"]

DEFAULT_RELATIONSHIP_KINDS = [
    "INHERITANCE",
    "IMPLEMENTATION",
    "COMPOSITION",
    "AGGREGATION",
    "ASSOCIATION",
    "DEPENDENCY",
    "NESTED",
]


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for relationship analysis.

    Attributes:
        Execution:
            timeout_seconds: Wall-clock budget for one analysis run
            shutdown_grace_seconds: How long shutdown waits for in-flight runs
            workers: Worker pool size (None = auto, capped at 4)

        Type classification:
            universal_root: Implicit supertype of every type, never an edge target
            primitive_types: Type names that never produce member edges
            common_type_prefixes: Library namespaces excluded from member edges
            common_types: Exact library type names excluded from member edges
            ownership_tokens: Field-name fragments that mark composition

        Relationship selection:
            relationship_kinds: Kinds the extractor emits (names, upper case)
            resolve_member_types: Require field/parameter/return types to be
                present in the fact source before emitting edges to them

        Output control:
            verbosity: Logging verbosity level
    """

    # Execution
    timeout_seconds: float = 300.0
    shutdown_grace_seconds: float = 30.0
    workers: Optional[int] = None

    # Type classification
    universal_root: str = "java.lang.Object"
    primitive_types: list[str] = field(default_factory=lambda: list(DEFAULT_PRIMITIVE_TYPES))
    common_type_prefixes: list[str] = field(
        default_factory=lambda: list(DEFAULT_COMMON_TYPE_PREFIXES)
    )
    common_types: list[str] = field(default_factory=list)
    ownership_tokens: list[str] = field(default_factory=lambda: list(DEFAULT_OWNERSHIP_TOKENS))

    # Relationship selection
    relationship_kinds: list[str] = field(
        default_factory=lambda: list(DEFAULT_RELATIONSHIP_KINDS)
    )
    resolve_member_types: bool = False

    # Output control
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if self.shutdown_grace_seconds < 0:
            raise ValueError("shutdown_grace_seconds must be non-negative")
        if self.workers is not None and not 1 <= self.workers <= MAX_WORKERS:
            raise ValueError(f"workers must be between 1 and {MAX_WORKERS}")

        if not self.universal_root:
            raise ValueError("universal_root must not be empty")
        if any(not token for token in self.ownership_tokens):
            raise ValueError("ownership_tokens must not contain empty strings")
        if not self.relationship_kinds:
            raise ValueError("relationship_kinds must name at least one kind")

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet, normal, verbose")

    @property
    def max_workers(self) -> int:
        """Worker pool size: configured value, else available CPUs, never above 4."""
        if self.workers is not None:
            return self.workers
        return max(1, min(MAX_WORKERS, os.cpu_count() or 1))


DEFAULT_CONFIG = AnalysisConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing, or a
            value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".relation-insight.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "relation-insight.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from RELATION_INSIGHT_* environment variables.

    List fields accept comma-separated values, e.g.
    ``RELATION_INSIGHT_COMMON_TYPE_PREFIXES=java.lang.,kotlin.``.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"RELATION_INSIGHT_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return [item.strip() for item in value.split(",") if item.strip()]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
