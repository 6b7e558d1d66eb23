"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AnalysisConfig, load_config

console = Console()


def resolve_config(
    config: Optional[Path] = None,
    timeout: Optional[float] = None,
    kinds: Optional[list[str]] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> AnalysisConfig:
    """Build configuration from CLI options."""
    overrides = {}
    if timeout is not None:
        overrides["timeout_seconds"] = timeout
    if kinds:
        overrides["relationship_kinds"] = [k.upper() for k in kinds]
    return load_config(config_file=config, verbose=verbose, quiet=quiet, **overrides)
