"""Relationship analysis command."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..analysis import AnalysisCoordinator, AnalysisResult
from ..exceptions import RelationInsightError
from ..facts import FactSource
from ..graph.models import RelationshipKind
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config


@app.command()
def analyze(
    facts_file: Path = typer.Argument(
        ...,
        help="JSON file with one fact record per type",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (human-readable) or json",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Wall-clock budget in seconds (default 300)",
        min=0.001,
    ),
    kind: Optional[list[str]] = typer.Option(
        None,
        "--kind",
        "-k",
        help="Relationship kind to extract (repeatable; default all)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Debug logging and per-type hierarchy table",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress logging",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    log_file: Optional[str] = typer.Option(
        None,
        "--log-file",
        help="Also write log records to this file",
    ),
):
    """
    Build the relationship graph, hierarchies, patterns and metrics for a fact file.

    [bold cyan]Examples:[/bold cyan]

      relation-insight analyze facts.json

      relation-insight analyze facts.json --format json --kind inheritance --kind composition
    """
    if fmt not in ("rich", "json"):
        console.print(f"[red]Unknown format: {fmt}[/red] (expected rich or json)")
        raise typer.Exit(2)

    try:
        settings = resolve_config(config=config, timeout=timeout, kinds=kind, verbose=verbose, quiet=quiet)
        setup_logging(settings.verbosity, log_file=log_file)
        source = FactSource.from_json(facts_file)
        with AnalysisCoordinator(settings) as coordinator:
            result = coordinator.analyze(source)
    except RelationInsightError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if fmt == "json":
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(result, verbose=settings.verbosity == "verbose")

    if not result.successful:
        raise typer.Exit(1)


def _print_result(result: AnalysisResult, verbose: bool = False) -> None:
    if not result.successful:
        console.print(f"[red]Analysis {result.status.value}:[/red] {result.error}")
        return

    metrics = result.metrics
    console.print()
    console.print("[bold cyan]RELATION INSIGHT - Type Relationships[/bold cyan]")
    console.print(
        f"[dim]{result.analyzed_types} types analyzed in {result.duration_seconds:.2f}s[/dim]"
    )
    console.print()

    counts = Table(title="Relationships")
    counts.add_column("Kind", style="cyan")
    counts.add_column("Count", justify="right")
    for kind in RelationshipKind:
        counts.add_row(kind.name, str(metrics.count(kind)))
    counts.add_row("[bold]Total[/bold]", f"[bold]{metrics.total_relationships}[/bold]")
    console.print(counts)

    summary = Table(title="Metrics", show_header=False)
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", justify="right")
    summary.add_row("Relationships per type", f"{metrics.average_relationships_per_type:.2f}")
    summary.add_row("Coupling index", f"{metrics.coupling_index:.3f}")
    summary.add_row("Cohesion index", f"{metrics.cohesion_index:.3f}")
    summary.add_row("Hierarchies", str(metrics.total_hierarchies))
    summary.add_row("Deepest hierarchy", str(metrics.deepest_hierarchy))
    summary.add_row("Average depth", f"{metrics.average_hierarchy_depth:.2f}")
    summary.add_row("Widest hierarchy", str(metrics.widest_hierarchy))
    summary.add_row("Abstract types", str(metrics.abstract_type_count))
    summary.add_row("Interfaces", str(metrics.interface_count))
    console.print(summary)

    if result.patterns:
        patterns = Table(title="Design pattern candidates")
        patterns.add_column("Pattern", style="magenta")
        patterns.add_column("Anchor")
        patterns.add_column("Participants")
        patterns.add_column("Confidence", justify="right")
        for match in sorted(result.patterns, key=lambda p: (p.kind.name, p.anchor)):
            patterns.add_row(
                match.kind.name,
                match.anchor,
                ", ".join(sorted(match.participants)),
                f"{match.confidence:.1f}",
            )
        console.print(patterns)
    else:
        console.print("[dim]No design pattern candidates[/dim]")

    if verbose:
        hierarchy = Table(title="Hierarchies")
        hierarchy.add_column("Type", style="cyan")
        hierarchy.add_column("Depth", justify="right")
        hierarchy.add_column("Path")
        hierarchy.add_column("Subtypes", justify="right")
        for name in sorted(result.hierarchies):
            node = result.hierarchies[name]
            hierarchy.add_row(name, str(node.depth), " -> ".join(node.ancestor_path), str(len(node.subtypes)))
        console.print(hierarchy)
