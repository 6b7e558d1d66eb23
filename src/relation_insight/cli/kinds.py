"""List the relationship kinds the analyzer knows about."""

from rich.table import Table

from ..graph.models import RelationshipKind, default_strength
from . import app
from ._common import console

_NOTES = {
    RelationshipKind.DEPENDENCY: "reserved; needs method-body analysis, always empty",
}


@app.command()
def kinds():
    """Show every relationship kind with its strength."""
    table = Table(title="Relationship kinds")
    table.add_column("Kind", style="cyan")
    table.add_column("Strength")
    table.add_column("Notes", style="dim")
    for kind in RelationshipKind:
        table.add_row(kind.name, default_strength(kind).name, _NOTES.get(kind, ""))
    console.print(table)
