"""CLI entry point: registers all subcommands."""

import typer

app = typer.Typer(
    name="relation-insight",
    help="Relation Insight - Type Relationship and Hierarchy Analyzer",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .kinds import kinds as _kinds  # noqa: F401, E402


def main() -> None:
    app()
