"""farmqc CLI application.

This module provides the command-line interface for farmqc,
built with Typer.
"""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from farmqc._version import __version__
from farmqc.core.exceptions import RecordLoadError
from farmqc.core.types import EntityKind, OperationKind

app = typer.Typer(
    name="farmqc",
    help="Data quality validation for farm management records",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"farmqc v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """farmqc - data quality validation for farm records.

    Validate. Score. Fix.
    """
    pass


def load_records(path: Path) -> list[dict[str, Any]]:
    """Load records from a JSON, JSON Lines or YAML file.

    The file may hold a single record or a list of records.

    Raises:
        RecordLoadError: If the file is missing, unparseable or not records
    """
    if not path.is_file():
        raise RecordLoadError(f"File not found: {path}", path=str(path))

    suffix = path.suffix.lower()
    try:
        with open(path, "r", encoding="utf-8") as f:
            if suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            elif suffix == ".jsonl":
                data = [json.loads(line) for line in f if line.strip()]
            else:
                data = json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise RecordLoadError(f"Could not parse {path.name}: {e}", path=str(path)) from e

    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise RecordLoadError("Expected a record or a list of records", path=str(path))
    return data


@app.command()
def validate(
    path: Annotated[Path, typer.Argument(help="JSON, JSONL or YAML file with records")],
    entity: Annotated[EntityKind, typer.Option(help="Entity kind of the records")],
    operation: Annotated[
        OperationKind, typer.Option(help="Operation the records are validated for")
    ] = OperationKind.IMPORT,
    auto_correct: Annotated[
        bool, typer.Option(help="Auto-fix failing records and re-validate them")
    ] = False,
    output: Annotated[Optional[Path], typer.Option(help="Output file for report")] = None,
) -> None:
    """Validate records from a file."""
    from farmqc.core.types import ValidationContext
    from farmqc.validate.engine import DataValidationEngine
    from farmqc.validate.importer import validate_import

    console.print(f"[blue]Validating {entity.value} records from {path}...[/blue]")

    try:
        records = load_records(path)
    except RecordLoadError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)

    engine = DataValidationEngine()
    context = ValidationContext(entity_kind=entity, operation_kind=operation)
    report = asyncio.run(
        validate_import(engine, records, context, auto_correct=auto_correct)
    )

    table = Table(title="Validation Results")
    table.add_column("Row", style="cyan", justify="right")
    table.add_column("Valid")
    table.add_column("Quality", justify="right")
    table.add_column("Errors", style="red")
    table.add_column("Warnings", style="yellow")

    for row in report.rows:
        table.add_row(
            str(row.index),
            "[green]yes[/green]" if row.accepted else "[red]no[/red]",
            str(row.result.quality_score),
            "\n".join(f.message for f in row.result.errors),
            "\n".join(f.message for f in row.result.warnings),
        )

    console.print(table)
    console.print(report.summary())

    if output:
        with open(output, "w", encoding="utf-8") as f:
            json.dump(report.to_dict(), f, indent=2, default=str)
        console.print(f"\n[green]Report saved to {output}[/green]")

    if report.failed:
        raise typer.Exit(1)


@app.command()
def rules(
    entity: Annotated[EntityKind, typer.Argument(help="Entity kind to describe")],
) -> None:
    """Show the field rules and custom rules for an entity kind."""
    from farmqc.validate.registry import rules_for
    from farmqc.validate.rules import rules_applicable_to

    table = Table(title=f"Field rules: {entity.value}")
    table.add_column("Field", style="cyan")
    table.add_column("Required")
    table.add_column("Expected", style="green")
    table.add_column("Depends on")

    for rule in rules_for(entity):
        table.add_row(
            rule.name,
            "yes" if rule.required else "",
            rule.expected,
            ", ".join(rule.depends_on),
        )
    console.print(table)

    custom = rules_applicable_to(entity)
    if custom:
        console.print("\n[yellow]Custom rules:[/yellow]")
        for rule in custom:
            console.print(f"  {rule.name}: {rule.description}")


if __name__ == "__main__":
    app()
