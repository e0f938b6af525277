"""Encode command - apply page-stream filters to a file."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from vector_surface.filters import FilterType, encode_stream

console = Console()


@click.command()
@click.argument("input_file", metavar="INPUT", type=click.Path(exists=True, path_type=Path))
@click.argument("output", type=click.Path(path_type=Path))
@click.option(
    "--filter",
    "-F",
    "filters",
    type=click.Choice([t.value for t in FilterType], case_sensitive=False),
    multiple=True,
    required=True,
    help="Filter to apply; repeat to chain (applied in the order given)",
)
def encode(input_file: Path, output: Path, filters: tuple[str, ...]) -> None:
    """Encode INPUT with one or more stream filters and write OUTPUT."""
    try:
        data = input_file.read_bytes()
    except OSError as e:
        console.print(f"[red]Error:[/red] Cannot read {input_file}: {e}")
        raise SystemExit(1) from None

    encoded, entry = encode_stream(data, [f.lower() for f in filters])

    try:
        output.write_bytes(encoded)
    except OSError as e:
        console.print(f"[red]Error:[/red] Cannot write {output}: {e}")
        raise SystemExit(1) from None

    table = Table(title="Stream Encoding")
    table.add_column("Input", style="cyan")
    table.add_column("Filters", style="green")
    table.add_column("Bytes in", justify="right")
    table.add_column("Bytes out", justify="right")
    table.add_row(str(input_file), " -> ".join(filters), str(len(data)), str(len(encoded)))
    console.print(table)
    console.print(f"[bold]{escape(entry)}[/bold]", highlight=False)
