from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from eliot import start_action
from pycomfort.logging import to_nice_stdout
from rich.console import Console
from rich.table import Table

from allelejoin.fields import FieldRegistry
from allelejoin.io import HeaderError, read_info_declarations

load_dotenv()

app = typer.Typer(
    name="allelejoin",
    help="Inspect the fields an auxiliary VCF source contributes to variant annotations",
    rich_markup_mode="rich"
)

console = Console()


def _load_registry(source: Path, name: str) -> FieldRegistry:
    try:
        declarations = read_info_declarations(source)
    except HeaderError as e:
        console.print(f"❌ {e}", style="red")
        raise typer.Exit(code=1)
    return FieldRegistry(name, declarations)


@app.command()
def fields(
    source: Path = typer.Argument(..., help="Auxiliary VCF/BCF file whose INFO declarations are read"),
    name: str = typer.Option(..., "--name", "-n", help="Logical source name used as the field prefix"),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Also write the field table as TSV to this path"
    ),
    log: bool = typer.Option(
        False,
        "--log/--no-log",
        help="Print eliot log messages to stdout"
    ),
):
    """
    List the namespaced fields, count types and defaults of an annotation source.
    """
    if log:
        to_nice_stdout()

    with start_action(action_type="fields_command", source=str(source), name=name) as action:
        registry = _load_registry(source, name)
        if len(registry) == 0:
            console.print(f"⚠️ {source} declares no INFO fields, nothing to annotate", style="yellow")
            return

        frame = registry.to_frame()
        table = Table(title=f"{name} fields ({len(registry)})")
        for column in ("name", "type", "number", "default", "description"):
            table.add_column(column)
        for row in frame.iter_rows(named=True):
            table.add_row(row["name"], row["type"], row["number"], repr(row["default"]), row["description"])
        console.print(table)

        if output is not None:
            output.parent.mkdir(parents=True, exist_ok=True)
            frame.write_csv(output, separator="\t")
            console.print(f"📁 Field table written to [bold blue]{output}[/bold blue]")
            action.add_success_fields(output=str(output))


@app.command()
def header(
    source: Path = typer.Argument(..., help="Auxiliary VCF/BCF file whose INFO declarations are read"),
    name: str = typer.Option(..., "--name", "-n", help="Logical source name used as the field prefix"),
):
    """
    Print the renamed ##INFO lines to merge into an annotated VCF header.
    """
    registry = _load_registry(source, name)
    for line in registry.header_lines():
        typer.echo(line)


if __name__ == "__main__":
    app()
