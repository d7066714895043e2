"""Variable name commands: check-name."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.markup import escape

from dnb.cli import app, console


@app.command(name="check-name")
def check_name(
    name: Annotated[str, typer.Argument(help="Proposed variable name")],
) -> None:
    """Show the identifier a block variable name compiles to.

    Exits with status 1 when the sanitized name is a reserved keyword.

    Examples:
      dnb check-name "my-button-name"
    """
    from dnb.engine.utils import validate_python_variable_name

    result = validate_python_variable_name(name)
    typer.echo(result.sanitized_name)
    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {escape(warning)}")

    if not result.is_valid:
        raise typer.Exit(1)
