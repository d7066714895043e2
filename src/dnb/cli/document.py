"""Document commands: validate, compile."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape

from dnb.cli import _load_config, _load_document, app, console


@app.command()
def validate(
    file: Annotated[Path, typer.Argument(help="Deepnote YAML file")],
) -> None:
    """Check a Deepnote file against the document schema.

    Examples:
      dnb validate analysis.deepnote
    """
    from dnb.engine.blocks import check_project_references

    document = _load_document(file)

    for problem in check_project_references(document):
        console.print(f"[yellow]Warning:[/yellow] {escape(problem)}")

    notebooks = document.project.notebooks
    block_count = sum(len(notebook.blocks) for notebook in notebooks)
    console.print(
        f"[green]OK[/green] {escape(str(file))}: "
        f"{len(notebooks)} notebook(s), {block_count} block(s)"
    )


@app.command(name="compile")
def compile_command(
    file: Annotated[Path, typer.Argument(help="Deepnote YAML file")],
    notebook: Annotated[Optional[str], typer.Option("--notebook", "-n", help="Notebook name or id (default: all)")] = None,
    output_format: Annotated[Optional[str], typer.Option("--format", "-f", help="Output format: python or markdown")] = None,
    skip_errors: Annotated[bool, typer.Option("--skip-errors", help="Skip blocks that fail to compile")] = False,
    variables: Annotated[Optional[list[str]], typer.Option("--var", help="Button variable that evaluates to True (repeatable)")] = None,
) -> None:
    """Compile notebook blocks to a Python script or a markdown document.

    Examples:
      dnb compile analysis.deepnote
      dnb compile analysis.deepnote --notebook "Main" --format markdown
      dnb compile analysis.deepnote --var run_export --skip-errors
    """
    from dnb.engine.blocks import (
        BlockError,
        ButtonExecutionContext,
        compile_notebook,
        notebook_to_markdown,
        notebook_to_script,
    )

    config = _load_config()
    output_format = output_format or config.compile.format
    if output_format not in ("python", "markdown"):
        console.print(f"[red]Unknown format: {escape(output_format)}[/red] (expected python or markdown)")
        raise typer.Exit(1)

    on_error = "skip" if skip_errors else config.compile.on_error
    context = ButtonExecutionContext(variable_context=tuple(variables or config.compile.variable_context))

    document = _load_document(file)
    notebooks = document.project.notebooks
    if notebook is not None:
        notebooks = [nb for nb in notebooks if notebook in (nb.name, nb.id)]
        if not notebooks:
            console.print(f"[red]Notebook '{escape(notebook)}' not found in {escape(str(file))}[/red]")
            raise typer.Exit(1)

    render = notebook_to_markdown if output_format == "markdown" else notebook_to_script
    sections = []
    for nb in notebooks:
        try:
            compiled = compile_notebook(nb, execution_context=context, on_error=on_error)
        except BlockError as e:
            console.print(f"[red]Failed to compile notebook '{escape(nb.name)}':[/red] {escape(str(e))}")
            raise typer.Exit(1)

        text = render(compiled)
        if len(notebooks) > 1:
            header = f"# {nb.name}" if output_format == "markdown" else f"# Notebook: {nb.name}"
            text = f"{header}\n\n{text}"
        sections.append(text)

    typer.echo("\n".join(sections), nl=False)
