"""CLI interface for Deepnote notebook files.

Split into modules by command group.
The Typer app and shared helpers live here; each module registers its commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

app = typer.Typer(
    name="dnb",
    help="Validate Deepnote notebook files and compile their blocks to Python or markdown.",
    no_args_is_help=True,
)
# Messages quote user text containing [brackets]; escape it before printing.
console = Console(soft_wrap=True)


@app.callback()
def main(
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="Log level (default: from dnb.yml, else WARNING)")] = None,
) -> None:
    """Deepnote notebook tooling."""
    from dnb import setup_logging

    config = _load_config()
    setup_logging(log_level or config.log_level)


def _load_config(project_dir: Path | None = None):
    """Load dnb.yml, turning a malformed file into a CLI error."""
    import yaml

    from dnb.config import load_config

    try:
        return load_config(project_dir)
    except ValidationError as e:
        console.print(f"[red]Invalid dnb.yml:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except yaml.YAMLError as e:
        console.print(f"[red]Invalid YAML in dnb.yml:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _load_document(path: Path):
    """Read and validate a Deepnote file, or exit with the reason it failed."""
    import yaml

    from dnb.engine.deserialize import DeepnoteFileParseError, deserialize_deepnote_file

    if not path.is_file():
        console.print(f"[red]File not found: {escape(str(path))}[/red]")
        raise typer.Exit(1)

    try:
        return deserialize_deepnote_file(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        console.print(f"[red]Invalid YAML in {escape(str(path))}:[/red]")
        console.print(escape(str(e)))
        raise typer.Exit(1)
    except DeepnoteFileParseError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


# Import submodules so they register their commands on `app`.
from dnb.cli import document  # noqa: E402, F401
from dnb.cli import names  # noqa: E402, F401
