"""Output helpers shared by the commands."""
from typing import Iterable, NoReturn, Optional

import typer

from .errors import sanitize


def echo_lines(lines: Iterable[str]) -> None:
    for line in lines:
        typer.echo(line)


def fail(message: str, error: Optional[BaseException] = None) -> NoReturn:
    """Print an error (secrets masked) to stderr and exit 1."""
    typer.echo(f"❌ {sanitize(message)}", err=True)
    if error is not None:
        typer.echo(f"   Error: {sanitize(str(error))}", err=True)
    raise typer.Exit(1)
