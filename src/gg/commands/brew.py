"""Homebrew formula lookup."""
import typer

from ..console import echo_lines, fail
from ..errors import NotFoundError, RegistryError
from ..formatting import format_brew
from ..registry import BrewRegistry


def brew(
    formula: str = typer.Argument(..., help="Homebrew formula"),
    install: bool = typer.Option(False, "-i", "--install", help="Auto-install formula if not installed"),
) -> None:
    """Homebrew formula → compact MCP summary.

    Examples:
        gg brew ffmpeg
        gg brew -i jq
    """
    registry = BrewRegistry()

    try:
        info, installed, cached = registry.lookup(formula)
    except NotFoundError:
        fail(f"Formula not found: {formula}")
    except RegistryError as e:
        fail("Failed to fetch formula", e)

    if cached:
        typer.echo(f"🍺 {formula} (cached)")

    if not installed and install:
        typer.echo(f"🍺 Installing {formula}...")
        if not registry.install(formula):
            fail(f"Install failed: {formula}")
        typer.echo(f"✅ {formula} installed")
        installed = True

    typer.echo()
    echo_lines(format_brew(info, installed, show_install_hint=not install))
