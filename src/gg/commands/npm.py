"""npm package lookup."""
from typing import Optional

import typer

from ..console import echo_lines, fail
from ..errors import NotFoundError, RegistryError
from ..formatting import format_npm
from ..registry import NpmRegistry


def npm(
    package: str = typer.Argument(..., help="npm package name"),
    fn: Optional[str] = typer.Option(None, "--fn", help="Function of interest inside the package"),
) -> None:
    """npm package → compact MCP summary.

    Examples:
        gg npm prettier
        gg npm lodash --fn debounce
    """
    registry = NpmRegistry()

    if not registry.cache.has(package):
        typer.echo(f"📦 Fetching {package} from npm...")

    try:
        info, cached = registry.lookup(package)
    except NotFoundError:
        fail(f"Package not found: {package}")
    except RegistryError as e:
        fail("Failed to fetch package", e)

    if cached:
        typer.echo(f"📦 {package} (cached)")

    typer.echo()
    echo_lines(format_npm(info, fn=fn))
