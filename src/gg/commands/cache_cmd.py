"""Local cache inspection and cleanup."""
import typer

from ..cache import DEFAULT_MAX_AGE_DAYS, cache_status, clean_cache, iter_entries
from ..config import get_cache_path
from ..formatting import format_size

app = typer.Typer(help="Inspect and prune the package cache.")


@app.command("status")
def cache_status_cmd() -> None:
    """Show cache size and contents."""
    status = cache_status()

    typer.echo("📦 Cache Status")
    typer.echo()
    typer.echo(f"   Total: {format_size(status.total_size)}")
    typer.echo(f"   npm:   {format_size(status.sizes['npm'])} ({status.counts['npm']} packages)")
    typer.echo(f"   brew:  {format_size(status.sizes['brew'])} ({status.counts['brew']} formulas)")
    typer.echo()
    typer.echo(f"   Location: {status.location}")


@app.command("clean")
def cache_clean_cmd(
    days: int = typer.Option(DEFAULT_MAX_AGE_DAYS, "--days", "-d", min=0, help="Remove entries older than this"),
) -> None:
    """Remove old cache entries."""
    root = get_cache_path()
    if not any(True for _ in iter_entries(root)):
        typer.echo("📦 Cache is empty")
        return

    result = clean_cache(root, max_age_days=days)
    if result.removed == 0:
        typer.echo("🧹 No old cache entries to clean")
    else:
        typer.echo(f"🧹 Cleaned cache: {format_size(result.freed)} freed ({result.removed} entries removed)")
