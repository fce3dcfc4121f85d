"""Run a shell command and report how it went."""
import subprocess
import time

import typer

from ..usage import UsageTracker


def run(
    command: list[str] = typer.Argument(..., help="Command to run"),
) -> None:
    """Execute a command with tracking.

    Example:
        gg run npm test
    """
    cmd = " ".join(command)
    typer.echo(f"🔄 Running: {cmd}")
    typer.echo()

    start = time.monotonic()
    result = subprocess.run(["sh", "-c", cmd])
    elapsed = time.monotonic() - start

    typer.echo()
    if result.returncode != 0:
        typer.echo(f"❌ Exit code: {result.returncode} ({elapsed:.2f}s)")
    else:
        typer.echo(f"✓ Success ({elapsed:.2f}s)")

    UsageTracker().record_command("run")

    if result.returncode != 0:
        raise typer.Exit(result.returncode)
