"""gg logs: read back the command log."""
from collections import Counter

import typer
from rich.console import Console
from rich.table import Table

from ..logging import CommandLog

app = typer.Typer(help="Inspect the gg command log.")
console = Console()

ARGS_PREVIEW = 60
# Commands that change a repository get highlighted
WRITE_COMMANDS = {"ask", "edit", "approve", "pr"}


def _preview(args: str) -> str:
    if len(args) <= ARGS_PREVIEW:
        return args
    return args[:ARGS_PREVIEW] + "..."


@app.command("show")
def logs_show(
    lines: int = typer.Option(50, "--lines", "-n", help="How many recent entries to print"),
    command: str = typer.Option("", "--command", "-c", help="Filter to one command, e.g. 'cache clean'"),
    summary: bool = typer.Option(False, "--summary", "-s", help="Count invocations per command instead"),
):
    """Print recent gg invocations."""
    entries = CommandLog().entries()
    if command:
        entries = [e for e in entries if e.command == command]

    if not entries:
        console.print("[yellow]No log entries found.[/yellow]")
        return

    if summary:
        table = Table(title="gg Command Usage")
        table.add_column("Command", style="cyan")
        table.add_column("Count", style="green", justify="right")
        for name, count in Counter(e.command for e in entries).most_common():
            table.add_row(name, str(count))
        console.print(table)
        return

    for entry in entries[-lines:]:
        when = entry.timestamp[:19]
        style = "bold blue" if entry.command in WRITE_COMMANDS else "dim"
        console.print(f"[{style}]{when}[/] {entry.command} {_preview(entry.args)}", highlight=False)


@app.command("clear")
def logs_clear(
    force: bool = typer.Option(False, "--force", "-f", help="Don't ask first"),
):
    """Delete the command log."""
    log = CommandLog()
    if not log.path.exists():
        console.print("[yellow]Nothing to clear.[/yellow]")
        return

    if not force and not typer.confirm(f"Delete {log.path}?"):
        raise typer.Abort()

    log.clear()
    console.print("[green]Command log cleared.[/green]")
