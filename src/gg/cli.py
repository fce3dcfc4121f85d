"""gg CLI - compressed package, repo and LLM summaries for AI agents."""

import sys
from typing import Optional

import typer

from . import __version__

app = typer.Typer(
    name="gg",
    help="Token-frugal MCP summaries for npm, Homebrew, GitHub and LLM chats, plus prompt-to-PR code generation",
    no_args_is_help=True,
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"gg v{__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-v", callback=_print_version, is_eager=True, help="Print the gg version and exit"
    ),
) -> None:
    """gg - compact context for AI coding agents."""
    # Log command invocation for development tracking
    from .logging import log_from_cli
    try:
        log_from_cli()
    except OSError:
        # Don't let logging failures break the CLI
        pass


@app.command(name="version")
def version() -> None:
    """Print the gg version."""
    typer.echo(f"gg v{__version__}")


# Import and register command modules
from .commands import a2a as a2a_cmd
from .commands import ask as ask_cmd
from .commands import brew as brew_cmd
from .commands import cache_cmd
from .commands import chain as chain_cmd
from .commands import config_cmd
from .commands import cool as cool_cmd
from .commands import logs as logs_cmd
from .commands import maaza as maaza_cmd
from .commands import npm as npm_cmd
from .commands import pr as pr_cmd
from .commands import repo as repo_cmd
from .commands import run as run_cmd
from .commands import stats as stats_cmd

# Package lookups
app.command(name="npm")(npm_cmd.npm)
app.command(name="brew")(brew_cmd.brew)
app.command(name="repo")(repo_cmd.repo)

# Prompt -> PR workflow
app.command(name="ask")(ask_cmd.ask)
app.command(name="edit")(ask_cmd.edit)
app.command(name="approve")(ask_cmd.approve)
app.command(name="pr")(pr_cmd.pr)

app.command(name="a2a")(a2a_cmd.a2a)
app.command(name="chain")(chain_cmd.chain)
app.command(name="cool")(cool_cmd.cool)
app.command(name="maaza")(maaza_cmd.maaza)

# `gg run ls -la` passes -la through to the command
app.command(
    name="run",
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)(run_cmd.run)
app.command(name="stats")(stats_cmd.stats)

# Register subcommand groups
app.add_typer(cache_cmd.app, name="cache")
app.add_typer(config_cmd.app, name="config")
app.add_typer(logs_cmd.app, name="logs")


def command_names() -> set[str]:
    names = {c.name for c in app.registered_commands if c.name}
    names.update(g.name for g in app.registered_groups if g.name)
    return names


def _summary(help_text: object) -> str:
    if not isinstance(help_text, str):
        return ""
    lines = help_text.strip().splitlines()
    return lines[0] if lines else ""


def usage_lines() -> list[str]:
    """One line per command, for when the first word is not a command."""
    entries = [(c.name, _summary(c.help or (c.callback.__doc__ if c.callback else None)))
               for c in app.registered_commands if c.name]
    entries += [(g.name, _summary(g.typer_instance.info.help))
                for g in app.registered_groups if g.name and g.typer_instance]
    width = max(len(name) for name, _ in entries)

    lines = ["Usage: gg COMMAND [ARGS]...", "       gg owner/repo | gg .", "", "Commands:"]
    lines += [f"  {name.ljust(width)}  {summary}".rstrip() for name, summary in sorted(entries)]
    return lines


def route_args(argv: list[str]) -> Optional[list[str]]:
    """Rewrite shorthand invocations into regular commands.

    `gg .` and `gg owner/repo` become `gg repo ...`. Returns None when the
    first word is not a known command.
    """
    if not argv:
        return argv

    first = argv[0]
    if first.startswith("-") or first in command_names():
        return argv
    if first == "." or "/" in first:
        return ["repo", *argv]
    return None


def main() -> None:
    """Console entry point."""
    argv = route_args(sys.argv[1:])
    if argv is None:
        typer.echo(f"❌ Unknown command: {sys.argv[1]}", err=True)
        typer.echo("", err=True)
        for line in usage_lines():
            typer.echo(line, err=True)
        sys.exit(1)

    sys.argv = [sys.argv[0], *argv]
    app()


if __name__ == "__main__":
    main()
