"""Curated toolbelts."""
from typing import Optional

import typer

from ..chains import TOOLBELTS, parse_refs
from ..formatting import token_cost


def cool(
    toolbelt: Optional[str] = typer.Argument(None, help="webdev, media, sec, data or devops"),
    list_all: bool = typer.Option(False, "--list", help="List all toolbelts"),
) -> None:
    """Curated toolbelts (webdev, media, sec, data, devops)."""
    if list_all:
        typer.echo("🧰 Available toolbelts:")
        typer.echo()
        for name, tools in TOOLBELTS.items():
            typer.echo(f"   {name} ({len(tools)} tools)")
            for _, ref in parse_refs(tools):
                typer.echo(f"      • {ref.name} ({ref.type})")
            typer.echo()
        return

    if not toolbelt:
        typer.echo("❌ Usage: gg cool <toolbelt>")
        typer.echo("         gg cool --list")
        typer.echo()
        typer.echo(f"Available toolbelts: {', '.join(TOOLBELTS)}")
        raise typer.Exit(1)

    tools = TOOLBELTS.get(toolbelt)
    if tools is None:
        typer.echo(f"❌ Unknown toolbelt: {toolbelt}")
        typer.echo("   Run 'gg cool --list' to see available toolbelts")
        raise typer.Exit(1)

    typer.echo(f"🧰 Toolbelt: {toolbelt}")
    typer.echo()
    total = 0
    for _, ref in parse_refs(tools):
        typer.echo(f"   • {ref.name} ({ref.type})")
        total += token_cost(ref.type)

    typer.echo()
    typer.echo(f"📊 Combined token cost: ~{total}")
    typer.echo()
    typer.echo(f"💡 Chain all: gg chain {' '.join(tools)}")
