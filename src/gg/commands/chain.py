"""Chain several tool summaries together, save and replay chains."""
from typing import Optional

import typer

from ..chains import ChainStore, parse_refs
from ..errors import GGError
from ..formatting import token_cost
from ..registry import BrewRegistry, NpmRegistry

USAGE = [
    "❌ Usage: gg chain <tool:pkg> [tool:pkg...]",
    "         gg chain --save <name> <tool:pkg> [tool:pkg...]",
    "         gg chain run <name>",
    "         gg chain <saved-name>",
    "",
    "Examples:",
    "  gg chain npm:prettier npm:eslint brew:jq",
    "  gg chain --save webformat npm:prettier npm:eslint",
    "  gg chain run webformat",
]


def chain(
    args: Optional[list[str]] = typer.Argument(None, help="type:name refs, a saved chain, or `run NAME`"),
    save: Optional[str] = typer.Option(None, "--save", help="Save the refs under this name"),
    list_chains: bool = typer.Option(False, "--list", help="List saved chains"),
) -> None:
    """Chain MCPs (npm:pkg brew:formula) and show combined token cost.

    Examples:
        gg chain npm:prettier npm:eslint brew:jq
        gg chain --save webformat npm:prettier npm:eslint
        gg chain run webformat
    """
    store = ChainStore()
    args = args or []

    if list_chains:
        show_saved_chains(store)
        return

    if save:
        if not args:
            typer.echo("❌ Usage: gg chain --save <name> <tool:pkg>...")
            raise typer.Exit(1)
        store.save(save, args)
        typer.echo(f"💾 Saved chain '{save}' with {len(args)} tools")
        return

    if not args:
        for line in USAGE:
            typer.echo(line)
        raise typer.Exit(1)

    if args[0] == "run":
        if len(args) < 2:
            typer.echo("❌ Usage: gg chain run <name>")
            raise typer.Exit(1)
        run_chain(store, args[1])
        return

    if ":" not in args[0]:
        tools = store.load(args[0])
        if tools is None:
            typer.echo(f"❌ Unknown chain: {args[0]}")
            typer.echo("   Run 'gg chain --list' to see saved chains")
            raise typer.Exit(1)
        typer.echo(f"🔗 Running saved chain '{args[0]}'")
        typer.echo()
        args = tools

    show_chain(args)


def show_chain(refs: list[str]) -> int:
    """Print each ref with its token cost. Returns the combined cost."""
    typer.echo(f"🔗 Chained {len(refs)} MCPs:")
    total = 0
    for i, (raw, ref) in enumerate(parse_refs(refs), start=1):
        if ref is None:
            typer.echo(f"   {i}. ❌ Invalid format: {raw} (expected type:name)")
            continue
        cost = token_cost(ref.type)
        typer.echo(f"   {i}. {ref} (~{cost} tokens)")
        total += cost

    typer.echo()
    typer.echo(f"📊 Combined token cost: ~{total}")
    return total


def show_saved_chains(store: ChainStore) -> None:
    chains = store.list()
    if not chains:
        typer.echo("📋 No saved chains")
        typer.echo("   Create one: gg chain --save <name> <tool:pkg>...")
        return

    typer.echo("📋 Saved chains:")
    for name, count in chains.items():
        typer.echo(f"   • {name} ({count} tools)")


def run_chain(
    store: ChainStore,
    name: str,
    npm: Optional[NpmRegistry] = None,
    brew: Optional[BrewRegistry] = None,
) -> int:
    """Fetch or check every tool of a saved chain. Returns how many are ready."""
    tools = store.load(name)
    if tools is None:
        typer.echo(f"❌ Chain not found: {name}")
        typer.echo("   Run 'gg chain --list' to see saved chains")
        raise typer.Exit(1)

    typer.echo(f"🔗 Executing chain '{name}'...")
    typer.echo()

    ready = 0
    total = len(tools)
    for i, (raw, ref) in enumerate(parse_refs(tools), start=1):
        if ref is None:
            typer.echo(f"[{i}/{total}] ❌ Invalid: {raw}")
            continue

        typer.echo(f"[{i}/{total}] {ref}")
        if ref.type == "npm":
            npm = npm or NpmRegistry()
            ok = check_npm(npm, ref.name)
        elif ref.type == "brew":
            brew = brew or BrewRegistry()
            ok = check_brew(brew, ref.name)
        else:
            typer.echo(f"   ⚠️  Unknown type: {ref.type}")
            ok = False

        if ok:
            ready += 1
        typer.echo()

    typer.echo(f"✅ Chain complete: {ready}/{total} tools ready")
    return ready


def check_npm(registry: NpmRegistry, package: str) -> bool:
    try:
        info, cached = registry.lookup(package)
    except GGError:
        typer.echo(f"   📦 {package} ❌")
        return False

    if cached:
        typer.echo(f"   📦 {package} ✓ (cached)")
    else:
        typer.echo(f"   📦 {package}@{info.get('version', '')} ✓")
    return True


def check_brew(registry: BrewRegistry, formula: str) -> bool:
    if registry.is_installed(formula):
        typer.echo(f"   🍺 {formula} ✓ installed")
        return True
    typer.echo(f"   🍺 {formula} (not installed)")
    return False
