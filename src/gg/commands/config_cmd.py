"""Configuration management commands for gg."""
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..config import (
    CONFIG_FILE,
    SECRETS_FILE,
    encrypt_secrets,
    generate_identity,
    get_gg_home,
    load_secrets,
    read_config,
    write_config,
)
from ..console import fail
from ..errors import ConfigError
from ..models import PRO_KEY_PREFIX, APISection, GGConfig, GGSection, Secrets

app = typer.Typer(help="Create and inspect ~/.gg configuration.")


def _ask(value: Optional[str], message: str) -> str:
    if value is not None:
        return value.strip()
    return typer.prompt(message, default="", show_default=False, hide_input=True).strip()


def mask(value: str) -> str:
    """Show only enough of a secret to recognise it."""
    if not value:
        return "[dim]not set[/dim]"
    if len(value) <= 12:
        return "****"
    return f"{value[:7]}…{value[-4:]}"


@app.command("init")
def config_init(
    claude_key: Optional[str] = typer.Option(None, "--claude-key", help="Claude API key"),
    openai_key: Optional[str] = typer.Option(None, "--openai-key", help="OpenAI API key"),
    maaza_key: Optional[str] = typer.Option(None, "--maaza-key", help="Maaza API key"),
    license_key: Optional[str] = typer.Option(None, "--license", help="gg Pro license key"),
    provider: str = typer.Option("anthropic", "--provider", "-p", help="Default provider"),
) -> None:
    """Create config.toml and the encrypted secrets file.

    Keys not passed as options are prompted for. Press Enter to skip one.

    Example:
        gg config init
    """
    if provider not in ("anthropic", "openai", "ollama"):
        fail(f"Unknown provider: {provider}")

    home = get_gg_home()
    typer.echo(f"Welcome to gg v{__version__}!")
    typer.echo()
    typer.echo("Setting up your configuration...")
    typer.echo()

    secrets = Secrets(
        claude_api_key=_ask(claude_key, "Enter your Claude API key (from console.anthropic.com)"),
        openai_api_key=_ask(openai_key, "Enter your OpenAI API key (optional, press Enter to skip)"),
        maaza_api_key=_ask(maaza_key, "Enter your Maaza API key (optional, press Enter to skip)"),
        pro_license_key=_ask(license_key, "Enter your Pro license key (optional, press Enter to skip)"),
    )

    config = GGConfig(
        gg=GGSection(tier="pro" if secrets.pro_license_key.startswith(PRO_KEY_PREFIX) else "free"),
        api=APISection(provider=provider),
    )

    try:
        identity = generate_identity(home)
        write_config(config, home)
        encrypt_secrets(secrets, identity, home)
    except OSError as e:
        fail("Failed to write configuration", e)

    typer.echo()
    typer.echo(f"✓ Configuration saved to {home / CONFIG_FILE}")
    typer.echo(f"✓ Secrets encrypted and saved to {home / SECRETS_FILE}")
    typer.echo()
    typer.echo("Run 'gg ask \"your prompt\"' to get started!")


@app.command("show")
def config_show(
    plain: bool = typer.Option(False, "--plain", help="Plain text output"),
) -> None:
    """Show current configuration (secrets masked).

    Example:
        gg config show
    """
    console = Console(force_terminal=not plain, no_color=plain)
    home = get_gg_home()

    try:
        config = read_config(home)
    except ConfigError as e:
        fail("Config error", e)

    console.print(f"[dim]Config file: {home / CONFIG_FILE}[/dim]")
    console.print()

    defaults = GGConfig()
    table = Table(box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("Status", justify="center")

    current = config.model_dump()
    default_values = defaults.model_dump()
    for section, values in current.items():
        for name, value in values.items():
            status = "[dim]default[/dim]" if value == default_values[section][name] else "[green]custom[/green]"
            table.add_row(f"{section}.{name}", str(value), status)

    console.print(table)

    try:
        secrets = load_secrets(home)
    except ConfigError as e:
        console.print(f"\n[yellow]Secrets unavailable:[/yellow] {e}")
        return

    console.print()
    console.print("[bold]Secrets[/bold]")
    for name, value in secrets.model_dump().items():
        console.print(f"  [dim]-[/dim] {name}: {mask(value)}")
    console.print(f"  [dim]-[/dim] pro: {'yes' if secrets.is_pro else 'no'}")
