"""Maaza model MCP endpoint info."""
import typer

from ..config import load_secrets, read_config
from ..errors import ConfigError
from ..models import GGConfig

BANNER = [
    "🐱 Maaza Orchestrator v1.2",
    "",
    "Code-execution MCP — 98.7% token reduction",
    "Compatible with: Claude Desktop, Cursor, any MCP client",
]


def maaza() -> None:
    """Maaza model MCP endpoint."""
    try:
        config = read_config()
    except ConfigError:
        config = GGConfig()

    try:
        key_status = "configured" if load_secrets().maaza_api_key else "not configured"
    except ConfigError:
        key_status = "not configured (run: gg config init)"

    for line in BANNER:
        typer.echo(line)
    typer.echo()
    typer.echo(f"Model: {config.api.maaza_model}")
    typer.echo(f"API key: {key_status}")
