"""GitHub repository summaries (`gg owner/repo` and `gg .`)."""
import typer

from ..console import echo_lines, fail
from ..errors import NotFoundError, RegistryError
from ..formatting import format_repo
from ..git import current_repo
from ..registry import GitHubClient


def repo(
    name: str = typer.Argument(".", help="owner/repo, or '.' for the current checkout"),
) -> None:
    """GitHub repo → compact summary.

    Examples:
        gg repo .
        gg cli/cli
    """
    if name == ".":
        name = current_repo()
        if not name:
            fail("Not in a git repo or no GitHub remote configured")
        typer.echo(f"📦 Current repo: {name}")

    if name.count("/") != 1:
        fail(f"Expected owner/repo, got: {name}")

    try:
        data = GitHubClient().get_repo(name)
    except NotFoundError:
        fail(f"Repository not found: {name}")
    except RegistryError as e:
        fail("Failed to fetch repository", e)

    echo_lines(format_repo(data))
