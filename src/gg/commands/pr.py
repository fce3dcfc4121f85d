"""View and act on one pull request."""
import typer

from ..console import echo_lines, fail
from ..errors import GitError
from ..formatting import format_pr
from ..git import close_pr, current_repo, diff_pr, merge_pr, view_pr
from .ask import ensure_github_auth

ACTIONS = [
    "Actions:",
    "  [a]pprove - Merge this PR",
    "  [d]iff   - Show full diff",
    "  [c]lose  - Close without merging",
    "  [q]uit   - Exit",
]


def pr(
    number: str = typer.Argument(..., help="PR number"),
    action: str = typer.Option("", "--action", "-a", help="a, d, c or q (skips the prompt)"),
) -> None:
    """View/manage a specific PR."""
    ensure_github_auth()
    if not current_repo():
        fail("Not in a git repository")

    try:
        data = view_pr(number)
    except GitError as e:
        fail("Failed to fetch PR", e)

    echo_lines(format_pr(data))
    typer.echo()

    if data.get("state") != "OPEN":
        return

    choice = action
    if not choice:
        echo_lines(ACTIONS)
        choice = typer.prompt("\nChoice", default="q", show_default=False)
    choice = choice.strip().lower()[:1]

    try:
        if choice == "a":
            merge_pr(number)
            typer.echo("✓ PR merged!")
        elif choice == "d":
            diff_pr(number)
        elif choice == "c":
            close_pr(number)
            typer.echo("✓ PR closed")
        else:
            typer.echo("Exiting")
    except GitError as e:
        fail("PR action failed", e)
