"""git and gh subprocess wrappers.

Authentication is delegated entirely to the `gh` CLI session.
"""
import json
import subprocess
from pathlib import Path
from typing import Any, Optional

from .errors import GitError

PR_VIEW_FIELDS = "number,title,author,state,body,additions,deletions,changedFiles,headRefName,baseRefName,url"
PR_LIST_FIELDS = "number,title,headRefName"


def parse_github_url(url: str) -> str:
    """Extract `owner/repo` from an HTTPS or SSH GitHub remote URL ('' if not GitHub)."""
    url = url.strip().rstrip("/")
    if url.endswith(".git"):
        url = url[:-4]

    if url.startswith("git@github.com:"):
        return url[len("git@github.com:"):]

    if "github.com/" in url:
        parts = url.split("github.com/")
        if len(parts) == 2:
            return parts[1].lstrip(":")

    return ""


def run(
    args: list[str],
    cwd: Optional[Path] = None,
    capture: bool = True,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """Run a command. With check, a non-zero exit raises GitError."""
    try:
        result = subprocess.run(args, cwd=cwd, capture_output=capture, text=True)
    except FileNotFoundError as e:
        raise GitError(f"{args[0]} not found. Install it and retry.") from e

    if check and result.returncode != 0:
        detail = (result.stderr or result.stdout or "").strip() if capture else ""
        raise GitError(f"`{' '.join(args[:3])}` failed", extra_info={"exit": result.returncode, "detail": detail or None})
    return result


def current_repo(cwd: Optional[Path] = None) -> str:
    """`owner/repo` of the origin remote, or '' outside a GitHub checkout."""
    try:
        result = run(["git", "remote", "get-url", "origin"], cwd=cwd, check=False)
    except GitError:
        return ""
    if result.returncode != 0:
        return ""
    return parse_github_url(result.stdout)


def gh_authenticated() -> bool:
    """True if `gh auth status` reports a logged-in session."""
    try:
        result = run(["gh", "auth", "status"], check=False)
    except GitError:
        return False
    output = (result.stdout or "") + (result.stderr or "")
    return result.returncode == 0 and "Logged in" in output


def create_branch(name: str, cwd: Optional[Path] = None) -> None:
    run(["git", "checkout", "-b", name], cwd=cwd)


def commit_all(message: str, cwd: Optional[Path] = None) -> None:
    run(["git", "add", "."], cwd=cwd)
    run(["git", "commit", "-m", message], cwd=cwd)


def push_branch(name: str, cwd: Optional[Path] = None) -> None:
    run(["git", "push", "-u", "origin", name], cwd=cwd)


def create_pr(title: str, body: str, cwd: Optional[Path] = None) -> str:
    """Open a PR for the current branch and return its URL."""
    result = run(["gh", "pr", "create", "--title", title, "--body", body], cwd=cwd)
    return result.stdout.strip()


def _gh_json(args: list[str]) -> Any:
    result = run(args)
    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise GitError(f"failed to parse `{' '.join(args[:3])}` output: {e}") from e


def latest_pr() -> Optional[dict[str, Any]]:
    prs = _gh_json(["gh", "pr", "list", "--limit", "1", "--json", PR_LIST_FIELDS])
    if isinstance(prs, list) and prs:
        return prs[0]
    return None


def view_pr(number: str) -> dict[str, Any]:
    pr = _gh_json(["gh", "pr", "view", number, "--json", PR_VIEW_FIELDS])
    if not isinstance(pr, dict):
        raise GitError("unexpected `gh pr view` output")
    return pr


def merge_pr(number: str) -> None:
    run(["gh", "pr", "merge", number, "--squash", "--delete-branch"], capture=False)


def diff_pr(number: str) -> None:
    run(["gh", "pr", "diff", number], capture=False, check=False)


def close_pr(number: str) -> None:
    run(["gh", "pr", "close", number], capture=False)
