"""ask / edit / approve: prompt → code → commit → pull request."""
import time
from pathlib import Path
from typing import Optional

import typer

from ..codeblocks import plan_changes, write_changes
from ..config import load_all
from ..console import fail
from ..errors import ConfigError, GitError, ProviderError
from ..formatting import truncate
from ..git import commit_all, create_branch, create_pr, current_repo, gh_authenticated, latest_pr, merge_pr, push_branch
from ..models import GGConfig, Secrets
from ..providers import build_provider
from ..usage import UsageTracker

PROVIDERS = ("anthropic", "openai", "ollama")
COMMIT_PROMPT_LIMIT = 60

SYSTEM_PROMPT = """You are a code generation assistant for the repository: {repo}

Generate clean, production-ready code based on the user's request.
Format code blocks as:
```language:path/to/file
code here
```

Be concise and only generate the requested code."""

EDIT_PROMPT = """Edit the file {path}.

Instruction: {instruction}

Current content of {path}:
```
{content}
```

Return the complete updated file as a single ```language:{path} block."""

UPSELL = [
    "",
    "╔══════════════════════════════════════╗",
    "║   gg Pro required for this feature  ║",
    "╚══════════════════════════════════════╝",
    "",
    "Pro features:",
    "  • Full Claude-powered code generation",
    "  • Unlimited gg ask commands",
    "  • Priority API access",
    "",
    "Upgrade: https://ggdotdev.com/pro ($15/month)",
    "Local models stay free: gg ask \"...\" --provider ollama",
]


def _load(provider: Optional[str]) -> tuple[GGConfig, Secrets, str]:
    if provider and provider not in PROVIDERS:
        fail(f"Unknown provider: {provider} (choose from {', '.join(PROVIDERS)})")
    try:
        config, secrets = load_all()
    except ConfigError as e:
        fail("Config error. Run: gg config init", e)
    return config, secrets, provider or config.api.provider


def check_tier(secrets: Secrets, provider: str, pro_flag: bool) -> bool:
    """True if the request may proceed; prints the upsell otherwise.

    Hosted providers need a Pro license. Ollama runs locally and is free.
    """
    if secrets.is_pro or provider == "ollama":
        return True
    if pro_flag:
        fail("Pro license not found in config")
    for line in UPSELL:
        typer.echo(line)
    return False


def ensure_github_auth() -> None:
    if gh_authenticated():
        return
    typer.echo("❌ GitHub authentication required", err=True)
    typer.echo("", err=True)
    typer.echo("Run: gh auth login", err=True)
    typer.echo("Or install gh CLI: https://cli.github.com", err=True)
    raise typer.Exit(1)


def run_change_pipeline(
    kind: str,
    summary: str,
    user_prompt: str,
    config: GGConfig,
    secrets: Secrets,
    provider_name: str,
    root: Optional[Path] = None,
) -> Optional[str]:
    """Ask the model, write its code blocks, commit, push and open a PR.

    Returns:
        The PR URL, or None if nothing was committed or the PR could not be created.
    """
    root = root or Path.cwd()
    ensure_github_auth()

    repo_name = current_repo(root)
    if not repo_name:
        fail("Not in a git repository")

    try:
        provider = build_provider(config, secrets, provider=provider_name)
    except (ProviderError, ConfigError) as e:
        fail("Provider error", e)

    typer.echo(f"🤖 Generating code with {provider.name} ({provider.model})...")
    typer.echo()

    try:
        completion = provider.stream(
            user_prompt,
            SYSTEM_PROMPT.format(repo=repo_name),
            on_text=lambda text: typer.echo(text, nl=False),
        )
    except ProviderError as e:
        fail(f"{provider.name} API error", e)
    typer.echo()

    tracker = UsageTracker()
    tracker.record_command(kind)
    if completion.input_tokens or completion.output_tokens:
        tracker.record_tokens(completion.input_tokens, completion.output_tokens)

    changes, rejected = plan_changes(completion.text)
    for path in rejected:
        typer.echo(f"⚠️  Skipping unsafe path: {path}")

    if not changes:
        typer.echo("⚠️  No code blocks found in response")
        typer.echo("Model response:")
        typer.echo(completion.text)
        return None

    branch = f"gg-{kind}-{int(time.time())}"
    commit_msg = f"gg {kind}: {truncate(summary, COMMIT_PROMPT_LIMIT)}"

    try:
        create_branch(branch, cwd=root)
    except GitError as e:
        fail("Failed to create branch", e)

    written, failed = write_changes(changes, root)
    for path, error in failed:
        typer.echo(f"⚠️  Failed to write {path}: {error}")
    for path in written:
        typer.echo(f"✓ {path}")

    if not written:
        fail("No files were written")

    try:
        commit_all(commit_msg, cwd=root)
        push_branch(branch, cwd=root)
    except GitError as e:
        fail("Failed to commit changes", e)

    try:
        pr_url = create_pr(commit_msg, f"Generated by gg {kind}:\n\n{summary}", cwd=root)
    except GitError:
        typer.echo("⚠️  Failed to create PR. Create manually:")
        typer.echo(f"   Branch: {branch}")
        return None

    typer.echo()
    typer.echo(f"✓ PR created: {pr_url}")
    typer.echo()
    typer.echo("Next: gg approve")
    return pr_url


def ask(
    prompt: list[str] = typer.Argument(..., help="What to build"),
    pro: bool = typer.Option(False, "--pro", help="Require the Pro license"),
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="anthropic, openai or ollama"),
) -> None:
    """Generate code → open PR (streams output).

    Example:
        gg ask "add a health check endpoint"
    """
    text = " ".join(prompt).strip()
    if not text:
        fail("No prompt provided")

    config, secrets, provider_name = _load(provider)
    if not check_tier(secrets, provider_name, pro):
        return

    run_change_pipeline("ask", text, text, config, secrets, provider_name)


def edit(
    file: Path = typer.Argument(..., help="File to edit"),
    instruction: list[str] = typer.Argument(..., help="What to change"),
    pro: bool = typer.Option(False, "--pro", help="Require the Pro license"),
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="anthropic, openai or ollama"),
) -> None:
    """Edit one file with the model → open PR.

    Example:
        gg edit src/app.py "add type hints"
    """
    text = " ".join(instruction).strip()
    if not text:
        fail("No instruction provided")
    if not file.is_file():
        fail(f"File not found: {file}")

    config, secrets, provider_name = _load(provider)
    if not check_tier(secrets, provider_name, pro):
        return

    path = file.as_posix()
    user_prompt = EDIT_PROMPT.format(path=path, instruction=text, content=file.read_text(encoding="utf-8"))
    run_change_pipeline("edit", f"{path}: {text}", user_prompt, config, secrets, provider_name)


def approve(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Merge the latest open PR (squash, delete branch)."""
    ensure_github_auth()

    try:
        pr = latest_pr()
    except GitError as e:
        fail("Failed to list PRs", e)

    if pr is None:
        typer.echo("No open PRs found")
        return

    typer.echo(f"PR #{pr.get('number')}: {pr.get('title', '')}")
    typer.echo(f"Branch: {pr.get('headRefName', '')}")
    typer.echo()

    if not yes and not typer.confirm("Merge this PR?", default=True):
        typer.echo("Cancelled")
        return

    try:
        merge_pr(str(pr.get("number")))
    except GitError as e:
        fail("Failed to merge PR", e)

    typer.echo()
    typer.echo("✓ PR merged successfully!")
