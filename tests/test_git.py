"""Tests for git/gh helpers."""

import subprocess

import pytest

from gg import git
from gg.errors import GitError


class TestParseGitHubUrl:
    """Tests for parse_github_url."""

    @pytest.mark.parametrize("url, expected", [
        ("https://github.com/cli/cli.git", "cli/cli"),
        ("https://github.com/cli/cli", "cli/cli"),
        ("git@github.com:cli/cli.git", "cli/cli"),
        ("ssh://git@github.com/cli/cli.git\n", "cli/cli"),
        ("https://github.com/cli/cli/", "cli/cli"),
        ("https://github.com/cli/cli.git/", "cli/cli"),
        ("https://gitlab.com/group/project.git", ""),
        ("", ""),
    ])
    def test_urls(self, url: str, expected: str) -> None:
        assert git.parse_github_url(url) == expected


class TestRun:
    """Tests for the subprocess wrapper."""

    def test_missing_binary(self) -> None:
        with pytest.raises(GitError, match="not found"):
            git.run(["gg-test-no-such-binary", "status"])

    def test_failure_raises(self, monkeypatch) -> None:
        def fake_run(args, **kwargs):
            return subprocess.CompletedProcess(args, 1, stdout="", stderr="fatal: not a git repository")

        monkeypatch.setattr(git.subprocess, "run", fake_run)

        with pytest.raises(GitError, match="not a git repository"):
            git.run(["git", "status"])

    def test_no_check(self, monkeypatch) -> None:
        monkeypatch.setattr(
            git.subprocess, "run",
            lambda args, **kwargs: subprocess.CompletedProcess(args, 2, stdout="", stderr=""),
        )

        assert git.run(["git", "status"], check=False).returncode == 2


class TestRepoHelpers:
    """Tests for helpers built on run()."""

    def test_current_repo(self, monkeypatch) -> None:
        monkeypatch.setattr(
            git.subprocess, "run",
            lambda args, **kwargs: subprocess.CompletedProcess(args, 0, stdout="git@github.com:o/r.git\n", stderr=""),
        )

        assert git.current_repo() == "o/r"

    def test_current_repo_outside_checkout(self, monkeypatch) -> None:
        monkeypatch.setattr(
            git.subprocess, "run",
            lambda args, **kwargs: subprocess.CompletedProcess(args, 128, stdout="", stderr="fatal"),
        )

        assert git.current_repo() == ""

    def test_gh_authenticated(self, monkeypatch) -> None:
        monkeypatch.setattr(
            git.subprocess, "run",
            lambda args, **kwargs: subprocess.CompletedProcess(args, 0, stdout="", stderr="✓ Logged in to github.com"),
        )

        assert git.gh_authenticated() is True

    def test_latest_pr(self, monkeypatch) -> None:
        out = '[{"number": 7, "title": "t", "headRefName": "gg-ask-1"}]'
        monkeypatch.setattr(
            git.subprocess, "run",
            lambda args, **kwargs: subprocess.CompletedProcess(args, 0, stdout=out, stderr=""),
        )

        assert git.latest_pr() == {"number": 7, "title": "t", "headRefName": "gg-ask-1"}

    def test_latest_pr_none(self, monkeypatch) -> None:
        monkeypatch.setattr(
            git.subprocess, "run",
            lambda args, **kwargs: subprocess.CompletedProcess(args, 0, stdout="[]", stderr=""),
        )

        assert git.latest_pr() is None
