"""Shared fixtures: every test gets its own gg home and no command log."""

import pytest


@pytest.fixture(autouse=True)
def gg_home(tmp_path, monkeypatch):
    home = tmp_path / "gg-home"
    monkeypatch.setenv("GG_HOME", str(home))
    monkeypatch.setenv("GG_NO_LOG", "1")
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return home
