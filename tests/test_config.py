"""Tests for config.toml and encrypted secrets."""

import os
import stat
from pathlib import Path

import pytest

from gg.config import (
    CONFIG_FILE,
    KEY_FILE,
    SECRETS_FILE,
    decrypt_secrets,
    encrypt_secrets,
    generate_identity,
    get_gg_home,
    load_all,
    load_identity,
    load_secrets,
    read_config,
    write_config,
)
from gg.errors import ConfigError
from gg.models import APISection, GGConfig, Secrets


class TestGGHome:
    """Tests for locating the gg home directory."""

    def test_env_override(self, gg_home: Path) -> None:
        assert get_gg_home() == gg_home

    def test_default(self, monkeypatch) -> None:
        monkeypatch.delenv("GG_HOME")

        assert get_gg_home() == Path.home() / ".gg"


class TestConfigFile:
    """Tests for reading and writing config.toml."""

    def test_round_trip(self, tmp_path: Path) -> None:
        config = GGConfig(api=APISection(provider="ollama", ollama_model="llama3"))
        path = write_config(config, tmp_path)

        assert path == tmp_path / CONFIG_FILE
        assert "[api]" in path.read_text()
        assert read_config(tmp_path) == config

    def test_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="gg config init"):
            read_config(tmp_path)

    def test_invalid(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILE).write_text('[api]\nprovider = "bard"\n')

        with pytest.raises(ConfigError, match="invalid config"):
            read_config(tmp_path)

    def test_partial_file_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILE).write_text('[gg]\ntier = "pro"\n')

        config = read_config(tmp_path)

        assert config.gg.tier == "pro"
        assert config.api.provider == "anthropic"
        assert config.github.default_branch == "main"


class TestSecrets:
    """Tests for age-encrypted secrets."""

    def test_identity_file_private(self, tmp_path: Path) -> None:
        generate_identity(tmp_path)
        mode = stat.S_IMODE(os.stat(tmp_path / KEY_FILE).st_mode)

        assert mode == 0o600

    def test_encrypt_decrypt(self, tmp_path: Path) -> None:
        identity = generate_identity(tmp_path)
        secrets = Secrets(claude_api_key="sk-ant-abc", pro_license_key="gg_pro_0123456789abcdef_01234567")
        encrypt_secrets(secrets, identity, tmp_path)

        raw = (tmp_path / SECRETS_FILE).read_bytes()
        assert b"sk-ant-abc" not in raw

        loaded = decrypt_secrets(load_identity(tmp_path), tmp_path)
        assert loaded == secrets
        assert loaded.is_pro

    def test_wrong_identity(self, tmp_path: Path) -> None:
        identity = generate_identity(tmp_path)
        encrypt_secrets(Secrets(claude_api_key="k"), identity, tmp_path)
        generate_identity(tmp_path)

        with pytest.raises(ConfigError, match="decrypt"):
            load_secrets(tmp_path)

    def test_missing_key_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="encryption key"):
            load_identity(tmp_path)

    def test_env_fills_missing_keys(self, tmp_path: Path, monkeypatch) -> None:
        identity = generate_identity(tmp_path)
        encrypt_secrets(Secrets(openai_api_key="from-file"), identity, tmp_path)
        monkeypatch.setenv("ANTHROPIC_API_KEY", "from-env")
        monkeypatch.setenv("OPENAI_API_KEY", "ignored")

        secrets = load_secrets(tmp_path)

        assert secrets.claude_api_key == "from-env"
        assert secrets.openai_api_key == "from-file"

    def test_load_all(self, tmp_path: Path) -> None:
        write_config(GGConfig(), tmp_path)
        encrypt_secrets(Secrets(claude_api_key="k"), generate_identity(tmp_path), tmp_path)

        config, secrets = load_all(tmp_path)

        assert config.gg.tier == "free"
        assert secrets.claude_api_key == "k"
        assert not secrets.is_pro
