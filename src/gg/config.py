"""Configuration, secrets and environment loading for gg."""

from pathlib import Path
from typing import Optional
import os
import tomllib

import pyrage
import tomli_w
from dotenv import load_dotenv
from pydantic import ValidationError

from .errors import ConfigError
from .models import GGConfig, Secrets


def load_env() -> bool:
    """Load environment variables from a .env file in the current directory.

    Returns:
        True if .env file was found and loaded, False otherwise.
    """
    if Path(".env").exists():
        load_dotenv()
        return True
    return False


# gg configuration constants
GG_HOME_ENV = "GG_HOME"
GG_DIR = ".gg"
CONFIG_FILE = "config.toml"
SECRETS_FILE = "secrets"
KEY_FILE = ".key"
STATS_FILE = "stats.json"
CACHE_DIR = "cache"
CHAINS_DIR = "chains"
LOGS_DIR = "logs"

# Environment variables that fill secrets missing from the encrypted file
SECRET_ENV_VARS = {
    "claude_api_key": "ANTHROPIC_API_KEY",
    "openai_api_key": "OPENAI_API_KEY",
}


def get_gg_home() -> Path:
    """Get the gg home directory (~/.gg unless GG_HOME is set)."""
    override = os.environ.get(GG_HOME_ENV)
    if override:
        return Path(override)
    return Path.home() / GG_DIR


def get_cache_path(kind: Optional[str] = None) -> Path:
    """Get the cache directory, or the sub-directory for one kind (npm, brew)."""
    cache = get_gg_home() / CACHE_DIR
    return cache / kind if kind else cache


def get_chains_path() -> Path:
    return get_gg_home() / CHAINS_DIR


def get_stats_path() -> Path:
    return get_gg_home() / STATS_FILE


def read_config(home: Optional[Path] = None) -> GGConfig:
    """Read config.toml.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    home = home or get_gg_home()
    config_path = home / CONFIG_FILE
    if not config_path.exists():
        raise ConfigError("config not found. Run: gg config init")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        return GGConfig.model_validate(data)
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        raise ConfigError(f"invalid config at {config_path}: {e}") from e


def write_config(config: GGConfig, home: Optional[Path] = None) -> Path:
    """Write config.toml and return its path."""
    home = home or get_gg_home()
    home.mkdir(parents=True, exist_ok=True)
    config_path = home / CONFIG_FILE
    config_path.write_text(tomli_w.dumps(config.model_dump()), encoding="utf-8")
    return config_path


def generate_identity(home: Optional[Path] = None) -> pyrage.x25519.Identity:
    """Generate a new X25519 identity and store it in the .key file (0600)."""
    home = home or get_gg_home()
    home.mkdir(parents=True, exist_ok=True, mode=0o700)
    identity = pyrage.x25519.Identity.generate()
    key_path = home / KEY_FILE
    key_path.write_text(str(identity))
    key_path.chmod(0o600)
    return identity


def load_identity(home: Optional[Path] = None) -> pyrage.x25519.Identity:
    home = home or get_gg_home()
    key_path = home / KEY_FILE
    if not key_path.exists():
        raise ConfigError("encryption key not found. Run: gg config init")
    return pyrage.x25519.Identity.from_str(key_path.read_text().strip())


def encrypt_secrets(
    secrets: Secrets,
    identity: pyrage.x25519.Identity,
    home: Optional[Path] = None,
) -> Path:
    """Encrypt secrets as a TOML [keys] table with age and write them."""
    home = home or get_gg_home()
    plaintext = tomli_w.dumps({"keys": secrets.model_dump()}).encode("utf-8")
    ciphertext = pyrage.encrypt(plaintext, [identity.to_public()])
    secrets_path = home / SECRETS_FILE
    secrets_path.write_bytes(ciphertext)
    secrets_path.chmod(0o600)
    return secrets_path


def decrypt_secrets(identity: pyrage.x25519.Identity, home: Optional[Path] = None) -> Secrets:
    """Decrypt the secrets file."""
    home = home or get_gg_home()
    secrets_path = home / SECRETS_FILE
    if not secrets_path.exists():
        raise ConfigError("secrets not found. Run: gg config init")

    try:
        plaintext = pyrage.decrypt(secrets_path.read_bytes(), [identity])
    except pyrage.DecryptError as e:
        raise ConfigError(f"failed to decrypt secrets: {e}") from e

    data = tomllib.loads(plaintext.decode("utf-8"))
    return Secrets.model_validate(data.get("keys", {}))


def load_secrets(home: Optional[Path] = None) -> Secrets:
    """Load decrypted secrets, filling blanks from the environment."""
    load_env()
    secrets = decrypt_secrets(load_identity(home), home)

    updates = {}
    for field, env_var in SECRET_ENV_VARS.items():
        if not getattr(secrets, field) and os.environ.get(env_var):
            updates[field] = os.environ[env_var]
    if updates:
        secrets = secrets.model_copy(update=updates)

    return secrets


def load_all(home: Optional[Path] = None) -> tuple[GGConfig, Secrets]:
    """Load config and secrets together (what ask/edit need)."""
    return read_config(home), load_secrets(home)
