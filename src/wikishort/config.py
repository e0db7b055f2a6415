"""Configuration loader for wikishort.toml."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

CONFIG_NAME = "wikishort.toml"
SETTINGS_RELPATH = Path(".wikishort") / "settings.yaml"


@dataclass
class VaultConfig:
    """Vault-specific configuration."""
    root: Path
    settings: Path


@dataclass
class WatchConfig:
    """Watch mode configuration."""
    debounce_ms: int = 150


@dataclass
class WikishortConfig:
    """Complete wikishort configuration."""
    vault: VaultConfig
    watch: WatchConfig


def load_config(config_path: Path | None = None, vault_path: Path | None = None) -> WikishortConfig:
    """
    Load configuration from wikishort.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/wikishort.toml
    3. vault_path/wikishort.toml

    Args:
        config_path: Explicit path to config file
        vault_path: Vault root path, used for fallback search and as the default root

    Returns:
        WikishortConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if vault_path:
        search_paths.append(vault_path / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    vault_data = toml_data.get("vault", {})
    vault_root = Path(vault_data.get("root", vault_path or Path("./vault")))
    settings_path = Path(vault_data.get("settings", vault_root / SETTINGS_RELPATH))

    watch_data = toml_data.get("watch", {})
    watch_config = WatchConfig(
        debounce_ms=int(watch_data.get("debounce_ms", 150))
    )

    return WikishortConfig(
        vault=VaultConfig(root=vault_root, settings=settings_path),
        watch=watch_config,
    )
