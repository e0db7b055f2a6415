"""Runtime wiring helper for CLI applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_store import FsDocumentStore
from .config import WikishortConfig, load_config
from .core.model import Settings
from .optimizer import WikiLinkOptimizer
from .settings import SettingsStore


@dataclass
class Runtime:
    """Container for all wired components."""
    store: FsDocumentStore
    settings_store: SettingsStore
    settings: Settings
    optimizer: WikiLinkOptimizer
    config: WikishortConfig


def build_runtime(
    vault_path: Path | None = None,
    settings_path: Path | None = None,
    config_path: Path | None = None,
) -> Runtime:
    """Build and wire all components for a vault."""
    config = load_config(config_path=config_path, vault_path=vault_path)

    # CLI args win over config values
    if vault_path is None:
        vault_path = config.vault.root
    if settings_path is None:
        settings_path = config.vault.settings

    store = FsDocumentStore(vault_path)
    settings_store = SettingsStore(settings_path)
    # Loaded once; later changes go through settings_store.update()
    settings = settings_store.load()
    optimizer = WikiLinkOptimizer(store, settings)

    return Runtime(
        store=store,
        settings_store=settings_store,
        settings=settings,
        optimizer=optimizer,
        config=config,
    )
