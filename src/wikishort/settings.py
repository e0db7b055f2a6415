"""Persistence of the user settings shared by the rewriter and the display shortener."""

import io
from pathlib import Path
from typing import Any

import yaml

from .core.model import Settings

# On-disk keys, in file order
OPTIMIZE_KEY = "optimizeWhenAliasMatchesNoteName"
TARGET_KEY = "targetFileNameForShortDisplay"

_KEY_ALIASES = {
    OPTIMIZE_KEY: OPTIMIZE_KEY,
    "optimize_when_alias_matches_note_name": OPTIMIZE_KEY,
    TARGET_KEY: TARGET_KEY,
    "target_file_name_for_short_display": TARGET_KEY,
}

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


class SettingsError(ValueError):
    """Unknown settings key or a value that cannot be stored under it."""


def settings_to_dict(settings: Settings) -> dict[str, Any]:
    return {
        OPTIMIZE_KEY: settings.optimize_when_alias_matches_note_name,
        TARGET_KEY: settings.target_file_name_for_short_display,
    }


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise SettingsError(f"Expected a boolean, got {value!r}")


class SettingsStore:
    """
    Loads settings once and saves them on every change. The Settings object
    handed out by load() is mutated in place, so every holder sees updates.
    """

    def __init__(self, path: Path):
        self.path = path
        self.settings = Settings()

    def load(self) -> Settings:
        if self.path.exists():
            data = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
            if not isinstance(data, dict):
                raise SettingsError(f"Settings file is not a mapping: {self.path}")
            # Stored values win over defaults; unknown keys are ignored
            if OPTIMIZE_KEY in data:
                self.settings.optimize_when_alias_matches_note_name = _parse_bool(
                    data[OPTIMIZE_KEY]
                )
            if TARGET_KEY in data:
                self.settings.target_file_name_for_short_display = str(
                    data[TARGET_KEY]
                ).strip()
        return self.settings

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        buf = io.StringIO()
        yaml.safe_dump(settings_to_dict(self.settings), buf, sort_keys=False, allow_unicode=True)
        self.path.write_text(buf.getvalue(), encoding="utf-8")

    def update(self, key: str, value: Any) -> Settings:
        """Set one setting by its camelCase or snake_case name and persist it."""
        canonical = _KEY_ALIASES.get(key)
        if canonical is None:
            raise SettingsError(
                f"Unknown setting {key!r} (expected one of: {OPTIMIZE_KEY}, {TARGET_KEY})"
            )

        if canonical == OPTIMIZE_KEY:
            self.settings.optimize_when_alias_matches_note_name = _parse_bool(value)
        else:
            self.settings.target_file_name_for_short_display = str(value).strip()

        self.save()
        return self.settings
