"""Persistence of MacroForge Studio preferences (never the macro itself)."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Callable, Optional

from models import ApplicationSettings

SETTINGS_ENV_VAR = "MACROFORGE_SETTINGS"

LogCallback = Callable[[str, str], None]


def default_settings_path() -> Path:
    """`$MACROFORGE_SETTINGS` if set, else settings.json next to the app."""
    override = os.environ.get(SETTINGS_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return Path(__file__).resolve().parent / "settings.json"


class SettingsManager:
    """Loads and saves ApplicationSettings as JSON."""

    def __init__(self, storage_path: Optional[Path] = None, log: Optional[LogCallback] = None) -> None:
        self._storage_path = Path(storage_path) if storage_path else default_settings_path()
        self._log = log

    @property
    def storage_path(self) -> Path:
        return self._storage_path

    def load(self) -> ApplicationSettings:
        """Return stored settings, or defaults if the file is missing or corrupt."""
        path = self.storage_path
        if not path.exists():
            return ApplicationSettings()

        try:
            raw_data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(raw_data, dict):
                raise ValueError("settings file must contain a JSON object")
            return ApplicationSettings.from_dict(raw_data)
        except (OSError, ValueError, TypeError) as exc:
            backup_path = path.with_suffix(".bak")
            self._emit(f"Settings unreadable ({exc}); using defaults, backup at {backup_path.name}", "WARNING")
            try:
                path.replace(backup_path)
            except OSError:
                self._emit("Could not back up unreadable settings file", "WARNING")
            return ApplicationSettings()

    def save(self, settings: ApplicationSettings) -> bool:
        """Write settings via a temp file so a crash never leaves half a file."""
        path = self.storage_path
        tmp_path = path.with_suffix(".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(settings.to_dict(), indent=2, ensure_ascii=False)
            tmp_path.write_text(payload, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as exc:
            self._emit(f"Could not save settings: {exc}", "ERROR")
            return False
        return True

    def _emit(self, message: str, level: str) -> None:
        if self._log:
            self._log(message, level)
