"""Persisted user preferences.

Stored as a JSON object mapping keys to JSON-encoded values, the same shape
a browser keeps in localStorage.
"""

import json
from pathlib import Path
from typing import Any

from payout_console.core.logging import LoggerMixin

FILTER_STORAGE_KEY = "fundsConsoleFilter"


class PreferenceStore(LoggerMixin):
    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            self.logger.warning("Error reading preferences", path=str(self.path), error=str(exc))
            return {}
        if not isinstance(data, dict):
            self.logger.warning("Ignoring malformed preferences", path=str(self.path))
            return {}
        return data

    def get(self, key: str, default: Any) -> Any:
        raw = self._read_all().get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as exc:
            self.logger.warning("Error reading preference", key=key, error=str(exc))
            return default

    def set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = json.dumps(value)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            self.logger.warning("Error saving preference", key=key, error=str(exc))
