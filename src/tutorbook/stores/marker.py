"""Local marker stores for per-device state such as the last rollover month."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from tutorbook.core.errors import StoreError

logger = logging.getLogger(__name__)


class MemoryMarkerStore:
    """Marker store held in a plain dictionary."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.values.get(key)

    def write(self, key: str, value: str) -> None:
        self.values[key] = value


class FileMarkerStore:
    """Marker store persisted as a small JSON object on disk.

    Writes go to a temporary sibling file that is then renamed over the
    original, so a crash never leaves half-written JSON behind.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as err:
            raise StoreError(f"Could not read local state from {self.path}") from err
        if not isinstance(data, dict):
            raise StoreError(f"Local state in {self.path} is not a JSON object")
        return {str(key): str(value) for key, value in data.items()}

    def read(self, key: str) -> str | None:
        return self._load().get(key)

    def write(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as err:
            raise StoreError(f"Could not write local state to {self.path}") from err
        logger.debug("Stored %s=%s in %s", key, value, self.path)
