import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class MemoryStorage:
    """Key/value string storage kept in memory."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage(MemoryStorage):
    """Key/value string storage persisted as one JSON object on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        initial = {}
        if self.path.exists():
            try:
                initial = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError):
                logger.warning("Ignoring unreadable client storage at %s", self.path, exc_info=True)
                initial = {}
        super().__init__(initial)

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        super().set(key, value)
        self._flush()

    def remove(self, key: str) -> None:
        super().remove(key)
        self._flush()
