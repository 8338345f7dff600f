import json
import logging
import os
from typing import Any
from pmc_portal.client.session import Storage

logger = logging.getLogger(__name__)

DRAFT_KEY = "pmc_application_draft"


def _is_file(value: Any) -> bool:
    return callable(getattr(value, "read", None)) and hasattr(value, "name")


def strip_files(value: Any) -> Any:
    """Replace file objects with ``{"name": ...}`` placeholders, recursively."""
    if _is_file(value):
        return {"name": os.path.basename(str(value.name))}
    if isinstance(value, dict):
        return {k: strip_files(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [strip_files(v) for v in value]
    return value


class DraftStore:
    def __init__(self, storage: Storage, key: str = DRAFT_KEY):
        self._storage = storage
        self._key = key

    def save(self, form: dict) -> dict:
        draft = strip_files(form)
        self._storage.set(self._key, json.dumps(draft, default=str))
        return draft

    def load(self) -> dict | None:
        raw = self._storage.get(self._key)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable application draft")
            self.clear()
            return None

    def clear(self) -> None:
        self._storage.remove(self._key)
