"""
File-backed key/value store with the browser localStorage interface.

Values are strings; the whole store is one JSON object on disk, rewritten on
every change.
"""

import json
from pathlib import Path

from renoplan.utils.logger import logger

ANONYMOUS_CHAT_KEY_PREFIX = "anonymous-chat-"


def anonymous_chat_key(session_id: str) -> str:
    return f"{ANONYMOUS_CHAT_KEY_PREFIX}{session_id}"


class LocalStorage:
    def __init__(self, path: Path):
        self.path = Path(path)
        self._items: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable local storage", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._items), encoding="utf-8")

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._save()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._save()

    def keys(self) -> list[str]:
        return list(self._items)
