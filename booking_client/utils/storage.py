import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from booking_client.utils.config import settings

logger = logging.getLogger("booking.storage")

# Keys shared with the rest of the app
USER_TOKEN = "userToken"
USER_INFO = "userInfo"


class LocalStorage:
    """
    Key-value client state persisted as one JSON file.
    A missing or corrupt file reads as empty.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or settings.STORAGE_PATH)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Storage file %s unreadable, treating as empty: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, Any]) -> None:
        os.makedirs(self.path.parent, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def get_item(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set_item(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)

    def clear(self) -> None:
        self._save({})
