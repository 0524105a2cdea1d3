import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DATABASE_KEY = "elitevideos_database"
RECOMMENDATIONS_KEY = "elitevideos_recommendations"
USER_PREFERENCES_KEY = "elitevideos_preferences"
VIEW_HISTORY_KEY = "elitevideos_history"
FAVORITES_KEY = "elitevideos_favorites"
LAST_SITEMAP_KEY = "last_sitemap"
SITEMAP_UPDATED_KEY = "sitemap_updated"


class LocalStore:
    """Key-value store of JSON blobs, one file per key.

    Reads never raise: a missing or corrupt blob yields the caller's default.
    Writes report success as a bool.
    """

    def __init__(self, root):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def has(self, key: str) -> bool:
        return self._path(key).exists()

    def get(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s: %s", key, exc)
            return default

    def set(self, key: str, value: Any) -> bool:
        try:
            self._path(key).write_text(json.dumps(value, ensure_ascii=False, indent=2), encoding="utf-8")
        except (OSError, TypeError) as exc:
            logger.warning("Could not write %s: %s", key, exc)
            return False
        return True

    def remove(self, key: str) -> bool:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove %s: %s", key, exc)
            return False
        return True

    def clear(self) -> bool:
        ok = True
        for path in self.root.glob("*.json"):
            ok = self.remove(path.stem) and ok
        return ok
