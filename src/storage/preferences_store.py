# src/storage/preferences_store.py

"""Persisted user preferences: selected city and saved prices."""

import json
import logging
from pathlib import Path

from src.config.settings import Settings
from src.models.bookmark import Bookmark

logger = logging.getLogger("naftas.storage")


class PreferencesStore:
    """Explicit store for the selected city and bookmarks.

    State is read by :meth:`load` and written by :meth:`save`; callers
    decide when (start-up, after a user action).  A missing or corrupt
    file loads as defaults.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path or Settings.PREFERENCES_PATH
        self.city: str = Settings.DEFAULT_CITY
        self._bookmarks: dict[str, Bookmark] = {}

    @property
    def bookmarks(self) -> list[Bookmark]:
        return list(self._bookmarks.values())

    def load(self) -> None:
        """Replace in-memory state with the file contents."""
        self.city = Settings.DEFAULT_CITY
        self._bookmarks = {}
        if not self.path.exists():
            logger.debug("No preferences file at %s", self.path)
            return
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            self.city = str(data.get("city") or Settings.DEFAULT_CITY)
            for raw in data.get("bookmarks", []):
                bookmark = Bookmark.from_dict(raw)
                self._bookmarks[bookmark.id] = bookmark
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning(
                "Ignoring unreadable preferences file %s: %s",
                self.path,
                exc,
            )
            self.city = Settings.DEFAULT_CITY
            self._bookmarks = {}

    def save(self) -> Path:
        """Write the current state to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "city": self.city,
            "bookmarks": [b.to_dict() for b in self._bookmarks.values()],
        }
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        logger.info(
            "Saved preferences (city=%s, %d bookmarks) to %s",
            self.city,
            len(self._bookmarks),
            self.path,
        )
        return self.path

    def set_city(self, city: str) -> None:
        self.city = city.strip().upper() or Settings.DEFAULT_CITY

    def add_bookmark(self, bookmark: Bookmark) -> None:
        """Save a bookmark, replacing one with the same id."""
        self._bookmarks[bookmark.id] = bookmark

    def remove_bookmark(self, bookmark_id: str) -> bool:
        """Remove a bookmark; returns False if it was not saved."""
        return self._bookmarks.pop(bookmark_id, None) is not None
