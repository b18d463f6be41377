from __future__ import annotations

import json
import logging
import threading
from datetime import date
from pathlib import Path
from typing import Any

from consultbook.application.ports.booked_index import BookedIndexPort
from consultbook.domain.entities.slot import slot_key


class JsonBookedIndex(BookedIndexPort):
    """Booked index kept in a single JSON file.

    The file is read once at start-up and rewritten atomically on every add.
    """

    def __init__(self, path: str = "./data/booked_slots.json") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)
        self._keys: set[str] = set(self._load().get("booked", []))

    def contains(self, day: date, start_time: str) -> bool:
        with self._lock:
            return slot_key(day, start_time) in self._keys

    def add(self, day: date, start_time: str) -> None:
        key = slot_key(day, start_time)
        with self._lock:
            if key in self._keys:
                return
            updated = self._keys | {key}
            self._save({"version": 1, "booked": sorted(updated)})
            self._keys = updated

    def _load(self) -> dict[str, Any]:
        """Load index data from disk, return an empty index if missing."""
        if not self._path.exists():
            return {"version": 1, "booked": []}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Booked index file {self._path} is corrupted: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("booked", []), list):
            raise ValueError(f"Booked index file {self._path} has an unexpected layout")
        return data

    def _save(self, data: dict[str, Any]) -> None:
        """Save index data to disk atomically."""
        temp_path = self._path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._path)
        except OSError as e:
            self._logger.error("Failed to write booked index", extra={"error": str(e)})
            temp_path.unlink(missing_ok=True)
            raise
