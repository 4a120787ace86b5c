from __future__ import annotations

from collections import deque
import json
from pathlib import Path

from .models import HistoryEntry

DEFAULT_HISTORY_LIMIT = 20


class LocatorHistory:
    """Most recent locator syntheses, oldest evicted first."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit <= 0:
            raise ValueError("History limit must be a positive integer.")
        self._entries: deque[HistoryEntry] = deque(maxlen=limit)

    @property
    def limit(self) -> int:
        return self._entries.maxlen or DEFAULT_HISTORY_LIMIT

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)

    def snapshot(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def to_json(self) -> str:
        return json.dumps([entry.to_dict() for entry in self._entries], indent=2, ensure_ascii=False)

    def export(self, path: Path) -> tuple[bool, str | None]:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.to_json(), encoding="utf-8")
        except OSError as exc:
            return False, f"Could not export locator history: {exc}"
        return True, None
