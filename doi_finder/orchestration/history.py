"""Session history of successful resolutions, newest first."""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from doi_finder.models import HistoryEntry


class HistoryStore:
    """Append-only, newest-first collection of HistoryEntry.

    Entries are never mutated or removed for the lifetime of the store. Only
    the orchestrator's success path calls prepend().
    """

    def __init__(self) -> None:
        self._entries: List[HistoryEntry] = []
        self._ids: set[str] = set()

    def prepend(self, entry: HistoryEntry) -> None:
        if entry.id in self._ids:
            raise ValueError(f"Duplicate history id: {entry.id}")
        self._entries.insert(0, entry)
        self._ids.add(entry.id)

    def contains_id(self, entry_id: str) -> bool:
        return entry_id in self._ids

    def entries(self) -> Tuple[HistoryEntry, ...]:
        """Snapshot of the store, newest first."""
        return tuple(self._entries)

    def latest(self) -> Optional[HistoryEntry]:
        return self._entries[0] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(tuple(self._entries))

    def __getitem__(self, index: int) -> HistoryEntry:
        return self._entries[index]
