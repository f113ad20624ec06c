"""Journal entries: in memory (newest first), persisted on every write."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from tearlog.errors import EntryNotFoundError, UnknownReferenceError
from tearlog.models import TearEntry

if TYPE_CHECKING:
    from tearlog.managers.emojis import EmojiManager
    from tearlog.managers.tags import TagManager
    from tearlog.store import JournalStore

logger = logging.getLogger(__name__)


class EntryManager:
    """Entries referencing emojis and tags held by the sibling managers.

    Subscribes to tag/emoji removals so that references never dangle.
    """

    def __init__(self, store: JournalStore, emojis: EmojiManager, tags: TagManager) -> None:
        self._store = store
        self._emojis = emojis
        self._tags = tags
        self.entries: list[TearEntry] = []
        emojis.on_remove(self.clear_emoji)
        tags.on_remove(self.clear_tag)
        self.reload()

    def reload(self) -> None:
        self.entries = self._store.load_entries()
        logger.debug("Loaded %d entries", len(self.entries))

    def _sort(self) -> None:
        self.entries = self._sorted(self.entries)

    @staticmethod
    def _sorted(entries: list[TearEntry]) -> list[TearEntry]:
        return sorted(entries, key=lambda e: e.date, reverse=True)

    def get(self, entry_id: str) -> TearEntry | None:
        return next((e for e in self.entries if e.id == entry_id), None)

    def _check_references(self, emoji_id: str | None, tag_id: str | None) -> None:
        if emoji_id is not None and self._emojis.get(emoji_id) is None:
            raise UnknownReferenceError("emoji", emoji_id)
        if tag_id is not None and self._tags.get(tag_id) is None:
            raise UnknownReferenceError("tag", tag_id)

    def find_duplicate(self, entry: TearEntry) -> TearEntry | None:
        """Existing entry with the same minute, emoji, tag and note."""
        signature = entry.signature()
        return next(
            (e for e in self.entries if e.id != entry.id and e.signature() == signature),
            None,
        )

    def add_entry(self, entry: TearEntry) -> TearEntry | None:
        """Store a new entry. Returns None if an identical entry already exists."""
        self._check_references(entry.emoji_id, entry.tag_id)
        if self.get(entry.id) is not None or self.find_duplicate(entry) is not None:
            logger.info("Entry already exists, duplicate not added")
            return None
        self.entries = self._sorted([*self.entries, entry])
        self._store.save_entry(entry)
        return entry

    def delete_entry(self, entry_id: str) -> bool:
        before = len(self.entries)
        self.entries = [e for e in self.entries if e.id != entry_id]
        self._store.delete_entry(entry_id)
        return len(self.entries) != before

    def update_entry(
        self,
        entry_id: str,
        *,
        date: datetime,
        emoji_id: str | None,
        tag_id: str | None,
        note: str,
    ) -> TearEntry:
        existing = self.get(entry_id)
        if existing is None:
            raise EntryNotFoundError(entry_id)
        self._check_references(emoji_id, tag_id)

        updated = TearEntry(date=date, emoji_id=emoji_id, tag_id=tag_id, note=note, id=entry_id)
        existing.date = updated.date
        existing.emoji_id = updated.emoji_id
        existing.tag_id = updated.tag_id
        existing.note = updated.note
        self._sort()
        self._store.save_entry(existing)
        return existing

    # ── Reference maintenance ────────────────────────────────

    def _repoint(self, attr: str, old_id: str, new_id: str | None) -> int:
        changed = 0
        for entry in self.entries:
            if getattr(entry, attr) == old_id:
                setattr(entry, attr, new_id)
                self._store.save_entry(entry)
                changed += 1
        return changed

    def clear_tag(self, tag_id: str) -> int:
        changed = self._repoint("tag_id", tag_id, None)
        if changed:
            logger.info("Cleared removed tag from %d entries", changed)
        return changed

    def clear_emoji(self, emoji_id: str) -> int:
        changed = self._repoint("emoji_id", emoji_id, None)
        if changed:
            logger.info("Cleared removed emoji from %d entries", changed)
        return changed

    def repoint_tag(self, old_id: str, new_id: str) -> int:
        return self._repoint("tag_id", old_id, new_id)

    def repoint_emoji(self, old_id: str, new_id: str) -> int:
        return self._repoint("emoji_id", old_id, new_id)

    # ── Reconciliation ───────────────────────────────────────

    def upsert(self, entry: TearEntry) -> bool:
        """Insert or replace by id without duplicate checks. Returns True if inserted."""
        updated = list(self.entries)
        existing = self.get(entry.id)
        inserted = existing is None
        if inserted:
            updated.append(entry)
        else:
            updated[next(i for i, e in enumerate(updated) if e is existing)] = entry
        self.entries = self._sorted(updated)
        self._store.save_entry(entry)
        return inserted

    def discard(self, entry: TearEntry) -> None:
        """Drop one entry object. A same-id survivor keeps the file."""
        self.entries = [e for e in self.entries if e is not entry]
        survivor = self.get(entry.id)
        if survivor is not None:
            self._store.save_entry(survivor)
        else:
            self._store.delete_entry(entry.id)
