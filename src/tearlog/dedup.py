"""Duplicate removal for emojis, tags and entries.

Runs after every sync, since merging remote records can reintroduce
emojis, tags or entries that already exist locally under another id.

Order matters: emojis and tags are collapsed first so that entries that
pointed at two copies of the same emoji/tag end up with identical
signatures and are collapsed in the last pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tearlog.managers.emojis import EmojiManager
    from tearlog.managers.entries import EntryManager
    from tearlog.managers.tags import TagManager

logger = logging.getLogger(__name__)


@dataclass
class DedupReport:
    """Counts of removed duplicates per entity kind."""

    emojis: int = 0
    tags: int = 0
    entries: int = 0

    @property
    def total(self) -> int:
        return self.emojis + self.tags + self.entries


def _group(items: list, key) -> dict:
    groups: dict = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


class DuplicateRemover:
    def __init__(self, entries: EntryManager, tags: TagManager, emojis: EmojiManager) -> None:
        self._entries = entries
        self._tags = tags
        self._emojis = emojis

    def remove_duplicates(self) -> DedupReport:
        report = DedupReport(
            emojis=self._remove_duplicate_emojis(),
            tags=self._remove_duplicate_tags(),
            entries=self._remove_duplicate_entries(),
        )
        logger.info(
            "Duplicate removal finished: %d emojis, %d tags, %d entries",
            report.emojis,
            report.tags,
            report.entries,
        )
        return report

    def _remove_duplicate_emojis(self) -> int:
        removed = 0
        for group in _group(self._emojis.emojis, lambda e: e.symbol).values():
            if len(group) < 2:
                continue
            primary, *duplicates = sorted(group, key=lambda e: e.order)
            for duplicate in duplicates:
                if duplicate.id != primary.id:
                    self._entries.repoint_emoji(duplicate.id, primary.id)
                self._emojis.discard(duplicate)
                removed += 1
            if any(d.id == primary.id for d in duplicates):
                self._emojis.upsert(primary)
        if removed:
            self._emojis.normalize_order()
        return removed

    def _remove_duplicate_tags(self) -> int:
        removed = 0
        for group in _group(self._tags.tags, lambda t: t.key).values():
            if len(group) < 2:
                continue
            primary, *duplicates = sorted(group, key=lambda t: t.order)
            for duplicate in duplicates:
                if duplicate.id != primary.id:
                    self._entries.repoint_tag(duplicate.id, primary.id)
                self._tags.discard(duplicate)
                removed += 1
            if any(d.id == primary.id for d in duplicates):
                self._tags.upsert(primary)
        if removed:
            self._tags.normalize_order()
        return removed

    def _remove_duplicate_entries(self) -> int:
        seen_ids: set[str] = set()
        seen_signatures: set[tuple] = set()
        duplicates = []
        # Display order: the manager keeps entries newest first, earlier wins.
        for entry in self._entries.entries:
            if entry.id in seen_ids:
                duplicates.append(entry)
                continue
            seen_ids.add(entry.id)
            signature = entry.signature()
            if signature in seen_signatures:
                duplicates.append(entry)
                continue
            seen_signatures.add(signature)

        for entry in duplicates:
            self._entries.discard(entry)
        if duplicates:
            logger.info("Removed %d duplicate entries", len(duplicates))
        return len(duplicates)
