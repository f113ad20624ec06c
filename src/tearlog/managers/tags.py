"""Tag list: in memory, persisted on every write."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from tearlog.errors import DuplicateItemError, NotFoundError
from tearlog.managers.base import RemovalListener, move_items
from tearlog.models import TagItem

if TYPE_CHECKING:
    from tearlog.store import JournalStore

logger = logging.getLogger(__name__)


class TagManager:
    """Ordered tags, unique by case-insensitive name."""

    def __init__(self, store: JournalStore) -> None:
        self._store = store
        self.tags: list[TagItem] = []
        self._removal_listeners: list[RemovalListener] = []
        self.reload()

    def reload(self) -> None:
        self.tags = self._store.load_tags()
        logger.debug("Loaded %d tags", len(self.tags))

    def on_remove(self, listener: RemovalListener) -> None:
        self._removal_listeners.append(listener)

    def get(self, tag_id: str | None) -> TagItem | None:
        if tag_id is None:
            return None
        return next((t for t in self.tags if t.id == tag_id), None)

    def find_by_name(self, name: str) -> TagItem | None:
        key = name.strip().lower()
        return next((t for t in self.tags if t.key == key), None)

    def add_tag(self, name: str) -> TagItem | None:
        """Append a tag. Names are trimmed; case-insensitive duplicates are skipped."""
        tag = TagItem(name=name, order=len(self.tags))
        if self.find_by_name(tag.name):
            logger.info("Tag '%s' already exists, not added", tag.name)
            return None
        self.tags.append(tag)
        self._store.save_tag(tag)
        logger.info("Added tag %s", tag.name)
        return tag

    def remove_tag(self, tag_id: str) -> TagItem | None:
        tag = self.get(tag_id)
        if tag is None:
            return None
        self.tags.remove(tag)
        self._store.delete_tag(tag.id)
        for listener in self._removal_listeners:
            listener(tag.id)
        logger.info("Removed tag %s", tag.name)
        return tag

    def rename_tag(self, tag_id: str, name: str) -> TagItem:
        tag = self.get(tag_id)
        if tag is None:
            raise NotFoundError(f"Tag {tag_id} not found")
        renamed = TagItem(name=name, order=tag.order, id=tag.id)
        clash = self.find_by_name(renamed.name)
        if clash is not None and clash.id != tag.id:
            raise DuplicateItemError(f"Tag '{renamed.name}' already exists")
        tag.name = renamed.name
        self._store.save_tag(tag)
        return tag

    def move_tags(self, source: Iterable[int], destination: int) -> bool:
        """Reorder tags. Returns True if the order changed."""
        old_order = [t.id for t in self.tags]
        self.tags = move_items(self.tags, source, destination)
        if [t.id for t in self.tags] == old_order:
            return False
        self.normalize_order()
        return True

    def normalize_order(self) -> None:
        for index, tag in enumerate(self.tags):
            if tag.order != index:
                tag.order = index
                self._store.save_tag(tag)

    # ── Reconciliation ───────────────────────────────────────

    def upsert(self, tag: TagItem) -> bool:
        """Insert or replace by id without uniqueness checks. Returns True if inserted."""
        for i, existing in enumerate(self.tags):
            if existing.id == tag.id:
                self.tags[i] = tag
                inserted = False
                break
        else:
            self.tags.append(tag)
            inserted = True
        self.tags.sort(key=lambda t: t.order)
        self._store.save_tag(tag)
        return inserted

    def discard(self, tag: TagItem) -> None:
        self.tags = [t for t in self.tags if t is not tag]
        self._store.delete_tag(tag.id)
