"""Emoji intensity list: in memory, persisted on every write."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from tearlog.errors import DuplicateItemError, ValidationError
from tearlog.managers.base import RemovalListener, move_items
from tearlog.models import EmojiIntensity

if TYPE_CHECKING:
    from tearlog.store import JournalStore

logger = logging.getLogger(__name__)


class EmojiManager:
    """Ordered emoji intensities, unique by symbol."""

    def __init__(self, store: JournalStore) -> None:
        self._store = store
        self.emojis: list[EmojiIntensity] = []
        self._removal_listeners: list[RemovalListener] = []
        self.reload()

    def reload(self) -> None:
        self.emojis = self._store.load_emojis()
        logger.debug("Loaded %d emojis", len(self.emojis))

    def on_remove(self, listener: RemovalListener) -> None:
        self._removal_listeners.append(listener)

    def get(self, emoji_id: str | None) -> EmojiIntensity | None:
        if emoji_id is None:
            return None
        return next((e for e in self.emojis if e.id == emoji_id), None)

    def find_by_symbol(self, symbol: str) -> EmojiIntensity | None:
        symbol = symbol.strip()
        return next((e for e in self.emojis if e.symbol == symbol), None)

    def add_emoji(self, emoji: EmojiIntensity) -> EmojiIntensity | None:
        """Append an emoji at the end of the list. Skips duplicate symbols."""
        if self.find_by_symbol(emoji.symbol):
            logger.info("Emoji '%s' already exists, not added", emoji.symbol)
            return None
        emoji.order = len(self.emojis)
        self.emojis.append(emoji)
        self._store.save_emoji(emoji)
        logger.info("Added emoji %s", emoji.symbol)
        return emoji

    def remove_emoji(self, index: int) -> EmojiIntensity | None:
        if not 0 <= index < len(self.emojis):
            return None
        if len(self.emojis) <= 1:
            raise ValidationError("Cannot remove the last emoji intensity")
        emoji = self.emojis.pop(index)
        self._store.delete_emoji(emoji.id)
        for listener in self._removal_listeners:
            listener(emoji.id)
        logger.info("Removed emoji %s", emoji.symbol)
        return emoji

    def update_emoji(
        self,
        index: int,
        *,
        symbol: str | None = None,
        color: str | None = None,
        opacity: float | None = None,
    ) -> EmojiIntensity | None:
        """Edit an emoji in place. Id and order are preserved."""
        if not 0 <= index < len(self.emojis):
            return None
        original = self.emojis[index]
        candidate = EmojiIntensity(
            symbol=symbol if symbol is not None else original.symbol,
            color=color if color is not None else original.color,
            opacity=opacity if opacity is not None else original.opacity,
        )
        clash = self.find_by_symbol(candidate.symbol)
        if clash is not None and clash.id != original.id:
            raise DuplicateItemError(f"Emoji '{candidate.symbol}' already exists")

        original.symbol = candidate.symbol
        original.color = candidate.color
        original.opacity = candidate.opacity
        self._store.save_emoji(original)
        return original

    def move_emojis(self, source: Iterable[int], destination: int) -> bool:
        """Reorder emojis. Returns True if the order changed."""
        old_order = [e.id for e in self.emojis]
        self.emojis = move_items(self.emojis, source, destination)
        if [e.id for e in self.emojis] == old_order:
            logger.debug("Emoji order unchanged")
            return False
        self.normalize_order()
        return True

    def normalize_order(self) -> None:
        """Renumber ``order`` to 0..n-1 following list position."""
        for index, emoji in enumerate(self.emojis):
            if emoji.order != index:
                emoji.order = index
                self._store.save_emoji(emoji)

    # ── Reconciliation ───────────────────────────────────────

    def upsert(self, emoji: EmojiIntensity) -> bool:
        """Insert or replace by id without uniqueness checks. Returns True if inserted."""
        for i, existing in enumerate(self.emojis):
            if existing.id == emoji.id:
                self.emojis[i] = emoji
                inserted = False
                break
        else:
            self.emojis.append(emoji)
            inserted = True
        self.emojis.sort(key=lambda e: e.order)
        self._store.save_emoji(emoji)
        return inserted

    def discard(self, emoji: EmojiIntensity) -> None:
        """Drop an emoji without notifying listeners (references already repointed)."""
        self.emojis = [e for e in self.emojis if e is not emoji]
        self._store.delete_emoji(emoji.id)
