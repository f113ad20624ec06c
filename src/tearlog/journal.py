"""Journal facade over the store and the entity managers.

Responsibilities:
1. Build the store and wire the managers (removal listeners keep entry
   references valid)
2. Seed default emojis and tags on first run
3. Entry / tag / emoji operations
4. Duplicate removal and cloud sync
5. Statistics snapshots
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING

from tearlog.config import TearlogConfig
from tearlog.dedup import DedupReport, DuplicateRemover
from tearlog.managers.emojis import EmojiManager
from tearlog.managers.entries import EntryManager
from tearlog.managers.tags import TagManager
from tearlog.models import EmojiIntensity, TagItem, TearEntry
from tearlog.stats import StatsAnalyzer
from tearlog.store import JournalStore
from tearlog.sync.merge import CloudSync, SyncReport

if TYPE_CHECKING:
    from tearlog.sync.base import RecordStore

logger = logging.getLogger(__name__)

# (symbol, opacity) from mildest to strongest
DEFAULT_EMOJIS = [("🥲", 0.4), ("😢", 0.7), ("😭", 1.0)]


class Journal:
    """Single-writer access to one journal directory."""

    def __init__(self, config: TearlogConfig) -> None:
        self.config = config
        self.store = JournalStore(config.data_dir)
        self.emojis = EmojiManager(self.store)
        self.tags = TagManager(self.store)
        self.entries = EntryManager(self.store, self.emojis, self.tags)
        self._remover = DuplicateRemover(self.entries, self.tags, self.emojis)
        self._seed_defaults()

    def _seed_defaults(self) -> None:
        if not self.emojis.emojis:
            for symbol, opacity in DEFAULT_EMOJIS:
                self.emojis.add_emoji(
                    EmojiIntensity(symbol=symbol, color=self.config.defaults.emoji_color, opacity=opacity)
                )
            logger.info("Seeded %d default emojis", len(self.emojis.emojis))
        if not self.tags.tags:
            for name in self.config.defaults.tags:
                self.tags.add_tag(name)
            logger.info("Seeded %d default tags", len(self.tags.tags))

    def reload(self) -> None:
        self.emojis.reload()
        self.tags.reload()
        self.entries.reload()

    # ── Entries ──────────────────────────────────────────────

    def add_entry(
        self,
        date: datetime,
        emoji_id: str | None = None,
        tag_id: str | None = None,
        note: str = "",
    ) -> TearEntry | None:
        entry = TearEntry(date=date, emoji_id=emoji_id, tag_id=tag_id, note=note)
        return self.entries.add_entry(entry)

    def update_entry(
        self,
        entry_id: str,
        *,
        date: datetime,
        emoji_id: str | None,
        tag_id: str | None,
        note: str,
    ) -> TearEntry:
        return self.entries.update_entry(
            entry_id, date=date, emoji_id=emoji_id, tag_id=tag_id, note=note
        )

    def delete_entry(self, entry_id: str) -> bool:
        return self.entries.delete_entry(entry_id)

    # ── Tags ─────────────────────────────────────────────────

    def add_tag(self, name: str) -> TagItem | None:
        return self.tags.add_tag(name)

    def remove_tag(self, tag_id: str) -> TagItem | None:
        return self.tags.remove_tag(tag_id)

    def rename_tag(self, tag_id: str, name: str) -> TagItem:
        return self.tags.rename_tag(tag_id, name)

    def move_tags(self, source: Iterable[int], destination: int) -> bool:
        return self.tags.move_tags(source, destination)

    # ── Emojis ───────────────────────────────────────────────

    def add_emoji(self, symbol: str, color: str | None = None, opacity: float = 1.0) -> EmojiIntensity | None:
        emoji = EmojiIntensity(
            symbol=symbol, color=color or self.config.defaults.emoji_color, opacity=opacity
        )
        return self.emojis.add_emoji(emoji)

    def remove_emoji(self, index: int) -> EmojiIntensity | None:
        return self.emojis.remove_emoji(index)

    def update_emoji(
        self,
        index: int,
        *,
        symbol: str | None = None,
        color: str | None = None,
        opacity: float | None = None,
    ) -> EmojiIntensity | None:
        return self.emojis.update_emoji(index, symbol=symbol, color=color, opacity=opacity)

    def move_emojis(self, source: Iterable[int], destination: int) -> bool:
        return self.emojis.move_emojis(source, destination)

    # ── Reconciliation ───────────────────────────────────────

    def remove_duplicates(self) -> DedupReport:
        return self._remover.remove_duplicates()

    async def sync(self, remote: RecordStore) -> SyncReport:
        cloud = CloudSync(
            remote,
            store=self.store,
            entries=self.entries,
            tags=self.tags,
            emojis=self.emojis,
            remover=self._remover,
        )
        return await cloud.sync()

    @property
    def last_refresh(self) -> datetime | None:
        value = self.store.read_state().get("last_refresh")
        return datetime.fromisoformat(value) if value else None

    # ── Statistics ───────────────────────────────────────────

    def analyzer(self) -> StatsAnalyzer:
        return StatsAnalyzer(
            self.entries.entries,
            self.tags.tags,
            self.emojis.emojis,
            locale=self.config.locale,
        )
