"""Best-effort merge between the local journal and a remote record store.

Sequence:
1. Check the remote account; anything but AVAILABLE skips the sync.
2. Fetch emojis, tags, then entries and upsert them into local state.
   Existing ids are updated field by field; missing fields keep local values.
3. Run the duplicate removal pass.
4. Upload every local entity (create or overwrite).
5. Delete remote copies of entities deleted locally (tombstones).
6. Record ``last_refresh``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from tearlog.dedup import DedupReport
from tearlog.errors import RecordNotFoundError, SyncError, TearlogError
from tearlog.models import EmojiIntensity, TagItem, TearEntry, parse_datetime
from tearlog.sync.base import (
    RECORD_TYPE_EMOJI,
    RECORD_TYPE_ENTRY,
    RECORD_TYPE_TAG,
    RECORD_TYPES,
    AccountStatus,
    FetchFailure,
    Record,
)

if TYPE_CHECKING:
    from tearlog.dedup import DuplicateRemover
    from tearlog.managers.emojis import EmojiManager
    from tearlog.managers.entries import EntryManager
    from tearlog.managers.tags import TagManager
    from tearlog.store import JournalStore
    from tearlog.sync.base import RecordStore

logger = logging.getLogger(__name__)

# Store directory name -> remote record type
_KIND_TO_RECORD_TYPE = {
    "emojis": RECORD_TYPE_EMOJI,
    "tags": RECORD_TYPE_TAG,
    "entries": RECORD_TYPE_ENTRY,
}


@dataclass
class SyncReport:
    store: str
    status: AccountStatus = AccountStatus.COULD_NOT_DETERMINE
    skipped: bool = False
    fetched: int = 0
    inserted: int = 0
    updated: int = 0
    failed: int = 0
    uploaded: int = 0
    deleted_remote: int = 0
    duplicates: DedupReport = field(default_factory=DedupReport)
    finished_at: datetime | None = None


def _pick(fields: dict, key: str, fallback):
    value = fields.get(key)
    return fallback if value is None else value


class CloudSync:
    """Single-writer reconciliation against one remote record store."""

    def __init__(
        self,
        remote: RecordStore,
        store: JournalStore,
        entries: EntryManager,
        tags: TagManager,
        emojis: EmojiManager,
        remover: DuplicateRemover,
    ) -> None:
        self._remote = remote
        self._store = store
        self._entries = entries
        self._tags = tags
        self._emojis = emojis
        self._remover = remover

    async def sync(self) -> SyncReport:
        report = SyncReport(store=self._remote.name)
        report.status = await self._remote.account_status()
        if report.status != AccountStatus.AVAILABLE:
            logger.warning("Remote %s not available (%s), sync skipped", report.store, report.status.value)
            report.skipped = True
            return report

        logger.info("Starting sync with %s", report.store)
        try:
            tombstones = self._tombstoned_ids()
            for record_type in RECORD_TYPES:
                await self._fetch_and_merge(record_type, tombstones.get(record_type, set()), report)
            report.duplicates = self._remover.remove_duplicates()
            await self._upload(report)
            await self._delete_tombstoned(report)
        except SyncError:
            raise
        except Exception as e:
            logger.error("Sync with %s failed: %s", report.store, e)
            raise SyncError(f"Sync with {report.store} failed: {e}") from e

        report.finished_at = datetime.now()
        state = self._store.read_state()
        state["last_refresh"] = report.finished_at.isoformat()
        self._store.write_state(state)
        logger.info(
            "Sync finished: fetched=%d inserted=%d updated=%d uploaded=%d duplicates=%d",
            report.fetched,
            report.inserted,
            report.updated,
            report.uploaded,
            report.duplicates.total,
        )
        return report

    def _local_ids(self, kind: str) -> set[str]:
        items = {"emojis": self._emojis.emojis, "tags": self._tags.tags, "entries": self._entries.entries}
        return {item.id for item in items.get(kind, [])}

    def _tombstoned_ids(self) -> dict[str, set[str]]:
        # An id that exists locally again (re-saved after a same-id dedup) is not dead.
        return {
            _KIND_TO_RECORD_TYPE[kind]: set(ids) - self._local_ids(kind)
            for kind, ids in self._store.tombstones().items()
            if kind in _KIND_TO_RECORD_TYPE
        }

    # ── Fetch & merge ────────────────────────────────────────

    async def _fetch_and_merge(self, record_type: str, tombstoned: set[str], report: SyncReport) -> None:
        results = await self._remote.fetch_all(record_type)
        for result in results:
            if isinstance(result, FetchFailure):
                logger.warning(
                    "Failed to fetch %s record %s: %s", record_type, result.record_id, result.error
                )
                report.failed += 1
                continue
            report.fetched += 1
            if not result.record_id or result.record_id in tombstoned:
                continue
            try:
                inserted = self._merge_record(result)
            except (TearlogError, ValueError, TypeError) as e:
                logger.warning("Skipping invalid %s record %s: %s", record_type, result.record_id, e)
                report.failed += 1
                continue
            if inserted is None:
                continue
            if inserted:
                report.inserted += 1
            else:
                report.updated += 1

    def _merge_record(self, record: Record) -> bool | None:
        """Upsert one record. Returns True if inserted, False if updated, None if unchanged."""
        if record.record_type == RECORD_TYPE_EMOJI:
            return self._merge_emoji(record)
        if record.record_type == RECORD_TYPE_TAG:
            return self._merge_tag(record)
        if record.record_type == RECORD_TYPE_ENTRY:
            return self._merge_entry(record)
        logger.debug("Ignoring record of unknown type %s", record.record_type)
        return None

    def _merge_emoji(self, record: Record) -> bool | None:
        fields = record.fields
        existing = self._emojis.get(record.record_id)
        if existing is None:
            emoji = EmojiIntensity.from_record_fields(
                record.record_id, fields, default_order=len(self._emojis.emojis)
            )
            return self._emojis.upsert(emoji)
        merged = EmojiIntensity(
            symbol=_pick(fields, "symbol", existing.symbol),
            color=_pick(fields, "color", existing.color),
            opacity=_pick(fields, "opacity", existing.opacity),
            order=int(_pick(fields, "order", existing.order)),
            id=existing.id,
        )
        if merged == existing:
            return None
        return self._emojis.upsert(merged)

    def _merge_tag(self, record: Record) -> bool | None:
        fields = record.fields
        existing = self._tags.get(record.record_id)
        if existing is None:
            tag = TagItem.from_record_fields(record.record_id, fields, default_order=len(self._tags.tags))
            return self._tags.upsert(tag)
        merged = TagItem(
            name=_pick(fields, "name", existing.name),
            order=int(_pick(fields, "order", existing.order)),
            id=existing.id,
        )
        if merged == existing:
            return None
        return self._tags.upsert(merged)

    def _resolve(self, fields: dict, key: str, lookup, fallback: str | None) -> str | None:
        ref = fields.get(key)
        if ref is None:
            return fallback
        return ref if lookup(ref) is not None else None

    def _merge_entry(self, record: Record) -> bool | None:
        fields = record.fields
        existing = self._entries.get(record.record_id)
        if existing is None:
            entry = TearEntry.from_record_fields(record.record_id, fields)
            entry.emoji_id = self._resolve(fields, "emoji_id", self._emojis.get, None)
            entry.tag_id = self._resolve(fields, "tag_id", self._tags.get, None)
            return self._entries.upsert(entry)
        merged = TearEntry(
            date=parse_datetime(fields["date"]) if fields.get("date") else existing.date,
            emoji_id=self._resolve(fields, "emoji_id", self._emojis.get, existing.emoji_id),
            tag_id=self._resolve(fields, "tag_id", self._tags.get, existing.tag_id),
            note=_pick(fields, "note", existing.note),
            id=existing.id,
        )
        if merged == existing:
            return None
        return self._entries.upsert(merged)

    # ── Upload ───────────────────────────────────────────────

    def _local_records(self) -> list[Record]:
        records = [
            Record(RECORD_TYPE_EMOJI, e.id, e.to_record_fields()) for e in self._emojis.emojis
        ]
        records += [Record(RECORD_TYPE_TAG, t.id, t.to_record_fields()) for t in self._tags.tags]
        records += [
            Record(RECORD_TYPE_ENTRY, e.id, e.to_record_fields()) for e in self._entries.entries
        ]
        return records

    async def _upload(self, report: SyncReport) -> None:
        for record in self._local_records():
            try:
                remote = await self._remote.fetch(record.record_type, record.record_id)
            except RecordNotFoundError:
                remote = None
            if remote is not None and remote.fields == record.fields:
                continue
            try:
                await self._remote.save(record)
            except Exception as e:
                logger.error(
                    "Failed to save %s record %s: %s", record.record_type, record.record_id, e
                )
                raise SyncError(f"Failed to save {record.record_type} {record.record_id}: {e}") from e
            logger.debug(
                "%s %s record %s",
                "Created" if remote is None else "Saved",
                record.record_type,
                record.record_id,
            )
            report.uploaded += 1

    async def _delete_tombstoned(self, report: SyncReport) -> None:
        for kind, ids in self._store.tombstones().items():
            record_type = _KIND_TO_RECORD_TYPE.get(kind)
            if record_type is None or not ids:
                continue
            alive = self._local_ids(kind)
            for record_id in ids:
                if record_id in alive:
                    continue
                if await self._remote.delete(record_type, record_id):
                    report.deleted_remote += 1
            self._store.clear_tombstones(kind, ids)
