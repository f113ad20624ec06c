"""Markdown + YAML frontmatter persistence for entries, tags and emojis.

Files are the source of truth. Managers load them once into memory and
call back into the store on every write.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

import frontmatter

from tearlog.models import EmojiIntensity, TagItem, TearEntry

logger = logging.getLogger(__name__)

MAX_VERSIONS_PER_ENTITY = 10

_KINDS = ("entries", "tags", "emojis")


class JournalStore:
    """Read/write access to the on-disk journal."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self._ensure_initialized()

    def _ensure_initialized(self) -> None:
        """Ensure base directories exist. Idempotent."""
        for d in [*_KINDS, ".versions"]:
            (self.root / d).mkdir(parents=True, exist_ok=True)

    # ── Paths ────────────────────────────────────────────────

    def _path(self, kind: str, entity_id: str) -> Path:
        return self.root / kind / f"{entity_id}.md"

    @property
    def state_file(self) -> Path:
        return self.root / ".sync_state.json"

    # ── Loading ──────────────────────────────────────────────

    def _iter_posts(self, kind: str):
        for md_file in sorted((self.root / kind).glob("*.md")):
            try:
                post = frontmatter.load(str(md_file))
            except Exception as e:
                logger.warning("Skipping unreadable %s file %s: %s", kind, md_file.name, e)
                continue
            yield md_file, post

    def load_entries(self) -> list[TearEntry]:
        """All entries, newest first."""
        entries: list[TearEntry] = []
        for md_file, post in self._iter_posts("entries"):
            meta = post.metadata
            try:
                entries.append(
                    TearEntry(
                        date=meta["date"],
                        emoji_id=meta.get("emoji_id"),
                        tag_id=meta.get("tag_id"),
                        note=post.content,
                        id=md_file.stem,
                    )
                )
            except Exception as e:
                logger.warning("Skipping malformed entry %s: %s", md_file.name, e)
        entries.sort(key=lambda e: e.date, reverse=True)
        logger.debug("Loaded %d entries", len(entries))
        return entries

    def load_tags(self) -> list[TagItem]:
        """All tags, by display order."""
        tags: list[TagItem] = []
        for md_file, post in self._iter_posts("tags"):
            meta = post.metadata
            try:
                tags.append(
                    TagItem(
                        name=str(meta["name"]),
                        order=int(meta.get("order", 0)),
                        id=md_file.stem,
                    )
                )
            except Exception as e:
                logger.warning("Skipping malformed tag %s: %s", md_file.name, e)
        tags.sort(key=lambda t: t.order)
        return tags

    def load_emojis(self) -> list[EmojiIntensity]:
        """All emoji intensities, by display order."""
        emojis: list[EmojiIntensity] = []
        for md_file, post in self._iter_posts("emojis"):
            meta = post.metadata
            try:
                emojis.append(
                    EmojiIntensity(
                        symbol=str(meta["symbol"]),
                        color=str(meta.get("color", "#0000FF")),
                        opacity=float(meta.get("opacity", 1.0)),
                        order=int(meta.get("order", 0)),
                        id=md_file.stem,
                    )
                )
            except Exception as e:
                logger.warning("Skipping malformed emoji %s: %s", md_file.name, e)
        emojis.sort(key=lambda e: e.order)
        return emojis

    # ── Writing ──────────────────────────────────────────────

    def _write(self, kind: str, entity_id: str, post: frontmatter.Post) -> None:
        path = self._path(kind, entity_id)
        self._backup(kind, path)
        path.write_text(frontmatter.dumps(post) + "\n", encoding="utf-8")

    def save_entry(self, entry: TearEntry) -> None:
        post = frontmatter.Post(
            entry.note,
            id=entry.id,
            date=entry.date.isoformat(),
            emoji_id=entry.emoji_id,
            tag_id=entry.tag_id,
        )
        self._write("entries", entry.id, post)

    def save_tag(self, tag: TagItem) -> None:
        post = frontmatter.Post("", id=tag.id, name=tag.name, order=tag.order)
        self._write("tags", tag.id, post)

    def save_emoji(self, emoji: EmojiIntensity) -> None:
        post = frontmatter.Post(
            "",
            id=emoji.id,
            symbol=emoji.symbol,
            color=emoji.color,
            opacity=emoji.opacity,
            order=emoji.order,
        )
        self._write("emojis", emoji.id, post)

    def _delete(self, kind: str, entity_id: str) -> bool:
        path = self._path(kind, entity_id)
        if not path.exists():
            return False
        self._backup(kind, path)
        path.unlink()
        self._add_tombstone(kind, entity_id)
        return True

    def delete_entry(self, entry_id: str) -> bool:
        return self._delete("entries", entry_id)

    def delete_tag(self, tag_id: str) -> bool:
        return self._delete("tags", tag_id)

    def delete_emoji(self, emoji_id: str) -> bool:
        return self._delete("emojis", emoji_id)

    # ── Versions ─────────────────────────────────────────────

    def _backup(self, kind: str, path: Path) -> None:
        """Backup to .versions/, keep at most MAX_VERSIONS_PER_ENTITY per entity."""
        if not path.exists():
            return
        versions_dir = self.root / ".versions"
        versions_dir.mkdir(exist_ok=True)
        prefix = f"{kind}-{path.stem}"
        ts = datetime.now().strftime("%Y%m%dT%H%M%S%f")
        (versions_dir / f"{prefix}-{ts}.md").write_text(
            path.read_text(encoding="utf-8"), encoding="utf-8"
        )
        old = sorted(versions_dir.glob(f"{prefix}-*.md"))
        for f in old[:-MAX_VERSIONS_PER_ENTITY]:
            f.unlink()

    def cleanup_old_versions(self, keep: int = 200) -> int:
        """Keep only the most recent `keep` version files."""
        versions = sorted(
            (self.root / ".versions").glob("*"),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        removed = 0
        for path in versions[keep:]:
            path.unlink()
            removed += 1
        return removed

    # ── Sync state ───────────────────────────────────────────

    def read_state(self) -> dict:
        if not self.state_file.exists():
            return {}
        try:
            return json.loads(self.state_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable sync state: %s", e)
            return {}

    def write_state(self, state: dict) -> None:
        self.state_file.write_text(
            json.dumps(state, ensure_ascii=False, indent=2), encoding="utf-8"
        )

    # ── Tombstones ───────────────────────────────────────────
    # Ids deleted locally and not yet removed from the remote.

    def _add_tombstone(self, kind: str, entity_id: str) -> None:
        state = self.read_state()
        ids = state.setdefault("tombstones", {}).setdefault(kind, [])
        if entity_id not in ids:
            ids.append(entity_id)
            self.write_state(state)

    def tombstones(self) -> dict[str, list[str]]:
        return {kind: list(ids) for kind, ids in self.read_state().get("tombstones", {}).items()}

    def clear_tombstones(self, kind: str, ids: list[str]) -> None:
        state = self.read_state()
        remaining = [i for i in state.get("tombstones", {}).get(kind, []) if i not in ids]
        state.setdefault("tombstones", {})[kind] = remaining
        self.write_state(state)
