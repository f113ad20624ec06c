"""Tests for the Journal facade."""

from __future__ import annotations

import pytest
from datetime import datetime
from pathlib import Path

from tearlog.config import DefaultsConfig, TearlogConfig
from tearlog.errors import DuplicateItemError, ValidationError
from tearlog.journal import DEFAULT_EMOJIS, Journal
from tearlog.sync.memory import InMemoryRecordStore


@pytest.fixture
def config(tmp_path: Path) -> TearlogConfig:
    return TearlogConfig(data_dir=tmp_path / "journal")


@pytest.fixture
def journal(config: TearlogConfig) -> Journal:
    return Journal(config)


class TestSeeding:
    def test_defaults_seeded(self, journal: Journal):
        assert [e.symbol for e in journal.emojis.emojis] == [s for s, _ in DEFAULT_EMOJIS]
        assert [t.name for t in journal.tags.tags] == [
            "#Health", "#Loneliness", "#Work", "#Family", "#Movies",
        ]

    def test_seed_uses_config(self, tmp_path: Path):
        config = TearlogConfig(
            data_dir=tmp_path / "journal",
            defaults=DefaultsConfig(tags=["#Rain"], emoji_color="#00ff00"),
        )
        journal = Journal(config)
        assert [t.name for t in journal.tags.tags] == ["#Rain"]
        assert all(e.color == "#00FF00" for e in journal.emojis.emojis)

    def test_not_reseeded(self, config: TearlogConfig, journal: Journal):
        journal.remove_tag(journal.tags.tags[0].id)
        assert len(Journal(config).tags.tags) == 4

    def test_emptied_tag_list_is_reseeded(self, config: TearlogConfig, journal: Journal):
        for tag in list(journal.tags.tags):
            journal.remove_tag(tag.id)
        assert len(Journal(config).tags.tags) == 5


class TestOperations:
    def test_entry_lifecycle(self, config: TearlogConfig, journal: Journal):
        emoji = journal.emojis.emojis[2]
        tag = journal.tags.find_by_name("#movies")
        entry = journal.add_entry(datetime(2024, 3, 5, 21, 40), emoji.id, tag.id, "Titanic")

        reopened = Journal(config)
        assert reopened.entries.get(entry.id).note == "Titanic"

        journal.update_entry(entry.id, date=entry.date, emoji_id=emoji.id, tag_id=None, note="Up")
        assert journal.entries.get(entry.id).tag_id is None

        assert journal.delete_entry(entry.id) is True
        assert Journal(config).entries.entries == []

    def test_add_duplicate_entry(self, journal: Journal):
        emoji_id = journal.emojis.emojis[0].id
        journal.add_entry(datetime(2024, 3, 5, 21, 40), emoji_id, None, "x")
        assert journal.add_entry(datetime(2024, 3, 5, 21, 40, 30), emoji_id, None, "x") is None

    def test_removing_tag_clears_entries(self, journal: Journal):
        tag = journal.tags.tags[0]
        entry = journal.add_entry(datetime(2024, 3, 5), None, tag.id)
        journal.remove_tag(tag.id)
        assert journal.entries.get(entry.id).tag_id is None

    def test_rename_tag_clash(self, journal: Journal):
        with pytest.raises(DuplicateItemError):
            journal.rename_tag(journal.tags.tags[0].id, "#work")

    def test_add_emoji_uses_default_colour(self, journal: Journal):
        emoji = journal.add_emoji("😿", opacity=0.2)
        assert emoji.color == "#0000FF"
        assert emoji.order == 3

    def test_cannot_remove_every_emoji(self, journal: Journal):
        journal.remove_emoji(0)
        journal.remove_emoji(0)
        with pytest.raises(ValidationError):
            journal.remove_emoji(0)

    def test_move_emojis(self, journal: Journal):
        assert journal.move_emojis([0], 3) is True
        assert [e.symbol for e in journal.emojis.emojis] == ["😢", "😭", "🥲"]

    def test_analyzer_snapshot(self, journal: Journal):
        journal.add_entry(datetime(2024, 3, 5), journal.emojis.emojis[0].id)
        analyzer = journal.analyzer()
        journal.add_entry(datetime(2024, 4, 5), journal.emojis.emojis[0].id)
        assert analyzer.total_entries_for_year(2024) == 1
        assert journal.analyzer().total_entries_for_year(2024) == 2


class TestReconciliation:
    def test_last_refresh_initially_none(self, journal: Journal):
        assert journal.last_refresh is None

    @pytest.mark.asyncio
    async def test_sync_sets_last_refresh(self, journal: Journal):
        report = await journal.sync(InMemoryRecordStore())
        assert journal.last_refresh == report.finished_at
        assert report.uploaded == 8

    @pytest.mark.asyncio
    async def test_two_devices_converge(self, tmp_path: Path):
        remote = InMemoryRecordStore()
        phone = Journal(TearlogConfig(data_dir=tmp_path / "phone"))
        laptop = Journal(TearlogConfig(data_dir=tmp_path / "laptop"))
        phone.add_entry(datetime(2024, 3, 5, 21, 40), phone.emojis.emojis[1].id, None, "x")

        await phone.sync(remote)
        report = await laptop.sync(remote)

        # both devices seeded the same defaults under different ids
        assert report.duplicates.emojis == 3
        assert report.duplicates.tags == 5
        assert [e.symbol for e in laptop.emojis.emojis] == ["🥲", "😢", "😭"]
        assert len(laptop.entries.entries) == 1
        entry = laptop.entries.entries[0]
        assert laptop.emojis.get(entry.emoji_id).symbol == "😢"

    def test_remove_duplicates_on_clean_journal(self, journal: Journal):
        assert journal.remove_duplicates().total == 0
