"""Tests for journal statistics."""

from __future__ import annotations

import pytest
from datetime import date, datetime

from tearlog.models import EmojiIntensity, TagItem, TearEntry
from tearlog.stats import StatsAnalyzer, month_label


@pytest.fixture
def emojis() -> list[EmojiIntensity]:
    return [
        EmojiIntensity(symbol="🥲", order=0, id="mild"),
        EmojiIntensity(symbol="😢", order=1, id="sad"),
        EmojiIntensity(symbol="😭", order=2, id="sob"),
    ]


@pytest.fixture
def tags() -> list[TagItem]:
    return [TagItem(name="#Work", order=0, id="work"), TagItem(name="#Family", order=1, id="family")]


@pytest.fixture
def entries() -> list[TearEntry]:
    return [
        TearEntry(date=datetime(2024, 3, 20, 22, 0), emoji_id="sob", tag_id="work"),
        TearEntry(date=datetime(2024, 3, 2, 9, 15), emoji_id="sad", tag_id="family"),
        TearEntry(date=datetime(2024, 3, 2, 18, 0), emoji_id="sob"),
        TearEntry(date=datetime(2024, 1, 7, 7, 0), emoji_id="mild", tag_id="work"),
        TearEntry(date=datetime(2023, 12, 31, 23, 59), emoji_id="sob", tag_id="family"),
    ]


@pytest.fixture
def analyzer(entries, tags, emojis) -> StatsAnalyzer:
    return StatsAnalyzer(entries, tags, emojis)


class TestMonthLabel:
    def test_english(self):
        assert month_label(2024, 3) == "MARCH 2024"

    def test_russian(self):
        assert month_label(2024, 3, "ru") == "МАРТ 2024"

    def test_unknown_locale_falls_back(self):
        assert month_label(2024, 12, "xx") == "DECEMBER 2024"


class TestGrouping:
    def test_available_years(self, analyzer: StatsAnalyzer):
        assert analyzer.available_years() == [2023, 2024]

    def test_grouped_newest_month_first(self, analyzer: StatsAnalyzer):
        groups = analyzer.grouped_entries()
        assert [g.label for g in groups] == ["MARCH 2024", "JANUARY 2024", "DECEMBER 2023"]
        march = groups[0].entries
        assert [e.date.day for e in march] == [20, 2, 2]
        assert march[1].date.hour == 18

    def test_grouped_single_year(self, analyzer: StatsAnalyzer):
        assert [(g.year, g.month) for g in analyzer.grouped_entries(2023)] == [(2023, 12)]

    def test_empty(self, tags, emojis):
        assert StatsAnalyzer([], tags, emojis).grouped_entries() == []


class TestFilters:
    def test_total_for_year(self, analyzer: StatsAnalyzer):
        assert analyzer.total_entries_for_year(2024) == 4
        assert analyzer.total_entries_for_year(2022) == 0

    def test_emoji_filter(self, analyzer: StatsAnalyzer):
        assert len(analyzer.entries_for_year(2024, emoji_id="sob")) == 2

    def test_tag_filter_drops_untagged(self, analyzer: StatsAnalyzer):
        selected = analyzer.entries_for_year(2024, tag_ids=["work", "family"])
        assert len(selected) == 3
        assert all(e.tag_id for e in selected)


class TestGetEmoji:
    def test_known(self, analyzer: StatsAnalyzer, entries):
        assert analyzer.get_emoji(entries[0]).symbol == "😭"

    def test_unknown_falls_back_to_first(self, analyzer: StatsAnalyzer):
        assert analyzer.get_emoji(TearEntry(date=datetime(2024, 1, 1))).symbol == "🥲"

    def test_placeholder_without_emojis(self):
        emoji = StatsAnalyzer([], [], []).get_emoji(TearEntry(date=datetime(2024, 1, 1)))
        assert emoji.symbol == "😶"
        assert emoji.color == "#808080"
        assert emoji.opacity == 0.5


class TestCounts:
    def test_emoji_statistics_follow_emoji_order(self, analyzer: StatsAnalyzer):
        stats = analyzer.emoji_statistics(2024)
        assert [(s.symbol, s.count) for s in stats] == [("🥲", 1), ("😢", 1), ("😭", 2)]

    def test_emoji_statistics_with_tag_filter(self, analyzer: StatsAnalyzer):
        stats = analyzer.emoji_statistics(2024, tag_ids=["work"])
        assert [s.count for s in stats] == [1, 0, 1]

    def test_tag_statistics(self, analyzer: StatsAnalyzer):
        stats = analyzer.tag_statistics(2024)
        assert [(s.name, s.count) for s in stats] == [("#Work", 2), ("#Family", 1)]

    def test_tag_statistics_limited_to_selection(self, analyzer: StatsAnalyzer):
        stats = analyzer.tag_statistics(2024, tag_ids=["family"])
        assert [(s.name, s.count) for s in stats] == [("#Family", 1)]

    def test_monthly_intensity(self, analyzer: StatsAnalyzer):
        months = analyzer.monthly_data_by_intensity(2024)
        assert len(months) == 12
        assert months[0].month_start == date(2024, 1, 1)
        assert months[0].counts == [1, 0, 0]
        assert months[2].counts == [0, 1, 2]
        assert months[2].total == 3
        assert all(m.total == 0 for m in months[3:])

    def test_monthly_intensity_emoji_filter(self, analyzer: StatsAnalyzer):
        months = analyzer.monthly_data_by_intensity(2024, emoji_id="sob")
        assert months[2].counts == [0, 0, 2]
