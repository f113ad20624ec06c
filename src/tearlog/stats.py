"""Group-by and count over the in-memory journal lists."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from tearlog.models import EmojiIntensity, TagItem, TearEntry

MONTH_NAMES = {
    "en": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
    "ru": [
        "Январь", "Февраль", "Март", "Апрель", "Май", "Июнь",
        "Июль", "Август", "Сентябрь", "Октябрь", "Ноябрь", "Декабрь",
    ],
}


def month_label(year: int, month: int, locale: str = "en") -> str:
    """Upper-cased standalone month name and year, e.g. ``MARCH 2024``."""
    names = MONTH_NAMES.get(locale, MONTH_NAMES["en"])
    return f"{names[month - 1]} {year}".upper()


@dataclass
class MonthGroup:
    label: str
    year: int
    month: int
    entries: list[TearEntry]


@dataclass
class EmojiStat:
    symbol: str
    count: int


@dataclass
class TagStat:
    name: str
    count: int


@dataclass
class MonthlyIntensity:
    month_start: date
    counts: list[int]  # aligned with emoji order

    @property
    def total(self) -> int:
        return sum(self.counts)


class StatsAnalyzer:
    """Read-only statistics over a snapshot of entries, tags and emojis."""

    def __init__(
        self,
        entries: list[TearEntry],
        tags: list[TagItem],
        emojis: list[EmojiIntensity],
        locale: str = "en",
    ) -> None:
        self.entries = list(entries)
        self.tags = list(tags)
        self.emojis = list(emojis)
        self.locale = locale

    def available_years(self) -> list[int]:
        return sorted({e.date.year for e in self.entries})

    def grouped_entries(self, year: int | None = None) -> list[MonthGroup]:
        """Entries grouped by calendar month, newest month first."""
        source = self.entries if year is None else self.entries_for_year(year)
        buckets: dict[tuple[int, int], list[TearEntry]] = {}
        for entry in source:
            buckets.setdefault((entry.date.year, entry.date.month), []).append(entry)
        return [
            MonthGroup(
                label=month_label(y, m, self.locale),
                year=y,
                month=m,
                entries=sorted(records, key=lambda e: e.date, reverse=True),
            )
            for (y, m), records in sorted(buckets.items(), reverse=True)
        ]

    def entries_for_year(
        self,
        year: int,
        emoji_id: str | None = None,
        tag_ids: Iterable[str] | None = None,
    ) -> list[TearEntry]:
        """Entries in ``year``, optionally filtered. A tag filter drops untagged entries."""
        wanted_tags = set(tag_ids) if tag_ids is not None else None
        return [
            e
            for e in self.entries
            if e.date.year == year
            and (emoji_id is None or e.emoji_id == emoji_id)
            and (wanted_tags is None or (e.tag_id is not None and e.tag_id in wanted_tags))
        ]

    def total_entries_for_year(self, year: int) -> int:
        return len(self.entries_for_year(year))

    def get_emoji(self, entry: TearEntry) -> EmojiIntensity:
        for emoji in self.emojis:
            if emoji.id == entry.emoji_id:
                return emoji
        if self.emojis:
            return self.emojis[0]
        return EmojiIntensity(symbol="😶", color="#808080", opacity=0.5)

    def emoji_statistics(self, year: int, tag_ids: Iterable[str] | None = None) -> list[EmojiStat]:
        counts = Counter(
            e.emoji_id for e in self.entries_for_year(year, tag_ids=tag_ids) if e.emoji_id
        )
        return [EmojiStat(symbol=emoji.symbol, count=counts[emoji.id]) for emoji in self.emojis]

    def tag_statistics(self, year: int, tag_ids: Iterable[str] | None = None) -> list[TagStat]:
        tag_ids = list(tag_ids) if tag_ids is not None else None
        counts = Counter(
            e.tag_id for e in self.entries_for_year(year, tag_ids=tag_ids) if e.tag_id
        )
        targets = self.tags if tag_ids is None else [t for t in self.tags if t.id in tag_ids]
        return [TagStat(name=tag.name, count=counts[tag.id]) for tag in targets]

    def monthly_data_by_intensity(
        self,
        year: int,
        emoji_id: str | None = None,
        tag_ids: Iterable[str] | None = None,
    ) -> list[MonthlyIntensity]:
        """Twelve buckets, one per month; counts follow the emoji order."""
        per_month: dict[int, Counter] = {m: Counter() for m in range(1, 13)}
        for entry in self.entries_for_year(year, emoji_id=emoji_id, tag_ids=tag_ids):
            if entry.emoji_id:
                per_month[entry.date.month][entry.emoji_id] += 1
        return [
            MonthlyIntensity(
                month_start=date(year, month, 1),
                counts=[per_month[month][emoji.id] for emoji in self.emojis],
            )
            for month in range(1, 13)
        ]
