"""Tests for journal entities."""

import pytest
from datetime import datetime, timedelta, timezone

from tearlog.errors import ValidationError
from tearlog.models import EmojiIntensity, TagItem, TearEntry, normalize_hex


class TestNormalizeHex:
    def test_uppercases_and_prefixes(self):
        assert normalize_hex("00ff7f") == "#00FF7F"
        assert normalize_hex(" #abcdef ") == "#ABCDEF"

    @pytest.mark.parametrize("bad", ["", "#12345", "#GGGGGG", "blue"])
    def test_rejects_invalid(self, bad):
        with pytest.raises(ValidationError):
            normalize_hex(bad)


class TestEmojiIntensity:
    def test_rgba(self):
        emoji = EmojiIntensity(symbol="😢", color="#FF8000", opacity=0.5)
        r, g, b, a = emoji.rgba()
        assert r == 1.0
        assert g == pytest.approx(128 / 255)
        assert b == 0.0
        assert a == 0.5

    def test_opacity_out_of_range(self):
        with pytest.raises(ValidationError):
            EmojiIntensity(symbol="😢", opacity=1.5)

    def test_empty_symbol(self):
        with pytest.raises(ValidationError):
            EmojiIntensity(symbol="  ")

    def test_from_record_fields_defaults(self):
        emoji = EmojiIntensity.from_record_fields("id-1", {"symbol": "🥲"}, default_order=4)
        assert emoji.id == "id-1"
        assert emoji.color == "#0000FF"
        assert emoji.opacity == 1.0
        assert emoji.order == 4

    def test_non_string_symbol_rejected(self):
        with pytest.raises(ValidationError):
            EmojiIntensity(symbol=7)

    def test_non_string_colour_rejected(self):
        with pytest.raises(ValidationError):
            EmojiIntensity(symbol="😭", color=255)


class TestTagItem:
    def test_name_trimmed(self):
        assert TagItem(name="  #Work ").name == "#Work"

    def test_key_case_insensitive(self):
        assert TagItem(name="#WORK").key == TagItem(name="#work").key

    def test_empty_name(self):
        with pytest.raises(ValidationError):
            TagItem(name="   ")

    def test_non_string_name_rejected(self):
        with pytest.raises(ValidationError):
            TagItem(name=123)


class TestTearEntry:
    def test_signature_truncates_to_minute(self):
        a = TearEntry(date=datetime(2024, 3, 5, 21, 40, 5), emoji_id="e", note="x")
        b = TearEntry(date=datetime(2024, 3, 5, 21, 40, 59, 999), emoji_id="e", note="x")
        c = TearEntry(date=datetime(2024, 3, 5, 21, 41, 0), emoji_id="e", note="x")
        assert a.signature() == b.signature()
        assert a.signature() != c.signature()

    def test_signature_includes_tag_and_note(self):
        base = dict(date=datetime(2024, 3, 5, 21, 40), emoji_id="e")
        assert TearEntry(**base, tag_id="t").signature() != TearEntry(**base).signature()
        assert TearEntry(**base, note="a").signature() != TearEntry(**base, note="b").signature()

    def test_date_from_iso_string(self):
        entry = TearEntry(date="2024-03-05T21:40:00")
        assert entry.date == datetime(2024, 3, 5, 21, 40)

    def test_aware_date_becomes_naive_local(self):
        entry = TearEntry(date="2024-03-06T10:00:00+03:00")
        expected = datetime(2024, 3, 6, 10, 0, tzinfo=timezone(timedelta(hours=3))).astimezone()
        assert entry.date.tzinfo is None
        assert entry.date == expected.replace(tzinfo=None)

    def test_aware_datetime_sorts_with_naive(self):
        aware = TearEntry(date=datetime(2024, 3, 6, 10, 0, tzinfo=timezone.utc))
        naive = TearEntry(date=datetime(2024, 3, 1, 10, 0))
        assert sorted([aware, naive], key=lambda e: e.date)[0] is naive

    def test_non_string_note_rejected(self):
        with pytest.raises(ValidationError):
            TearEntry(date=datetime(2024, 3, 5), note=42)

    def test_invalid_date(self):
        with pytest.raises(ValidationError):
            TearEntry(date="yesterday")

    def test_record_fields(self):
        entry = TearEntry(date=datetime(2024, 3, 5, 21, 40), emoji_id="e", note=" hi ")
        fields = entry.to_record_fields()
        assert fields == {"date": "2024-03-05T21:40:00", "emoji_id": "e", "tag_id": None, "note": "hi"}
        again = TearEntry.from_record_fields(entry.id, fields)
        assert again == entry
