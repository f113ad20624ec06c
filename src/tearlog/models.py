"""Journal entities and their sync wire shape."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime

from tearlog.errors import ValidationError

DEFAULT_COLOR = "#0000FF"

_HEX_RE = re.compile(r"^#?([0-9A-Fa-f]{6})$")


def new_id() -> str:
    return str(uuid.uuid4())


def normalize_hex(color: str) -> str:
    """Validate a ``#RRGGBB`` colour and return it upper-cased with the ``#``."""
    if not isinstance(color, str):
        raise ValidationError(f"Invalid colour: {color!r}")
    match = _HEX_RE.match(color.strip())
    if not match:
        raise ValidationError(f"Invalid colour: {color!r}")
    return "#" + match.group(1).upper()


def parse_datetime(value: datetime | str) -> datetime:
    """Naive local datetime from a datetime or ISO-8601 string.

    Aware values are converted to local time and stripped of tzinfo.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            pass
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone().replace(tzinfo=None)
        return value
    raise ValidationError(f"Invalid date: {value!r}")


def truncate_to_minute(value: datetime) -> datetime:
    return value.replace(second=0, microsecond=0)


@dataclass
class EmojiIntensity:
    """Emoji + colour + opacity describing how strongly the user felt."""

    symbol: str
    color: str = DEFAULT_COLOR
    opacity: float = 1.0
    order: int = 0
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if not isinstance(self.symbol, str):
            raise ValidationError(f"Emoji symbol must be a string, got {type(self.symbol).__name__}")
        if not self.symbol.strip():
            raise ValidationError("Emoji symbol must not be empty")
        self.symbol = self.symbol.strip()
        self.color = normalize_hex(self.color)
        self.opacity = float(self.opacity)
        if not 0.0 <= self.opacity <= 1.0:
            raise ValidationError(f"Opacity must be within [0, 1], got {self.opacity}")

    def rgba(self) -> tuple[float, float, float, float]:
        value = int(self.color[1:], 16)
        return (
            ((value >> 16) & 0xFF) / 255.0,
            ((value >> 8) & 0xFF) / 255.0,
            (value & 0xFF) / 255.0,
            self.opacity,
        )

    def to_record_fields(self) -> dict:
        return {
            "symbol": self.symbol,
            "color": self.color,
            "opacity": self.opacity,
            "order": self.order,
        }

    @classmethod
    def from_record_fields(cls, record_id: str, fields: dict, default_order: int = 0) -> EmojiIntensity:
        return cls(
            symbol=fields.get("symbol", ""),
            color=fields.get("color") or DEFAULT_COLOR,
            opacity=fields.get("opacity", 1.0),
            order=int(fields.get("order", default_order)),
            id=record_id,
        )


@dataclass
class TagItem:
    """User-defined category label attached to an entry."""

    name: str
    order: int = 0
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            raise ValidationError(f"Tag name must be a string, got {type(self.name).__name__}")
        self.name = self.name.strip()
        if not self.name:
            raise ValidationError("Tag name must not be empty")

    @property
    def key(self) -> str:
        """Case-insensitive identity used for uniqueness."""
        return self.name.lower()

    def to_record_fields(self) -> dict:
        return {"name": self.name, "order": self.order}

    @classmethod
    def from_record_fields(cls, record_id: str, fields: dict, default_order: int = 0) -> TagItem:
        return cls(
            name=fields.get("name", ""),
            order=int(fields.get("order", default_order)),
            id=record_id,
        )


@dataclass
class TearEntry:
    """One journal record of a sad moment."""

    date: datetime
    emoji_id: str | None = None
    tag_id: str | None = None
    note: str = ""
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        self.date = parse_datetime(self.date)
        if self.note is None:
            self.note = ""
        if not isinstance(self.note, str):
            raise ValidationError(f"Entry note must be a string, got {type(self.note).__name__}")
        self.note = self.note.strip()

    def signature(self) -> tuple[datetime, str | None, str | None, str]:
        """Key under which two entries count as the same moment."""
        return (truncate_to_minute(self.date), self.emoji_id, self.tag_id, self.note)

    def to_record_fields(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "emoji_id": self.emoji_id,
            "tag_id": self.tag_id,
            "note": self.note,
        }

    @classmethod
    def from_record_fields(cls, record_id: str, fields: dict) -> TearEntry:
        return cls(
            date=parse_datetime(fields["date"]) if fields.get("date") else datetime.now(),
            emoji_id=fields.get("emoji_id"),
            tag_id=fields.get("tag_id"),
            note=fields.get("note") or "",
            id=record_id,
        )
