"""Shared helpers for the ordered entity managers."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

from tearlog.errors import ValidationError

T = TypeVar("T")

# Called with the id of a removed tag/emoji.
RemovalListener = Callable[[str], None]


def move_items(items: list[T], source: Iterable[int], destination: int) -> list[T]:
    """Return a copy of ``items`` with ``source`` offsets moved before ``destination``.

    ``destination`` is an offset into the original list, so moving item 0 to
    offset 2 puts it after the item originally at offset 1.
    """
    offsets = sorted(set(source))
    for i in offsets:
        if not 0 <= i < len(items):
            raise ValidationError(f"Source offset {i} out of range (0..{len(items) - 1})")
    destination = max(0, min(destination, len(items)))

    moving = [items[i] for i in offsets]
    before = [item for i, item in enumerate(items[:destination]) if i not in offsets]
    after = [
        item for i, item in enumerate(items[destination:], start=destination) if i not in offsets
    ]
    return before + moving + after
