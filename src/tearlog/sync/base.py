"""Record store protocol and shared types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable

RECORD_TYPE_ENTRY = "TearEntry"
RECORD_TYPE_TAG = "TagItem"
RECORD_TYPE_EMOJI = "EmojiIntensity"

# Merge order: referenced types first so entry references resolve.
RECORD_TYPES = (RECORD_TYPE_EMOJI, RECORD_TYPE_TAG, RECORD_TYPE_ENTRY)


class AccountStatus(str, Enum):
    AVAILABLE = "available"
    NO_ACCOUNT = "no_account"
    RESTRICTED = "restricted"
    COULD_NOT_DETERMINE = "could_not_determine"
    TEMPORARILY_UNAVAILABLE = "temporarily_unavailable"


@dataclass
class Record:
    """A remote key/value record."""

    record_type: str
    record_id: str
    fields: dict = field(default_factory=dict)


@dataclass
class FetchFailure:
    """A record the store listed but could not return."""

    record_type: str
    record_id: str
    error: str


FetchResult = Record | FetchFailure


@runtime_checkable
class RecordStore(Protocol):
    """Protocol that all remote record stores must implement."""

    @property
    def name(self) -> str: ...

    async def account_status(self) -> AccountStatus:
        """Whether the remote is reachable and signed in."""
        ...

    async def fetch_all(self, record_type: str) -> list[FetchResult]:
        """Return every record of a type. Per-record failures are returned, not raised."""
        ...

    async def fetch(self, record_type: str, record_id: str) -> Record:
        """Return one record. Raises RecordNotFoundError if it does not exist."""
        ...

    async def save(self, record: Record) -> Record:
        """Create or overwrite a record."""
        ...

    async def delete(self, record_type: str, record_id: str) -> bool:
        """Remove a record. Returns False if it did not exist."""
        ...
