"""Exception hierarchy for the journal data layer."""

from __future__ import annotations


class TearlogError(Exception):
    """Base exception for tearlog."""

    def __init__(self, message: str, code: str = "TEARLOG_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(TearlogError):
    def __init__(self, message: str) -> None:
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(TearlogError):
    def __init__(self, message: str) -> None:
        super().__init__(message, code="NOT_FOUND")


class EntryNotFoundError(NotFoundError):
    def __init__(self, entry_id: str) -> None:
        super().__init__(f"Entry {entry_id} not found")
        self.entry_id = entry_id


class UnknownReferenceError(TearlogError):
    """An entry points at a tag or emoji that does not exist."""

    def __init__(self, kind: str, ref_id: str) -> None:
        super().__init__(f"Unknown {kind} reference: {ref_id}", code="UNKNOWN_REFERENCE")
        self.kind = kind
        self.ref_id = ref_id


class DuplicateItemError(TearlogError):
    def __init__(self, message: str) -> None:
        super().__init__(message, code="DUPLICATE")


class SyncError(TearlogError):
    def __init__(self, message: str) -> None:
        super().__init__(message, code="SYNC_ERROR")


class RecordNotFoundError(TearlogError):
    """Raised by record stores when a record id is unknown remotely."""

    def __init__(self, record_type: str, record_id: str) -> None:
        super().__init__(f"{record_type} record {record_id} not found", code="UNKNOWN_ITEM")
        self.record_type = record_type
        self.record_id = record_id
