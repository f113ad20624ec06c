"""In-process record store, used offline and in tests."""

from __future__ import annotations

import copy
import logging

from tearlog.errors import RecordNotFoundError
from tearlog.sync.base import AccountStatus, FetchResult, Record

logger = logging.getLogger(__name__)


class InMemoryRecordStore:
    """Dict-backed record store."""

    def __init__(self, status: AccountStatus = AccountStatus.AVAILABLE) -> None:
        self.status = status
        self._records: dict[tuple[str, str], dict] = {}

    @property
    def name(self) -> str:
        return "memory"

    async def account_status(self) -> AccountStatus:
        return self.status

    async def fetch_all(self, record_type: str) -> list[FetchResult]:
        return [
            Record(rtype, rid, copy.deepcopy(fields))
            for (rtype, rid), fields in self._records.items()
            if rtype == record_type
        ]

    async def fetch(self, record_type: str, record_id: str) -> Record:
        fields = self._records.get((record_type, record_id))
        if fields is None:
            raise RecordNotFoundError(record_type, record_id)
        return Record(record_type, record_id, copy.deepcopy(fields))

    async def save(self, record: Record) -> Record:
        self._records[(record.record_type, record.record_id)] = copy.deepcopy(record.fields)
        return record

    async def delete(self, record_type: str, record_id: str) -> bool:
        return self._records.pop((record_type, record_id), None) is not None

    def __len__(self) -> int:
        return len(self._records)
