"""Record store over a plain directory, e.g. a cloud-drive folder.

Layout:
    <root>/<record_type>/<record_id>.json   # {"record_type", "record_id", "fields"}
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

from tearlog.errors import RecordNotFoundError
from tearlog.sync.base import AccountStatus, FetchFailure, FetchResult, Record

logger = logging.getLogger(__name__)


class DirectoryRecordStore:
    """One JSON file per record under ``root``."""

    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def name(self) -> str:
        return "directory"

    def _path(self, record_type: str, record_id: str) -> Path:
        return self.root / record_type / f"{record_id}.json"

    async def account_status(self) -> AccountStatus:
        if not self.root.is_dir():
            return AccountStatus.NO_ACCOUNT
        if not os.access(self.root, os.W_OK):
            return AccountStatus.RESTRICTED
        return AccountStatus.AVAILABLE

    @staticmethod
    def _read(path: Path) -> Record:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Record(
            record_type=data["record_type"],
            record_id=data["record_id"],
            fields=dict(data.get("fields", {})),
        )

    def _read_all(self, record_type: str) -> list[FetchResult]:
        type_dir = self.root / record_type
        if not type_dir.is_dir():
            return []
        results: list[FetchResult] = []
        for path in sorted(type_dir.glob("*.json")):
            try:
                results.append(self._read(path))
            except (OSError, ValueError, KeyError) as e:
                results.append(FetchFailure(record_type, path.stem, str(e)))
        return results

    async def fetch_all(self, record_type: str) -> list[FetchResult]:
        return await asyncio.to_thread(self._read_all, record_type)

    async def fetch(self, record_type: str, record_id: str) -> Record:
        path = self._path(record_type, record_id)
        if not path.exists():
            raise RecordNotFoundError(record_type, record_id)
        return await asyncio.to_thread(self._read, path)

    def _write(self, record: Record) -> None:
        path = self._path(record.record_type, record.record_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "record_type": record.record_type,
            "record_id": record.record_id,
            "fields": record.fields,
        }
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(path)

    async def save(self, record: Record) -> Record:
        await asyncio.to_thread(self._write, record)
        return record

    async def delete(self, record_type: str, record_id: str) -> bool:
        path = self._path(record_type, record_id)
        if not path.exists():
            return False
        await asyncio.to_thread(path.unlink)
        return True
