"""History of generated invoices.

A small repository interface (save / list / delete) over a swappable medium:

- ``SqlHistoryStore``: SQLite through SQLModel.
- ``JsonHistoryStore``: one JSON file holding the whole list under a single key.

Stores never raise to callers. Failures are logged; reads degrade to an empty
history and writes are dropped. Both media assume a single writer: ``save`` and
``delete`` are read-modify-write cycles with no locking.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from invoicer.core.errors import PersistenceError
from invoicer.core.settings import Settings
from invoicer.data.db import create_db_and_tables, dispose_engine, get_session, session_scope
from invoicer.data.models import HistoryRecord

logger = logging.getLogger(__name__)

STORAGE_KEY = "invoice-generator-invoices"


class HistoryStore(ABC):
    """Most-recent-first collection of HistoryRecord, addressable by invoice number."""

    @abstractmethod
    def _read(self) -> List[HistoryRecord]:
        """Return all records, newest first. Raise PersistenceError on failure."""

    @abstractmethod
    def _prepend(self, record: HistoryRecord) -> None:
        """Persist record ahead of the existing ones. Raise PersistenceError on failure."""

    @abstractmethod
    def _remove(self, record_id: str) -> None:
        """Drop every record with this id. Raise PersistenceError on failure."""

    def save(self, record: HistoryRecord) -> None:
        try:
            self._prepend(record)
            logger.info("Saved invoice %s to history", record.id)
        except PersistenceError:
            logger.exception("Error saving invoice %s to history", record.id)

    def list(self) -> List[HistoryRecord]:
        try:
            return self._read()
        except PersistenceError:
            logger.exception("Error retrieving invoice history")
            return []

    def delete(self, record_id: str) -> None:
        try:
            self._remove(record_id)
        except PersistenceError:
            logger.exception("Error deleting invoice %s from history", record_id)

    def get(self, record_id: str) -> Optional[HistoryRecord]:
        for rec in self.list():
            if rec.id == record_id:
                return rec
        return None

    def close(self) -> None:
        """Release any resources held by the medium. The store may be used again afterwards."""


class SqlHistoryStore(HistoryStore):
    """History kept in a SQLite table; insertion order comes from the ``seq`` key."""

    def __init__(self, db_path: Union[str, Path]) -> None:
        self.db_path = Path(db_path)
        self._ready = False

    def _ensure_schema(self) -> None:
        if not self._ready:
            create_db_and_tables(self.db_path)
            self._ready = True

    def _read(self) -> List[HistoryRecord]:
        try:
            self._ensure_schema()
            with get_session(self.db_path) as s:
                stmt = select(HistoryRecord).order_by(HistoryRecord.seq.desc())
                return list(s.exec(stmt).all())
        except (SQLAlchemyError, OSError) as exc:
            raise PersistenceError(str(exc)) from exc

    def _prepend(self, record: HistoryRecord) -> None:
        row = HistoryRecord(
            id=record.id,
            client_name=record.client_name,
            total=record.total,
            date=record.date,
            document=bytes(record.document or b""),
        )
        try:
            self._ensure_schema()
            with session_scope(self.db_path) as s:
                s.add(row)
        except (SQLAlchemyError, OSError) as exc:
            raise PersistenceError(str(exc)) from exc

    def _remove(self, record_id: str) -> None:
        try:
            self._ensure_schema()
            with session_scope(self.db_path) as s:
                rows = s.exec(select(HistoryRecord).where(HistoryRecord.id == record_id)).all()
                for row in rows:
                    s.delete(row)
        except (SQLAlchemyError, OSError) as exc:
            raise PersistenceError(str(exc)) from exc

    def close(self) -> None:
        dispose_engine(self.db_path)
        self._ready = False


def _record_to_json(record: HistoryRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "clientName": record.client_name,
        "total": record.total,
        "date": record.date,
        "pdfData": base64.b64encode(bytes(record.document or b"")).decode("ascii"),
    }


def _record_from_json(raw: Dict[str, Any]) -> HistoryRecord:
    return HistoryRecord(
        id=str(raw["id"]),
        client_name=str(raw.get("clientName", "")),
        total=float(raw.get("total", 0.0) or 0.0),
        date=str(raw.get("date", "")),
        document=base64.b64decode(raw.get("pdfData") or "", validate=True),
    )


class JsonHistoryStore(HistoryStore):
    """History kept as one JSON document: ``{STORAGE_KEY: [record, ...]}``, newest first."""

    def __init__(self, path: Union[str, Path], key: str = STORAGE_KEY) -> None:
        self.path = Path(path)
        self.key = key

    def _load_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Unreadable history file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"Unexpected history layout in {self.path}")
        return data

    def _read(self) -> List[HistoryRecord]:
        entries = self._load_all().get(self.key) or []
        if not isinstance(entries, list):
            raise PersistenceError(f"History under {self.key!r} is not a list")
        try:
            return [_record_from_json(e) for e in entries]
        except (KeyError, TypeError, ValueError, AttributeError, binascii.Error) as exc:
            raise PersistenceError(f"Corrupt history entry: {exc}") from exc

    def _write(self, records: List[HistoryRecord]) -> None:
        try:
            data = self._load_all()
        except PersistenceError:
            data = {}
        data[self.key] = [_record_to_json(r) for r in records]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            with tmp.open("w", encoding="utf-8", newline="\n") as f:
                json.dump(data, f, ensure_ascii=False)
            tmp.replace(self.path)
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Could not write {self.path}: {exc}") from exc

    def _prepend(self, record: HistoryRecord) -> None:
        try:
            existing = self._read()
        except PersistenceError:
            logger.warning("Discarding unreadable history in %s", self.path)
            existing = []
        self._write([record] + existing)

    def _remove(self, record_id: str) -> None:
        existing = self._read()
        remaining = [r for r in existing if r.id != record_id]
        if len(remaining) != len(existing):
            self._write(remaining)


def open_history_store(settings: Settings) -> HistoryStore:
    """Build the store selected by ``settings.history_backend``."""
    path = settings.resolved_history_path()
    if settings.history_backend == "json":
        return JsonHistoryStore(path)
    return SqlHistoryStore(path)


SAMPLE_HISTORY = (
    ("INV-2024001", "Acme Corporation", 2450.00, 7),
    ("INV-2024002", "Tech Solutions Ltd", 1875.50, 14),
    ("INV-2024003", "Creative Agency Inc", 3200.75, 21),
)


def seed_sample_history(store: HistoryStore, now: Optional[datetime] = None) -> bool:
    """Fill an empty history with demo entries (no PDF bytes). Returns True if seeded."""
    if store.list():
        return False
    now = now or datetime.now(timezone.utc)
    for number, client, total, days_ago in SAMPLE_HISTORY:
        store.save(
            HistoryRecord(
                id=number,
                client_name=client,
                total=total,
                date=(now - timedelta(days=days_ago)).isoformat(),
                document=b"",
            )
        )
    return True
