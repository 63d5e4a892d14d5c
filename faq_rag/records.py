"""Durable storage for the embedded record collection.

The collection is read and written as one JSON array; there are no row-level
updates. Backends raise UninitializedKnowledgeBase when nothing has been
written yet and StoreError for every other read/write failure.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import ValidationError

from .errors import StoreError, UninitializedKnowledgeBase
from .schemas import EmbeddedRecord

logger = logging.getLogger(__name__)


class DurableStore(ABC):
    """Whole-collection read/write of embedded records."""

    @abstractmethod
    def get_records(self) -> List[EmbeddedRecord]:  # pragma: no cover - interface
        """Return the full current record collection."""
        raise NotImplementedError

    @abstractmethod
    def put_records(self, records: Sequence[EmbeddedRecord]) -> None:  # pragma: no cover - interface
        """Replace the full record collection."""
        raise NotImplementedError


def parse_records(payload: str, location: str = "") -> List[EmbeddedRecord]:
    """
    Parse a serialized record collection.

    Raises:
        StoreError: If the payload is not a JSON array of valid records
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise StoreError(f"Record collection is not valid JSON: {location or exc}") from exc

    if not isinstance(data, list):
        raise StoreError(f"Record collection must be a JSON array: {location}")

    try:
        return [EmbeddedRecord.model_validate(item) for item in data]
    except ValidationError as exc:
        raise StoreError(f"Invalid record in collection {location}: {exc}") from exc


def dump_records(records: Sequence[EmbeddedRecord]) -> str:
    """Serialize records with the persisted field names."""
    return json.dumps([record.to_storage() for record in records], ensure_ascii=False, indent=2)


class JsonFileRecordStore(DurableStore):
    """Record collection kept in a single JSON file."""

    def __init__(self, path: str):
        self.path = Path(path)

    def get_records(self) -> List[EmbeddedRecord]:
        if not self.path.exists():
            raise UninitializedKnowledgeBase(str(self.path))

        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                payload = handle.read()
        except OSError as exc:
            raise StoreError(f"Failed to read record collection {self.path}: {exc}") from exc

        records = parse_records(payload, str(self.path))
        logger.info("Read %d records from %s", len(records), self.path)
        return records

    def put_records(self, records: Sequence[EmbeddedRecord]) -> None:
        """Write to a temp file in the same directory, then switch it in atomically."""
        payload = dump_records(records)
        directory = self.path.parent
        tmp_path: Optional[str] = None

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".records_", suffix=".json", dir=str(directory))
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as exc:
            raise StoreError(f"Failed to write record collection {self.path}: {exc}") from exc
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.info("Wrote %d records to %s", len(records), self.path)


class InMemoryRecordStore(DurableStore):
    """Process-local store, uninitialized until the first put."""

    def __init__(self, records: Optional[Sequence[EmbeddedRecord]] = None):
        self._lock = threading.Lock()
        self._records: Optional[List[EmbeddedRecord]] = list(records) if records is not None else None
        self.reads = 0

    def get_records(self) -> List[EmbeddedRecord]:
        with self._lock:
            self.reads += 1
            if self._records is None:
                raise UninitializedKnowledgeBase("memory")
            return list(self._records)

    def put_records(self, records: Sequence[EmbeddedRecord]) -> None:
        with self._lock:
            self._records = list(records)
