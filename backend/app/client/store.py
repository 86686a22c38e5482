"""In-memory ordered record store."""

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from pydantic import ValidationError

from app.models.record import DocumentRecord, FileRecord, FolderRecord, parse_record

logger = logging.getLogger(__name__)

AnyRecord = FolderRecord | FileRecord | DocumentRecord


class RecordStore:
    """Ordered collection of records keyed by ID.

    Replaced wholesale on load; individual records are added, replaced or
    removed after the server confirms a change.
    """

    def __init__(self, records: Iterable[AnyRecord | dict[str, Any]] = ()) -> None:
        self._records: dict[str, AnyRecord] = {}
        self.replace(records)

    @staticmethod
    def _coerce(item: AnyRecord | dict[str, Any]) -> AnyRecord:
        if isinstance(item, (FolderRecord, FileRecord, DocumentRecord)):
            return item
        return parse_record(item)

    def replace(self, records: Iterable[AnyRecord | dict[str, Any]]) -> int:
        """Swap the whole content. Invalid entries are skipped. Returns the new size."""
        fresh: dict[str, AnyRecord] = {}
        for item in records:
            try:
                record = self._coerce(item)
            except (ValidationError, ValueError) as e:
                logger.warning("Skipping invalid record %r: %s", item, e)
                continue
            fresh[str(record.id)] = record
        self._records = fresh
        return len(fresh)

    def get(self, record_id: str | None) -> AnyRecord | None:
        if record_id is None:
            return None
        return self._records.get(str(record_id))

    def get_folder(self, folder_id: str | None) -> FolderRecord | None:
        record = self.get(folder_id)
        return record if isinstance(record, FolderRecord) else None

    def folders(self) -> list[FolderRecord]:
        return [r for r in self._records.values() if isinstance(r, FolderRecord)]

    def all(self) -> list[AnyRecord]:
        return list(self._records.values())

    def ids(self) -> set[str]:
        return set(self._records)

    def add(self, record: AnyRecord | dict[str, Any]) -> AnyRecord:
        """Append a record; an existing ID is replaced in place."""
        return self.put(record)

    def put(self, record: AnyRecord | dict[str, Any]) -> AnyRecord:
        coerced = self._coerce(record)
        self._records[str(coerced.id)] = coerced
        return coerced

    def remove(self, record_ids: Iterable[str]) -> int:
        """Drop the given IDs. Returns how many were present."""
        removed = 0
        for record_id in record_ids:
            if self._records.pop(str(record_id), None) is not None:
                removed += 1
        return removed

    def detach_children(self, folder_id: str) -> int:
        """Move the direct children of *folder_id* to the root. Returns how many moved."""
        children = [
            r for r in self._records.values()
            if not isinstance(r, DocumentRecord) and r.parent_id == str(folder_id)
        ]
        for child in children:
            self._records[child.id] = child.model_copy(update={"parent_id": None})
        return len(children)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return str(record_id) in self._records

    def __iter__(self) -> Iterator[AnyRecord]:
        return iter(list(self._records.values()))
