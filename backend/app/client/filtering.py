"""Record filtering and search.

Output is recomputed from scratch on every call.
"""

from collections.abc import Iterable
from typing import Final

from app.core.stats import in_window
from app.models.record import DocumentRecord, FileRecord, FolderRecord

AnyRecord = FolderRecord | FileRecord | DocumentRecord


class _Unscoped:
    def __repr__(self) -> str:
        return "UNSCOPED"


UNSCOPED: Final = _Unscoped()
"""Pass as ``folder_id`` to disable folder scoping (``None`` means the root)."""


def search_text(record: AnyRecord) -> str:
    """Lower-cased haystack for substring search."""
    if isinstance(record, DocumentRecord):
        fields = [
            record.document_number,
            record.document_type,
            record.department,
            record.responsible,
            record.status.value,
            record.notes,
        ]
    else:
        fields = [
            record.name,
            record.kind,
            record.owner,
            getattr(record, "size", None),
        ]
    return " ".join(f for f in fields if f).lower()


def matches_search(record: AnyRecord, term: str) -> bool:
    term = term.strip().lower()
    return not term or term in search_text(record)


def in_folder(record: AnyRecord, folder_id: str | None) -> bool:
    if isinstance(record, DocumentRecord):
        return False
    return record.parent_id == folder_id


def _folder_sort_key(record: AnyRecord) -> tuple[int, str]:
    return (0 if isinstance(record, FolderRecord) else 1, record.label.lower())


def filter_records(
    records: Iterable[AnyRecord],
    *,
    folder_id: str | None | _Unscoped = UNSCOPED,
    search: str = "",
    month: int | None = None,
    year: int | None = None,
) -> list[AnyRecord]:
    """Return the records visible under the given scope.

    Folder-scoped results put folders before files, each group sorted by
    name; unscoped results keep store order.
    """
    scoped = not isinstance(folder_id, _Unscoped)
    result = [
        r
        for r in records
        if (not scoped or in_folder(r, folder_id))  # type: ignore[arg-type]
        and in_window(r, month, year)
        and matches_search(r, search)
    ]
    if scoped:
        result.sort(key=_folder_sort_key)
    return result
