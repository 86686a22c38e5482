"""Month/year dashboard aggregation over registry records."""

import calendar
from collections import Counter
from collections.abc import Iterable
from datetime import date

from app.models.record import (
    DocumentRecord,
    DocumentStatus,
    FileRecord,
    FolderRecord,
    RegistryStats,
    reference_date,
)

AnyRecord = FolderRecord | FileRecord | DocumentRecord


def month_window(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a month, both inclusive."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def in_window(record: AnyRecord, month: int | None, year: int | None) -> bool:
    """True when no window is set or the record's reference date falls inside it."""
    if month is None or year is None:
        return True
    ref = reference_date(record)
    if ref is None:
        return False
    return ref.year == year and ref.month == month


def compute_stats(records: Iterable[AnyRecord]) -> RegistryStats:
    """Aggregate document counts by status, department, responsible and type.

    Folders and files are ignored; only flat documents carry a status.
    """
    docs = [r for r in records if isinstance(r, DocumentRecord)]
    statuses = Counter(d.status for d in docs)
    return RegistryStats(
        total=len(docs),
        processed=statuses[DocumentStatus.PROCESSED],
        overdue=statuses[DocumentStatus.OVERDUE],
        in_review=statuses[DocumentStatus.IN_REVIEW],
        pending=statuses[DocumentStatus.PENDING],
        by_department=dict(Counter(d.department for d in docs)),
        by_responsible=dict(Counter(d.responsible for d in docs)),
        by_type=dict(Counter(d.document_type for d in docs)),
    )
