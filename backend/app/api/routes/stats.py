"""Dashboard statistics endpoint."""

import logging

from fastapi import APIRouter, Query

from app.api.dependencies import CurrentSession, DbSession
from app.core.stats import compute_stats, month_window
from app.db.repositories import record_repo
from app.models.envelope import success_response
from app.models.record import parse_record

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def get_stats(
    session: CurrentSession,
    db: DbSession,
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None, ge=1900, le=9999),
) -> dict:
    """Aggregate documents, optionally limited to the month they were issued in.

    The window only applies when both ``month`` and ``year`` are given.
    """
    if month is not None and year is not None:
        start, end = month_window(year, month)
        rows = await record_repo.get_documents_issued_between(db, start, end)
    else:
        rows = await record_repo.get_records(db, kind="document")

    stats = compute_stats(parse_record(r) for r in rows)
    return success_response(stats.model_dump(), month=month, year=year)
