"""Registry record CRUD endpoints."""

import logging

from fastapi import APIRouter, HTTPException, status

from app.api.dependencies import CurrentSession, DbSession
from app.db.exceptions import ConstraintViolationError
from app.db.repositories import record_repo
from app.models.envelope import success_response
from app.models.record import DocumentStatus, RecordWrite, StatusUpdate, parse_record

logger = logging.getLogger(__name__)

router = APIRouter()


def _serialize(record: object) -> dict:
    return parse_record(record).model_dump(mode="json")


def _columns(body: RecordWrite) -> dict:
    try:
        return body.to_columns()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


# ---------------------------------------------------------------------------
# List / fetch
# ---------------------------------------------------------------------------

@router.get("")
async def list_records(
    session: CurrentSession,
    db: DbSession,
) -> dict:
    """Return every record, newest first."""
    records = await record_repo.get_records(db)
    return success_response([_serialize(r) for r in records], count=len(records))


@router.get("/{record_id}")
async def get_record(
    record_id: str,
    session: CurrentSession,
    db: DbSession,
) -> dict:
    """Return a single record."""
    record = await record_repo.get_record_by_id(db, record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Record not found")
    return success_response(_serialize(record))


# ---------------------------------------------------------------------------
# Create / update / delete
# ---------------------------------------------------------------------------

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_record(
    body: RecordWrite,
    session: CurrentSession,
    db: DbSession,
) -> dict:
    """Create a record. The server assigns the ID."""
    columns = _columns(body)
    try:
        record = await record_repo.create_record(db, columns)
    except ConstraintViolationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    logger.info("Record created: %s (%s)", record.id, record.kind)
    return success_response(_serialize(record))


@router.put("/{record_id}")
async def update_record(
    record_id: str,
    body: RecordWrite,
    session: CurrentSession,
    db: DbSession,
) -> dict:
    """Full update of a record."""
    existing = await record_repo.get_record_by_id(db, record_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Record not found")
    if body.kind.value != existing.kind:
        raise HTTPException(status_code=400, detail="Record kind cannot be changed")

    columns = _columns(body)
    try:
        record = await record_repo.update_record(db, record_id, columns)
    except ConstraintViolationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if not record:
        raise HTTPException(status_code=404, detail="Record not found")
    logger.info("Record updated: %s", record_id)
    return success_response(_serialize(record))


@router.patch("/{record_id}")
async def update_status(
    record_id: str,
    body: StatusUpdate,
    session: CurrentSession,
    db: DbSession,
) -> dict:
    """Change only the status of a document."""
    try:
        new_status = DocumentStatus(body.status)
    except ValueError as exc:
        allowed = ", ".join(s.value for s in DocumentStatus)
        raise HTTPException(
            status_code=400,
            detail=f"Invalid status; must be one of: {allowed}",
        ) from exc

    existing = await record_repo.get_record_by_id(db, record_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Record not found")
    if existing.kind != "document":
        raise HTTPException(status_code=400, detail="Only documents have a status")

    record = await record_repo.update_record(db, record_id, {"status": new_status.value})
    if not record:
        raise HTTPException(status_code=404, detail="Record not found")
    logger.info("Status of %s set to %s", record_id, new_status.value)
    return success_response(_serialize(record))


@router.delete("/{record_id}")
async def delete_record(
    record_id: str,
    session: CurrentSession,
    db: DbSession,
) -> dict:
    """Delete a record. Children of a folder move to the root."""
    record = await record_repo.delete_record(db, record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Record not found")
    logger.info("Record deleted: %s", record.name)
    return success_response({"message": "Record deleted", "id": record_id, "name": record.name})
