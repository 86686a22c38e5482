"""Registry record repository."""

import logging
import uuid
from datetime import date
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.exceptions import ConnectionError, ConstraintViolationError, DatabaseError, DuplicateRecordError
from app.db.models import Record

logger = logging.getLogger(__name__)

FOLDER_KIND = "folder"


async def get_records(db: AsyncSession, kind: str | None = None) -> list[Record]:
    """Get all records, newest first, optionally restricted to one kind."""
    try:
        query = select(Record).order_by(
            Record.issued_on.desc(),
            Record.modified_at.desc(),
            Record.name,
        )
        if kind is not None:
            query = query.where(Record.kind == kind)
        result = await db.execute(query)
        return list(result.scalars().all())
    except OperationalError as e:
        logger.error(f"Database connection error in get_records: {e}")
        raise ConnectionError("Database connection failed") from e
    except Exception as e:
        logger.error(f"Unexpected error listing records: {e}")
        raise DatabaseError(f"Failed to list records: {e}") from e


async def get_documents_issued_between(db: AsyncSession, start: date, end: date) -> list[Record]:
    """Get flat documents whose issue date falls within [start, end]."""
    try:
        result = await db.execute(
            select(Record)
            .where(
                Record.kind == "document",
                Record.issued_on >= start,
                Record.issued_on <= end,
            )
            .order_by(Record.issued_on.desc())
        )
        return list(result.scalars().all())
    except OperationalError as e:
        logger.error(f"Database connection error in get_documents_issued_between: {e}")
        raise ConnectionError("Database connection failed") from e
    except Exception as e:
        logger.error(f"Unexpected error listing documents between {start} and {end}: {e}")
        raise DatabaseError(f"Failed to list documents: {e}") from e


async def get_record_by_id(db: AsyncSession, record_id: str) -> Record | None:
    """Get a single record by ID."""
    try:
        result = await db.execute(select(Record).where(Record.id == record_id))
        return result.scalar_one_or_none()
    except OperationalError as e:
        logger.error(f"Database connection error in get_record_by_id: {e}")
        raise ConnectionError("Database connection failed") from e
    except Exception as e:
        logger.error(f"Unexpected error getting record {record_id}: {e}")
        raise DatabaseError(f"Failed to get record: {e}") from e


async def _check_parent(db: AsyncSession, record_id: str | None, parent_id: str | None) -> None:
    """Ensure *parent_id* is an existing folder and not a descendant of *record_id*."""
    if parent_id is None:
        return
    parent = await get_record_by_id(db, parent_id)
    if parent is None or parent.kind != FOLDER_KIND:
        raise ConstraintViolationError(f"Parent {parent_id} is not an existing folder")
    if record_id is None:
        return

    # Walk up from the new parent; meeting the record itself means a cycle.
    seen: set[str] = set()
    current: Record | None = parent
    while current is not None and current.id not in seen:
        if current.id == record_id:
            raise ConstraintViolationError(f"Moving {record_id} under {parent_id} would create a cycle")
        seen.add(current.id)
        current = await get_record_by_id(db, current.parent_id) if current.parent_id else None


async def create_record(db: AsyncSession, columns: dict[str, Any], record_id: str | None = None) -> Record:
    """Create a new record. The ID is generated when not supplied."""
    try:
        if record_id and await get_record_by_id(db, record_id):
            raise DuplicateRecordError(f"Record {record_id} already exists")
        await _check_parent(db, None, columns.get("parent_id"))
        record = Record(id=record_id or str(uuid.uuid4()), **columns)
        db.add(record)
        await db.flush()
        await db.refresh(record)
        return record
    except ConstraintViolationError as e:
        logger.warning(f"Rejected record create: {e}")
        raise
    except DuplicateRecordError as e:
        logger.error(f"Duplicate record {record_id}: {e}")
        raise
    except IntegrityError as e:
        logger.error(f"Duplicate record {record_id}: {e}")
        raise DuplicateRecordError(f"Record {record_id} already exists") from e
    except OperationalError as e:
        logger.error(f"Database connection error in create_record: {e}")
        raise ConnectionError("Database connection failed") from e
    except Exception as e:
        logger.error(f"Unexpected error creating record: {e}")
        raise DatabaseError(f"Failed to create record: {e}") from e


async def update_record(db: AsyncSession, record_id: str, updates: dict[str, Any]) -> Record | None:
    """Update a record. Returns None if not found."""
    try:
        record = await get_record_by_id(db, record_id)
        if not record:
            return None
        if "parent_id" in updates and updates["parent_id"] != record.parent_id:
            await _check_parent(db, record_id, updates["parent_id"])
        for key, value in updates.items():
            if key != "id" and hasattr(record, key):
                setattr(record, key, value)
        await db.flush()
        await db.refresh(record)
        return record
    except ConstraintViolationError as e:
        logger.warning(f"Rejected update of record {record_id}: {e}")
        raise
    except OperationalError as e:
        logger.error(f"Database connection error in update_record: {e}")
        raise ConnectionError("Database connection failed") from e
    except Exception as e:
        logger.error(f"Unexpected error updating record {record_id}: {e}")
        raise DatabaseError(f"Failed to update record: {e}") from e


async def delete_record(db: AsyncSession, record_id: str) -> Record | None:
    """Delete a record and return it, or None if not found.

    Children of a deleted folder move to the root.
    """
    try:
        record = await get_record_by_id(db, record_id)
        if not record:
            return None
        await db.execute(
            update(Record).where(Record.parent_id == record_id).values(parent_id=None)
        )
        await db.execute(delete(Record).where(Record.id == record_id))
        await db.flush()
        return record
    except OperationalError as e:
        logger.error(f"Database connection error in delete_record: {e}")
        raise ConnectionError("Database connection failed") from e
    except Exception as e:
        logger.error(f"Unexpected error deleting record {record_id}: {e}")
        raise DatabaseError(f"Failed to delete record: {e}") from e
