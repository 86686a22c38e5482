"""Tests for the registry record repository."""

from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.exceptions import ConstraintViolationError, DuplicateRecordError
from app.db.repositories import record_repo
from app.models.record import RecordWrite


def _columns(**payload) -> dict:
    return RecordWrite(**payload).to_columns(today=date(2026, 2, 11))


async def _folder(db: AsyncSession, name: str, parent_id: str | None = None):
    return await record_repo.create_record(db, _columns(kind="folder", name=name, parent_id=parent_id))


@pytest.mark.asyncio
async def test_create_assigns_id(db: AsyncSession):
    record = await _folder(db, "Contracts")
    assert record.id
    assert record.kind == "folder"
    assert record.parent_id is None


@pytest.mark.asyncio
async def test_create_with_explicit_duplicate_id_raises(db: AsyncSession):
    await record_repo.create_record(db, _columns(kind="folder", name="A"), record_id="same")
    with pytest.raises(DuplicateRecordError, match="already exists"):
        await record_repo.create_record(db, _columns(kind="folder", name="B"), record_id="same")


@pytest.mark.asyncio
async def test_create_under_missing_parent_is_rejected(db: AsyncSession):
    with pytest.raises(ConstraintViolationError):
        await record_repo.create_record(db, _columns(kind="file", name="x.pdf", parent_id="nope"))


@pytest.mark.asyncio
async def test_create_under_file_is_rejected(db: AsyncSession):
    parent = await record_repo.create_record(db, _columns(kind="file", name="x.pdf"))
    with pytest.raises(ConstraintViolationError):
        await record_repo.create_record(db, _columns(kind="file", name="y.pdf", parent_id=parent.id))


@pytest.mark.asyncio
async def test_update_returns_none_for_missing_record(db: AsyncSession):
    assert await record_repo.update_record(db, "missing", {"name": "x"}) is None


@pytest.mark.asyncio
async def test_move_folder_under_its_descendant_is_rejected(db: AsyncSession):
    top = await _folder(db, "Top")
    mid = await _folder(db, "Mid", top.id)
    leaf = await _folder(db, "Leaf", mid.id)

    with pytest.raises(ConstraintViolationError, match="cycle"):
        await record_repo.update_record(db, top.id, {"parent_id": leaf.id})
    with pytest.raises(ConstraintViolationError, match="cycle"):
        await record_repo.update_record(db, top.id, {"parent_id": top.id})


@pytest.mark.asyncio
async def test_move_file_between_folders(db: AsyncSession):
    a = await _folder(db, "A")
    b = await _folder(db, "B")
    doc = await record_repo.create_record(db, _columns(kind="file", name="x.pdf", parent_id=a.id))

    moved = await record_repo.update_record(db, doc.id, {"parent_id": b.id})
    assert moved is not None
    assert moved.parent_id == b.id


@pytest.mark.asyncio
async def test_delete_folder_moves_children_to_root(db: AsyncSession):
    folder = await _folder(db, "Old")
    child = await record_repo.create_record(db, _columns(kind="file", name="x.pdf", parent_id=folder.id))

    deleted = await record_repo.delete_record(db, folder.id)
    assert deleted is not None
    assert deleted.name == "Old"
    assert await record_repo.get_record_by_id(db, folder.id) is None

    db.expire_all()
    orphan = await record_repo.get_record_by_id(db, child.id)
    assert orphan is not None
    assert orphan.parent_id is None


@pytest.mark.asyncio
async def test_delete_missing_returns_none(db: AsyncSession):
    assert await record_repo.delete_record(db, "missing") is None


@pytest.mark.asyncio
async def test_documents_issued_between(db: AsyncSession):
    for number, issued in [("1", "2026-01-31"), ("2", "2026-02-01"), ("3", "2026-02-28"), ("4", "2026-03-01")]:
        await record_repo.create_record(
            db,
            _columns(
                kind="document",
                document_number=number,
                department="Finance",
                responsible="Ana",
                issued_on=issued,
            ),
        )
    await record_repo.create_record(db, _columns(kind="file", name="feb.pdf", modified_at="2026-02-10"))

    rows = await record_repo.get_documents_issued_between(db, date(2026, 2, 1), date(2026, 2, 28))
    assert sorted(r.document_number for r in rows) == ["2", "3"]


@pytest.mark.asyncio
async def test_get_records_filters_by_kind(db: AsyncSession):
    await _folder(db, "F")
    await record_repo.create_record(db, _columns(kind="file", name="x.pdf"))

    assert len(await record_repo.get_records(db)) == 2
    folders = await record_repo.get_records(db, kind="folder")
    assert [f.name for f in folders] == ["F"]


@pytest.mark.asyncio
async def test_rejected_writes_are_logged(db: AsyncSession, caplog):
    import logging

    caplog.set_level(logging.WARNING)
    with pytest.raises(ConstraintViolationError):
        await record_repo.create_record(db, _columns(kind="file", name="x.pdf", parent_id="nope"))
    assert "Rejected record create" in caplog.text
