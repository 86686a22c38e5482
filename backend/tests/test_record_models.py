"""Tests for record schemas and dashboard aggregation."""

from datetime import date

import pytest
from pydantic import ValidationError

from app.core.stats import compute_stats, in_window, month_window
from app.models.record import (
    DocumentRecord,
    DocumentStatus,
    FileRecord,
    FolderRecord,
    RecordKind,
    RecordWrite,
    coerce_status,
    parse_record,
)

TODAY = date(2026, 3, 5)


def _doc(**extra) -> DocumentRecord:
    data = {
        "kind": "document",
        "id": "d",
        "document_number": "NF-1",
        "department": "Finance",
        "responsible": "Ana",
        "issued_on": "2026-02-10",
    }
    data.update(extra)
    return parse_record(data)


class TestParseRecord:
    def test_dispatches_on_kind(self):
        assert isinstance(parse_record({"kind": "folder", "id": "1", "name": "A"}), FolderRecord)
        assert isinstance(_doc(), DocumentRecord)

    def test_integer_ids_become_strings(self):
        record = parse_record({"kind": "folder", "id": 7, "name": "A", "parent_id": 3})
        assert record.id == "7"
        assert record.parent_id == "3"

    def test_file_requires_metadata(self):
        with pytest.raises(ValidationError):
            parse_record({"kind": "file", "id": "1", "name": "x.pdf"})

    def test_unknown_kind_is_rejected(self):
        with pytest.raises(ValidationError):
            parse_record({"kind": "shortcut", "id": "1"})

    def test_file_label_is_name(self):
        record = parse_record({
            "kind": "file",
            "id": "1",
            "name": "x.pdf",
            "size": "1 KB",
            "modified_at": "2026-01-01",
            "owner": "Ana",
            "mime_type": "application/pdf",
        })
        assert isinstance(record, FileRecord)
        assert record.label == "x.pdf"

    def test_document_has_no_parent(self):
        doc = _doc()
        assert doc.parent_id is None
        assert doc.label == "NF-1"
        assert doc.document_type == "Other"


def test_coerce_status_defaults_to_pending():
    assert coerce_status("overdue") is DocumentStatus.OVERDUE
    assert coerce_status("archived") is DocumentStatus.PENDING
    assert coerce_status(None) is DocumentStatus.PENDING


class TestRecordWrite:
    def test_kind_defaults_to_document(self):
        assert RecordWrite().kind is RecordKind.DOCUMENT

    def test_missing_fields_are_listed(self):
        with pytest.raises(ValueError, match="department, responsible"):
            RecordWrite(document_number="NF-1").to_columns(TODAY)

    def test_document_defaults(self):
        columns = RecordWrite(
            document_number="NF-1", department="Finance", responsible="Ana", status="bogus",
        ).to_columns(TODAY)
        assert columns["issued_on"] == TODAY
        assert columns["status"] == "pending"
        assert columns["document_type"] == "Other"
        assert columns["notes"] == ""
        assert columns["parent_id"] is None
        assert columns["name"] == "NF-1"

    def test_file_defaults(self):
        columns = RecordWrite(kind="file", name="x.bin").to_columns(TODAY)
        assert columns["size"] == "-"
        assert columns["mime_type"] == "application/octet-stream"
        assert columns["modified_at"] == TODAY

    def test_folder_has_no_file_metadata(self):
        columns = RecordWrite(kind="folder", name="A", parent_id="").to_columns(TODAY)
        assert columns["size"] is None
        assert columns["parent_id"] is None


class TestStats:
    def test_month_window_covers_whole_month(self):
        assert month_window(2026, 2) == (date(2026, 2, 1), date(2026, 2, 28))
        assert month_window(2024, 2)[1] == date(2024, 2, 29)
        assert month_window(2026, 12)[1] == date(2026, 12, 31)

    def test_month_window_rejects_bad_month(self):
        with pytest.raises(ValueError):
            month_window(2026, 13)

    def test_in_window(self):
        doc = _doc()
        assert in_window(doc, None, None)
        assert in_window(doc, 2, 2026)
        assert not in_window(doc, 3, 2026)
        assert not in_window(parse_record({"kind": "folder", "id": "f", "name": "A"}), 2, 2026)

    def test_compute_stats_ignores_non_documents(self):
        records = [
            _doc(id="1", status="processed"),
            _doc(id="2", status="overdue", department="Legal"),
            _doc(id="3", status="in_review", document_type="Contract"),
            parse_record({"kind": "folder", "id": "f", "name": "A"}),
        ]
        stats = compute_stats(records)
        assert stats.total == 3
        assert (stats.processed, stats.overdue, stats.in_review, stats.pending) == (1, 1, 1, 0)
        assert stats.by_department == {"Finance": 2, "Legal": 1}
        assert stats.by_type == {"Other": 2, "Contract": 1}
        assert stats.by_responsible == {"Ana": 3}

    def test_empty_stats(self):
        assert compute_stats([]).total == 0
