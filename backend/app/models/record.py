"""Registry record schemas.

A record is a tagged union over ``kind``:

- ``folder``: hierarchical container, may hold other records via ``parent_id``
- ``file``: hierarchical leaf with descriptive metadata
- ``document``: flat registry entry tracked by type, department and status
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class RecordKind(str, Enum):
    FOLDER = "folder"
    FILE = "file"
    DOCUMENT = "document"


class DocumentStatus(str, Enum):
    PENDING = "pending"
    IN_REVIEW = "in_review"
    PROCESSED = "processed"
    OVERDUE = "overdue"


DEFAULT_DOCUMENT_TYPE = "Other"


def coerce_status(value: object) -> DocumentStatus:
    """Map an arbitrary status value onto a known status, defaulting to pending."""
    try:
        return DocumentStatus(value)
    except ValueError:
        return DocumentStatus.PENDING


# ---------------------------------------------------------------------------
# Record variants
# ---------------------------------------------------------------------------

class _RecordBase(BaseModel):
    # Ids may arrive as integers from older clients.
    model_config = ConfigDict(from_attributes=True, coerce_numbers_to_str=True)

    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class FolderRecord(_RecordBase):
    """Folder returned to the client."""

    kind: Literal["folder"] = "folder"
    name: str
    parent_id: str | None = None
    owner: str | None = None
    modified_at: date | None = None

    @property
    def label(self) -> str:
        return self.name


class FileRecord(_RecordBase):
    """File returned to the client."""

    kind: Literal["file"] = "file"
    name: str
    parent_id: str | None = None
    size: str
    modified_at: date
    owner: str
    mime_type: str

    @property
    def label(self) -> str:
        return self.name


class DocumentRecord(_RecordBase):
    """Flat registry document returned to the client."""

    kind: Literal["document"] = "document"
    document_number: str
    document_type: str = DEFAULT_DOCUMENT_TYPE
    department: str
    responsible: str
    issued_on: date
    due_on: date | None = None
    status: DocumentStatus = DocumentStatus.PENDING
    notes: str = ""

    @property
    def parent_id(self) -> None:
        return None

    @property
    def label(self) -> str:
        return self.document_number


Record = Annotated[Union[FolderRecord, FileRecord, DocumentRecord], Field(discriminator="kind")]
RecordAdapter: TypeAdapter[Record] = TypeAdapter(Record)

_VARIANTS: dict[str, type[_RecordBase]] = {
    RecordKind.FOLDER.value: FolderRecord,
    RecordKind.FILE.value: FileRecord,
    RecordKind.DOCUMENT.value: DocumentRecord,
}


def parse_record(data: Any) -> FolderRecord | FileRecord | DocumentRecord:
    """Validate a raw dict or ORM row into the matching record variant."""
    if isinstance(data, dict):
        return RecordAdapter.validate_python(data)
    kind = getattr(data, "kind", None)
    variant = _VARIANTS.get(kind)  # type: ignore[arg-type]
    if variant is None:
        raise ValueError(f"Unknown record kind: {kind!r}")
    return variant.model_validate(data)  # type: ignore[return-value]


def reference_date(record: FolderRecord | FileRecord | DocumentRecord) -> date | None:
    """Date used for month/year windows: issue date for documents, else modification date."""
    if isinstance(record, DocumentRecord):
        return record.issued_on
    return record.modified_at


# ---------------------------------------------------------------------------
# Write payloads
# ---------------------------------------------------------------------------

_REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    RecordKind.FOLDER.value: ("name",),
    RecordKind.FILE.value: ("name",),
    RecordKind.DOCUMENT.value: ("document_number", "department", "responsible"),
}


class RecordWrite(BaseModel):
    """Create or full-update payload for any record kind.

    Fields are loose on purpose so that missing per-kind fields produce a
    400 with a readable message instead of a schema dump.
    """

    kind: RecordKind = RecordKind.DOCUMENT
    name: str | None = None
    parent_id: str | None = None
    size: str | None = None
    mime_type: str | None = None
    owner: str | None = None
    modified_at: date | None = None
    document_number: str | None = None
    document_type: str | None = None
    department: str | None = None
    responsible: str | None = None
    issued_on: date | None = None
    due_on: date | None = None
    status: str | None = None
    notes: str | None = None

    def to_columns(self, today: date | None = None) -> dict[str, Any]:
        """Return ORM column values for this payload.

        Raises ValueError when a field required by the kind is missing.
        """
        kind = self.kind.value
        missing = [f for f in _REQUIRED_FIELDS[kind] if not getattr(self, f)]
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")

        today = today or date.today()
        if self.kind is RecordKind.DOCUMENT:
            return {
                "kind": kind,
                "name": self.document_number,
                "parent_id": None,
                "document_number": self.document_number,
                "document_type": self.document_type or DEFAULT_DOCUMENT_TYPE,
                "department": self.department,
                "responsible": self.responsible,
                "issued_on": self.issued_on or today,
                "due_on": self.due_on,
                "status": coerce_status(self.status).value,
                "notes": self.notes or "",
            }

        columns: dict[str, Any] = {
            "kind": kind,
            "name": self.name,
            "parent_id": self.parent_id or None,
            "owner": self.owner,
            "modified_at": self.modified_at or today,
        }
        if self.kind is RecordKind.FILE:
            columns.update(
                size=self.size or "-",
                mime_type=self.mime_type or "application/octet-stream",
                owner=self.owner or "",
            )
        else:
            columns.update(size=None, mime_type=None)
        return columns


class StatusUpdate(BaseModel):
    """Status-only update for a document."""

    status: str


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

class RegistryStats(BaseModel):
    """Month/year dashboard figures."""

    total: int = 0
    processed: int = 0
    overdue: int = 0
    in_review: int = 0
    pending: int = 0
    by_department: dict[str, int] = {}
    by_responsible: dict[str, int] = {}
    by_type: dict[str, int] = {}
