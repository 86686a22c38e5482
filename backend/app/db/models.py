"""SQLAlchemy ORM models."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class Record(Base):
    """A registry entry: folder, file or flat document.

    All kinds share one table. ``kind`` selects which of the nullable
    columns are meaningful; the Pydantic layer enforces the per-kind shape.
    """

    __tablename__ = "records"
    __table_args__ = (
        Index("idx_records_parent_id", "parent_id"),
        Index("idx_records_kind_issued_on", "kind", "issued_on"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    parent_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("records.id", ondelete="SET NULL"), nullable=True)

    # folder / file metadata
    size: Mapped[str | None] = mapped_column(String(50), nullable=True)
    mime_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    owner: Mapped[str | None] = mapped_column(String(255), nullable=True)
    modified_at: Mapped[date | None] = mapped_column(Date, nullable=True)

    # flat document metadata
    document_number: Mapped[str | None] = mapped_column(String(255), nullable=True)
    document_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    department: Mapped[str | None] = mapped_column(String(255), nullable=True)
    responsible: Mapped[str | None] = mapped_column(String(255), nullable=True)
    issued_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    due_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    parent: Mapped["Record | None"] = relationship(remote_side="Record.id", back_populates="children")
    children: Mapped[list["Record"]] = relationship(back_populates="parent", passive_deletes=True)
