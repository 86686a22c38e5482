"""Create the records table.

Revision ID: 001
Revises:
Create Date: 2026-10-19

One table holds every registry entry. ``kind`` is one of folder, file or
document; the nullable columns are filled according to the kind.

Key design decisions:
- VARCHAR(36) primary keys so clients may supply their own UUIDs.
- parent_id ON DELETE SET NULL so children of a deleted folder move to root.
- (kind, issued_on) index backs the month/year dashboard query.
"""

from alembic import op
import sqlalchemy as sa

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "records",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column(
            "parent_id",
            sa.String(36),
            sa.ForeignKey("records.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("size", sa.String(50), nullable=True),
        sa.Column("mime_type", sa.String(255), nullable=True),
        sa.Column("owner", sa.String(255), nullable=True),
        sa.Column("modified_at", sa.Date, nullable=True),
        sa.Column("document_number", sa.String(255), nullable=True),
        sa.Column("document_type", sa.String(100), nullable=True),
        sa.Column("department", sa.String(255), nullable=True),
        sa.Column("responsible", sa.String(255), nullable=True),
        sa.Column("issued_on", sa.Date, nullable=True),
        sa.Column("due_on", sa.Date, nullable=True),
        sa.Column("status", sa.String(20), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("idx_records_parent_id", "records", ["parent_id"])
    op.create_index("idx_records_kind_issued_on", "records", ["kind", "issued_on"])


def downgrade() -> None:
    op.drop_index("idx_records_kind_issued_on", table_name="records")
    op.drop_index("idx_records_parent_id", table_name="records")
    op.drop_table("records")
