"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates the `notes` table and its list-order index.
How:   Portable column types only (String, Text, Boolean, timezone-aware
       TIMESTAMP), so the same migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops the table entirely (destructive, all notes lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the notes table. See notes_api/models/note.py for column docs."""
    op.create_table(
        "notes",

        # 32-char uuid4 hex, generated by the application
        sa.Column(
            "id",
            sa.String(32),
            nullable=False,
            comment="Opaque identifier assigned at creation",
        ),

        sa.Column(
            "title",
            sa.Text(),
            nullable=False,
            comment="Note title, never blank",
        ),

        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            server_default=sa.text("''"),
            comment="Note body, may be empty",
        ),

        sa.Column(
            "category",
            sa.Text(),
            nullable=True,
            comment="Optional free-form category",
        ),

        sa.Column(
            "published",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
            comment="Publication flag",
        ),

        # No server defaults: the service stamps both from one clock reading
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            comment="When this note was created (UTC)",
        ),

        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            comment="When this note was last modified (UTC)",
        ),

        sa.PrimaryKeyConstraint("id"),
    )

    # Matches GET /api/notes ordering: created_at ASC, id ASC
    op.create_index(
        "idx_notes_created_at_id",
        "notes",
        ["created_at", "id"],
    )


def downgrade() -> None:
    """Drop the notes table. Destructive: every note is lost."""
    op.drop_index("idx_notes_created_at_id", table_name="notes")
    op.drop_table("notes")
