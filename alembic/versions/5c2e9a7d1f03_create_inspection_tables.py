"""create inspection tables

Revision ID: 5c2e9a7d1f03
Revises:
Create Date: 2026-10-19 09:12:41.507211

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5c2e9a7d1f03'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "inspections",
        sa.Column("id", sa.Uuid(), primary_key=True),

        sa.Column("equipment", sa.Text(), nullable=False),
        sa.Column("inspector", sa.Text(), nullable=False),
        sa.Column("supervisor", sa.Text(), nullable=False),
        sa.Column("horometer", sa.Text(), nullable=False),

        # ISO-8601 local date-time, e.g. 2024-05-01T08:30:00.000000
        sa.Column("date", sa.String(26), nullable=False),

        sa.Column("isCompleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("conformityPercentage", sa.Float(), nullable=False, server_default=sa.text("0")),
    )
    op.create_index("ix_inspections_equipment_date", "inspections", ["equipment", "date"])

    op.create_table(
        "inspection_items",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "inspectionId",
            sa.Uuid(),
            sa.ForeignKey("inspections.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
    )
    op.create_index("ix_inspection_items_inspectionId", "inspection_items", ["inspectionId"])

    op.create_table(
        "inspection_questions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "itemId",
            sa.Uuid(),
            sa.ForeignKey("inspection_items.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("isConform", sa.Boolean(), nullable=True),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
    )
    op.create_index("ix_inspection_questions_itemId", "inspection_questions", ["itemId"])

    op.create_table(
        "photos",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "questionId",
            sa.Uuid(),
            sa.ForeignKey("inspection_questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("uri", sa.Text(), nullable=False),
        sa.Column("hasDrawings", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("drawingUri", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.String(26), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
    )
    op.create_index("ix_photos_questionId", "photos", ["questionId"])


def downgrade() -> None:
    op.drop_index("ix_photos_questionId", table_name="photos")
    op.drop_table("photos")
    op.drop_index("ix_inspection_questions_itemId", table_name="inspection_questions")
    op.drop_table("inspection_questions")
    op.drop_index("ix_inspection_items_inspectionId", table_name="inspection_items")
    op.drop_table("inspection_items")
    op.drop_index("ix_inspections_equipment_date", table_name="inspections")
    op.drop_table("inspections")
