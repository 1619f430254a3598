"""Create resource tables

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  Creates tours, car_rentals, packages and gallery_items.
How:   Every table carries the shared document columns (id, image, asset_id,
       created_at, updated_at); list fields are JSON arrays.

Rollback: downgrade() drops all four tables (destructive).
"""

from typing import List, Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def document_columns() -> List[sa.Column]:
    """Columns shared by every resource table (see models/mixins.py)."""
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "image",
            sa.String(1024),
            nullable=False,
            comment="Public URL of the hosted image",
        ),
        sa.Column(
            "asset_id",
            sa.String(255),
            nullable=True,
            comment="Asset store identifier of the hosted image",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def json_list(name: str) -> sa.Column:
    return sa.Column(name, sa.JSON(), nullable=False, server_default=sa.text("'[]'"))


def upgrade() -> None:
    op.create_table(
        "tours",
        *document_columns(),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("duration", sa.Text(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("max_participants", sa.Integer(), nullable=False),
        json_list("includes"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "car_rentals",
        *document_columns(),
        sa.Column("vehicle_name", sa.Text(), nullable=False),
        sa.Column("vehicle_type", sa.Text(), nullable=False),
        sa.Column("seats", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("fuel", sa.Text(), nullable=False),
        json_list("features"),
        sa.Column(
            "available",
            sa.Boolean(),
            nullable=False,
            server_default=sa.true(),
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "packages",
        *document_columns(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration", sa.Text(), nullable=True),
        sa.Column("category", sa.Text(), nullable=True),
        json_list("destinations"),
        json_list("includes"),
        json_list("highlights"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "gallery_items",
        *document_columns(),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Gallery is listed newest first
    op.create_index(
        "idx_gallery_items_created_at",
        "gallery_items",
        ["created_at"],
    )


def downgrade() -> None:
    """Drop all resource tables. All content is lost."""
    op.drop_index("idx_gallery_items_created_at", table_name="gallery_items")
    op.drop_table("gallery_items")
    op.drop_table("packages")
    op.drop_table("car_rentals")
    op.drop_table("tours")
