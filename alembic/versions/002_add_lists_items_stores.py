"""Add shopping lists, shopping items and store locations

Revision ID: 002
Revises: 001
Create Date: 2026-10-12 09:30:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _sync_columns() -> list[sa.Column]:
    return [
        sa.Column("sync_id", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.Column("last_synced", sa.DateTime(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
    ]


def upgrade() -> None:
    """Upgrade database schema."""
    op.create_table(
        "shopping_lists",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_sync_columns(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sync_id"),
    )
    op.create_index("ix_shopping_lists_user_id", "shopping_lists", ["user_id"])
    op.create_index("ix_shopping_lists_last_synced", "shopping_lists", ["last_synced"])

    op.create_table(
        "shopping_items",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False, server_default="1"),
        sa.Column("unit_type", sa.String(length=50), nullable=False, server_default="units"),
        sa.Column("checked", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("sort_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("shopping_list_id", sa.Integer(), nullable=False),
        *_sync_columns(),
        sa.ForeignKeyConstraint(
            ["shopping_list_id"],
            ["shopping_lists.id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sync_id"),
        sa.CheckConstraint("quantity > 0", name="check_quantity_positive"),
    )
    op.create_index("ix_shopping_items_shopping_list_id", "shopping_items", ["shopping_list_id"])
    op.create_index("ix_shopping_items_last_synced", "shopping_items", ["last_synced"])

    op.create_table(
        "store_locations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("address", sa.String(length=500), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("geofence_id", sa.String(length=100), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_sync_columns(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sync_id"),
    )
    op.create_index("ix_store_locations_user_id", "store_locations", ["user_id"])
    op.create_index("ix_store_locations_geofence_id", "store_locations", ["geofence_id"])
    op.create_index("ix_store_locations_last_synced", "store_locations", ["last_synced"])


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table("store_locations")
    op.drop_table("shopping_items")
    op.drop_table("shopping_lists")
