"""Create accounts, fragments and locations tables.

Revision ID: 20261019000000
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20261019000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.CheckConstraint("role in ('admin', 'user')", name=op.f("ck_accounts_role")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_accounts")),
    )
    op.create_index(op.f("ix_accounts_username"), "accounts", ["username"], unique=True)

    op.create_table(
        "fragments",
        sa.Column("row_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("label", sa.Text(), nullable=False),
        sa.Column("source", sa.Text(), nullable=False),
        sa.Column("detail", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "type in ('voice', 'photo', 'quote', 'fact')",
            name=op.f("ck_fragments_type"),
        ),
        sa.PrimaryKeyConstraint("row_id", name=op.f("pk_fragments")),
        sa.UniqueConstraint("id", name=op.f("uq_fragments_id")),
    )
    op.create_index(op.f("ix_fragments_created_at"), "fragments", ["created_at"])

    op.create_table(
        "locations",
        sa.Column("row_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("row_id", name=op.f("pk_locations")),
        sa.UniqueConstraint("id", name=op.f("uq_locations_id")),
    )
    op.create_index(op.f("ix_locations_username"), "locations", ["username"])
    op.create_index(op.f("ix_locations_created_at"), "locations", ["created_at"])


def downgrade() -> None:
    op.drop_index(op.f("ix_locations_created_at"), table_name="locations")
    op.drop_index(op.f("ix_locations_username"), table_name="locations")
    op.drop_table("locations")
    op.drop_index(op.f("ix_fragments_created_at"), table_name="fragments")
    op.drop_table("fragments")
    op.drop_index(op.f("ix_accounts_username"), table_name="accounts")
    op.drop_table("accounts")
