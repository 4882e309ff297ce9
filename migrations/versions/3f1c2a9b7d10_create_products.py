"""create products table

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-18 10:00:00.000000
"""
from __future__ import annotations

import os
from typing import Optional, Sequence, Union

from alembic import op
import sqlalchemy as sa

# --- Alembic identifiers ---
revision: str = "3f1c2a9b7d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLE = "products"
IDX_NAME = "ix_products_name"


def _schema() -> Optional[str]:
    if op.get_bind().dialect.name == "sqlite":
        return None
    return (os.getenv("DB_SCHEMA") or "").strip() or None


def upgrade() -> None:
    schema = _schema()
    bind = op.get_bind()

    # create table if missing
    if TABLE not in set(sa.inspect(bind).get_table_names(schema=schema)):
        op.create_table(
            TABLE,
            sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("price", sa.Numeric(12, 2), nullable=False),
            sa.Column("quantity", sa.Integer, nullable=False),
            sa.CheckConstraint("price >= 0", name=op.f("ck_products_price_nonnegative")),
            schema=schema,
        )

    idx_names = {ix["name"] for ix in sa.inspect(bind).get_indexes(TABLE, schema=schema)}
    if IDX_NAME not in idx_names:
        op.create_index(IDX_NAME, TABLE, ["name"], schema=schema, unique=False)


def downgrade() -> None:
    schema = _schema()
    insp = sa.inspect(op.get_bind())

    idx_names = {ix["name"] for ix in insp.get_indexes(TABLE, schema=schema)}
    if IDX_NAME in idx_names:
        op.drop_index(IDX_NAME, table_name=TABLE, schema=schema)

    if TABLE in set(insp.get_table_names(schema=schema)):
        op.drop_table(TABLE, schema=schema)
