"""Initial schema — practices, procedures, procedure pricing

Revision ID: 0001
Revises:
Create Date: 2026-10-17

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── medical_practices ─────────────────────────────────────────────────────
    op.create_table(
        "medical_practices",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("phone", sa.Text, nullable=True),
        sa.Column("email", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("medical_practices_name_idx", "medical_practices", ["name"])

    # ── medical_procedures ────────────────────────────────────────────────────
    op.create_table(
        "medical_procedures",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("category", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("medical_procedures_name_idx", "medical_procedures", ["name"])
    op.create_index(
        "medical_procedures_category_idx", "medical_procedures", ["category"]
    )

    # ── procedure_pricing ─────────────────────────────────────────────────────
    # No unique constraint on (procedure_id, practice_id): the bulk importer
    # keeps one row per pair, explicit pricing creation does not. No foreign
    # keys either; parents are checked by the service layer.
    op.create_table(
        "procedure_pricing",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("procedure_id", sa.Integer, nullable=False),
        sa.Column("practice_id", sa.Integer, nullable=False),
        sa.Column("cost", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.Text, nullable=False, server_default="USD"),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "procedure_pricing_procedure_idx", "procedure_pricing", ["procedure_id"]
    )
    op.create_index(
        "procedure_pricing_practice_idx", "procedure_pricing", ["practice_id"]
    )
    op.create_index("procedure_pricing_cost_idx", "procedure_pricing", ["cost"])


def downgrade() -> None:
    op.drop_table("procedure_pricing")
    op.drop_table("medical_procedures")
    op.drop_table("medical_practices")
