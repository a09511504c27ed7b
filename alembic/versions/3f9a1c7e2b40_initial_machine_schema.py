"""initial machine schema

Revision ID: 3f9a1c7e2b40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f9a1c7e2b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "machine_records",
        sa.Column("resource_id", sa.String(), nullable=False),
        sa.Column("payload", sa.LargeBinary(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("resource_id"),
    )
    op.create_table(
        "boxes",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("provider", sa.String(64), nullable=False),
        sa.Column("version", sa.String(64), nullable=False),
        sa.Column("directory", sa.String(), nullable=True),
        sa.Column("metadata_url", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "name", "provider", "version", name="uq_boxes_name_provider_version"
        ),
    )
    op.create_index("ix_boxes_name", "boxes", ["name"])
    op.create_index("ix_boxes_name_provider", "boxes", ["name", "provider"])


def downgrade() -> None:
    op.drop_index("ix_boxes_name_provider", table_name="boxes")
    op.drop_index("ix_boxes_name", table_name="boxes")
    op.drop_table("boxes")
    op.drop_table("machine_records")
