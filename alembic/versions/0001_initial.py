"""initial schema: blocked attempts + counters

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-16 00:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "blocked_attempts",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("kind", sa.String(32), nullable=False),
        sa.Column("phone", sa.String(32)),
        sa.Column("name", sa.String(256)),
        sa.Column("ip", sa.String(64)),
        sa.Column("user_agent", sa.String(512)),
        sa.Column("extra", sa.JSON),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_blocked_attempts_kind", "blocked_attempts", ["kind"])
    op.create_index("ix_blocked_attempts_created_at", "blocked_attempts", ["created_at"])

    counters = op.create_table(
        "guard_counters",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(64), nullable=False, unique=True),
        sa.Column("value", sa.Integer, nullable=False, server_default="0"),
    )
    op.bulk_insert(counters, [{"name": "vpn_blocked_count", "value": 0}])

def downgrade():
    op.drop_table("guard_counters")

    op.drop_index("ix_blocked_attempts_created_at", table_name="blocked_attempts")
    op.drop_index("ix_blocked_attempts_kind", table_name="blocked_attempts")
    op.drop_table("blocked_attempts")
