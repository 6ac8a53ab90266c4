"""SCORM runtime tracking per user and package.

Revision ID: 1b2c3d4e5f6a
Revises: 0a1b2c3d4e5f
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "1b2c3d4e5f6a"
down_revision = "0a1b2c3d4e5f"
branch_labels = None
depends_on = None

scorm_completion_status = postgresql.ENUM(
    "NOT_ATTEMPTED", "INCOMPLETE", "COMPLETED", "PASSED", "FAILED",
    name="scorm_completion_status", create_type=False,
)


def upgrade() -> None:
    op.execute(
        "CREATE TYPE scorm_completion_status AS ENUM "
        "('NOT_ATTEMPTED', 'INCOMPLETE', 'COMPLETED', 'PASSED', 'FAILED')"
    )

    op.create_table(
        "scorm_tracking",
        sa.Column("scorm_tracking_id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "scorm_package_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("scorm_packages.scorm_package_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("data", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default="{}"),
        sa.Column(
            "completion_status", scorm_completion_status, nullable=False,
            server_default="NOT_ATTEMPTED",
        ),
        sa.Column("location", sa.String(1000), nullable=True),
        sa.Column("score", sa.Numeric(5, 2), nullable=True),
        sa.Column("created_at", postgresql.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", postgresql.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "scorm_package_id", name="uq_scorm_tracking_user_package"),
    )
    op.create_index("ix_scorm_tracking_scorm_package_id", "scorm_tracking", ["scorm_package_id"])


def downgrade() -> None:
    op.drop_index("ix_scorm_tracking_scorm_package_id", table_name="scorm_tracking")
    op.drop_table("scorm_tracking")
    op.execute("DROP TYPE scorm_completion_status")
