"""Courses, chapters, SCORM packages, purchases and chapter progress.

Revision ID: 0a1b2c3d4e5f
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

revision = "0a1b2c3d4e5f"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("category_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
    )

    # ── courses ──────────────────────────────────────────────────────────
    op.create_table(
        "courses",
        sa.Column("course_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("instructor_id", UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "category_id",
            UUID(as_uuid=True),
            sa.ForeignKey("categories.category_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_courses_instructor_id", "courses", ["instructor_id"])
    op.create_index("ix_courses_is_published", "courses", ["is_published"])

    # ── chapters ─────────────────────────────────────────────────────────
    op.create_table(
        "chapters",
        sa.Column("chapter_id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "course_id",
            UUID(as_uuid=True),
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("video_url", sa.String(500), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_free", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_chapters_course_id_position", "chapters", ["course_id", "position"])

    # ── scorm_packages (1:1 with courses) ────────────────────────────────
    op.create_table(
        "scorm_packages",
        sa.Column("scorm_package_id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "course_id",
            UUID(as_uuid=True),
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("version", sa.String(20), nullable=False, server_default="1.2"),
        sa.Column("package_url", sa.String(500), nullable=False),
        sa.Column("entry_point", sa.String(500), nullable=False, server_default="index.html"),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # ── purchases ────────────────────────────────────────────────────────
    op.create_table(
        "purchases",
        sa.Column("purchase_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column(
            "course_id",
            UUID(as_uuid=True),
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "course_id", name="uq_purchases_user_course"),
    )
    op.create_index("ix_purchases_course_id", "purchases", ["course_id"])

    # ── user_progress ────────────────────────────────────────────────────
    op.create_table(
        "user_progress",
        sa.Column("user_progress_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column(
            "chapter_id",
            UUID(as_uuid=True),
            sa.ForeignKey("chapters.chapter_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "chapter_id", name="uq_user_progress_user_chapter"),
    )
    op.create_index("ix_user_progress_chapter_id", "user_progress", ["chapter_id"])


def downgrade() -> None:
    op.drop_index("ix_user_progress_chapter_id", table_name="user_progress")
    op.drop_table("user_progress")
    op.drop_index("ix_purchases_course_id", table_name="purchases")
    op.drop_table("purchases")
    op.drop_table("scorm_packages")
    op.drop_index("ix_chapters_course_id_position", table_name="chapters")
    op.drop_table("chapters")
    op.drop_index("ix_courses_is_published", table_name="courses")
    op.drop_index("ix_courses_instructor_id", table_name="courses")
    op.drop_table("courses")
    op.drop_table("categories")
