import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Numeric, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base

from .enums import ScormCompletionStatus, scorm_completion_status_enum


class ScormTracking(Base):
    """Per-user SCORM runtime state for one package (LMSCommit target)."""

    __tablename__ = "scorm_tracking"

    scorm_tracking_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    scorm_package_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("scorm_packages.scorm_package_id", ondelete="CASCADE"),
        nullable=False,
    )
    # SCORM cmi.* data model stored as JSONB
    data: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    completion_status: Mapped[ScormCompletionStatus] = mapped_column(
        scorm_completion_status_enum,
        nullable=False,
        default=ScormCompletionStatus.NOT_ATTEMPTED,
    )
    # cmi.core.lesson_location / cmi.location bookmark
    location: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    score: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    scorm_package = relationship("ScormPackage", lazy="noload")

    __table_args__ = (
        UniqueConstraint("user_id", "scorm_package_id", name="uq_scorm_tracking_user_package"),
        Index("ix_scorm_tracking_scorm_package_id", "scorm_package_id"),
    )
