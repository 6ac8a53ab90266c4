import uuid
from datetime import datetime, timezone

from sqlalchemy import ForeignKey, String
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base


class ScormPackage(Base):
    """SCORM bundle attached to a course; supersedes the chapter player."""

    __tablename__ = "scorm_packages"

    scorm_package_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    course_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("courses.course_id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    # "1.2" or "2004"
    version: Mapped[str] = mapped_column(String(20), nullable=False, default="1.2")
    package_url: Mapped[str] = mapped_column(String(500), nullable=False)
    # Launch file relative to the extracted package root (imsmanifest resource href)
    entry_point: Mapped[str] = mapped_column(String(500), nullable=False, default="index.html")
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    course = relationship("Course", back_populates="scorm_package", lazy="select")

    @property
    def launch_url(self) -> str:
        return f"{self.package_url.rstrip('/')}/{self.entry_point.lstrip('/')}"
