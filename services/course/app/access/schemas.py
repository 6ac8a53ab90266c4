"""Access domain Pydantic V2 schemas (response only)."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.access.decision import AccessOutcome, DenialReason


class ChapterSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    chapter_id: UUID
    title: str
    position: int
    is_free: bool


class ScormPackageSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    scorm_package_id: UUID
    title: str
    version: str


class CourseSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    course_id: UUID
    title: str
    description: str | None
    image_url: str | None
    price: Decimal | None
    instructor_id: UUID


class CourseAccessResponse(BaseModel):
    course: CourseSummary
    category: str | None = Field(default=None, description="Category name, if any.")
    chapters: list[ChapterSummary] = Field(
        default_factory=list, description="Published chapters in display order.",
    )
    scorm_package: ScormPackageSummary | None = None
    progress: Decimal | None = Field(
        default=None,
        description="Completion percentage (0-100). Null unless the course is purchased.",
    )
    is_purchased: bool


class AccessResponse(BaseModel):
    outcome: AccessOutcome
    location: str = Field(description="Front-end path the learner should be sent to.")
    reason: DenialReason | None = None
    chapter_id: UUID | None = Field(
        default=None, description="Target chapter when routed to the chapter player.",
    )
    access: CourseAccessResponse | None = None
