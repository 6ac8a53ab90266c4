"""Progress domain Pydantic V2 schemas."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class UpdateChapterProgressRequest(BaseModel):
    is_completed: bool = Field(description="Mark the chapter completed or not.")


class ChapterProgressResponse(BaseModel):
    chapter_id: UUID
    is_completed: bool
    course_progress: Decimal | None = Field(
        description="Course completion percentage after the update.",
    )
