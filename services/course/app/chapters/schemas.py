"""Chapter domain Pydantic V2 schemas."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ChapterResponse(BaseModel):
    chapter_id: UUID
    course_id: UUID
    title: str
    description: str | None
    position: int
    is_free: bool
    is_locked: bool = Field(description="True when the chapter is paid and not purchased.")
    video_url: str | None = Field(default=None, description="Omitted while locked.")
    next_chapter_id: UUID | None = None
    is_purchased: bool
    is_completed: bool


class CreateChapterRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=300)


class UpdateChapterRequest(BaseModel):
    """PATCH body; publish state has its own endpoints."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = Field(default=None)
    video_url: str | None = Field(default=None, max_length=500)
    is_free: bool | None = Field(default=None)


class ChapterDetailResponse(BaseModel):
    """Instructor view of a chapter, always with its video URL."""

    model_config = ConfigDict(from_attributes=True)

    chapter_id: UUID
    course_id: UUID
    title: str
    description: str | None
    video_url: str | None
    position: int
    is_published: bool
    is_free: bool
