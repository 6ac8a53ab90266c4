"""Course domain Pydantic V2 schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CreateCourseRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=300)


class UpdateCourseRequest(BaseModel):
    """PATCH body for updating a course. All fields optional; publish state has its own endpoints."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = Field(default=None)
    image_url: str | None = Field(default=None, max_length=500)
    price: Decimal | None = Field(default=None, ge=0)
    category_id: UUID | None = Field(default=None)


class CourseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    course_id: UUID
    instructor_id: UUID
    title: str
    description: str | None
    image_url: str | None
    price: Decimal | None
    is_published: bool
    category_id: UUID | None
    created_at: datetime
    updated_at: datetime


class ScormLaunchResponse(BaseModel):
    """Everything the SCORM player needs to start the package."""

    course_id: UUID
    course_title: str
    scorm_package_id: UUID
    title: str
    version: str = Field(description="SCORM version, '1.2' or '2004'.")
    launch_url: str = Field(description="Absolute URL of the package entry point.")
