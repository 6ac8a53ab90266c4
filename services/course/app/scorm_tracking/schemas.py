"""SCORM tracking Pydantic V2 schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import ScormCompletionStatus


class ScormTrackingRequest(BaseModel):
    """SCORM runtime commit. Accepts 1.2 and 2004 status spellings."""

    model_config = ConfigDict(str_strip_whitespace=True)

    data: dict = Field(description="cmi.* values, merged into the stored state.")
    completion_status: ScormCompletionStatus | None = Field(
        default=None,
        description="'not attempted', 'incomplete', 'completed', 'passed' or 'failed'.",
    )
    location: str | None = Field(default=None, max_length=1000)
    score: Decimal | None = Field(default=None, ge=0, le=100)

    @field_validator("completion_status", mode="before")
    @classmethod
    def _normalise_status(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper().replace(" ", "_")
        return v


class ScormTrackingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    scorm_package_id: UUID
    data: dict
    completion_status: ScormCompletionStatus
    location: str | None = None
    score: Decimal | None = None
    updated_at: datetime | None = None
