"""Purchase domain Pydantic V2 schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class GrantPurchaseRequest(BaseModel):
    """Admin grant of a course to a user (e.g. after an offline payment)."""

    user_id: UUID = Field(description="User receiving the entitlement.")


class PurchaseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    purchase_id: UUID
    user_id: UUID
    course_id: UUID
    created_at: datetime
