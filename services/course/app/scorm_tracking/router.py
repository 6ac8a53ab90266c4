"""SCORM tracking router — HTTP layer only."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.scorm_tracking import controller
from app.scorm_tracking.schemas import ScormTrackingRequest, ScormTrackingResponse
from shared.auth.dependencies import get_current_user_required
from shared.models.user import CurrentUser

router = APIRouter(prefix="/courses", tags=["SCORM Tracking"])


@router.get(
    "/{course_id}/scorm/tracking",
    response_model=ScormTrackingResponse,
    summary="Get SCORM runtime data",
    description="The caller's stored cmi.* state. Before the first commit the "
    "response is empty with status NOT_ATTEMPTED.",
)
async def get_tracking(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> ScormTrackingResponse:
    return await controller.get_tracking(db, user.id, course_id)


@router.post(
    "/{course_id}/scorm/tracking",
    response_model=ScormTrackingResponse,
    summary="SCORM runtime data commit",
    description="The SCORM JS runtime posts LMSCommit data here. Purchasers "
    "and the course instructor only.",
)
async def commit_tracking(
    course_id: UUID,
    body: ScormTrackingRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> ScormTrackingResponse:
    return await controller.commit_tracking(db, user.id, course_id, body)
