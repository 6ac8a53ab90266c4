"""SCORM tracking controller — maps service results to HTTP responses, catches domain exceptions."""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    ContentNotAccessibleError,
    CourseNotFoundError,
    ScormPackageNotFoundError,
)
from app.models.enums import ScormCompletionStatus
from app.scorm_tracking import service
from app.scorm_tracking.schemas import ScormTrackingRequest, ScormTrackingResponse


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (CourseNotFoundError, ScormPackageNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ContentNotAccessibleError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Course not purchased.")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


async def get_tracking(db: AsyncSession, user_id: UUID, course_id: UUID) -> ScormTrackingResponse:
    try:
        package, tracking = await service.get_tracking(db, user_id, course_id)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    if tracking is None:
        return ScormTrackingResponse(
            scorm_package_id=package.scorm_package_id,
            data={},
            completion_status=ScormCompletionStatus.NOT_ATTEMPTED,
        )
    return ScormTrackingResponse.model_validate(tracking)


async def commit_tracking(
    db: AsyncSession, user_id: UUID, course_id: UUID, body: ScormTrackingRequest,
) -> ScormTrackingResponse:
    try:
        tracking = await service.commit_tracking(db, user_id, course_id, **body.model_dump())
        return ScormTrackingResponse.model_validate(tracking)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
