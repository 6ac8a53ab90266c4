"""Access controller — shapes resolver output into HTTP responses.

The resolver never raises a domain error, so there is no error mapping here.
"""

from __future__ import annotations

from uuid import UUID

from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.access import service
from app.access.decision import CourseAccess, RouteDecision
from app.access.schemas import (
    AccessResponse,
    ChapterSummary,
    CourseAccessResponse,
    CourseSummary,
    ScormPackageSummary,
)
from shared.models.user import CurrentUser


def _access_response(access: CourseAccess) -> CourseAccessResponse:
    aggregate = access.aggregate
    return CourseAccessResponse(
        course=CourseSummary.model_validate(aggregate.course),
        category=aggregate.category.name if aggregate.category is not None else None,
        chapters=[ChapterSummary.model_validate(c) for c in aggregate.chapters],
        scorm_package=(
            ScormPackageSummary.model_validate(aggregate.scorm_package)
            if aggregate.scorm_package is not None
            else None
        ),
        progress=access.progress,
        is_purchased=access.is_purchased,
    )


def _decision_response(decision: RouteDecision) -> AccessResponse:
    return AccessResponse(
        outcome=decision.outcome,
        location=decision.location,
        reason=decision.reason,
        chapter_id=decision.chapter_id,
        access=_access_response(decision.access) if decision.access is not None else None,
    )


async def get_access(
    db: AsyncSession, user: CurrentUser | None, course_id: UUID,
) -> AccessResponse:
    decision = await service.resolve_route(db, user, course_id)
    return _decision_response(decision)


async def enter_course(
    db: AsyncSession, user: CurrentUser | None, course_id: UUID,
) -> RedirectResponse:
    decision = await service.resolve_route(db, user, course_id)
    return RedirectResponse(url=decision.location, status_code=307)
