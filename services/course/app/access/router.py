"""Access router — HTTP layer only."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.access import controller
from app.access.schemas import AccessResponse
from app.database import get_db
from shared.auth.dependencies import get_current_user_optional
from shared.models.user import CurrentUser

router = APIRouter(prefix="/courses", tags=["Access"])


@router.get(
    "/{course_id}/access",
    response_model=AccessResponse,
    summary="Resolve course access",
    description="Entitlement, progress and the delivery mode for the caller. "
    "Anonymous callers, missing or unpublished courses and courses without "
    "content all resolve to DENIED with location `/`.",
)
async def get_access(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser | None = Depends(get_current_user_optional),
) -> AccessResponse:
    return await controller.get_access(db, user, course_id)


@router.get(
    "/{course_id}/enter",
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    response_class=RedirectResponse,
    summary="Redirect into the course",
    description="Redirects to the SCORM player, the first chapter, or `/`.",
)
async def enter_course(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser | None = Depends(get_current_user_optional),
) -> RedirectResponse:
    return await controller.enter_course(db, user, course_id)
