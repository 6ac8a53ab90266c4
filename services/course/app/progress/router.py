"""Progress router — HTTP layer only."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.progress import controller
from app.progress.schemas import ChapterProgressResponse, UpdateChapterProgressRequest
from shared.auth.dependencies import get_current_user_required
from shared.models.user import CurrentUser

router = APIRouter(prefix="/courses", tags=["Progress"])


@router.put(
    "/{course_id}/chapters/{chapter_id}/progress",
    response_model=ChapterProgressResponse,
    summary="Mark a chapter completed",
    description="Requires a purchase of the course.",
)
async def update_chapter_progress(
    course_id: UUID,
    chapter_id: UUID,
    body: UpdateChapterProgressRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> ChapterProgressResponse:
    return await controller.update_chapter_progress(db, user.id, course_id, chapter_id, body)
