"""Progress controller — maps service results to HTTP responses, catches domain exceptions."""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ChapterNotFoundError, NotPurchasedError
from app.progress import service
from app.progress.schemas import ChapterProgressResponse, UpdateChapterProgressRequest


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, ChapterNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, NotPurchasedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Course not purchased.")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


async def update_chapter_progress(
    db: AsyncSession,
    user_id: UUID,
    course_id: UUID,
    chapter_id: UUID,
    body: UpdateChapterProgressRequest,
) -> ChapterProgressResponse:
    try:
        progress, course_progress = await service.mark_chapter_progress(
            db, user_id, course_id, chapter_id, is_completed=body.is_completed,
        )
        return ChapterProgressResponse(
            chapter_id=progress.chapter_id,
            is_completed=progress.is_completed,
            course_progress=course_progress,
        )
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
