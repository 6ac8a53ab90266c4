"""Chapter controller — maps service results to HTTP responses, catches domain exceptions."""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.chapters import service
from app.chapters.schemas import (
    ChapterDetailResponse,
    ChapterResponse,
    CreateChapterRequest,
    UpdateChapterRequest,
)
from app.exceptions import (
    ChapterNotFoundError,
    ChapterNotReadyError,
    CourseNotFoundError,
    NotCourseOwnerError,
)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (CourseNotFoundError, ChapterNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, NotCourseOwnerError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not the course instructor.")
    if isinstance(exc, ChapterNotReadyError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


async def get_chapter(
    db: AsyncSession, user_id: UUID, course_id: UUID, chapter_id: UUID,
) -> ChapterResponse:
    try:
        view = await service.get_chapter_view(db, user_id, course_id, chapter_id)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    chapter = view.chapter
    return ChapterResponse(
        chapter_id=chapter.chapter_id,
        course_id=chapter.course_id,
        title=chapter.title,
        description=chapter.description,
        position=chapter.position,
        is_free=chapter.is_free,
        is_locked=view.is_locked,
        video_url=None if view.is_locked else chapter.video_url,
        next_chapter_id=view.next_chapter.chapter_id if view.next_chapter else None,
        is_purchased=view.is_purchased,
        is_completed=view.is_completed,
    )


# ---------------------------------------------------------------------------
# Instructor: authoring
# ---------------------------------------------------------------------------


async def create_chapter(
    db: AsyncSession, owner_id: UUID, course_id: UUID, body: CreateChapterRequest,
) -> ChapterDetailResponse:
    try:
        chapter = await service.create_chapter(db, owner_id, course_id, title=body.title)
        return ChapterDetailResponse.model_validate(chapter)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def update_chapter(
    db: AsyncSession,
    owner_id: UUID,
    course_id: UUID,
    chapter_id: UUID,
    body: UpdateChapterRequest,
) -> ChapterDetailResponse:
    try:
        chapter = await service.update_chapter(
            db, owner_id, course_id, chapter_id, **body.model_dump(exclude_unset=True),
        )
        return ChapterDetailResponse.model_validate(chapter)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def delete_chapter(
    db: AsyncSession, owner_id: UUID, course_id: UUID, chapter_id: UUID,
) -> None:
    try:
        await service.delete_chapter(db, owner_id, course_id, chapter_id)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def publish_chapter(
    db: AsyncSession, owner_id: UUID, course_id: UUID, chapter_id: UUID,
) -> ChapterDetailResponse:
    try:
        chapter = await service.publish_chapter(db, owner_id, course_id, chapter_id)
        return ChapterDetailResponse.model_validate(chapter)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def unpublish_chapter(
    db: AsyncSession, owner_id: UUID, course_id: UUID, chapter_id: UUID,
) -> ChapterDetailResponse:
    try:
        chapter = await service.unpublish_chapter(db, owner_id, course_id, chapter_id)
        return ChapterDetailResponse.model_validate(chapter)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
