"""Chapter router — HTTP layer only."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.chapters import controller
from app.chapters.schemas import (
    ChapterDetailResponse,
    ChapterResponse,
    CreateChapterRequest,
    UpdateChapterRequest,
)
from app.database import get_db
from shared.auth.dependencies import get_current_user_required
from shared.models.user import CurrentUser

router = APIRouter(prefix="/courses", tags=["Chapters"])


@router.get(
    "/{course_id}/chapters/{chapter_id}",
    response_model=ChapterResponse,
    summary="Get a chapter",
    description="Paid chapters are returned locked, without `video_url`, "
    "until the course is purchased.",
)
async def get_chapter(
    course_id: UUID,
    chapter_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> ChapterResponse:
    return await controller.get_chapter(db, user.id, course_id, chapter_id)


@router.post(
    "/{course_id}/chapters",
    response_model=ChapterDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a chapter (instructor only)",
    description="New chapters are appended after the last position, unpublished and paid.",
)
async def create_chapter(
    course_id: UUID,
    body: CreateChapterRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> ChapterDetailResponse:
    return await controller.create_chapter(db, user.id, course_id, body)


@router.patch(
    "/{course_id}/chapters/{chapter_id}",
    response_model=ChapterDetailResponse,
    summary="Update a chapter (instructor only)",
)
async def update_chapter(
    course_id: UUID,
    chapter_id: UUID,
    body: UpdateChapterRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> ChapterDetailResponse:
    return await controller.update_chapter(db, user.id, course_id, chapter_id, body)


@router.delete(
    "/{course_id}/chapters/{chapter_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a chapter (instructor only)",
    description="A chapter course left without published chapters is unpublished.",
)
async def delete_chapter(
    course_id: UUID,
    chapter_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> None:
    await controller.delete_chapter(db, user.id, course_id, chapter_id)


@router.patch(
    "/{course_id}/chapters/{chapter_id}/publish",
    response_model=ChapterDetailResponse,
    summary="Publish a chapter (instructor only)",
    description="Requires a title and a video URL.",
)
async def publish_chapter(
    course_id: UUID,
    chapter_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> ChapterDetailResponse:
    return await controller.publish_chapter(db, user.id, course_id, chapter_id)


@router.patch(
    "/{course_id}/chapters/{chapter_id}/unpublish",
    response_model=ChapterDetailResponse,
    summary="Unpublish a chapter (instructor only)",
    description="A chapter course left without published chapters is unpublished.",
)
async def unpublish_chapter(
    course_id: UUID,
    chapter_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> ChapterDetailResponse:
    return await controller.unpublish_chapter(db, user.id, course_id, chapter_id)
