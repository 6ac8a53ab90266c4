"""Chapter service — chapter content behind the purchase lock, and instructor authoring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.courses.service import get_owned_course, get_published_course
from app.exceptions import ChapterNotFoundError, ChapterNotReadyError, CourseNotFoundError
from app.models.chapter import Chapter
from app.models.course import Course
from app.models.user_progress import UserProgress
from app.purchases.service import find_purchase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChapterView:
    course: Course
    chapter: Chapter
    next_chapter: Chapter | None
    is_purchased: bool
    is_completed: bool

    @property
    def is_locked(self) -> bool:
        return not self.chapter.is_free and not self.is_purchased


def _next_chapter(chapters: tuple[Chapter, ...], chapter: Chapter) -> Chapter | None:
    for candidate in chapters:
        if candidate.position > chapter.position:
            return candidate
    return None


async def get_chapter_view(
    db: AsyncSession, user_id: UUID, course_id: UUID, chapter_id: UUID,
) -> ChapterView:
    aggregate = await get_published_course(db, course_id)
    if aggregate is None:
        raise CourseNotFoundError(str(course_id))
    chapter = next((c for c in aggregate.chapters if c.chapter_id == chapter_id), None)
    if chapter is None:
        raise ChapterNotFoundError(str(chapter_id))

    purchase = await find_purchase(db, user_id, course_id)
    completed = await db.scalar(
        select(UserProgress.is_completed).where(
            UserProgress.user_id == user_id,
            UserProgress.chapter_id == chapter_id,
        )
    )
    return ChapterView(
        course=aggregate.course,
        chapter=chapter,
        next_chapter=_next_chapter(aggregate.chapters, chapter),
        is_purchased=purchase is not None,
        is_completed=bool(completed),
    )


# ---------------------------------------------------------------------------
# Instructor: authoring
# ---------------------------------------------------------------------------


def _course_chapter(course: Course, chapter_id: UUID) -> Chapter:
    chapter = next((c for c in course.chapters if c.chapter_id == chapter_id), None)
    if chapter is None:
        raise ChapterNotFoundError(str(chapter_id))
    return chapter


def _unpublish_if_no_chapters_left(course: Course, removed: Chapter) -> None:
    if course.scorm_package is not None or not course.is_published:
        return
    if not any(c.is_published for c in course.chapters if c is not removed):
        course.is_published = False
        logger.info("Course %s unpublished: no published chapters left", course.course_id)


async def create_chapter(
    db: AsyncSession, owner_id: UUID, course_id: UUID, *, title: str,
) -> Chapter:
    """Append an unpublished, paid chapter after the current last position."""
    course = await get_owned_course(db, owner_id, course_id)
    position = max((c.position for c in course.chapters), default=0) + 1
    chapter = Chapter(
        course_id=course.course_id,
        title=title,
        position=position,
        is_published=False,
        is_free=False,
    )
    db.add(chapter)
    await db.flush()
    await db.refresh(chapter)
    return chapter


async def update_chapter(
    db: AsyncSession,
    owner_id: UUID,
    course_id: UUID,
    chapter_id: UUID,
    **fields: object,
) -> Chapter:
    course = await get_owned_course(db, owner_id, course_id)
    chapter = _course_chapter(course, chapter_id)
    for key, value in fields.items():
        if value is not None:
            setattr(chapter, key, value)
    await db.flush()
    await db.refresh(chapter)
    return chapter


async def delete_chapter(
    db: AsyncSession, owner_id: UUID, course_id: UUID, chapter_id: UUID,
) -> None:
    course = await get_owned_course(db, owner_id, course_id)
    chapter = _course_chapter(course, chapter_id)
    _unpublish_if_no_chapters_left(course, chapter)
    await db.delete(chapter)
    await db.flush()


def missing_chapter_fields(chapter: Chapter) -> list[str]:
    missing: list[str] = []
    if not chapter.title:
        missing.append("title")
    if not chapter.video_url:
        missing.append("video_url")
    return missing


async def publish_chapter(
    db: AsyncSession, owner_id: UUID, course_id: UUID, chapter_id: UUID,
) -> Chapter:
    course = await get_owned_course(db, owner_id, course_id)
    chapter = _course_chapter(course, chapter_id)
    missing = missing_chapter_fields(chapter)
    if missing:
        raise ChapterNotReadyError(missing)
    chapter.is_published = True
    await db.flush()
    return chapter


async def unpublish_chapter(
    db: AsyncSession, owner_id: UUID, course_id: UUID, chapter_id: UUID,
) -> Chapter:
    course = await get_owned_course(db, owner_id, course_id)
    chapter = _course_chapter(course, chapter_id)
    chapter.is_published = False
    _unpublish_if_no_chapters_left(course, chapter)
    await db.flush()
    return chapter
