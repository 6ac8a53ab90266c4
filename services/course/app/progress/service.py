"""Progress service — per-chapter completion and the derived course percentage."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ChapterNotFoundError, NotPurchasedError
from app.models.chapter import Chapter
from app.models.course import Course
from app.models.user_progress import UserProgress
from app.purchases.service import find_purchase

_HUNDRED = Decimal("100")


def compute_percentage(completed: int, total: int) -> Decimal | None:
    """``completed / total * 100`` to two places; ``None`` when nothing is published."""
    if total <= 0:
        return None
    return (Decimal(completed) / Decimal(total) * _HUNDRED).quantize(Decimal("0.01"))


def published_chapter_stmt(course_id: UUID, chapter_id: UUID):
    return (
        select(Chapter)
        .join(Course, Course.course_id == Chapter.course_id)
        .where(
            Chapter.chapter_id == chapter_id,
            Chapter.course_id == course_id,
            Chapter.is_published.is_(True),
            Course.is_published.is_(True),
        )
    )


def _published_chapter_ids(course_id: UUID):
    return select(Chapter.chapter_id).where(
        Chapter.course_id == course_id,
        Chapter.is_published.is_(True),
    )


async def get_progress(db: AsyncSession, user_id: UUID, course_id: UUID) -> Decimal | None:
    published_ids = _published_chapter_ids(course_id)
    total = await db.scalar(select(func.count()).select_from(published_ids.subquery()))
    if not total:
        return None
    completed = await db.scalar(
        select(func.count())
        .select_from(UserProgress)
        .where(
            UserProgress.user_id == user_id,
            UserProgress.is_completed.is_(True),
            UserProgress.chapter_id.in_(published_ids),
        )
    )
    return compute_percentage(completed or 0, total)


async def _upsert_user_progress(
    db: AsyncSession, user_id: UUID, chapter_id: UUID,
) -> UserProgress:
    stmt = select(UserProgress).where(
        UserProgress.user_id == user_id,
        UserProgress.chapter_id == chapter_id,
    )
    result = await db.execute(stmt)
    progress = result.scalar_one_or_none()
    if progress is None:
        progress = UserProgress(user_id=user_id, chapter_id=chapter_id, is_completed=False)
        db.add(progress)
    return progress


async def mark_chapter_progress(
    db: AsyncSession,
    user_id: UUID,
    course_id: UUID,
    chapter_id: UUID,
    *,
    is_completed: bool,
) -> tuple[UserProgress, Decimal | None]:
    """Set the completion flag for one chapter; returns the row and new course progress."""
    chapter = await db.scalar(published_chapter_stmt(course_id, chapter_id))
    if chapter is None:
        raise ChapterNotFoundError(str(chapter_id))
    if await find_purchase(db, user_id, course_id) is None:
        raise NotPurchasedError()

    progress = await _upsert_user_progress(db, user_id, chapter_id)
    progress.is_completed = is_completed
    await db.flush()
    return progress, await get_progress(db, user_id, course_id)
